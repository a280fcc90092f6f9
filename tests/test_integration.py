"""
Tests for the requests integration

A transport adapter captures prepared requests so signed requests can be
checked without a server.
"""

from unittest.mock import Mock

import pytest
import requests
from requests.adapters import HTTPAdapter

from httpsig_sdk.signing import (
    SignatureOptions,
    SignedSession,
    sign_prepared_request,
    signed_request,
)
from httpsig_sdk.signing.integration import signable_from_prepared
from httpsig_sdk.verification import verify_digest, verify_request
from httpsig_sdk.exceptions import KeyMismatch, MissingRequiredOption, ValidationError


class CapturingAdapter(HTTPAdapter):
    """Adapter that records requests and answers 200 OK"""

    def __init__(self):
        super().__init__()
        self.sent = []
        self.send_kwargs = []

    def send(self, request, **kwargs):
        self.sent.append(request)
        self.send_kwargs.append(kwargs)
        response = requests.Response()
        response.status_code = 200
        response._content = b"ok"
        response.request = request
        response.url = request.url
        return response


@pytest.fixture
def capturing_session():
    session = requests.Session()
    adapter = CapturingAdapter()
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.adapter = adapter
    return session


class TestSignedRequest:
    """Test signed_request"""

    def test_get_params_are_signed(self, capturing_session, hmac_secret, fixed_clock):
        """Test mapping payloads on GET become part of the request target"""
        response = signed_request(
            capturing_session, "get", "http://api.example.com/items", {"x": "1"},
            key=hmac_secret, key_id="k",
            algorithms="hmac-sha256", headers="(request-target) (created)",
            timestamp_generator=fixed_clock
        )
        assert response.status_code == 200

        prepared = capturing_session.adapter.sent[0]
        assert prepared.url == "http://api.example.com/items?x=1"
        assert prepared.headers["Authorization"].startswith('Signature keyId="k"')
        assert prepared.headers["Date"] == "Tue, 14 Nov 2023 22:13:20 GMT"

        signable = signable_from_prepared(prepared)
        assert signable.query == "x=1"
        result = verify_request(signable, hmac_secret, timestamp_generator=fixed_clock)
        assert result.valid
        assert result.signing_string.startswith("(request-target): get /items?x=1\n")

    def test_post_mapping_is_form_body(self, capturing_session, rsa_key, fixed_clock):
        """Test mapping payloads on POST are form-encoded and digested"""
        signed_request(
            capturing_session, "POST", "http://api.example.com/items", {"name": "widget"},
            key=rsa_key, key_id="k", digest=True,
            headers="(request-target) (created) digest",
            timestamp_generator=fixed_clock
        )
        prepared = capturing_session.adapter.sent[0]
        assert prepared.body == "name=widget"
        assert prepared.headers["Digest"].startswith("SHA-256=")

        signable = signable_from_prepared(prepared)
        assert verify_digest(signable)
        assert verify_request(signable, rsa_key, timestamp_generator=fixed_clock).valid

    def test_raw_body_and_send_kwargs(self, capturing_session, hmac_secret):
        """Test raw bodies and transport options pass through"""
        signed_request(
            capturing_session, "PUT", "http://api.example.com/items/1", b'{"a": 1}',
            key=hmac_secret, key_id="k", algorithms="hmac-sha256",
            request_headers={"Content-Type": "application/json"},
            send_kwargs={"timeout": 5}
        )
        prepared = capturing_session.adapter.sent[0]
        assert prepared.body == b'{"a": 1}'
        assert prepared.headers["Content-Type"] == "application/json"
        assert capturing_session.adapter.send_kwargs[0]["timeout"] == 5

    def test_options_object(self, capturing_session, ec_key):
        options = SignatureOptions(algorithms="ecdsa-sha256", headers="(request-target) date")
        signed_request(
            capturing_session, "DELETE", "http://api.example.com/items/1",
            key=ec_key, key_id="ec", options=options
        )
        prepared = capturing_session.adapter.sent[0]
        assert "algorithm=ecdsa-sha256" in prepared.headers["Authorization"]
        assert verify_request(signable_from_prepared(prepared), ec_key.public_key()).valid

    def test_missing_key_and_key_id(self, capturing_session, hmac_secret):
        with pytest.raises(MissingRequiredOption) as exc_info:
            signed_request(capturing_session, "GET", "http://api.example.com/", key_id="k")
        assert exc_info.value.option == "key"

        with pytest.raises(MissingRequiredOption) as exc_info:
            signed_request(capturing_session, "GET", "http://api.example.com/", key=hmac_secret)
        assert exc_info.value.option == "key_id"
        assert capturing_session.adapter.sent == []

    def test_invalid_url_and_payload(self, capturing_session, hmac_secret):
        with pytest.raises(ValidationError, match="request path"):
            signed_request(capturing_session, "GET", None, key=hmac_secret, key_id="k")

        with pytest.raises(ValidationError):
            signed_request(capturing_session, "POST", "http://api.example.com/", 42, key=hmac_secret, key_id="k")


class TestSignPreparedRequest:
    """Test signing of prepared requests"""

    def test_failure_leaves_headers_untouched(self, ec_key):
        """Test no header is applied when signing fails"""
        prepared = requests.Request("POST", "http://api.example.com/items", data="hello").prepare()
        before = dict(prepared.headers)

        with pytest.raises(KeyMismatch):
            sign_prepared_request(prepared, ec_key, "k", digest_body=True)

        assert dict(prepared.headers) == before

    def test_streamed_body_cannot_be_digested(self, hmac_secret):
        """Test a Digest is never computed for a body that was not read"""
        prepared = requests.Request("POST", "http://api.example.com/items", data=iter([b"abc"])).prepare()
        before = dict(prepared.headers)

        with pytest.raises(ValidationError) as exc_info:
            sign_prepared_request(prepared, hmac_secret, "k", digest_body=True, algorithms="hmac-sha256")

        assert exc_info.value.error_code == "INVALID_REQUEST"
        assert "Digest" not in prepared.headers
        assert dict(prepared.headers) == before

    def test_streamed_body_signed_without_digest(self, hmac_secret):
        prepared = requests.Request("POST", "http://api.example.com/items", data=iter([b"abc"])).prepare()
        sign_prepared_request(prepared, hmac_secret, "k", algorithms="hmac-sha256")
        assert "Authorization" in prepared.headers

    def test_streamed_body_treated_as_empty(self):
        prepared = requests.Request("POST", "http://api.example.com/", data=iter([b"a"])).prepare()
        assert signable_from_prepared(prepared).body is None


class TestSignedSession:
    """Test the session wrapper"""

    def test_base_url_and_verbs(self, capturing_session, hmac_secret, fixed_clock):
        client = SignedSession(
            hmac_secret, "k",
            base_url="http://api.example.com/",
            session=capturing_session,
            options=SignatureOptions(algorithms="hmac-sha256", headers="(request-target)"),
            timestamp_generator=fixed_clock
        )
        client.get("/items", {"page": "2"})
        client.post("/items", "body")
        client.head("http://other.example.com/x")

        sent = capturing_session.adapter.sent
        assert [r.method for r in sent] == ["GET", "POST", "HEAD"]
        assert sent[0].url == "http://api.example.com/items?page=2"
        assert sent[2].url == "http://other.example.com/x"
        for prepared in sent:
            assert verify_request(signable_from_prepared(prepared), hmac_secret,
                                  timestamp_generator=fixed_clock).valid

    def test_per_request_options(self, capturing_session, hmac_secret):
        client = SignedSession(hmac_secret, "k", session=capturing_session,
                               options=SignatureOptions(algorithms="hmac-sha256"))
        client.get("http://api.example.com/", key_id_override="alias")
        assert 'keyId="alias"' in capturing_session.adapter.sent[0].headers["Authorization"]

    def test_context_manager_closes_session(self, hmac_secret):
        session = Mock()
        with SignedSession(hmac_secret, "k", session=session) as client:
            assert client.session is session
        session.close.assert_called_once()

    def test_requires_key(self):
        with pytest.raises(MissingRequiredOption):
            SignedSession(None, "k")
