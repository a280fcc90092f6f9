"""
Tests for signing string construction
"""

import pytest

from httpsig_sdk.signing import (
    SignableRequest,
    build_request_target,
    build_signing_string,
    context_for_request,
    default_headers,
    parse_header_list,
)
from httpsig_sdk.signing.canonical_message import format_header_list, build_signing_line
from httpsig_sdk.exceptions import ValidationError


class TestRequestTarget:
    """Test (request-target) construction"""

    def test_method_is_lowercased(self):
        """Test the method token is lowercased"""
        assert build_request_target("GET", "/foo") == "get /foo"

    def test_query_appended_when_present(self):
        """Test non-empty query strings are appended with '?'"""
        assert build_request_target("POST", "/items", "x=1") == "post /items?x=1"

    def test_empty_query_has_no_question_mark(self):
        """Test an empty or missing query adds nothing"""
        assert build_request_target("GET", "/foo", "") == "get /foo"
        assert build_request_target("GET", "/foo", None) == "get /foo"


class TestHeaderLists:
    """Test header list helpers"""

    def test_default_headers(self):
        """Test hs2019 signs (created) and older algorithms sign date"""
        assert default_headers("hs2019") == "(created)"
        assert default_headers("rsa-sha256") == "date"
        assert default_headers("hmac-sha256") == "date"

    def test_parse_string_and_list(self):
        """Test both wire strings and lists are accepted"""
        assert parse_header_list("(request-target) date digest") == ["(request-target)", "date", "digest"]
        assert parse_header_list(["host", "date"]) == ["host", "date"]

    def test_format_header_list(self):
        assert format_header_list(["(created)", "host"]) == "(created) host"
        assert format_header_list("date") == "date"


class TestSigningString:
    """Test signing string construction"""

    def setup_method(self):
        """Setup a request used by several tests"""
        self.request = SignableRequest(
            method="POST",
            path="/items",
            query="x=1",
            headers={"Host": "example.com", "X-Multi": ["a", "b"], "Digest": "SHA-256=abc"}
        )
        self.context = context_for_request(
            self.request,
            created="1700000000",
            expires="1700000300",
            date="Tue, 14 Nov 2023 22:13:20 GMT"
        )

    def test_created_only(self):
        """Test a single (created) line"""
        assert build_signing_string("(created)", self.context) == "(created): 1700000000"

    def test_request_target_and_date(self):
        """Test line order follows the header list"""
        signing_string = build_signing_string("(request-target) date", self.context)
        assert signing_string == (
            "(request-target): post /items?x=1\n"
            "date: Tue, 14 Nov 2023 22:13:20 GMT"
        )

    def test_all_pseudo_headers(self):
        """Test every pseudo-header and a real header"""
        signing_string = build_signing_string(
            ["(request-target)", "(created)", "(expires)", "host", "digest"],
            self.context
        )
        lines = signing_string.split("\n")
        assert lines == [
            "(request-target): post /items?x=1",
            "(created): 1700000000",
            "(expires): 1700000300",
            "host: example.com",
            "digest: SHA-256=abc",
        ]
        assert not signing_string.endswith("\n")

    def test_multi_valued_header_joined_with_comma(self):
        """Test multiple values are joined with ',' and no space"""
        assert build_signing_line("x-multi", self.context) == "x-multi: a,b"

    def test_header_lookup_is_case_insensitive(self):
        """Test request headers are stored lowercase"""
        assert self.request.get_header("HOST") == ["example.com"]

    def test_missing_header_yields_empty_value(self):
        """Test an absent header renders with an empty value"""
        assert build_signing_line("x-absent", self.context) == "x-absent: "

    def test_explicit_request_target(self):
        """Test an explicit request target replaces the computed one"""
        context = context_for_request(self.request, "", "", "", request_target="get /override")
        assert build_signing_string("(request-target)", context) == "(request-target): get /override"


class TestSignableRequest:
    """Test request validation"""

    def test_path_required(self):
        """Test a missing path is rejected"""
        with pytest.raises(ValidationError, match="request path"):
            SignableRequest(method="GET", path=None)

    def test_method_required(self):
        with pytest.raises(ValidationError):
            SignableRequest(method="", path="/")

    def test_with_header_returns_copy(self):
        """Test with_header leaves the original untouched"""
        original = SignableRequest(method="GET", path="/", headers={"A": "1"})
        updated = original.with_header("B", "2")

        assert original.get_header("b") == []
        assert updated.get_header("b") == ["2"]
        assert updated.get_header("a") == ["1"]

    def test_body_bytes(self):
        assert SignableRequest(method="POST", path="/", body="hé").body_bytes() == "hé".encode("utf-8")
        assert SignableRequest(method="GET", path="/").body_bytes() == b""
