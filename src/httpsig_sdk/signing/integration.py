"""
HTTP client integration for request signing

This module signs outbound requests made with the requests library: the
request is prepared by the session, converted to a SignableRequest, signed,
and the Authorization, Date and (optionally) Digest headers are applied to
the prepared request before it is sent.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urlsplit

import requests
from requests.models import PreparedRequest
from requests.sessions import Session

from ..exceptions import MissingRequiredOption, ValidationError, ErrorCodes
from .types import SignableRequest, SignatureOptions, TimestampGenerator
from .signer import HttpSignatureSigner
from .utils import digest as compute_digest

logger = logging.getLogger(__name__)

# Methods whose mapping payload is sent as query parameters
QUERY_PAYLOAD_METHODS = frozenset(['GET', 'HEAD', 'DELETE', 'OPTIONS', 'TRACE', 'CONNECT'])

Payload = Union[Mapping[str, Any], str, bytes, None]


def signable_from_prepared(prepared: PreparedRequest) -> SignableRequest:
    """
    Convert a prepared request into a SignableRequest.

    Streamed bodies (iterators, files) are not read and are treated as an
    empty body; sign_prepared_request refuses to digest them.
    """
    parts = urlsplit(prepared.url)
    body = prepared.body if isinstance(prepared.body, (str, bytes)) else None

    return SignableRequest(
        method=prepared.method,
        path=parts.path or '/',
        query=parts.query,
        headers=dict(prepared.headers),
        body=body
    )


def sign_prepared_request(
    prepared: PreparedRequest,
    key: Any,
    key_id: str,
    options: Optional[SignatureOptions] = None,
    digest_body: bool = False,
    timestamp_generator: Optional[TimestampGenerator] = None,
    **option_overrides: Any
) -> PreparedRequest:
    """
    Sign a prepared request in place.

    Args:
        prepared: Prepared request to sign
        key: RSA/EC private key or HMAC secret
        key_id: Key identifier
        options: Signature options
        digest_body: Add a SHA-256 Digest header before signing
        timestamp_generator: Optional clock for the signer
        **option_overrides: Individual signature options

    Returns:
        PreparedRequest: The same request with signature headers added

    Raises:
        ValidationError: If digest_body is set for a streamed body
        HttpSignatureError: If signing fails; no header is set in that case
    """
    if digest_body and not isinstance(prepared.body, (str, bytes, type(None))):
        raise ValidationError(
            "Cannot compute a Digest for a streamed request body",
            ErrorCodes.INVALID_REQUEST,
            {"body_type": type(prepared.body).__name__}
        )

    request = signable_from_prepared(prepared)
    new_headers: Dict[str, str] = {}

    if digest_body:
        new_headers['Digest'] = compute_digest(request.body_bytes())
        request = request.with_header('digest', new_headers['Digest'])

    signer = HttpSignatureSigner(timestamp_generator=timestamp_generator)
    result = signer.sign(request, key, key_id, options, **option_overrides)
    new_headers['Date'] = result.date
    new_headers['Authorization'] = result.authorization

    prepared.headers.update(new_headers)
    return prepared


def _payload_kwargs(method: str, params_or_body: Payload) -> Dict[str, Any]:
    if params_or_body is None:
        return {}
    if isinstance(params_or_body, Mapping):
        if method in QUERY_PAYLOAD_METHODS:
            return {'params': dict(params_or_body)}
        return {'data': dict(params_or_body)}
    if isinstance(params_or_body, (str, bytes)):
        return {'data': params_or_body}
    raise ValidationError(
        f"Unsupported payload type: {type(params_or_body).__name__}",
        ErrorCodes.INVALID_REQUEST
    )


def signed_request(
    session: Session,
    method: str,
    url: str,
    params_or_body: Payload = None,
    *,
    key: Any = None,
    key_id: Optional[str] = None,
    options: Optional[SignatureOptions] = None,
    digest: bool = False,
    request_headers: Optional[Mapping[str, str]] = None,
    send_kwargs: Optional[Mapping[str, Any]] = None,
    timestamp_generator: Optional[TimestampGenerator] = None,
    **sign_opts: Any
) -> requests.Response:
    """
    Make a signed request.

    Args:
        session: requests session used to prepare and send the request
        method: HTTP method
        url: Absolute request URL
        params_or_body: Mapping (query params for GET-like methods, form
            data otherwise), or a raw str/bytes body
        key: RSA/EC private key or HMAC secret (required)
        key_id: Key identifier (required)
        options: Base signature options
        digest: Add a SHA-256 Digest header before signing
        request_headers: Extra HTTP headers for the request
        send_kwargs: Extra arguments for Session.send (timeout, verify...)
        timestamp_generator: Optional clock for the signer
        **sign_opts: Individual signature options (see SignatureOptions)

    Returns:
        requests.Response: HTTP response

    Raises:
        MissingRequiredOption: If key or key_id is missing
        ValidationError: If the URL is not a string or an option is unknown
    """
    if not isinstance(url, str):
        raise ValidationError("Signed requests must specify a request path", ErrorCodes.INVALID_REQUEST)
    if key is None:
        raise MissingRequiredOption('key')
    if key_id is None:
        raise MissingRequiredOption('key_id')

    effective = options or SignatureOptions()
    if sign_opts:
        effective = effective.merge(**sign_opts)

    method = method.upper()
    request = requests.Request(
        method,
        url,
        headers=dict(request_headers or {}),
        **_payload_kwargs(method, params_or_body)
    )
    prepared = session.prepare_request(request)
    sign_prepared_request(
        prepared,
        key,
        key_id,
        effective,
        digest_body=digest,
        timestamp_generator=timestamp_generator
    )

    settings = session.merge_environment_settings(prepared.url, {}, None, None, None)
    settings.update(send_kwargs or {})

    logger.debug(f"Sending signed {method} request to {prepared.url}")
    return session.send(prepared, **settings)


class SignedSession:
    """
    HTTP session wrapper that signs every request.

    Wraps a requests.Session together with key material and default
    signature options. Paths starting with '/' are joined to base_url.
    """

    def __init__(
        self,
        key: Any,
        key_id: str,
        base_url: Optional[str] = None,
        session: Optional[Session] = None,
        options: Optional[SignatureOptions] = None,
        digest: bool = False,
        timestamp_generator: Optional[TimestampGenerator] = None
    ):
        if key is None:
            raise MissingRequiredOption('key')
        if key_id is None:
            raise MissingRequiredOption('key_id')

        self.key = key
        self.key_id = key_id
        self.base_url = base_url.rstrip('/') if base_url else None
        self.session = session or requests.Session()
        self.signature_options = options or SignatureOptions()
        self.digest = digest
        self.timestamp_generator = timestamp_generator
        logger.info(f"Configured request signing for key ID: {key_id}")

    def _url(self, url: str) -> str:
        if self.base_url and isinstance(url, str) and url.startswith('/'):
            return f"{self.base_url}{url}"
        return url

    def request(
        self,
        method: str,
        url: str,
        params_or_body: Payload = None,
        *,
        request_headers: Optional[Mapping[str, str]] = None,
        send_kwargs: Optional[Mapping[str, Any]] = None,
        **sign_opts: Any
    ) -> requests.Response:
        """
        Make a signed request; ``sign_opts`` override the session options.
        """
        return signed_request(
            self.session,
            method,
            self._url(url),
            params_or_body,
            key=self.key,
            key_id=self.key_id,
            options=self.signature_options,
            digest=self.digest,
            request_headers=request_headers,
            send_kwargs=send_kwargs,
            timestamp_generator=self.timestamp_generator,
            **sign_opts
        )

    def get(self, url: str, params: Payload = None, **kwargs) -> requests.Response:
        """Make signed GET request."""
        return self.request('GET', url, params, **kwargs)

    def post(self, url: str, body: Payload = None, **kwargs) -> requests.Response:
        """Make signed POST request."""
        return self.request('POST', url, body, **kwargs)

    def put(self, url: str, body: Payload = None, **kwargs) -> requests.Response:
        """Make signed PUT request."""
        return self.request('PUT', url, body, **kwargs)

    def patch(self, url: str, body: Payload = None, **kwargs) -> requests.Response:
        """Make signed PATCH request."""
        return self.request('PATCH', url, body, **kwargs)

    def delete(self, url: str, params: Payload = None, **kwargs) -> requests.Response:
        """Make signed DELETE request."""
        return self.request('DELETE', url, params, **kwargs)

    def options(self, url: str, params: Payload = None, **kwargs) -> requests.Response:
        """Make signed OPTIONS request."""
        return self.request('OPTIONS', url, params, **kwargs)

    def head(self, url: str, params: Payload = None, **kwargs) -> requests.Response:
        """Make signed HEAD request."""
        return self.request('HEAD', url, params, **kwargs)

    def trace(self, url: str, params: Payload = None, **kwargs) -> requests.Response:
        """Make signed TRACE request."""
        return self.request('TRACE', url, params, **kwargs)

    def connect(self, url: str, params: Payload = None, **kwargs) -> requests.Response:
        """Make signed CONNECT request."""
        return self.request('CONNECT', url, params, **kwargs)

    def close(self) -> None:
        """Close the underlying session."""
        self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, *args):
        """Context manager exit."""
        self.close()
