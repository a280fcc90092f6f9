"""
Signature parameter resolution and serialization

Each parameter is resolved independently: an explicit option value wins,
otherwise the value is computed. The *_override options only change what
is written to the Authorization header, never what is signed.
"""

from typing import Any, List, Optional, Union

from .types import SignatureOptions, SignatureParams, SignableRequest
from .utils import created_timestamp, expires_timestamp, http_date
from .canonical_message import build_request_target, default_headers, format_header_list

AUTHORIZATION_SCHEME = "Signature"


def resolve_created(options: SignatureOptions, now: int) -> str:
    """Explicit 'created', else now - age ("" when age is None)"""
    if options.created is not None:
        return str(options.created)
    return created_timestamp(options.age, now)


def resolve_expires(options: SignatureOptions, now: int) -> str:
    """Explicit 'expires', else now + expires_in ("" without expires_in)"""
    if options.expires is not None:
        return str(options.expires)
    return expires_timestamp(options.expires_in, now)


def resolve_date(options: SignatureOptions, now: int) -> str:
    """Explicit Date header value, else the HTTP date shifted by age"""
    if options.date is not None:
        return options.date
    return http_date(options.age, now)


def resolve_headers(options: SignatureOptions) -> Union[str, List[str]]:
    """Configured header list, else the algorithm's default"""
    if options.headers is not None:
        return options.headers
    return default_headers(options.algorithm)


def resolve_request_target(options: SignatureOptions, request: SignableRequest) -> str:
    if options.request_target is not None:
        return options.request_target
    return build_request_target(request.method, request.path, request.query)


def _override(value: Optional[Any], computed: str) -> str:
    if value is None:
        return computed
    return str(value)


def resolve_signature_params(
    key_id: str,
    signature: str,
    headers: Union[str, List[str]],
    created: str,
    expires: str,
    options: SignatureOptions
) -> SignatureParams:
    """
    Apply the *_override options to the computed values.

    Args:
        key_id: Caller-supplied key identifier
        signature: Base64 signature over the signing string
        headers: Header list used for the signing string
        created: Resolved 'created' value
        expires: Resolved 'expires' value
        options: Signature options carrying the overrides

    Returns:
        SignatureParams: Values to serialize
    """
    headers_value = format_header_list(headers)
    if options.headers_override is not None:
        headers_value = format_header_list(options.headers_override)

    return SignatureParams(
        key_id=_override(options.key_id_override, key_id),
        signature=_override(options.signature_override, signature),
        headers=headers_value,
        created=_override(options.created_override, created),
        expires=_override(options.expires_override, expires),
        algorithm=_override(options.algorithm_override, options.algorithm),
    )


def serialize_signature_params(params: SignatureParams) -> str:
    """
    Serialize parameters in fixed order.

    String parameters are quoted; created, expires and algorithm are bare.
    A parameter whose value is empty is left out together with its comma.
    """
    segments = []
    for name, value, quoted in params.wire_items():
        if value in ("", '""'):
            continue
        if quoted:
            segments.append(f'{name}="{value}"')
        else:
            segments.append(f'{name}={value}')
    return ",".join(segments)


def build_authorization_header(params: SignatureParams) -> str:
    """Authorization header value using the Signature scheme"""
    return f"{AUTHORIZATION_SCHEME} {serialize_signature_params(params)}"
