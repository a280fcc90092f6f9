"""
HTTP signature SDK - Request Signing Module

draft-cavage HTTP signatures: signing string construction, signature
parameter assembly and Digest headers, with requests integration for
signing outbound requests.
"""

from .types import (
    SignableRequest,
    SignatureOptions,
    SignatureParams,
    SignatureResult,
    CanonicalContext,
    SignatureAlgorithm,
)

from .canonical_message import (
    build_request_target,
    build_signing_string,
    context_for_request,
    default_headers,
    parse_header_list,
)

from .signature_params import (
    resolve_signature_params,
    serialize_signature_params,
    build_authorization_header,
)

from .signer import (
    HttpSignatureSigner,
    create_signature,
    with_signature,
    with_digest,
)

from .utils import (
    generate_timestamp,
    created_timestamp,
    expires_timestamp,
    http_date,
    digest,
    digest_from_map,
    get_header_values,
)

from .integration import (
    SignedSession,
    signed_request,
    sign_prepared_request,
)

# Public API exports
__all__ = [
    # Types
    'SignableRequest',
    'SignatureOptions',
    'SignatureParams',
    'SignatureResult',
    'CanonicalContext',
    'SignatureAlgorithm',
    # Canonicalization
    'build_request_target',
    'build_signing_string',
    'context_for_request',
    'default_headers',
    'parse_header_list',
    # Parameters
    'resolve_signature_params',
    'serialize_signature_params',
    'build_authorization_header',
    # Core signing functionality
    'HttpSignatureSigner',
    'create_signature',
    'with_signature',
    'with_digest',
    # Utilities
    'generate_timestamp',
    'created_timestamp',
    'expires_timestamp',
    'http_date',
    'digest',
    'digest_from_map',
    'get_header_values',
    # HTTP Integration
    'SignedSession',
    'signed_request',
    'sign_prepared_request',
]
