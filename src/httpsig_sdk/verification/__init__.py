"""
Signature verification module for the HTTP signature SDK

Verifies Authorization: Signature headers presented with incoming requests
and Digest headers against request bodies.
"""

from .types import (
    ParsedSignature,
    VerificationResult,
    VerificationStatus,
    VerificationErrorCodes,
    KeyResolver,
)
from .utils import (
    parse_authorization_header,
    parse_signature_params,
    parse_http_date,
    verify_digest,
)
from .verifier import (
    HttpSignatureVerifier,
    verify_request,
    DEFAULT_CLOCK_SKEW,
)

__all__ = [
    # Types
    'ParsedSignature',
    'VerificationResult',
    'VerificationStatus',
    'VerificationErrorCodes',
    'KeyResolver',
    # Parsing and digest checks
    'parse_authorization_header',
    'parse_signature_params',
    'parse_http_date',
    'verify_digest',
    # Verifier
    'HttpSignatureVerifier',
    'verify_request',
    'DEFAULT_CLOCK_SKEW',
]
