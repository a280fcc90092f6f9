"""
HTTP signature SDK
draft-cavage HTTP signatures with RSA, ECDSA and HMAC keys
"""

from .version import __version__
from .exceptions import (
    HttpSignatureError,
    UnsupportedAlgorithm,
    KeyMismatch,
    MissingRequiredOption,
    ValidationError,
    InvalidSignatureHeader,
    KeyLoadError,
    ConfigurationError,
    SigningError,
    ErrorCodes,
)
# signing must be imported before crypto; crypto.engine imports signing.types
from .signing import (
    # Core signing functionality
    HttpSignatureSigner,
    create_signature,
    with_signature,
    with_digest,
    # Types
    SignableRequest,
    SignatureOptions,
    SignatureParams,
    SignatureResult,
    SignatureAlgorithm,
    # Canonicalization and parameters
    build_signing_string,
    build_authorization_header,
    # Utilities
    digest,
    http_date,
    # HTTP Integration
    SignedSession,
    signed_request,
    sign_prepared_request,
)
from .crypto import (
    generate_rsa_key,
    generate_ec_key,
    generate_hmac_secret,
    load_private_key,
    load_public_key,
    private_key_pem,
    public_key_pem,
)
from .verification import (
    HttpSignatureVerifier,
    VerificationResult,
    VerificationStatus,
    VerificationErrorCodes,
    verify_request,
    verify_digest,
    parse_authorization_header,
)
from .config import (
    SigningProfileManager,
    load_signing_profiles_from_file,
    load_signing_profiles_from_json,
)

__all__ = [
    '__version__',
    # Exceptions
    'HttpSignatureError',
    'UnsupportedAlgorithm',
    'KeyMismatch',
    'MissingRequiredOption',
    'ValidationError',
    'InvalidSignatureHeader',
    'KeyLoadError',
    'ConfigurationError',
    'SigningError',
    'ErrorCodes',
    # Signing
    'HttpSignatureSigner',
    'create_signature',
    'with_signature',
    'with_digest',
    'SignableRequest',
    'SignatureOptions',
    'SignatureParams',
    'SignatureResult',
    'SignatureAlgorithm',
    'build_signing_string',
    'build_authorization_header',
    'digest',
    'http_date',
    'SignedSession',
    'signed_request',
    'sign_prepared_request',
    # Keys
    'generate_rsa_key',
    'generate_ec_key',
    'generate_hmac_secret',
    'load_private_key',
    'load_public_key',
    'private_key_pem',
    'public_key_pem',
    # Verification
    'HttpSignatureVerifier',
    'VerificationResult',
    'VerificationStatus',
    'VerificationErrorCodes',
    'verify_request',
    'verify_digest',
    'parse_authorization_header',
    # Configuration
    'SigningProfileManager',
    'load_signing_profiles_from_file',
    'load_signing_profiles_from_json',
]
