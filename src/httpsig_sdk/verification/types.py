"""
Type definitions for signature verification
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional


class VerificationStatus(str, Enum):
    """Verification outcome"""
    VALID = "valid"
    INVALID = "invalid"


@dataclass
class ParsedSignature:
    """
    Parameters parsed from an Authorization: Signature header

    Optional parameters that were not present are None.
    """
    key_id: str
    signature: str
    headers: Optional[str] = None
    created: Optional[str] = None
    expires: Optional[str] = None
    algorithm: Optional[str] = None
    extra: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if not self.key_id:
            raise ValueError("Key ID cannot be empty")
        if not self.signature:
            raise ValueError("Signature cannot be empty")


@dataclass
class VerificationResult:
    """
    Verification result

    Attributes:
        status: Overall outcome
        key_id: keyId presented by the client (None if unparseable)
        algorithm: Algorithm used for verification
        headers: Signed (pseudo-)header names
        signing_string: Reconstructed signing string
        error: Error code, message and details for invalid results
    """
    status: VerificationStatus
    key_id: Optional[str] = None
    algorithm: Optional[str] = None
    headers: List[str] = field(default_factory=list)
    signing_string: Optional[str] = None
    error: Optional[Dict[str, Any]] = None

    @property
    def valid(self) -> bool:
        return self.status == VerificationStatus.VALID

    @property
    def error_code(self) -> Optional[str]:
        return self.error['code'] if self.error else None

    @property
    def error_message(self) -> Optional[str]:
        return self.error['message'] if self.error else None

    @classmethod
    def create_error(
        cls,
        error_code: str,
        error_message: str,
        details: Optional[Dict[str, Any]] = None,
        **fields: Any
    ) -> 'VerificationResult':
        """Create invalid result"""
        return cls(
            status=VerificationStatus.INVALID,
            error={
                'code': error_code,
                'message': error_message,
                'details': details or {}
            },
            **fields
        )


# Resolves a keyId to key material (None when the key is unknown)
KeyResolver = Callable[[str], Any]


class VerificationErrorCodes:
    """Standard error codes for verification results"""

    MISSING_AUTHORIZATION = "MISSING_AUTHORIZATION"
    INVALID_SIGNATURE_HEADER = "INVALID_SIGNATURE_HEADER"
    UNSUPPORTED_ALGORITHM = "UNSUPPORTED_ALGORITHM"
    MISSING_SIGNED_HEADER = "MISSING_SIGNED_HEADER"
    UNKNOWN_KEY = "UNKNOWN_KEY"
    CREATED_IN_FUTURE = "CREATED_IN_FUTURE"
    SIGNATURE_EXPIRED = "SIGNATURE_EXPIRED"
    SIGNATURE_TOO_OLD = "SIGNATURE_TOO_OLD"
    SIGNATURE_MISMATCH = "SIGNATURE_MISMATCH"
    KEY_MISMATCH = "KEY_MISMATCH"
