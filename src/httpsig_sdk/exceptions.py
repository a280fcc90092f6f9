"""
Exception classes for the HTTP signature SDK
"""

from typing import Optional, Dict, Any


class ErrorCodes:
    """Standard error codes for signing, verification and configuration"""

    UNSUPPORTED_ALGORITHM = "UNSUPPORTED_ALGORITHM"
    KEY_MISMATCH = "KEY_MISMATCH"
    MISSING_REQUIRED_OPTION = "MISSING_REQUIRED_OPTION"
    INVALID_OPTION = "INVALID_OPTION"
    INVALID_REQUEST = "INVALID_REQUEST"
    INVALID_SIGNATURE_HEADER = "INVALID_SIGNATURE_HEADER"
    KEY_LOAD_FAILED = "KEY_LOAD_FAILED"
    SIGNING_FAILED = "SIGNING_FAILED"

    # Configuration loading
    PARSE_ERROR = "PARSE_ERROR"
    INVALID_FORMAT = "INVALID_FORMAT"
    FILE_ERROR = "FILE_ERROR"
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"


class HttpSignatureError(Exception):
    """Base exception for all HTTP signature SDK errors"""

    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (code: {self.error_code}, details: {self.details})"
        return f"{self.message} (code: {self.error_code})"


class UnsupportedAlgorithm(HttpSignatureError):
    """Raised when an algorithm identifier is not one of the recognized values"""

    def __init__(self, algorithm: Any, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            f"Unsupported algorithm: {algorithm!r}",
            ErrorCodes.UNSUPPORTED_ALGORITHM,
            details or {"algorithm": str(algorithm)}
        )
        self.algorithm = algorithm


class KeyMismatch(HttpSignatureError):
    """Raised when the supplied key type does not fit the requested algorithm"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCodes.KEY_MISMATCH, details)


class MissingRequiredOption(HttpSignatureError):
    """Raised when a mandatory option (key, key identifier) is absent"""

    def __init__(self, option: str):
        super().__init__(
            f"Missing required option: {option}",
            ErrorCodes.MISSING_REQUIRED_OPTION,
            {"option": option}
        )
        self.option = option


class ValidationError(HttpSignatureError):
    """Exception raised for invalid arguments or option values"""
    pass


class InvalidSignatureHeader(HttpSignatureError):
    """Exception raised when an Authorization header cannot be parsed"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCodes.INVALID_SIGNATURE_HEADER, details)


class KeyLoadError(HttpSignatureError):
    """Exception raised when key material cannot be loaded"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCodes.KEY_LOAD_FAILED, details)


class ConfigurationError(HttpSignatureError):
    """Configuration loading and validation error"""
    pass


class SigningError(HttpSignatureError):
    """Exception raised when the signature primitive fails unexpectedly"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCodes.SIGNING_FAILED, details)
