"""
Type definitions for HTTP message signing

This module provides the data classes shared by the canonicalizer, the
parameter assembler, the signer and the verifier.
"""

import dataclasses
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union
from dataclasses import dataclass, field
from enum import Enum

from ..exceptions import UnsupportedAlgorithm, ValidationError, ErrorCodes


class SignatureAlgorithm(str, Enum):
    """Signature algorithm identifiers"""
    HS2019 = "hs2019"
    RSA_SHA256 = "rsa-sha256"
    RSA_SHA1 = "rsa-sha1"
    ECDSA_SHA256 = "ecdsa-sha256"
    HMAC_SHA256 = "hmac-sha256"

    @classmethod
    def parse(cls, value: Union[str, 'SignatureAlgorithm']) -> 'SignatureAlgorithm':
        """Look up an algorithm by its identifier, raising UnsupportedAlgorithm"""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedAlgorithm(value) from None


HeaderValue = Union[str, List[str], Tuple[str, ...]]
HeaderDict = Dict[str, HeaderValue]
RequestBody = Union[str, bytes, None]
TimestampGenerator = Callable[[], int]


@dataclass
class SignableRequest:
    """
    Request to be signed or verified

    Attributes:
        method: HTTP method token (GET, POST, etc.)
        path: Request path without the query string
        query: Query string without the leading '?', may be empty
        headers: Request headers; a value may be a string or a list of
            strings for multi-valued headers
        body: Optional request body (string or bytes)
    """
    method: str
    path: str
    query: str = ""
    headers: Mapping[str, HeaderValue] = field(default_factory=dict)
    body: RequestBody = None

    def __post_init__(self):
        """Validate request and normalize headers after initialization"""
        if not isinstance(self.method, str) or not self.method:
            raise ValidationError("Request method must be a non-empty string", ErrorCodes.INVALID_REQUEST)

        if not isinstance(self.path, str):
            raise ValidationError("Signed requests must specify a request path", ErrorCodes.INVALID_REQUEST)

        if self.query is None:
            self.query = ""

        # Lowercase names, list values; lookups are case-insensitive
        normalized: Dict[str, List[str]] = {}
        for name, value in self.headers.items():
            values = [value] if isinstance(value, str) else list(value)
            normalized.setdefault(name.lower(), []).extend(values)
        self.headers = normalized

    def get_header(self, name: str) -> List[str]:
        """Return all values of a header, in order (empty list when absent)"""
        return list(self.headers.get(name.lower(), []))

    def with_header(self, name: str, value: str) -> 'SignableRequest':
        """Return a copy of this request with ``name`` set to ``value``"""
        headers = {k: list(v) for k, v in self.headers.items()}
        headers[name.lower()] = [value]
        return dataclasses.replace(self, headers=headers)

    def body_bytes(self) -> bytes:
        """Body as bytes (empty when there is none)"""
        if self.body is None:
            return b""
        if isinstance(self.body, str):
            return self.body.encode('utf-8')
        return self.body


@dataclass
class SignatureOptions:
    """
    Options controlling how a signature is built

    Attributes:
        algorithms: Signature algorithm, or list whose first entry is used
            for signing (remaining entries are informational)
        headers: (Pseudo-)headers to sign, space-separated string or list;
            defaults to "(created)" for hs2019 and "date" otherwise
        request_target: Explicit (request-target) value
        age: Shift the Date header and 'created' by this many seconds into
            the past; None disables 'created'
        created: Literal 'created' value (overrides age, "" omits it)
        date: Literal Date header value (overrides age)
        expires_in: Add an 'expires' this many seconds in the future
        expires: Literal 'expires' value (overrides expires_in)
        to_be_signed: Literal signing string replacing canonicalization
        signature: Literal base64 signature; no signing is performed
        key_id_override .. expires_override: Values written to the
            Authorization header instead of the computed ones
    """
    algorithms: Union[str, List[str]] = field(default_factory=lambda: [SignatureAlgorithm.HS2019.value])
    headers: Optional[Union[str, List[str]]] = None
    request_target: Optional[str] = None
    age: Optional[int] = 0
    created: Optional[Union[int, str]] = None
    date: Optional[str] = None
    expires_in: Optional[int] = None
    expires: Optional[Union[int, str]] = None
    to_be_signed: Optional[str] = None
    signature: Optional[str] = None
    key_id_override: Optional[str] = None
    algorithm_override: Optional[str] = None
    signature_override: Optional[str] = None
    headers_override: Optional[Union[str, List[str]]] = None
    created_override: Optional[Union[int, str]] = None
    expires_override: Optional[Union[int, str]] = None

    def __post_init__(self):
        """Validate algorithm list"""
        if isinstance(self.algorithms, (str, SignatureAlgorithm)):
            self.algorithms = [self.algorithms]
        else:
            self.algorithms = list(self.algorithms)

        if not self.algorithms:
            raise ValidationError("At least one algorithm must be configured", ErrorCodes.INVALID_OPTION)

    @property
    def algorithm(self) -> str:
        """The algorithm used for signing (head of ``algorithms``)"""
        head = self.algorithms[0]
        return head.value if isinstance(head, SignatureAlgorithm) else head

    @classmethod
    def option_names(cls) -> List[str]:
        return [f.name for f in dataclasses.fields(cls)]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'SignatureOptions':
        """
        Build options from a mapping of option names.

        Raises:
            ValidationError: If an unknown option name is present
        """
        unknown = sorted(set(data) - set(cls.option_names()))
        if unknown:
            raise ValidationError(
                f"Unknown signature option(s): {', '.join(unknown)}",
                ErrorCodes.INVALID_OPTION,
                {"unknown_options": unknown}
            )
        return cls(**dict(data))

    def merge(self, **overrides: Any) -> 'SignatureOptions':
        """Return a copy with the given options replaced"""
        unknown = sorted(set(overrides) - set(self.option_names()))
        if unknown:
            raise ValidationError(
                f"Unknown signature option(s): {', '.join(unknown)}",
                ErrorCodes.INVALID_OPTION,
                {"unknown_options": unknown}
            )
        return dataclasses.replace(self, **overrides)


@dataclass
class CanonicalContext:
    """
    Values available to the canonicalizer

    Attributes:
        request_target: Computed or explicit (request-target) value
        created: 'created' timestamp string (may be empty)
        expires: 'expires' timestamp string (may be empty)
        date: HTTP date string
        header_values: Accessor returning all values of a header
    """
    request_target: str
    created: str
    expires: str
    date: str
    header_values: Callable[[str], List[str]]


@dataclass
class SignatureParams:
    """
    Resolved signature parameters, in wire order

    All values are strings; an empty string means the parameter is omitted
    from the Authorization header.
    """
    key_id: str
    signature: str
    headers: str
    created: str
    expires: str
    algorithm: str

    def wire_items(self) -> List[Tuple[str, str, bool]]:
        """(wire name, value, quoted) triples in fixed order"""
        return [
            ('keyId', self.key_id, True),
            ('signature', self.signature, True),
            ('headers', self.headers, True),
            ('created', self.created, False),
            ('expires', self.expires, False),
            ('algorithm', self.algorithm, False),
        ]


@dataclass
class SignatureResult:
    """
    Generated signature

    Attributes:
        authorization: Complete Authorization header value
        date: Date header value
        signing_string: Signing string that was signed
        params: Parameters serialized into the Authorization header
        headers: Headers to attach to the outgoing request
    """
    authorization: str
    date: str
    signing_string: str
    params: SignatureParams
    headers: Dict[str, str]

    def __post_init__(self):
        if not self.authorization.startswith("Signature "):
            raise ValueError("Authorization value must use the Signature scheme")
