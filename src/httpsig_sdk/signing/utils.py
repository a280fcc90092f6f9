"""
Utility functions for request signing

This module provides timestamp handling (created/expires/HTTP date), body
digest calculation according to RFC 3230 and header lookup helpers.
"""

import time
import hashlib
import base64
from email.utils import formatdate
from typing import Dict, Iterable, List, Mapping, Optional, Union

from ..exceptions import UnsupportedAlgorithm
from .types import RequestBody


# RFC 3230 / RFC 5843 digest algorithm names
DIGEST_ALGORITHMS = {
    'SHA-256': hashlib.sha256,
    'SHA-512': hashlib.sha512,
    'SHA': hashlib.sha1,
}

DEFAULT_DIGEST_ALGORITHM = 'SHA-256'


def generate_timestamp() -> int:
    """
    Generate current Unix timestamp.

    Returns:
        int: Current Unix timestamp (seconds since epoch)
    """
    return int(time.time())


def created_timestamp(age: Optional[int], now: Optional[int] = None) -> str:
    """
    Compute the 'created' parameter from an age in seconds.

    Args:
        age: Seconds into the past; None disables the parameter
        now: Unix timestamp to use (current time if None)

    Returns:
        str: Timestamp string, or "" when age is None
    """
    if age is None:
        return ""
    if now is None:
        now = generate_timestamp()
    return str(now - age)


def expires_timestamp(expires_in: Optional[int], now: Optional[int] = None) -> str:
    """
    Compute the 'expires' parameter from a validity period in seconds.

    Returns:
        str: Timestamp string, or "" when expires_in is None
    """
    if expires_in is None:
        return ""
    if now is None:
        now = generate_timestamp()
    return str(now + expires_in)


def http_date(age: Optional[int] = 0, now: Optional[int] = None) -> str:
    """
    Format an RFC 7231 HTTP date, shifted ``age`` seconds into the past.

    Args:
        age: Seconds into the past (None is treated as 0)
        now: Unix timestamp to use (current time if None)

    Returns:
        str: Date such as "Sun, 06 Nov 1994 08:49:37 GMT"
    """
    if now is None:
        now = generate_timestamp()
    return formatdate(now - (age or 0), usegmt=True)


def _hash_body(body: bytes, algorithm: str) -> str:
    hash_factory = DIGEST_ALGORITHMS.get(algorithm.upper())
    if hash_factory is None:
        raise UnsupportedAlgorithm(algorithm, {"supported": list(DIGEST_ALGORITHMS)})
    return base64.b64encode(hash_factory(body).digest()).decode('ascii')


def _body_bytes(body: RequestBody) -> bytes:
    if body is None:
        return b""
    if isinstance(body, str):
        return body.encode('utf-8')
    return body


def digest(body: RequestBody, algorithms: Iterable[str] = (DEFAULT_DIGEST_ALGORITHM,)) -> str:
    """
    Calculate a Digest header value (RFC 3230, section 4.3.2).

    Args:
        body: Message body (string, bytes, or None)
        algorithms: Digest algorithm names, in output order

    Returns:
        str: Header value such as "SHA-256=X48E9q...="

    Raises:
        UnsupportedAlgorithm: If a digest algorithm is not recognized
    """
    content = _body_bytes(body)
    return digest_from_map({alg: _hash_body(content, alg) for alg in algorithms})


def digest_from_map(digests: Mapping[str, str]) -> str:
    """
    Format precomputed digest values as a Digest header value.

    Args:
        digests: Mapping of algorithm name to base64 digest value

    Returns:
        str: Comma-joined "ALG=value" entries in mapping order
    """
    return ",".join(f"{alg}={value}" for alg, value in digests.items())


def parse_digest_header(value: str) -> Dict[str, str]:
    """
    Split a Digest header value into algorithm/value pairs.

    Algorithm names are upper-cased; entries without '=' are skipped.
    """
    digests = {}
    for entry in value.split(','):
        alg, sep, encoded = entry.strip().partition('=')
        if sep and alg:
            digests[alg.strip().upper()] = encoded.strip()
    return digests


def get_header_values(headers: Mapping[str, Union[str, List[str]]], name: str) -> List[str]:
    """
    Case-insensitive multi-value header lookup.

    Args:
        headers: Mapping of header name to a value or list of values
        name: Header name to look up

    Returns:
        list: All values, in order; empty when the header is absent
    """
    target = name.lower()
    values: List[str] = []
    for key, value in headers.items():
        if key.lower() == target:
            if isinstance(value, str):
                values.append(value)
            else:
                values.extend(value)
    return values
