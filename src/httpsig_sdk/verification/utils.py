"""
Utility functions for signature verification

This module parses Authorization: Signature header values and checks
Digest headers against request bodies.
"""

import re
import hmac
from datetime import timezone
from email.utils import parsedate_to_datetime
from typing import Dict, Optional

from ..exceptions import InvalidSignatureHeader
from ..signing.types import SignableRequest
from ..signing.utils import DIGEST_ALGORITHMS, digest, parse_digest_header
from .types import ParsedSignature

SIGNATURE_SCHEME = "signature"

# keyId="value" or created=123; a quoted value must end the parameter
_PARAM_PATTERN = re.compile(r'\s*([A-Za-z][A-Za-z0-9_-]*)=(?:"([^"]*)"|([^,"]*))\s*(?:,|$)')

_KNOWN_PARAMS = {
    'keyId': 'key_id',
    'signature': 'signature',
    'headers': 'headers',
    'created': 'created',
    'expires': 'expires',
    'algorithm': 'algorithm',
}


def parse_signature_params(params: str) -> Dict[str, str]:
    """
    Parse a comma-separated list of signature parameters

    Raises:
        InvalidSignatureHeader: If the list cannot be parsed
    """
    parsed: Dict[str, str] = {}
    position = 0
    params = params.strip()

    while position < len(params):
        match = _PARAM_PATTERN.match(params, position)
        if not match or match.end() == position:
            raise InvalidSignatureHeader(
                "Malformed signature parameters",
                {"params": params, "position": position}
            )
        name, quoted_value, bare_value = match.groups()
        parsed[name] = quoted_value if quoted_value is not None else bare_value.strip()
        position = match.end()

    return parsed


def parse_authorization_header(value: str) -> ParsedSignature:
    """
    Parse an Authorization header value using the Signature scheme

    Args:
        value: Header value such as 'Signature keyId="k",signature="..."'

    Returns:
        ParsedSignature: Parsed parameters

    Raises:
        InvalidSignatureHeader: If the scheme is not Signature, the
            parameters are malformed, or keyId/signature are missing
    """
    scheme, _, params = value.strip().partition(' ')
    if scheme.lower() != SIGNATURE_SCHEME:
        raise InvalidSignatureHeader(
            f"Unsupported authorization scheme: {scheme}",
            {"scheme": scheme}
        )

    parsed = parse_signature_params(params)

    for required in ('keyId', 'signature'):
        if not parsed.get(required):
            raise InvalidSignatureHeader(
                f"Missing signature parameter: {required}",
                {"parameter": required}
            )

    fields = {}
    extra = {}
    for name, param_value in parsed.items():
        if name in _KNOWN_PARAMS:
            fields[_KNOWN_PARAMS[name]] = param_value
        else:
            extra[name] = param_value

    return ParsedSignature(extra=extra, **fields)


def verify_digest(request: SignableRequest) -> bool:
    """
    Check a request's Digest header against its body

    Every recognized algorithm in the header must match; a header with no
    recognized algorithm, or no Digest header at all, fails.
    """
    header_values = request.get_header('digest')
    if not header_values:
        return False

    presented = parse_digest_header(",".join(header_values))
    recognized = [alg for alg in presented if alg in DIGEST_ALGORITHMS]
    if not recognized:
        return False

    body = request.body_bytes()
    for alg in recognized:
        expected = digest(body, [alg]).partition('=')[2]
        if not hmac.compare_digest(expected, presented[alg]):
            return False
    return True


def parse_http_date(value: str) -> Optional[int]:
    """Unix timestamp of an HTTP date, or None when unparseable

    Dates without a zone (or with -0000) are taken as UTC.
    """
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp())
