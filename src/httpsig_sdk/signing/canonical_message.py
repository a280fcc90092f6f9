"""
Signing string construction for draft-cavage HTTP signatures

This module builds the canonical signing string from an ordered list of
(pseudo-)header names and the values available for a request.
"""

from typing import List, Optional, Union

from .types import CanonicalContext, SignableRequest, SignatureAlgorithm

REQUEST_TARGET = '(request-target)'
CREATED = '(created)'
EXPIRES = '(expires)'
DATE = 'date'


def default_headers(algorithm: Union[str, SignatureAlgorithm]) -> str:
    """
    Default header list for an algorithm.

    hs2019 signs "(created)"; the older algorithms sign the Date header.
    """
    if algorithm == SignatureAlgorithm.HS2019.value:
        return CREATED
    return DATE


def parse_header_list(headers: Union[str, List[str]]) -> List[str]:
    """
    Split a header list into names.

    Args:
        headers: Space-separated string (wire form) or list of names

    Returns:
        list: Header names in order
    """
    if isinstance(headers, str):
        return headers.split(" ")
    return list(headers)


def format_header_list(headers: Union[str, List[str]]) -> str:
    """Space-joined wire form of a header list"""
    if isinstance(headers, str):
        return headers
    return " ".join(headers)


def build_request_target(method: str, path: str, query: Optional[str] = "") -> str:
    """
    Build the (request-target) value.

    Returns:
        str: Lowercased method, a space and the path, with "?query"
            appended only when the query is non-empty
    """
    target = f"{method.lower()} {path}"
    if query:
        target = f"{target}?{query}"
    return target


def build_signing_line(name: str, context: CanonicalContext) -> str:
    """
    Build one line of the signing string.

    Names are matched verbatim. A header without values yields an empty
    value after the colon.
    """
    if name == REQUEST_TARGET:
        return f"{REQUEST_TARGET}: {context.request_target}"
    if name == CREATED:
        return f"{CREATED}: {context.created}"
    if name == EXPIRES:
        return f"{EXPIRES}: {context.expires}"
    if name == DATE:
        return f"{DATE}: {context.date}"
    return f"{name}: {','.join(context.header_values(name))}"


def build_signing_string(headers: Union[str, List[str]], context: CanonicalContext) -> str:
    """
    Build the signing string.

    Args:
        headers: Ordered (pseudo-)header names
        context: Values for pseudo-headers and a header accessor

    Returns:
        str: One line per name, newline-joined, no trailing newline
    """
    return "\n".join(build_signing_line(name, context) for name in parse_header_list(headers))


def context_for_request(
    request: SignableRequest,
    created: str,
    expires: str,
    date: str,
    request_target: Optional[str] = None
) -> CanonicalContext:
    """
    Create a canonical context for a request.

    Args:
        request: Request providing method, path, query and headers
        created: 'created' value
        expires: 'expires' value
        date: Date header value
        request_target: Explicit request target (computed if None)
    """
    if request_target is None:
        request_target = build_request_target(request.method, request.path, request.query)

    return CanonicalContext(
        request_target=request_target,
        created=created,
        expires=expires,
        date=date,
        header_values=request.get_header
    )
