"""
HTTP signature signer

This module ties the canonicalizer, the crypto engine and the parameter
assembler together: it resolves the signature options for one request,
builds and signs the signing string and produces the Authorization and
Date header values.
"""

import base64
import logging
from typing import Any, Mapping, Optional, Union

from ..crypto import engine
from ..exceptions import MissingRequiredOption
from .types import (
    SignableRequest,
    SignatureOptions,
    SignatureResult,
    TimestampGenerator,
    RequestBody,
)
from .utils import generate_timestamp, digest, digest_from_map
from .canonical_message import build_signing_string, context_for_request
from .signature_params import (
    resolve_created,
    resolve_expires,
    resolve_date,
    resolve_headers,
    resolve_request_target,
    resolve_signature_params,
    build_authorization_header,
)

logger = logging.getLogger(__name__)


class HttpSignatureSigner:
    """
    Signer for draft-cavage HTTP signatures

    The signer holds no per-request state; ``now`` is sampled once per
    call so 'created', 'expires' and the Date header agree with each other.
    """

    def __init__(
        self,
        options: Optional[SignatureOptions] = None,
        timestamp_generator: Optional[TimestampGenerator] = None
    ):
        """
        Initialize the signer.

        Args:
            options: Default signature options (hs2019 if None)
            timestamp_generator: Optional clock returning Unix timestamps
        """
        self.options = options or SignatureOptions()
        self.timestamp_generator = timestamp_generator or generate_timestamp

    def sign(
        self,
        request: SignableRequest,
        key: Any,
        key_id: Optional[str],
        options: Optional[SignatureOptions] = None,
        **option_overrides: Any
    ) -> SignatureResult:
        """
        Sign a request.

        Args:
            request: Request to sign (not modified)
            key: RSA/EC private key or HMAC secret
            key_id: Key identifier written as keyId
            options: Signature options (signer defaults if None)
            **option_overrides: Individual options replacing those in
                ``options``

        Returns:
            SignatureResult: Header values and the signing string

        Raises:
            MissingRequiredOption: If key_id, or key without a literal
                signature, is missing
            UnsupportedAlgorithm: If the signing algorithm is not recognized
            KeyMismatch: If the key does not fit the algorithm
        """
        effective = options or self.options
        if option_overrides:
            effective = effective.merge(**option_overrides)

        if key_id is None:
            raise MissingRequiredOption('key_id')
        if key is None and effective.signature is None:
            raise MissingRequiredOption('key')

        now = self.timestamp_generator()
        algorithm = effective.algorithm
        created = resolve_created(effective, now)
        expires = resolve_expires(effective, now)
        date = resolve_date(effective, now)
        headers = resolve_headers(effective)

        if effective.to_be_signed is not None:
            signing_string = effective.to_be_signed
        else:
            context = context_for_request(
                request,
                created=created,
                expires=expires,
                date=date,
                request_target=resolve_request_target(effective, request)
            )
            signing_string = build_signing_string(headers, context)

        logger.debug(f"Signing string for {request.method} {request.path}:\n{signing_string}")

        if effective.signature is not None:
            signature = effective.signature
        else:
            raw_signature = engine.sign(signing_string, algorithm, key)
            signature = base64.b64encode(raw_signature).decode('ascii')

        params = resolve_signature_params(key_id, signature, headers, created, expires, effective)
        authorization = build_authorization_header(params)

        logger.debug(f"Signed {request.method} {request.path} with {algorithm} (keyId={key_id})")

        return SignatureResult(
            authorization=authorization,
            date=date,
            signing_string=signing_string,
            params=params,
            headers={'date': date, 'authorization': authorization}
        )

    def with_signature(
        self,
        request: SignableRequest,
        key: Any,
        key_id: Optional[str],
        options: Optional[SignatureOptions] = None,
        **option_overrides: Any
    ) -> SignableRequest:
        """
        Return a copy of the request carrying Date and Authorization headers.
        """
        result = self.sign(request, key, key_id, options, **option_overrides)
        signed = request
        for name, value in result.headers.items():
            signed = signed.with_header(name, value)
        return signed


def create_signature(
    request: SignableRequest,
    key: Any,
    key_id: Optional[str],
    options: Optional[SignatureOptions] = None,
    **option_overrides: Any
) -> SignatureResult:
    """
    Sign a request with a one-off signer.

    See HttpSignatureSigner.sign.
    """
    return HttpSignatureSigner().sign(request, key, key_id, options, **option_overrides)


def with_signature(
    request: SignableRequest,
    key: Any,
    key_id: Optional[str],
    options: Optional[SignatureOptions] = None,
    **option_overrides: Any
) -> SignableRequest:
    """
    Add an Authorization header with a signature, and a Date header.

    Requires a secret (RSA private key, EC private key or HMAC shared
    secret) and a key ID. The request passed in is not modified.
    """
    return HttpSignatureSigner().with_signature(request, key, key_id, options, **option_overrides)


def with_digest(
    request: SignableRequest,
    body_or_digests: Union[RequestBody, Mapping[str, str]]
) -> SignableRequest:
    """
    Add a Digest header (RFC 3230, section 4.3.2).

    When a body is passed in as str or bytes a SHA-256 digest of it is
    calculated. Alternatively, a mapping of digest algorithm names to
    base64 values is formatted as given.
    """
    if isinstance(body_or_digests, Mapping):
        header_value = digest_from_map(body_or_digests)
    else:
        header_value = digest(body_or_digests)
    return request.with_header('digest', header_value)
