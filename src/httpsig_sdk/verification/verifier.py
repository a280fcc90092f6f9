"""
Signature verification for draft-cavage HTTP signatures

This module verifies the Authorization: Signature header presented with an
incoming request: it parses the signature parameters, checks algorithm and
timestamps, rebuilds the signing string with the same canonicalizer used
for signing and checks the signature with the crypto engine.
"""

import base64
import binascii
import logging
from typing import Any, List, Optional, Sequence, Union

from ..crypto import engine
from ..exceptions import InvalidSignatureHeader, KeyMismatch
from ..signing.types import SignableRequest, SignatureAlgorithm, TimestampGenerator
from ..signing.utils import generate_timestamp
from ..signing.canonical_message import (
    CREATED,
    EXPIRES,
    build_signing_string,
    context_for_request,
    default_headers,
    parse_header_list,
)
from .types import (
    ParsedSignature,
    VerificationResult,
    VerificationStatus,
    VerificationErrorCodes,
)
from .utils import parse_authorization_header, parse_http_date

logger = logging.getLogger(__name__)

DEFAULT_CLOCK_SKEW = 30


class HttpSignatureVerifier:
    """
    Verifier for draft-cavage HTTP signatures

    Holds the verification policy (allowed algorithms, clock skew, maximum
    signature age, headers that must be signed); each call to verify() is
    independent.
    """

    def __init__(
        self,
        algorithms: Optional[Sequence[Union[str, SignatureAlgorithm]]] = None,
        max_age: Optional[int] = None,
        clock_skew: int = DEFAULT_CLOCK_SKEW,
        required_headers: Optional[Sequence[str]] = None,
        timestamp_generator: Optional[TimestampGenerator] = None
    ):
        """
        Initialize the verifier.

        Args:
            algorithms: Accepted algorithms; the first one is assumed when
                the header carries no algorithm parameter (all if None)
            max_age: Reject signatures whose 'created' (or Date header)
                is older than this many seconds
            clock_skew: Tolerance in seconds for 'created' in the future
            required_headers: (Pseudo-)headers that must be covered
            timestamp_generator: Optional clock returning Unix timestamps

        Raises:
            UnsupportedAlgorithm: If an algorithm is not recognized
        """
        if algorithms is None:
            algorithms = list(SignatureAlgorithm)
        self.algorithms = [SignatureAlgorithm.parse(alg).value for alg in algorithms]
        self.max_age = max_age
        self.clock_skew = clock_skew
        self.required_headers = list(required_headers or [])
        self.timestamp_generator = timestamp_generator or generate_timestamp

    def verify(self, request: SignableRequest, key: Any) -> VerificationResult:
        """
        Verify the signature presented with a request.

        Args:
            request: Incoming request
            key: Public key, private key or HMAC secret; or a callable
                mapping keyId to one of those (None for unknown keys)

        Returns:
            VerificationResult: Valid result, or invalid with an error code
        """
        authorization = request.get_header('authorization')
        if not authorization:
            return self._fail(VerificationErrorCodes.MISSING_AUTHORIZATION, "Authorization header not found")

        try:
            parsed = parse_authorization_header(authorization[0])
        except (InvalidSignatureHeader, ValueError) as e:
            return self._fail(VerificationErrorCodes.INVALID_SIGNATURE_HEADER, str(e))

        algorithm = parsed.algorithm or self.algorithms[0]
        if algorithm not in self.algorithms:
            return self._fail(
                VerificationErrorCodes.UNSUPPORTED_ALGORITHM,
                f"Algorithm not accepted: {algorithm}",
                {"allowed": self.algorithms},
                key_id=parsed.key_id
            )

        headers = parse_header_list(parsed.headers or default_headers(algorithm))
        fields = {"key_id": parsed.key_id, "algorithm": algorithm, "headers": headers}

        missing = [name for name in self.required_headers if name not in headers]
        if missing:
            return self._fail(
                VerificationErrorCodes.MISSING_SIGNED_HEADER,
                f"Required headers not signed: {', '.join(missing)}",
                {"missing_headers": missing},
                **fields
            )

        timestamp_failure = self._check_timestamps(request, parsed, headers)
        if timestamp_failure:
            code, message = timestamp_failure
            return self._fail(code, message, **fields)

        verification_key = key(parsed.key_id) if callable(key) else key
        if verification_key is None:
            return self._fail(VerificationErrorCodes.UNKNOWN_KEY, f"Unknown key: {parsed.key_id}", **fields)

        try:
            signature = base64.b64decode(parsed.signature, validate=True)
        except (binascii.Error, ValueError):
            return self._fail(VerificationErrorCodes.INVALID_SIGNATURE_HEADER, "Signature is not valid base64", **fields)

        context = context_for_request(
            request,
            created=parsed.created or "",
            expires=parsed.expires or "",
            date=",".join(request.get_header('date'))
        )
        signing_string = build_signing_string(headers, context)

        try:
            matches = engine.verify(signing_string, signature, algorithm, verification_key)
        except KeyMismatch as e:
            return self._fail(
                VerificationErrorCodes.KEY_MISMATCH,
                e.message,
                e.details,
                signing_string=signing_string,
                **fields
            )

        if not matches:
            return self._fail(
                VerificationErrorCodes.SIGNATURE_MISMATCH,
                "Signature does not match",
                signing_string=signing_string,
                **fields
            )

        logger.debug(f"Verified signature for keyId={parsed.key_id} ({algorithm})")
        return VerificationResult(
            status=VerificationStatus.VALID,
            signing_string=signing_string,
            **fields
        )

    def _check_timestamps(
        self,
        request: SignableRequest,
        parsed: ParsedSignature,
        headers: List[str]
    ) -> Optional[tuple]:
        now = self.timestamp_generator()

        try:
            created = int(parsed.created) if parsed.created else None
            expires = int(parsed.expires) if parsed.expires else None
        except ValueError:
            return VerificationErrorCodes.INVALID_SIGNATURE_HEADER, "created/expires must be integers"

        if CREATED in headers and created is None:
            return VerificationErrorCodes.INVALID_SIGNATURE_HEADER, "(created) signed without created parameter"
        if EXPIRES in headers and expires is None:
            return VerificationErrorCodes.INVALID_SIGNATURE_HEADER, "(expires) signed without expires parameter"

        if created is not None and created > now + self.clock_skew:
            return VerificationErrorCodes.CREATED_IN_FUTURE, f"Signature created in the future: {created}"

        if expires is not None and expires < now:
            return VerificationErrorCodes.SIGNATURE_EXPIRED, f"Signature expired at {expires}"

        if self.max_age is not None:
            issued = created
            if issued is None:
                date_values = request.get_header('date')
                issued = parse_http_date(date_values[0]) if date_values else None
            if issued is None or now - issued > self.max_age:
                return VerificationErrorCodes.SIGNATURE_TOO_OLD, f"Signature older than {self.max_age}s"

        return None

    def _fail(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
        **fields: Any
    ) -> VerificationResult:
        logger.warning(f"Signature verification failed: {message} (code: {code})")
        return VerificationResult.create_error(code, message, details, **fields)


def verify_request(
    request: SignableRequest,
    key: Any,
    *,
    algorithms: Optional[Sequence[Union[str, SignatureAlgorithm]]] = None,
    max_age: Optional[int] = None,
    clock_skew: int = DEFAULT_CLOCK_SKEW,
    required_headers: Optional[Sequence[str]] = None,
    timestamp_generator: Optional[TimestampGenerator] = None
) -> VerificationResult:
    """
    Verify a request with a one-off verifier.

    See HttpSignatureVerifier.
    """
    verifier = HttpSignatureVerifier(
        algorithms=algorithms,
        max_age=max_age,
        clock_skew=clock_skew,
        required_headers=required_headers,
        timestamp_generator=timestamp_generator
    )
    return verifier.verify(request, key)
