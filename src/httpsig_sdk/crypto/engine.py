"""
Signature primitives for HTTP signature algorithms

This module maps each signature algorithm identifier to its cryptographic
primitive using the cryptography package:

    hs2019, rsa-sha256  RSA PKCS#1 v1.5 over SHA-256
    rsa-sha1            RSA PKCS#1 v1.5 over SHA-1
    ecdsa-sha256        ECDSA over SHA-256, DER-encoded signature
    hmac-sha256         HMAC-SHA256 over the raw message

hs2019 always uses RSA-SHA256 here; the serialized algorithm parameter
still reads "hs2019".
"""

from typing import Any, Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa

from ..exceptions import KeyMismatch, SigningError
from ..signing.types import SignatureAlgorithm

RSA_HASHES = {
    SignatureAlgorithm.HS2019: hashes.SHA256,
    SignatureAlgorithm.RSA_SHA256: hashes.SHA256,
    SignatureAlgorithm.RSA_SHA1: hashes.SHA1,
}

Message = Union[str, bytes]


def _to_bytes(message: Message) -> bytes:
    if isinstance(message, str):
        return message.encode('utf-8')
    return bytes(message)


def _key_mismatch(algorithm: SignatureAlgorithm, expected: str, key: Any) -> KeyMismatch:
    return KeyMismatch(
        f"Algorithm {algorithm.value} requires {expected}, got {type(key).__name__}",
        {"algorithm": algorithm.value, "key_type": type(key).__name__}
    )


def _hmac_secret(key: Any, algorithm: SignatureAlgorithm) -> bytes:
    if isinstance(key, str):
        return key.encode('utf-8')
    if isinstance(key, (bytes, bytearray)):
        return bytes(key)
    raise _key_mismatch(algorithm, "a shared secret", key)


def _hmac_sha256(secret: bytes, data: bytes) -> hmac.HMAC:
    mac = hmac.HMAC(secret, hashes.SHA256())
    mac.update(data)
    return mac


def _check_signing_key(alg: SignatureAlgorithm, key: Any) -> Any:
    """Return the key to sign with, raising KeyMismatch for a wrong type"""
    if alg in RSA_HASHES:
        if not isinstance(key, rsa.RSAPrivateKey):
            raise _key_mismatch(alg, "an RSA private key", key)
        return key
    if alg == SignatureAlgorithm.ECDSA_SHA256:
        if not isinstance(key, ec.EllipticCurvePrivateKey):
            raise _key_mismatch(alg, "an EC private key", key)
        return key
    return _hmac_secret(key, alg)


def _check_verification_key(alg: SignatureAlgorithm, key: Any) -> Any:
    """Return the public key (or secret) to verify with"""
    if alg in RSA_HASHES:
        if isinstance(key, rsa.RSAPrivateKey):
            key = key.public_key()
        if not isinstance(key, rsa.RSAPublicKey):
            raise _key_mismatch(alg, "an RSA key", key)
        return key
    if alg == SignatureAlgorithm.ECDSA_SHA256:
        if isinstance(key, ec.EllipticCurvePrivateKey):
            key = key.public_key()
        if not isinstance(key, ec.EllipticCurvePublicKey):
            raise _key_mismatch(alg, "an EC key", key)
        return key
    return _hmac_secret(key, alg)


def sign(message: Message, algorithm: Union[str, SignatureAlgorithm], key: Any) -> bytes:
    """
    Sign a message.

    Args:
        message: Signing string (str is UTF-8 encoded) or bytes
        algorithm: Signature algorithm identifier
        key: RSA private key, EC private key or HMAC secret

    Returns:
        bytes: Raw signature (DER for ECDSA, raw MAC for HMAC)

    Raises:
        UnsupportedAlgorithm: If the algorithm is not recognized
        KeyMismatch: If the key type does not fit the algorithm
        SigningError: If the primitive fails
    """
    alg = SignatureAlgorithm.parse(algorithm)
    signing_key = _check_signing_key(alg, key)
    data = _to_bytes(message)

    try:
        if alg in RSA_HASHES:
            return signing_key.sign(data, padding.PKCS1v15(), RSA_HASHES[alg]())
        if alg == SignatureAlgorithm.ECDSA_SHA256:
            return signing_key.sign(data, ec.ECDSA(hashes.SHA256()))
        return _hmac_sha256(signing_key, data).finalize()
    except Exception as e:
        raise SigningError(
            f"Message signing failed: {e}",
            {"algorithm": alg.value, "original_error": str(e)}
        ) from e


def verify(
    message: Message,
    signature: bytes,
    algorithm: Union[str, SignatureAlgorithm],
    key: Any
) -> bool:
    """
    Verify a signature.

    Args:
        message: Signing string or bytes that was signed
        signature: Raw signature bytes
        algorithm: Signature algorithm identifier
        key: Public key, private key (its public half is used) or HMAC
            secret

    Returns:
        bool: True if the signature is valid, False otherwise (including
            structurally invalid signatures)

    Raises:
        UnsupportedAlgorithm: If the algorithm is not recognized
        KeyMismatch: If the key type does not fit the algorithm
    """
    alg = SignatureAlgorithm.parse(algorithm)
    verification_key = _check_verification_key(alg, key)
    data = _to_bytes(message)

    if not isinstance(signature, (bytes, bytearray)):
        return False
    signature = bytes(signature)

    try:
        if alg in RSA_HASHES:
            verification_key.verify(signature, data, padding.PKCS1v15(), RSA_HASHES[alg]())
        elif alg == SignatureAlgorithm.ECDSA_SHA256:
            verification_key.verify(signature, data, ec.ECDSA(hashes.SHA256()))
        else:
            _hmac_sha256(verification_key, data).verify(signature)
        return True
    except (InvalidSignature, ValueError):
        return False
