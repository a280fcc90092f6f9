"""
Key material helpers for HTTP signatures

This module generates and loads the key types used by the signature
algorithms (RSA, EC P-256, HMAC secrets) using the cryptography package.
Keys are only held in memory; nothing is persisted.
"""

import secrets
from typing import Any, Optional, Union

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from ..exceptions import KeyLoadError, ValidationError, ErrorCodes
from ..signing.types import SignatureAlgorithm

DEFAULT_RSA_KEY_SIZE = 2048
DEFAULT_HMAC_SECRET_LENGTH = 32


def generate_rsa_key(bits: int = DEFAULT_RSA_KEY_SIZE) -> rsa.RSAPrivateKey:
    """
    Generate an RSA private key.

    Args:
        bits: Key size in bits (at least 1024)

    Returns:
        RSAPrivateKey: New private key with public exponent 65537
    """
    if bits < 1024:
        raise ValidationError("RSA key size must be at least 1024 bits", ErrorCodes.INVALID_OPTION)
    return rsa.generate_private_key(public_exponent=65537, key_size=bits)


def generate_ec_key() -> ec.EllipticCurvePrivateKey:
    """Generate an EC private key on the P-256 curve"""
    return ec.generate_private_key(ec.SECP256R1())


def generate_hmac_secret(length: int = DEFAULT_HMAC_SECRET_LENGTH) -> bytes:
    """
    Generate a random HMAC shared secret.

    Args:
        length: Secret length in bytes
    """
    if length < 1:
        raise ValidationError("Secret length must be positive", ErrorCodes.INVALID_OPTION)
    return secrets.token_bytes(length)


def key_for_algorithm(algorithm: Union[str, SignatureAlgorithm]) -> Any:
    """
    Generate key material suitable for an algorithm.

    Returns:
        RSA private key for hs2019/rsa-*, EC private key for ecdsa-sha256
        and a random secret for hmac-sha256
    """
    alg = SignatureAlgorithm.parse(algorithm)
    if alg == SignatureAlgorithm.ECDSA_SHA256:
        return generate_ec_key()
    if alg == SignatureAlgorithm.HMAC_SHA256:
        return generate_hmac_secret()
    return generate_rsa_key()


def _as_bytes(data: Union[str, bytes]) -> bytes:
    if isinstance(data, str):
        return data.encode('utf-8')
    return data


def load_private_key(data: Union[str, bytes], password: Optional[bytes] = None) -> Any:
    """
    Load a PEM-encoded private key.

    Args:
        data: PEM text
        password: Optional password for encrypted keys

    Returns:
        Private key object (RSA or EC)

    Raises:
        KeyLoadError: If the data is not a valid private key
    """
    try:
        return serialization.load_pem_private_key(_as_bytes(data), password=password)
    except (ValueError, TypeError) as e:
        raise KeyLoadError(f"Failed to load private key: {e}", {"original_error": str(e)}) from e


def load_public_key(data: Union[str, bytes]) -> Any:
    """
    Load a PEM-encoded public key.

    Raises:
        KeyLoadError: If the data is not a valid public key
    """
    try:
        return serialization.load_pem_public_key(_as_bytes(data))
    except (ValueError, TypeError) as e:
        raise KeyLoadError(f"Failed to load public key: {e}", {"original_error": str(e)}) from e


def private_key_pem(key: Any) -> str:
    """PKCS#8 PEM text for a private key (unencrypted)"""
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption()
    ).decode('ascii')


def public_key_pem(key: Any) -> str:
    """
    SubjectPublicKeyInfo PEM text for a key.

    A private key is accepted; its public half is exported.
    """
    if hasattr(key, 'public_key'):
        key = key.public_key()
    return key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo
    ).decode('ascii')
