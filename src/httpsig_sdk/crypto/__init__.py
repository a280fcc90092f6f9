"""
Cryptographic primitives and key helpers for HTTP signatures
"""

from .engine import sign, verify
from .keys import (
    generate_rsa_key,
    generate_ec_key,
    generate_hmac_secret,
    key_for_algorithm,
    load_private_key,
    load_public_key,
    private_key_pem,
    public_key_pem,
)

__all__ = [
    'sign',
    'verify',
    'generate_rsa_key',
    'generate_ec_key',
    'generate_hmac_secret',
    'key_for_algorithm',
    'load_private_key',
    'load_public_key',
    'private_key_pem',
    'public_key_pem',
]
