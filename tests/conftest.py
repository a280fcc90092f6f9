"""
Shared fixtures for the HTTP signature SDK tests
"""

import pytest

from httpsig_sdk.crypto import generate_ec_key, generate_rsa_key

FIXED_NOW = 1700000000


@pytest.fixture(scope="session")
def rsa_key():
    """RSA private key shared across the test session (generation is slow)"""
    return generate_rsa_key(2048)


@pytest.fixture(scope="session")
def ec_key():
    """EC P-256 private key shared across the test session"""
    return generate_ec_key()


@pytest.fixture
def hmac_secret():
    return b"shared-secret-for-tests"


@pytest.fixture
def fixed_clock():
    """Timestamp generator frozen at FIXED_NOW"""
    return lambda: FIXED_NOW
