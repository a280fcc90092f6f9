"""
Configuration management for the HTTP signature SDK

Named signing profiles loaded from JSON, mapping onto SignatureOptions.
"""

from .signing_profiles import (
    SigningProfileConfig,
    SigningProfileManager,
    LoggingConfig,
    load_signing_profiles_from_json,
    load_signing_profiles_from_file,
)

__all__ = [
    'SigningProfileConfig',
    'SigningProfileManager',
    'LoggingConfig',
    'load_signing_profiles_from_json',
    'load_signing_profiles_from_file',
]
