"""
Tests for signing profile configuration
"""

import json
import logging

import pytest

from httpsig_sdk.config import (
    SigningProfileManager,
    load_signing_profiles_from_file,
    load_signing_profiles_from_json,
)
from httpsig_sdk.exceptions import ConfigurationError, ErrorCodes

PROFILES = {
    "config_format_version": "1.0",
    "default_profile": "hs2019",
    "logging": {"level": "INFO"},
    "profiles": {
        "hs2019": {"algorithms": ["hs2019"], "headers": "(created)"},
        "legacy": {"algorithms": ["rsa-sha256"], "headers": "(request-target) date", "age": None},
    },
}


class TestSigningProfileManager:
    """Test profile loading and lookup"""

    def test_load_from_json(self):
        manager = load_signing_profiles_from_json(json.dumps(PROFILES))

        assert manager.list_profiles() == ["hs2019", "legacy"]
        assert manager.get_profile().algorithm == "hs2019"
        legacy = manager.get_profile("legacy")
        assert legacy.algorithm == "rsa-sha256"
        assert legacy.headers == "(request-target) date"
        assert legacy.age is None

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "profiles.json"
        path.write_text(json.dumps(PROFILES), encoding="utf-8")
        assert load_signing_profiles_from_file(path).config.default_profile == "hs2019"

    def test_default_profile_falls_back_to_first(self):
        data = {"profiles": {"only": {"algorithms": "hmac-sha256"}}}
        manager = SigningProfileManager.from_dict(data)
        assert manager.config.default_profile == "only"
        assert manager.config.config_format_version == "1.0"
        assert manager.config.logging.level == "WARNING"

    def test_to_signature_options_with_overrides(self):
        manager = SigningProfileManager.from_dict(PROFILES)
        options = manager.to_signature_options("legacy", expires_in=30)
        assert options.expires_in == 30
        assert manager.get_profile("legacy").expires_in is None

    def test_unknown_override(self):
        manager = SigningProfileManager.from_dict(PROFILES)
        with pytest.raises(ConfigurationError) as exc_info:
            manager.to_signature_options(nonce="x")
        assert exc_info.value.error_code == ErrorCodes.INVALID_OPTION

    def test_apply_logging(self):
        manager = SigningProfileManager.from_dict(PROFILES)
        manager.apply_logging()
        assert logging.getLogger("httpsig_sdk").level == logging.INFO
        logging.getLogger("httpsig_sdk").setLevel(logging.NOTSET)


class TestConfigurationErrors:
    """Test configuration error codes"""

    def test_invalid_json(self):
        with pytest.raises(ConfigurationError) as exc_info:
            load_signing_profiles_from_json("{not json")
        assert exc_info.value.error_code == ErrorCodes.PARSE_ERROR

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            load_signing_profiles_from_file(tmp_path / "missing.json")
        assert exc_info.value.error_code == ErrorCodes.FILE_ERROR

    def test_missing_profiles_section(self):
        with pytest.raises(ConfigurationError) as exc_info:
            SigningProfileManager.from_dict({"default_profile": "x"})
        assert exc_info.value.error_code == ErrorCodes.INVALID_FORMAT

    def test_unknown_profile(self):
        manager = SigningProfileManager.from_dict(PROFILES)
        with pytest.raises(ConfigurationError) as exc_info:
            manager.get_profile("missing")
        assert exc_info.value.error_code == ErrorCodes.PROFILE_NOT_FOUND
        assert exc_info.value.details == {"available_profiles": ["hs2019", "legacy"]}

    def test_default_profile_must_exist(self):
        data = dict(PROFILES, default_profile="missing")
        with pytest.raises(ConfigurationError) as exc_info:
            SigningProfileManager.from_dict(data)
        assert exc_info.value.error_code == ErrorCodes.PROFILE_NOT_FOUND

    def test_unknown_option_in_profile(self):
        data = {"profiles": {"bad": {"algorithms": ["hs2019"], "keyid": "x"}}}
        with pytest.raises(ConfigurationError) as exc_info:
            SigningProfileManager.from_dict(data)
        assert exc_info.value.error_code == ErrorCodes.INVALID_OPTION
        assert exc_info.value.details == {"unknown_options": ["keyid"]}

    def test_invalid_logging_level(self):
        data = dict(PROFILES, logging={"level": "LOUD"})
        with pytest.raises(ConfigurationError) as exc_info:
            SigningProfileManager.from_dict(data)
        assert exc_info.value.error_code == ErrorCodes.INVALID_FORMAT
