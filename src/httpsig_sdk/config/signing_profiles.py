"""
Signing profile configuration

Loads named sets of signature options from a JSON document so one file can
drive signing in tests, scripts and the command-line tool:

    {
      "config_format_version": "1.0",
      "default_profile": "hs2019",
      "logging": {"level": "INFO"},
      "profiles": {
        "hs2019": {"algorithms": ["hs2019"], "headers": "(created)"},
        "legacy": {"algorithms": ["rsa-sha256"], "headers": "(request-target) date"}
      }
    }
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..exceptions import ConfigurationError, ErrorCodes, HttpSignatureError
from ..signing.types import SignatureOptions

PACKAGE_LOGGER = 'httpsig_sdk'
CONFIG_FORMAT_VERSION = "1.0"


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "WARNING"


@dataclass
class SigningProfileConfig:
    """Signing profile configuration structure"""
    config_format_version: str
    default_profile: str
    profiles: Dict[str, SignatureOptions]
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class SigningProfileManager:
    """Signing profile manager"""

    def __init__(self, config: SigningProfileConfig):
        self.config = config
        self._validate()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SigningProfileManager':
        """Load signing profiles from a parsed JSON document"""
        return cls(cls._parse_config_dict(data))

    @classmethod
    def from_json(cls, json_string: str) -> 'SigningProfileManager':
        """Load signing profiles from JSON string"""
        try:
            data = json.loads(json_string)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Failed to parse configuration JSON: {e}", ErrorCodes.PARSE_ERROR)
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, file_path: Union[str, Path]) -> 'SigningProfileManager':
        """Load signing profiles from file"""
        try:
            with open(Path(file_path), 'r', encoding='utf-8') as f:
                json_string = f.read()
        except OSError as e:
            raise ConfigurationError(f"Failed to read configuration file: {e}", ErrorCodes.FILE_ERROR)
        return cls.from_json(json_string)

    def get_profile(self, name: Optional[str] = None) -> SignatureOptions:
        """Get signature options for a profile (the default profile if None)"""
        profile_name = name or self.config.default_profile
        options = self.config.profiles.get(profile_name)
        if options is None:
            raise ConfigurationError(
                f"Signing profile '{profile_name}' not found",
                ErrorCodes.PROFILE_NOT_FOUND,
                {"available_profiles": self.list_profiles()}
            )
        return options

    def to_signature_options(self, name: Optional[str] = None, **overrides: Any) -> SignatureOptions:
        """Signature options for a profile with individual options replaced"""
        options = self.get_profile(name)
        if not overrides:
            return options
        try:
            return options.merge(**overrides)
        except HttpSignatureError as e:
            raise ConfigurationError(e.message, ErrorCodes.INVALID_OPTION, e.details)

    def list_profiles(self) -> List[str]:
        """List available profile names"""
        return list(self.config.profiles.keys())

    def apply_logging(self) -> None:
        """Set the package logger level from the logging section"""
        logging.getLogger(PACKAGE_LOGGER).setLevel(self.config.logging.level.upper())

    def _validate(self) -> None:
        """Validate the configuration"""
        if self.config.default_profile not in self.config.profiles:
            raise ConfigurationError(
                f"Default profile '{self.config.default_profile}' not found",
                ErrorCodes.PROFILE_NOT_FOUND
            )

        level = self.config.logging.level.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ConfigurationError(f"Invalid logging level: {self.config.logging.level}", ErrorCodes.INVALID_FORMAT)

    @staticmethod
    def _parse_config_dict(data: Dict[str, Any]) -> SigningProfileConfig:
        """Parse configuration dictionary into structured objects"""
        try:
            profiles_data = data['profiles']
            profiles = {}
            for profile_name, profile_data in profiles_data.items():
                try:
                    profiles[profile_name] = SignatureOptions.from_dict(profile_data)
                except HttpSignatureError as e:
                    raise ConfigurationError(
                        f"Profile '{profile_name}': {e.message}",
                        ErrorCodes.INVALID_OPTION,
                        e.details
                    )

            default_profile = data.get('default_profile') or next(iter(profiles), '')

            return SigningProfileConfig(
                config_format_version=data.get('config_format_version', CONFIG_FORMAT_VERSION),
                default_profile=default_profile,
                profiles=profiles,
                logging=LoggingConfig(**data.get('logging', {}))
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise ConfigurationError(f"Invalid configuration format: {e}", ErrorCodes.INVALID_FORMAT)


def load_signing_profiles_from_json(json_string: str) -> SigningProfileManager:
    """Load signing profiles from JSON string"""
    return SigningProfileManager.from_json(json_string)


def load_signing_profiles_from_file(file_path: Union[str, Path]) -> SigningProfileManager:
    """Load signing profiles from file"""
    return SigningProfileManager.from_file(file_path)
