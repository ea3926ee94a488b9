"""
Steam CM MikroTik Sync - Configuration Loader

This module builds the single SyncConfig used for a run from several sources,
lowest priority first: built-in defaults → config file profile → environment
variables → explicit overrides (CLI options). A password that is still empty
afterwards is looked up in the OS keyring.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import keyring
from keyring.errors import KeyringError
from pydantic import ValidationError as PydanticValidationError

from ..shared.constants import (
    ENV_DEVICE_ADDRESS,
    ENV_LIST_NAME,
    ENV_LISTEN_PORT,
    ENV_PASSWORD,
    ENV_USERNAME,
)
from .exceptions import ConfigurationError
from .models import SyncConfig

logger = logging.getLogger("steam-cm-mikrotik")


class ConfigLoader:
    """
    Configuration loader for the sync run.

    Security features:
    - Passwords are never written to the config file (keyring only)
    - Automatic file permission enforcement (0600)
    - No credential logging
    """

    DEFAULT_CONFIG_DIR = Path.home() / ".steam-cm-mikrotik"
    DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.json"
    REQUIRED_FILE_PERMISSIONS = 0o600
    KEYRING_SERVICE_NAME = "steam-cm-mikrotik"

    ENV_FIELDS = {
        ENV_DEVICE_ADDRESS: "device_address",
        ENV_USERNAME: "username",
        ENV_PASSWORD: "password",
        ENV_LISTEN_PORT: "listen_port",
        ENV_LIST_NAME: "list_name",
    }

    @classmethod
    def load(
        cls,
        profile: str = "default",
        overrides: Optional[Mapping[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> SyncConfig:
        """
        Load the effective configuration.

        Args:
            profile: Config file profile to start from (missing is fine)
            overrides: Explicit values; ``None`` entries are ignored
            environ: Environment mapping, defaults to ``os.environ``

        Returns:
            SyncConfig for this run

        Raises:
            ConfigurationError: If any source holds an invalid value
        """
        values: Dict[str, Any] = {}
        values.update(cls._load_from_config_file(profile))
        values.update(cls._load_from_env(os.environ if environ is None else environ))
        if overrides:
            values.update({key: value for key, value in overrides.items() if value is not None})

        try:
            config = SyncConfig(**values)
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}")

        if not config.password:
            password = cls._load_password_from_keyring(config.username, config.device_address)
            if password:
                config.password = password
                logger.debug("Loaded device password from keyring")

        return config

    @classmethod
    def _load_from_env(cls, environ: Mapping[str, str]) -> Dict[str, Any]:
        """Collect non-empty environment variables."""
        values = {}
        for env_name, field_name in cls.ENV_FIELDS.items():
            value = environ.get(env_name, "")
            if value:
                values[field_name] = value
        if values:
            logger.debug(f"Loaded settings from environment: {sorted(k for k in values if k != 'password')}")
        return values

    @classmethod
    def _load_from_config_file(cls, profile: str) -> Dict[str, Any]:
        """Load a profile from the config file, or nothing if absent."""
        config_file = cls.DEFAULT_CONFIG_FILE

        if not config_file.exists():
            logger.debug(f"Config file not found: {config_file}")
            return {}

        cls._verify_file_permissions(config_file)

        try:
            with open(config_file, 'r') as f:
                config_data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in config file: {e}")
        except OSError as e:
            raise ConfigurationError(f"Error loading config file: {e}")

        if profile not in config_data:
            logger.debug(f"Profile '{profile}' not found in config file")
            return {}

        profile_config = config_data[profile]
        if not isinstance(profile_config, dict):
            raise ConfigurationError(f"Profile '{profile}' must be a JSON object")

        logger.info(f"Loaded profile '{profile}' from config file")
        return dict(profile_config)

    @classmethod
    def _keyring_username(cls, username: str, device_address: str) -> str:
        return f"{username}@{device_address}"

    @classmethod
    def _load_password_from_keyring(cls, username: str, device_address: str) -> Optional[str]:
        try:
            return keyring.get_password(
                cls.KEYRING_SERVICE_NAME, cls._keyring_username(username, device_address)
            )
        except KeyringError as e:
            logger.debug(f"Could not read password from keyring: {e}")
            return None

    @classmethod
    def store_password(cls, username: str, device_address: str, password: str) -> None:
        """
        Store the device password in the OS keyring.

        Raises:
            ConfigurationError: If no usable keyring backend is available
        """
        try:
            keyring.set_password(
                cls.KEYRING_SERVICE_NAME, cls._keyring_username(username, device_address), password
            )
        except KeyringError as e:
            raise ConfigurationError(f"Could not store password in keyring: {e}")
        logger.info(f"Stored password for {username}@{device_address} in keyring")

    @classmethod
    def save_profile(cls, profile: str, config: SyncConfig) -> None:
        """
        Save a configuration profile (without password) to the config file.

        Args:
            profile: Profile name
            config: Configuration to save
        """
        config_file = cls.DEFAULT_CONFIG_FILE
        config_file.parent.mkdir(parents=True, exist_ok=True)

        if config_file.exists():
            cls._verify_file_permissions(config_file)
            with open(config_file, 'r') as f:
                config_data = json.load(f)
        else:
            config_data = {}

        config_data[profile] = config.model_dump(mode="json", exclude={"password"}, exclude_none=True)

        with open(config_file, 'w') as f:
            json.dump(config_data, f, indent=2)

        cls._set_secure_permissions(config_file)
        logger.info(f"Saved profile '{profile}' to config file")

    @classmethod
    def list_profiles(cls) -> List[str]:
        """List all profiles in the config file."""
        config_file = cls.DEFAULT_CONFIG_FILE

        if not config_file.exists():
            return []

        cls._verify_file_permissions(config_file)

        with open(config_file, 'r') as f:
            config_data = json.load(f)

        return list(config_data.keys())

    @classmethod
    def _set_secure_permissions(cls, file_path: Path) -> None:
        """Set secure file permissions (0600 - owner read/write only)."""
        try:
            os.chmod(file_path, cls.REQUIRED_FILE_PERMISSIONS)
        except OSError as e:
            logger.warning(f"Could not set secure permissions on {file_path}: {e}")

    @classmethod
    def _verify_file_permissions(cls, file_path: Path) -> None:
        """Verify file has secure permissions, fixing them if not."""
        try:
            current_perms = os.stat(file_path).st_mode & 0o777
        except OSError as e:
            logger.debug(f"Could not verify file permissions: {e}")
            return

        if current_perms != cls.REQUIRED_FILE_PERMISSIONS:
            logger.warning(
                f"Config file {file_path} has insecure permissions {oct(current_perms)}. "
                f"Recommended: {oct(cls.REQUIRED_FILE_PERMISSIONS)}"
            )
            cls._set_secure_permissions(file_path)
