# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Configuration Module.

Credentials and connection settings for the Swift REST client. Settings are
read from a YAML credentials file holding one section per profile::

    default:
      auth_url: https://swift.example.com/auth/v1.0
      user: account:user
      key: secret
      container_uri: swift://data/

and can be overridden per setting with ``SWIFTFS_*`` environment variables
(``SWIFTFS_AUTH_URL``, ``SWIFTFS_USER``, ``SWIFTFS_KEY`` and so on). The
profile is picked with ``SWIFTFS_PROFILE``.
"""
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

from .exceptions import ConfigurationError

DEFAULT_CREDENTIALS_PATH = Path.home() / ".swiftfs" / "credentials.yaml"
DEFAULT_PARTITION_SIZE = 64 * 1024 * 1024  # 64MB

@dataclass
class SwiftConfig:
    """Connection settings for one Swift account."""
    auth_url: Optional[str] = None
    user: Optional[str] = None
    key: Optional[str] = None
    auth_version: str = "1.0"
    tenant_name: Optional[str] = None
    container_uri: Optional[str] = None
    partition_size: int = DEFAULT_PARTITION_SIZE
    retries: int = 5
    timeout: Optional[float] = None

    def validate(self) -> None:
        """
        Check that the settings needed to authenticate are present.

        Raises:
            ConfigurationError: If a required setting is missing or invalid.
        """
        missing = [name for name in ("auth_url", "user", "key") if not getattr(self, name)]
        if missing:
            raise ConfigurationError(f"Missing Swift settings: {', '.join(missing)}")
        if self.partition_size <= 0:
            raise ConfigurationError(f"partition_size must be positive, got {self.partition_size}")

_INT_SETTINGS = {"partition_size", "retries"}
_FLOAT_SETTINGS = {"timeout"}

def _coerce(name, value):
    if value is None:
        return None
    try:
        if name in _INT_SETTINGS:
            return int(value)
        if name in _FLOAT_SETTINGS:
            return float(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid value for {name}: {value!r}") from e
    return str(value)

def load_config(profile: Optional[str] = None, path: Optional[Path] = None) -> SwiftConfig:
    """
    Load settings for a profile.

    Args:
        profile (str, optional): Profile name. Defaults to ``SWIFTFS_PROFILE`` or "default".
        path (Path, optional): Credentials file. Defaults to ~/.swiftfs/credentials.yaml.

    Returns:
        SwiftConfig: The merged settings. Not validated.

    Raises:
        ConfigurationError: If the credentials file cannot be parsed.
    """
    profile = profile or os.environ.get("SWIFTFS_PROFILE", "default")
    path = Path(path) if path else DEFAULT_CREDENTIALS_PATH

    values = {}
    if path.exists():
        try:
            with open(path, "r") as f:
                document = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Failed to parse {path}: {e}") from e
        if not isinstance(document, dict):
            raise ConfigurationError(f"{path} must hold a mapping of profiles")
        section = document.get(profile)
        if section is None and document:
            raise ConfigurationError(f"Profile {profile} not found in {path}")
        values.update(section or {})

    known = {f.name for f in fields(SwiftConfig)}
    unknown = set(values) - known
    if unknown:
        raise ConfigurationError(f"Unknown settings in profile {profile}: {', '.join(sorted(unknown))}")

    for name in known:
        env_value = os.environ.get(f"SWIFTFS_{name.upper()}")
        if env_value is not None:
            values[name] = env_value

    return SwiftConfig(**{name: _coerce(name, value) for name, value in values.items()})
