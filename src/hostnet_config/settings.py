"""
Configuration loading for hostnet

Search order (later overrides earlier):
1. Built-in defaults
2. /etc/hostnet/config.toml (system-wide)
3. ~/.config/hostnet/config.toml (user global)
4. ./.hostnet.toml (local directory - adjacent invocation)
5. Environment variables (HOSTNET_*)
6. CLI arguments (highest priority)

Profile support allows named configurations for different managed hosts.
"""

from __future__ import annotations

import os
import logging
import tomllib
from pathlib import Path
from dataclasses import dataclass, field
from typing import Any

from .policy import DEFAULT_RESERVED_PATTERNS


logger = logging.getLogger(__name__)

# Config file names
CONFIG_FILENAME = "config.toml"
LOCAL_CONFIG_FILENAME = ".hostnet.toml"
ALT_LOCAL_CONFIG = "hostnet.toml"

# Environment variable prefix
ENV_PREFIX = "HOSTNET_"

BACKENDS = ("http", "linux", "auto")


def get_config_dir() -> Path:
    """Get user config directory (XDG-compliant)."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / "hostnet"
    return Path.home() / ".config" / "hostnet"


def get_config_paths() -> list[Path]:
    """
    Return list of config paths to check, in precedence order (lowest first).

    Returns paths that WOULD be checked - caller should verify existence.
    """
    cwd = Path.cwd()
    return [
        Path("/etc/hostnet") / CONFIG_FILENAME,
        get_config_dir() / CONFIG_FILENAME,
        Path.home() / ".hostnet.toml",
        cwd / LOCAL_CONFIG_FILENAME,
        cwd / ALT_LOCAL_CONFIG,
    ]


@dataclass
class HostProfile:
    """A named managed host."""
    api_url: str
    backend: str = "http"
    description: str = ""


@dataclass
class Settings:
    """
    Merged configuration settings from all sources.

    Attributes represent the final resolved values after merging
    all config files, environment variables, and CLI arguments.
    """
    api_url: str = "http://127.0.0.1:5000"
    backend: str = "http"
    poll_interval: float = 5.0
    timeout: float = 10.0
    dry_run: bool = False
    reserved_patterns: list[str] = field(
        default_factory=lambda: list(DEFAULT_RESERVED_PATTERNS)
    )

    # Profile management
    default_profile: str | None = None
    profiles: dict[str, HostProfile] = field(default_factory=dict)

    # Metadata
    config_sources: list[str] = field(default_factory=list)

    def apply_profile(self, name: str) -> bool:
        """
        Apply a named profile to current settings.

        Returns True if profile was found and applied.
        """
        profile = self.profiles.get(name)
        if not profile:
            return False

        self.api_url = profile.api_url
        self.backend = profile.backend
        return True

    def list_profiles(self) -> list[str]:
        """List available profile names."""
        return list(self.profiles.keys())


def _positive_float(value: Any) -> float:
    """Coerce a seconds value; zero or negative intervals are rejected"""
    number = float(value)
    if not number > 0:
        raise ValueError(f"{value!r} is not positive")
    return number


def _merge_defaults(settings: Settings, data: dict[str, Any]) -> None:
    """Merge [defaults] section into settings."""
    defaults = data.get("defaults", {})

    if "api_url" in defaults:
        settings.api_url = defaults["api_url"]
    if "backend" in defaults:
        if defaults["backend"] in BACKENDS:
            settings.backend = defaults["backend"]
        else:
            logger.warning(f"Unknown backend '{defaults['backend']}', keeping {settings.backend}")
    for key in ("poll_interval", "timeout"):
        if key in defaults:
            try:
                setattr(settings, key, _positive_float(defaults[key]))
            except (TypeError, ValueError):
                logger.warning(f"Ignoring {key}={defaults[key]!r}: not a positive number")
    if "dry_run" in defaults:
        settings.dry_run = defaults["dry_run"]
    if "reserved_patterns" in defaults:
        settings.reserved_patterns = list(defaults["reserved_patterns"])


def _merge_profiles(settings: Settings, data: dict[str, Any]) -> None:
    """Merge [profiles.*] sections into settings."""
    profiles_data = data.get("profiles", {})

    for name, profile_data in profiles_data.items():
        if not isinstance(profile_data, dict):
            continue

        if "api_url" not in profile_data:
            logger.warning(f"Profile '{name}' missing api_url, skipping")
            continue

        settings.profiles[name] = HostProfile(
            api_url=profile_data["api_url"],
            backend=profile_data.get("backend", "http"),
            description=profile_data.get("description", ""),
        )


def _merge_config(settings: Settings, data: dict[str, Any], source: str) -> None:
    """Merge a config dict into settings."""
    settings.config_sources.append(source)

    if "default_profile" in data:
        settings.default_profile = data["default_profile"]

    _merge_defaults(settings, data)
    _merge_profiles(settings, data)


def _apply_env_overrides(settings: Settings) -> None:
    """Apply environment variable overrides."""
    env_mappings = {
        f"{ENV_PREFIX}API_URL": "api_url",
        f"{ENV_PREFIX}BACKEND": "backend",
        f"{ENV_PREFIX}PROFILE": "default_profile",
    }

    float_mappings = {
        f"{ENV_PREFIX}POLL_INTERVAL": "poll_interval",
        f"{ENV_PREFIX}TIMEOUT": "timeout",
    }

    for env_var, attr in env_mappings.items():
        value = os.environ.get(env_var)
        if value:
            setattr(settings, attr, value)
            settings.config_sources.append(f"env:{env_var}")

    for env_var, attr in float_mappings.items():
        value = os.environ.get(env_var)
        if value:
            try:
                setattr(settings, attr, _positive_float(value))
            except ValueError:
                logger.warning(f"Ignoring {env_var}={value!r}: not a positive number")
                continue
            settings.config_sources.append(f"env:{env_var}")

    value = os.environ.get(f"{ENV_PREFIX}DRY_RUN")
    if value is not None:
        settings.dry_run = value.lower() in ("1", "true", "yes")
        settings.config_sources.append(f"env:{ENV_PREFIX}DRY_RUN")


def load_settings(profile: str | None = None) -> Settings:
    """
    Load and merge settings from all config sources.

    Args:
        profile: Optional profile name to apply after loading.
                 If None and default_profile is set in config, uses that.

    Returns:
        Merged Settings object with all values resolved.
    """
    settings = Settings()

    for config_path in get_config_paths():
        if config_path.exists():
            try:
                with open(config_path, "rb") as f:
                    data = tomllib.load(f)
                _merge_config(settings, data, str(config_path))
                logger.debug(f"Loaded config from {config_path}")
            except (OSError, tomllib.TOMLDecodeError, ValueError) as e:
                logger.warning(f"Failed to load {config_path}: {e}")

    _apply_env_overrides(settings)

    # CLI profile takes precedence over default_profile
    active_profile = profile or settings.default_profile
    if active_profile:
        if settings.apply_profile(active_profile):
            logger.debug(f"Applied profile: {active_profile}")
        else:
            logger.warning(f"Profile not found: {active_profile}")

    return settings


def ensure_config_dir() -> Path:
    """Ensure user config directory exists and return its path."""
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_default_config_content() -> str:
    """Return default config file content as a string."""
    return '''# hostnet - User Configuration
# Place this file at: ~/.config/hostnet/config.toml
# Or use a local override: ./.hostnet.toml

# Default profile to use when none specified via CLI
# default_profile = "edge-01"

# Global defaults applied to all operations
[defaults]
api_url = "http://127.0.0.1:5000"
backend = "http"          # http, linux or auto (linux when running on Linux)
poll_interval = 5.0
timeout = 10.0
dry_run = false

# Interfaces matching these patterns can never be edited
reserved_patterns = ['^enp6s0f\\d+$']

# Named profiles for different managed hosts
# Use with: hostnet --profile edge-01

[profiles.edge-01]
api_url = "http://192.0.2.10:5000"
description = "Edge appliance, rack 1"

# [profiles.lab]
# api_url = "http://198.51.100.20:5000"
# backend = "http"
'''


def init_config(force: bool = False) -> Path | None:
    """
    Initialize user config file with defaults.

    Args:
        force: If True, overwrite existing config.

    Returns:
        Path to created config file, or None if it already exists and force=False.
    """
    config_dir = ensure_config_dir()
    config_path = config_dir / CONFIG_FILENAME

    if config_path.exists() and not force:
        return None

    config_path.write_text(get_default_config_content())
    return config_path
