"""
Configuration management for the build driver
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

import yaml
from pydantic import ValidationError

from ..errors import ConfigurationError
from .models import BuildConfig, MacOSConfig, PlatformConfig, WindowsConfig

DEFAULT_CONFIG_PATH = Path(__file__).parent / "build.yaml"

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class RuntimeOptions:
    """Options read from the environment at startup"""

    verbose: bool = False
    dry_run: bool = False
    log_file: Optional[str] = None
    config_path: Optional[Path] = None
    windows_runner: Optional[str] = None


def load_runtime_options(environ: Mapping[str, str] = os.environ) -> RuntimeOptions:
    """
    Read runtime options from environment variables

    Args:
        environ: Environment mapping to read from

    Returns:
        RuntimeOptions instance
    """
    config_path = environ.get("PERFETTO_BUILD_CONFIG")
    return RuntimeOptions(
        verbose=environ.get("PERFETTO_BUILD_VERBOSE", "").lower() in _TRUE_VALUES,
        dry_run=environ.get("PERFETTO_BUILD_DRY_RUN", "").lower() in _TRUE_VALUES,
        log_file=environ.get("PERFETTO_BUILD_LOG_FILE") or None,
        config_path=Path(config_path) if config_path else None,
        windows_runner=environ.get("PERFETTO_BUILD_WIN_RUNNER") or None,
    )


class ConfigLoader:
    """Loads and validates the build configuration"""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration loader

        Args:
            config_path: YAML configuration file (defaults to the packaged build.yaml)
        """
        self.config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    def load(self, windows_runner: Optional[str] = None) -> BuildConfig:
        """
        Load the build configuration

        Args:
            windows_runner: Optional override for ``windows.runner``

        Returns:
            Validated BuildConfig

        Raises:
            ConfigurationError: If the file is missing, unreadable or invalid
        """
        if not self.config_path.is_file():
            raise ConfigurationError(f"Build config not found: {self.config_path}")

        try:
            with open(self.config_path, 'r', encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to read build config {self.config_path}: {e}")

        if not isinstance(data, dict):
            raise ConfigurationError(f"Build config must be a mapping: {self.config_path}")

        if windows_runner:
            data.setdefault("windows", {})["runner"] = windows_runner

        try:
            return BuildConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid build config {self.config_path}:\n{e}")


__all__ = [
    "ConfigLoader",
    "RuntimeOptions",
    "load_runtime_options",
    "DEFAULT_CONFIG_PATH",
    "BuildConfig",
    "PlatformConfig",
    "MacOSConfig",
    "WindowsConfig",
]
