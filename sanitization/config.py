"""
Settings system - layered typed settings with validation.

Merge precedence (later overrides earlier):
    defaults < YAML file < .env file < environment variables < overrides
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, fields, MISSING
from pathlib import Path
from typing import Any, Dict, List, Optional, get_args, get_origin

import yaml
from dotenv import dotenv_values

from .faults import SettingsInvalidFault

logger = logging.getLogger("sanitization.config")

__all__ = [
    "SanitizationSettings",
    "SettingsLoader",
    "get_settings",
    "set_settings",
    "reset_settings",
    "configure_logging",
]

ENV_PREFIX = "SANITIZATION_"

# Variables that point the loader at its sources rather than being settings
_LOADER_KEYS = {"settings_file", "env_file"}


@dataclass
class SanitizationSettings:
    """
    Process-wide sanitization settings.

    Attributes:
        skip_unprovisioned: Silently skip declarations for models whose
            storage does not exist yet (e.g. during migrations). When False,
            such declarations raise ModelNotProvisionedFault.
        trace_steps: Log the value produced by every transform step at DEBUG.
        convention_suffixes: Class-name suffixes stripped when a custom
            sanitizer is registered without an explicit name.
        log_level: Level applied to the "sanitization" logger by
            configure_logging(), if set.
    """

    skip_unprovisioned: bool = True
    trace_steps: bool = False
    convention_suffixes: List[str] = field(default_factory=lambda: ["Sanitizer", "Transform"])
    log_level: Optional[str] = None


class SettingsLoader:
    """
    Loads and merges settings from multiple sources.
    """

    def __init__(self, env_prefix: str = ENV_PREFIX):
        self.env_prefix = env_prefix
        self.config_data: Dict[str, Any] = {}

    @classmethod
    def load(
        cls,
        path: Optional[str] = None,
        env_prefix: str = ENV_PREFIX,
        env_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
        environ: Optional[Dict[str, str]] = None,
    ) -> SanitizationSettings:
        """
        Load settings from all sources and return a validated instance.

        Args:
            path: YAML settings file (a top-level ``sanitization:`` key is
                honoured, otherwise the whole document is used)
            env_prefix: Prefix for environment variables
            env_file: Path to .env file
            overrides: Manual overrides (highest precedence)
            environ: Environment mapping (defaults to os.environ)

        Returns:
            SanitizationSettings
        """
        loader = cls(env_prefix=env_prefix)

        if path:
            loader._load_yaml_file(Path(path))

        if env_file:
            loader._load_env_file(env_file)

        loader._load_from_env(os.environ if environ is None else environ)

        if overrides:
            loader.config_data.update(overrides)

        return loader.build()

    def _load_yaml_file(self, path: Path):
        """Load settings from YAML file."""
        if not path.exists():
            logger.debug(f"Settings file {path} not found, skipping")
            return
        with open(path) as f:
            data = yaml.safe_load(f)
        if not data:
            return
        if not isinstance(data, dict):
            raise SettingsInvalidFault(str(path), "settings file must contain a mapping")
        section = data.get("sanitization", data)
        self.config_data.update(section)

    def _load_env_file(self, path: str):
        """Load settings from .env file."""
        env_path = Path(path)
        if not env_path.exists():
            logger.debug(f"Env file {env_path} not found, skipping")
            return
        self._load_from_env(dotenv_values(env_path))

    def _load_from_env(self, environ):
        """Load settings from prefixed variables."""
        for key, value in environ.items():
            if value is None or not key.startswith(self.env_prefix):
                continue
            name = key[len(self.env_prefix):].lower()
            if name in _LOADER_KEYS:
                continue
            self.config_data[name] = self._parse_value(value)

    def _parse_value(self, value: str) -> Any:
        """Parse string value to appropriate type."""
        # Boolean
        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False

        # Number
        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        # JSON
        if value.startswith(("{", "[")):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass

        return value

    def build(self) -> SanitizationSettings:
        """Instantiate settings with validation."""
        kwargs = {}
        known = {f.name for f in fields(SanitizationSettings)}

        for key in self.config_data:
            if key not in known:
                logger.warning(f"Ignoring unknown sanitization setting '{key}'")

        for field_info in fields(SanitizationSettings):
            name = field_info.name
            if name in self.config_data:
                value = self._coerce(name, self.config_data[name], field_info.type)
                kwargs[name] = value
            elif field_info.default is not MISSING:
                kwargs[name] = field_info.default
            elif field_info.default_factory is not MISSING:
                kwargs[name] = field_info.default_factory()

        return SanitizationSettings(**kwargs)

    def _coerce(self, name: str, value: Any, annotation: Any) -> Any:
        """Basic type checking, with 1/0 accepted for booleans."""
        expected = _resolve_annotation(annotation)
        origin = get_origin(expected)

        if origin is Optional or (origin is not None and type(None) in get_args(expected)):
            if value is None:
                return None
            expected = next(a for a in get_args(expected) if a is not type(None))
            origin = get_origin(expected)

        if expected is bool:
            if isinstance(value, bool):
                return value
            if value in (0, 1):
                return bool(value)
            raise SettingsInvalidFault(name, f"expected bool, got {type(value).__name__}")

        if origin in (list, List):
            if isinstance(value, str):
                value = [part.strip() for part in value.split(",") if part.strip()]
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise SettingsInvalidFault(name, "expected a list of strings")
            return value

        if expected is str:
            if not isinstance(value, str):
                raise SettingsInvalidFault(name, f"expected str, got {type(value).__name__}")
            return value

        return value


def _resolve_annotation(annotation: Any) -> Any:
    """Dataclass annotations are strings under postponed evaluation."""
    if not isinstance(annotation, str):
        return annotation
    return {
        "bool": bool,
        "str": str,
        "List[str]": List[str],
        "Optional[str]": Optional[str],
    }.get(annotation, Any)


# ── Process-wide settings ────────────────────────────────────────────────────

_settings: Optional[SanitizationSettings] = None


def get_settings() -> SanitizationSettings:
    """Return the active settings, loading them from the environment once."""
    global _settings
    if _settings is None:
        _settings = SettingsLoader.load(
            path=os.environ.get("SANITIZATION_SETTINGS_FILE"),
            env_file=os.environ.get("SANITIZATION_ENV_FILE"),
        )
    return _settings


def set_settings(settings: SanitizationSettings) -> None:
    """Replace the active settings."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Forget the active settings (useful for testing)."""
    global _settings
    _settings = None


def configure_logging(settings: Optional[SanitizationSettings] = None) -> None:
    """Apply settings.log_level to the package logger."""
    settings = settings or get_settings()
    if settings.log_level:
        logging.getLogger("sanitization").setLevel(settings.log_level.upper())
