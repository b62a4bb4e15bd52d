from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from platformdirs import PlatformDirs
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import SettingsError

logger = logging.getLogger(__name__)

APP_NAME = "managed-events"

ENV_PREFIX = "ME_"
ENV_SETTINGS_FILE = "ME_SETTINGS_FILE"
SETTINGS_FILE_NAME = "settings.toml"

_LEVEL_NAMES = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"}


def _as_bool(value: Any) -> bool:
    """Interpret common truthy/falsey spellings ("1", "yes", "off", ...) as a bool."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    v = str(value).strip().lower()
    if v in {"1", "true", "yes", "y", "on"}:
        return True
    if v in {"0", "false", "no", "n", "off"}:
        return False
    raise ValueError(f"not a boolean: {value!r}")


class BusSettings(BaseModel):
    """Runtime settings for the event manager.

    Sources, lowest to highest precedence:
    - field defaults
    - a TOML file (explicit path, ``ME_SETTINGS_FILE``, or ``settings.toml``
      in the user config directory); keys may sit at top level or under ``[bus]``
    - ``ME_*`` environment variables
    """

    log_level: str = Field("INFO", description="Root log level used by configure_logging")
    log_payloads: bool = Field(False, description="Include payload repr in trigger debug logs")
    catch_listener_errors: bool = Field(True, description="Log and swallow listener exceptions")
    max_pending: int = Field(0, ge=0, description="Pending queue capacity, 0 for unbounded")

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        level = str(v).strip().upper()
        if level not in _LEVEL_NAMES:
            raise ValueError(f"unknown log level: {v!r}")
        return level

    # ------------------------ Loading ------------------------
    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        env = os.environ if env is None else env
        mapping = {
            "ME_LOG_LEVEL": ("log_level", str),
            "ME_LOG_PAYLOADS": ("log_payloads", _as_bool),
            "ME_CATCH_LISTENER_ERRORS": ("catch_listener_errors", _as_bool),
            "ME_MAX_PENDING": ("max_pending", int),
        }
        out: Dict[str, Any] = {}
        for env_key, (field_name, caster) in mapping.items():
            raw = env.get(env_key)
            if raw is None or raw == "":
                continue
            try:
                value = caster(raw)
                cls(**{field_name: value})
            except (ValueError, ValidationError) as exc:
                logger.error("Invalid env for %s=%r: %s", env_key, raw, exc)
                continue
            out[field_name] = value
        return out

    @classmethod
    def from_toml_file(cls, path: Path) -> Dict[str, Any]:
        with path.open("rb") as f:
            doc = tomllib.load(f)
        flat: Dict[str, Any] = {k: v for k, v in doc.items() if not isinstance(v, dict)}
        if isinstance(doc.get("bus"), dict):
            flat.update(doc["bus"])
        allowed = set(cls.model_fields)
        unknown = sorted(set(flat) - allowed)
        if unknown:
            logger.warning("Ignoring unknown settings keys in %s: %s", path, ", ".join(unknown))
        return {k: v for k, v in flat.items() if k in allowed}

    @staticmethod
    def discover_config_path(env: Optional[Mapping[str, str]] = None) -> Optional[Path]:
        env = os.environ if env is None else env
        env_path = env.get(ENV_SETTINGS_FILE)
        if env_path:
            return Path(env_path).expanduser().resolve()
        default_path = Path(PlatformDirs(appname=APP_NAME, appauthor=False).user_config_dir) / SETTINGS_FILE_NAME
        if default_path.exists():
            return default_path
        return None

    @classmethod
    def from_sources(
        cls,
        *,
        env: Optional[Mapping[str, str]] = None,
        file_path: Optional[Path | str] = None,
    ) -> "BusSettings":
        """Build settings from defaults, a TOML file and the environment.

        An explicit ``file_path`` that cannot be read raises :class:`SettingsError`;
        a discovered file that fails to parse is logged and skipped.
        """
        data: Dict[str, Any] = {}
        if file_path is not None:
            path = Path(file_path).expanduser().resolve()
            try:
                data.update(cls.from_toml_file(path))
            except (OSError, tomllib.TOMLDecodeError) as exc:
                raise SettingsError(f"Cannot read settings file {path}: {exc}") from exc
        else:
            discovered = cls.discover_config_path(env)
            if discovered is not None:
                try:
                    data.update(cls.from_toml_file(discovered))
                    logger.debug("Loaded settings from %s", discovered)
                except (OSError, tomllib.TOMLDecodeError) as exc:
                    logger.error("Failed to read settings TOML %s: %s", discovered, exc)
        data.update(cls.from_env(env))
        return cls(**data)


__all__ = ["APP_NAME", "BusSettings", "ENV_SETTINGS_FILE"]
