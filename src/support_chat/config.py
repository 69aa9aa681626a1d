"""Configuration loading and validation for the support chat client."""

from __future__ import annotations

from copy import deepcopy
import logging
import os
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from pydantic import (
    BaseModel,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from .exceptions import ConfigValidationError
from .i18n import CATALOGS

import tomllib

LOGGER = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "foodflow-support"
CONFIG_PATH = CONFIG_DIR / "config.toml"

VALID_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class ApiConfig(BaseModel):
    """Support API endpoint and request policy."""

    base_url: str = "http://localhost:8080/api"
    chat_path: str = "/support/chat"
    timeout: int = Field(default=30, ge=1, le=600)
    retries: int = Field(default=0, ge=0, le=5)
    retry_backoff_seconds: float = Field(default=0.5, ge=0.0, le=30.0)
    auth_token: str = ""

    @field_validator("base_url", "chat_path", mode="before")
    @classmethod
    def _validate_required_string(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("Expected a string value.")
        normalized = value.strip()
        if not normalized:
            raise ValueError("String value must not be empty.")
        return normalized

    @field_validator("auth_token", mode="before")
    @classmethod
    def _normalize_token(cls, value: Any) -> str:
        if value is None:
            return ""
        if not isinstance(value, str):
            raise ValueError("auth_token must be a string.")
        return value.strip()


class SupportConfig(BaseModel):
    """Support contact details and presentation language."""

    email: str = "support@foodflow.com"
    language: str = "en"

    @field_validator("email", mode="before")
    @classmethod
    def _validate_email(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("email must be a string.")
        normalized = value.strip()
        if "@" not in normalized:
            raise ValueError("email must be an email address.")
        return normalized

    @field_validator("language", mode="before")
    @classmethod
    def _validate_language(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("language must be a string.")
        normalized = value.strip().lower()
        if normalized not in CATALOGS:
            raise ValueError(f"Unsupported language {normalized!r}.")
        return normalized


class LoggingConfig(BaseModel):
    """Logging behavior and output destinations."""

    level: str = "INFO"
    structured: bool = True
    log_to_file: bool = False
    log_file_path: str = "~/.local/state/foodflow-support/app.log"

    @field_validator("level", mode="before")
    @classmethod
    def _validate_level(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("Logging level must be a string.")
        normalized = value.strip().upper()
        if normalized not in VALID_LOG_LEVELS:
            raise ValueError(f"Unsupported log level {normalized!r}.")
        return normalized

    @field_validator("log_file_path", mode="before")
    @classmethod
    def _validate_log_file_path(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("log_file_path must be a string.")
        normalized = value.strip()
        if not normalized:
            raise ValueError("log_file_path must not be empty.")
        return normalized


class Config(BaseModel):
    """Root configuration model for all sections."""

    api: ApiConfig = ApiConfig()
    support: SupportConfig = SupportConfig()
    logging: LoggingConfig = LoggingConfig()

    @model_validator(mode="after")
    def _validate_base_url(self) -> Config:
        parsed = urlparse(self.api.base_url)
        if parsed.scheme.lower() not in {"http", "https"}:
            raise ValueError("api.base_url must use http or https scheme.")
        if not (parsed.hostname or "").strip():
            raise ValueError("api.base_url must include a hostname.")
        return self


DEFAULT_CONFIG: dict[str, dict[str, Any]] = Config().model_dump()


def ensure_config_dir(config_dir: Path | None = None) -> Path:
    """Create the support chat config directory if needed and return it."""
    directory = config_dir or CONFIG_DIR
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        LOGGER.warning(
            "config.dir.unavailable",
            extra={
                "event": "config.dir.unavailable",
                "path": str(directory),
                "error": str(exc),
            },
        )
    return directory


def _merge_sections(
    defaults: dict[str, Any], overrides: dict[str, Any]
) -> dict[str, Any]:
    """Overlay file values on the defaults, section by section."""
    merged: dict[str, Any] = deepcopy(defaults)
    for name, value in overrides.items():
        current = merged.get(name)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[name] = _merge_sections(current, value)
        else:
            merged[name] = value
    return merged


def _restrict_token_file(path: Path) -> None:
    """Make the config file owner-only on POSIX; it may hold ``auth_token``."""
    if os.name != "posix" or not path.exists():
        return
    try:
        path.chmod(0o600)
    except OSError as exc:
        LOGGER.warning(
            "config.permissions.unchanged",
            extra={
                "event": "config.permissions.unchanged",
                "path": str(path),
                "error": str(exc),
            },
        )


def _validated(raw: dict[str, Any]) -> dict[str, dict[str, Any]]:
    """Return the validated config, or the defaults when any field is invalid."""
    try:
        return Config.model_validate(raw).model_dump()
    except ValidationError as exc:
        LOGGER.warning(
            "config.invalid",
            extra={
                "event": "config.invalid",
                "error_count": exc.error_count(),
                "errors": str(exc),
            },
        )
        return deepcopy(DEFAULT_CONFIG)
    except Exception as exc:  # noqa: BLE001
        raise ConfigValidationError(
            f"Support chat config could not be validated: {exc}"
        ) from exc


def load_config(config_path: Path | None = None) -> dict[str, dict[str, Any]]:
    """Read ``config.toml`` over ``DEFAULT_CONFIG`` and validate the result.

    ``config_path`` overrides ``~/.config/foodflow-support/config.toml``.
    """
    target_path = config_path or CONFIG_PATH
    ensure_config_dir(target_path.parent)

    raw_data: dict[str, Any] = {}
    if target_path.exists():
        _restrict_token_file(target_path)
        try:
            raw_data = tomllib.loads(target_path.read_text(encoding="utf-8"))
        except (OSError, tomllib.TOMLDecodeError) as exc:
            LOGGER.warning(
                "config.parse.failed",
                extra={
                    "event": "config.parse.failed",
                    "path": str(target_path),
                    "error": str(exc),
                },
            )
            raw_data = {}

    return _validated(_merge_sections(DEFAULT_CONFIG, raw_data))
