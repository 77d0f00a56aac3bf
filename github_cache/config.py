import logging
import os
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from github_cache.domain.exceptions import ConfigurationError
from github_cache.infrastructure.github_client import DEFAULT_API_URL, DEFAULT_TIMEOUT_SECONDS

TRUE_VALUES = {"y", "yes", "true", "1", "on"}
FALSE_VALUES = {"n", "no", "false", "0", "off"}


class AppConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    api_url: str = DEFAULT_API_URL
    cache_dir: str = "."
    # None disables the request timeout.
    request_timeout: Optional[float] = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    # None means "ask the user at startup".
    persistent_storage: Optional[bool] = None
    log_level: str = "INFO"

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, value: str) -> str:
        normalized = value.strip().rstrip("/")
        if not normalized.startswith(("http://", "https://")):
            raise ValueError("GITHUB_API_URL must be an http(s) URL")
        return normalized

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if not isinstance(logging.getLevelName(normalized), int):
            raise ValueError(f"unknown LOG_LEVEL '{value}'")
        return normalized


def _parse_flag(name: str, raw: Optional[str]) -> Optional[bool]:
    if raw is None or not raw.strip():
        return None
    normalized = raw.strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a yes/no value, got '{raw}'.")


def _parse_timeout(raw: Optional[str]) -> Optional[float]:
    if raw is None:
        return DEFAULT_TIMEOUT_SECONDS
    if not raw.strip():
        return None
    try:
        timeout = float(raw)
    except ValueError as e:
        raise ConfigurationError(f"GITHUB_REQUEST_TIMEOUT must be a number of seconds, got '{raw}'.") from e
    return timeout if timeout != 0 else None


def load_config(environ: Optional[Mapping[str, str]] = None) -> AppConfig:
    """
    Builds the application configuration from the environment.

    A ``.env`` file in the working directory is loaded first when reading the
    real process environment; pass ``environ`` to bypass both.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    values = {
        "request_timeout": _parse_timeout(environ.get("GITHUB_REQUEST_TIMEOUT")),
        "persistent_storage": _parse_flag("GITHUB_PERSISTENT_STORAGE", environ.get("GITHUB_PERSISTENT_STORAGE")),
    }
    if environ.get("GITHUB_API_URL"):
        values["api_url"] = environ["GITHUB_API_URL"]
    if environ.get("GITHUB_CACHE_DIR"):
        values["cache_dir"] = environ["GITHUB_CACHE_DIR"]
    if environ.get("LOG_LEVEL"):
        values["log_level"] = environ["LOG_LEVEL"]

    try:
        return AppConfig(**values)
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e
