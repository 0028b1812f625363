"""
Process-wide defaults read by the status code and user message accessors.

The Settings object holds the fallback codes, the generic message and the
code-to-text mapping. Values are loaded from ``RESPERR_*`` environment
variables, may be overridden once during startup with ``configure`` and are
read without synchronization afterwards. Changing them while other threads
query errors is not guarded against.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from http import HTTPStatus
from typing import Any, Callable

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

StatusTexter = Callable[[int], str]

logger = logging.getLogger("resperr.config")

_overrides: dict[str, Any] = {}


def status_text(code: int) -> str:
    """Return the standard HTTP reason phrase for ``code`` or "" if it is unknown."""
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return ""


class Settings(BaseSettings):
    """Fallback values used when an error chain carries no explicit decoration."""

    model_config = SettingsConfigDict(
        env_file=(".env",),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )

    status_code_no_err: int = Field(
        default=HTTPStatus.OK.value,
        alias="RESPERR_STATUS_CODE_NO_ERR",
        description="Status code reported for a missing (None) error.",
    )
    status_code_err: int = Field(
        default=HTTPStatus.INTERNAL_SERVER_ERROR.value,
        alias="RESPERR_STATUS_CODE_ERR",
        description="Status code reported for an error without a status code in its chain.",
    )
    status_code_msg: int = Field(
        default=HTTPStatus.BAD_REQUEST.value,
        alias="RESPERR_STATUS_CODE_MSG",
        description="Status code reported by a user message that wraps no status code.",
    )
    default_error_message: str = Field(
        default="An unexpected error occured.",
        alias="RESPERR_DEFAULT_ERROR_MESSAGE",
        description="User message for errors that carry neither a message nor a status code.",
    )
    status_texter: StatusTexter = Field(
        default=status_text,
        exclude=True,
        description="Converts a status code to a user-facing message.",
    )

    @field_validator("default_error_message")
    @classmethod
    def _validate_message(cls, value: str, info: ValidationInfo) -> str:
        if not value.strip():
            field = (info.field_name or "value").upper()
            raise ValueError(f"{field} must not be empty.")
        return value


@lru_cache
def get_settings() -> Settings:
    """Return the cached process-wide Settings so the environment is read once."""
    return Settings(**_overrides)


def configure(**overrides: Any) -> Settings:
    """
    Replace the process-wide settings with ``overrides`` applied on top of the defaults.

    Meant to be called once during startup, before errors are queried
    concurrently. Invalid values raise ``pydantic.ValidationError`` and leave the
    current settings untouched.
    """
    candidate = {**_overrides, **overrides}
    Settings(**candidate)

    _overrides.clear()
    _overrides.update(candidate)
    get_settings.cache_clear()

    logger.debug("resperr settings overridden", extra={"fields": sorted(overrides)})
    return get_settings()


def reset_settings() -> None:
    """Drop every override and the cached instance."""
    _overrides.clear()
    get_settings.cache_clear()


__all__ = [
    "Settings",
    "StatusTexter",
    "configure",
    "get_settings",
    "reset_settings",
    "status_text",
]
