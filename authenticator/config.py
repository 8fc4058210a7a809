"""User-facing configuration loaded from ``TOTP_*`` environment variables and `.env` files."""
from __future__ import annotations

from typing import Any, Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import InvalidArgument
from .provisioning import DEFAULT_SECRET_LENGTH
from .totp import MAX_PERIOD, MIN_PERIOD, HashAlgorithm, check_digits

__all__ = ["TOTPSettings", "load_settings"]


class TOTPSettings(BaseSettings):
    """Defaults applied to secret generation and code computation."""

    period: int = Field(default=30, ge=MIN_PERIOD, le=MAX_PERIOD)
    digits: Literal[6, 8] = 6
    algorithm: HashAlgorithm = HashAlgorithm.SHA1
    secret_length: int = Field(default=DEFAULT_SECRET_LENGTH, ge=1, le=1024)
    issuer: str | None = None
    label: str = Field(default="user", min_length=1)
    valid_window: int = Field(default=1, ge=0, le=10)
    log_level: str = Field(
        default="WARNING",
        validation_alias=AliasChoices("TOTP_LOG_LEVEL", "LOG_LEVEL", "log_level"),
    )

    model_config = SettingsConfigDict(
        env_prefix="TOTP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("algorithm", mode="before")
    @classmethod
    def _parse_algorithm(cls, value: HashAlgorithm | str) -> HashAlgorithm:
        try:
            return HashAlgorithm.parse(value)
        except InvalidArgument as exc:
            raise ValueError(str(exc)) from exc

    @field_validator("digits", mode="before")
    @classmethod
    def _check_digits(cls, value: int | str) -> int:
        try:
            return check_digits(int(value))
        except (InvalidArgument, TypeError, ValueError) as exc:
            raise ValueError(f"digits must be 6 or 8, got {value!r}") from exc

    @field_validator("issuer", mode="before")
    @classmethod
    def _clean_issuer(cls, value: str | None) -> str | None:
        if value is None:
            return None
        cleaned = str(value).strip()
        return cleaned or None

    @field_validator("label", mode="before")
    @classmethod
    def _clean_label(cls, value: str) -> str:
        return str(value).strip()

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_log_level(cls, value: str) -> str:
        cleaned = str(value).strip().upper()
        if not cleaned:
            raise ValueError("log level must be a non-empty string")
        return cleaned


def load_settings(**overrides: Any) -> TOTPSettings:
    """Build settings from the environment, applying explicit *overrides*.

    ``None`` overrides are ignored so unset command-line flags fall back to
    the environment.
    """

    provided = {key: value for key, value in overrides.items() if value is not None}
    return TOTPSettings(**provided)
