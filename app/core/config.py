"""
FreeCoinPrice settings.

Single source of truth for runtime configuration. Values are read from the
process environment (and an optional `.env` file) once, at import time.

Usage:
    from app.core.config import settings

    client = CoinGeckoClient(api_key=settings.COINGECKO_API_KEY)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, List

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class ConfigurationWarning(UserWarning):
    """Non-fatal configuration problem; reported at startup, never blocks it."""


class SettingsValidationError(Exception):
    """Raised when settings validation fails."""

    def __init__(self, field: str, value: Any, message: str):
        self.field = field
        self.value = value
        super().__init__(f"Invalid configuration for {field}={value!r}: {message}")


def _parse_bool(value: str | None, default: bool = False) -> bool:
    """Parse a boolean from environment variable."""
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("true", "1", "yes", "on")


def _parse_int(value: str | None, default: int | None = None) -> int | None:
    """Parse an integer from environment variable."""
    if value is None or value.strip() == "":
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


def _parse_float(value: str | None, default: float | None = None) -> float | None:
    """Parse a float from environment variable."""
    if value is None or value.strip() == "":
        return default
    try:
        return float(value.strip())
    except ValueError:
        return default


def _optional_str(name: str) -> str | None:
    return (os.getenv(name) or "").strip() or None


@dataclass
class Settings:
    """
    Settings with validation.

    Hard errors (bad port, non-positive timeout) raise at instantiation.
    Soft problems are collected by `config_warnings()` and only logged.
    """

    PROJECT_NAME: str = "FreeCoinPrice"
    VERSION: str = "1.0.0"

    # Upstream provider
    COINGECKO_API_KEY: str | None = field(default_factory=lambda: _optional_str("COINGECKO_API_KEY"))
    COINGECKO_API_HOST: str = field(
        default_factory=lambda: (os.getenv("COINGECKO_API_HOST") or "https://api.coingecko.com/api/v3").strip().rstrip("/")
    )
    COINGECKO_API_KEY_HEADER: str = field(
        default_factory=lambda: (os.getenv("COINGECKO_API_KEY_HEADER") or "x-cg-demo-api-key").strip()
    )
    HTTP_TIMEOUT_SEC: float = field(default_factory=lambda: _parse_float(os.getenv("HTTP_TIMEOUT_SEC"), 10.0) or 10.0)

    # HTTP server
    API_HOST: str = field(default_factory=lambda: (os.getenv("API_HOST") or "0.0.0.0").strip())  # nosec B104
    API_PORT: int = field(
        default_factory=lambda: _parse_int(os.getenv("PORT") or os.getenv("API_PORT"), 3000) or 3000
    )
    MCP_JSON_RESPONSE: bool = field(default_factory=lambda: _parse_bool(os.getenv("MCP_JSON_RESPONSE"), False))

    # Observability
    LOG_LEVEL: str = field(default_factory=lambda: (os.getenv("LOG_LEVEL") or "INFO").strip().upper())

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        self._validate()

    def _validate(self) -> None:
        errors: List[str] = []

        if not (1 <= self.API_PORT <= 65535):
            errors.append(f"API_PORT must be between 1 and 65535, got {self.API_PORT}")

        if self.HTTP_TIMEOUT_SEC <= 0:
            errors.append(f"HTTP_TIMEOUT_SEC must be positive, got {self.HTTP_TIMEOUT_SEC}")

        if not self.COINGECKO_API_HOST.startswith(("http://", "https://")):
            errors.append(f"COINGECKO_API_HOST must be an http(s) URL, got {self.COINGECKO_API_HOST!r}")

        if errors:
            raise SettingsValidationError("MULTIPLE", None, "; ".join(errors))

    def config_warnings(self) -> List[ConfigurationWarning]:
        warnings: List[ConfigurationWarning] = []
        if not self.COINGECKO_API_KEY:
            warnings.append(
                ConfigurationWarning(
                    "COINGECKO_API_KEY is not set: upstream requests are sent without credentials."
                )
            )
        return warnings

    def to_dict(self) -> dict[str, Any]:
        """Convert settings to dictionary (redacting secrets)."""
        result: dict[str, Any] = {}
        for key, value in vars(self).items():
            if not key.isupper():
                continue
            if key.endswith("_KEY"):
                result[key] = "***REDACTED***" if value else None
            else:
                result[key] = value
        return result


settings = Settings()
