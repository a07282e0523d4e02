"""Settings for the Coinbase Advanced Trade client.

Configuration is explicit, validated, and environment-driven. Every field can
be set from a ``COINBASE_``-prefixed environment variable or a ``.env`` file.

Features:
    - **Endpoint selection:** production vs. sandbox base URL via ``use_sandbox``
    - **Credentials:** ``api_key`` / ``api_secret`` (secret held as ``SecretStr``)
    - **Resilience knobs:** retry count/base delay, breaker threshold/open time
    - **Observability:** log level and format, applied by
      ``configure_logging_from_settings``

Examples:
    >>> import os
    >>> os.environ["COINBASE_USE_SANDBOX"] = "true"
    >>> CoinbaseSettings().active_base_url
    'http://localhost:5226/api/v3/brokerage'

Tags:
    settings, configuration, pydantic, environment, env-prefix
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import MissingConfigError
from .secrets import Credentials, SecretValue

PRODUCTION_BASE_URL = "https://api.coinbase.com/api/v3/brokerage"
SANDBOX_BASE_URL = "http://localhost:5226/api/v3/brokerage"


class CoinbaseSettings(BaseSettings):
    """Client settings, resolved once per client construction.

    Fields
    ──────
    base_url                  : Production REST endpoint
    sandbox_base_url          : Sandbox REST endpoint
    use_sandbox               : Route requests to the sandbox endpoint
    api_key / api_secret      : CDP key name and EC private key (PEM or base64)
    timeout                   : Per-request timeout in seconds
    max_retries               : Retries for 429 / connectivity failures
    retry_base_delay          : First backoff delay; doubles per retry
    circuit_failure_threshold : Consecutive failed calls before the breaker opens
    circuit_open_seconds      : How long the breaker stays open
    """

    model_config = SettingsConfigDict(
        env_prefix="COINBASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Endpoint ─────────────────────────────────────────────────
    base_url: str = PRODUCTION_BASE_URL
    sandbox_base_url: str = SANDBOX_BASE_URL
    use_sandbox: bool = False

    # ── Credentials ──────────────────────────────────────────────
    api_key: str | None = None
    api_secret: SecretStr | None = None

    # ── Transport ────────────────────────────────────────────────
    timeout: float = Field(default=30.0, gt=0)

    # ── Resilience ───────────────────────────────────────────────
    max_retries: int = Field(default=3, ge=0)
    retry_base_delay: float = Field(default=2.0, ge=0)
    circuit_failure_threshold: int = Field(default=5, ge=1)
    circuit_open_seconds: float = Field(default=120.0, gt=0)

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_format: Literal["json", "console"] | None = None

    @property
    def active_base_url(self) -> str:
        return self.sandbox_base_url if self.use_sandbox else self.base_url

    def credentials(self) -> Credentials:
        """Credentials from settings; raises MissingConfigError if incomplete."""
        if not self.api_key:
            raise MissingConfigError("COINBASE_API_KEY")
        if self.api_secret is None or not self.api_secret.get_secret_value():
            raise MissingConfigError("COINBASE_API_SECRET")
        return Credentials(
            key_id=self.api_key,
            key_secret=SecretValue(self.api_secret.get_secret_value()),
        )


__all__ = ["CoinbaseSettings", "PRODUCTION_BASE_URL", "SANDBOX_BASE_URL"]
