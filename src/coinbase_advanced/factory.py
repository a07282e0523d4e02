"""
Factory functions that assemble clients from settings.

Features:
    - ``create_authenticated_http_client()``: ``httpx.AsyncClient`` whose
      transport signs every request
    - ``create_api()``: ``CoinbaseApi`` bound to the active base URL
    - ``create_client()``: the full ``CoinbaseAdvancedTradeClient`` with its
      own resilience pipeline

Credentials come from the explicit ``credentials`` argument when given,
otherwise from ``settings.credentials()``, which raises
``MissingConfigError`` when the key or secret is absent. Keys supplied at
runtime (vaults, user input) therefore never need to touch the environment.

Tags:
    coinbase, factory-pattern, httpx, configuration

Doc-Types:
    api-reference
"""

from __future__ import annotations

from typing import Any

import httpx

from .api.endpoints import CoinbaseApi
from .auth.tokens import CoinbaseJwtSigner
from .auth.transport import AuthenticatingTransport
from .client import CoinbaseAdvancedTradeClient
from .core.secrets import Credentials
from .core.settings import CoinbaseSettings
from .execution.pipeline import ResiliencePipeline

DEFAULT_TIMEOUT = 30.0


def create_authenticated_http_client(
    base_url: str,
    credentials: Credentials,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    signer: CoinbaseJwtSigner | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> httpx.AsyncClient:
    """Create an ``httpx.AsyncClient`` that authenticates every request.

    ``transport`` is the inner (wire) transport; it defaults to
    ``httpx.AsyncHTTPTransport()``. Tests pass an ``httpx.MockTransport``.
    """
    auth_transport = AuthenticatingTransport(
        transport or httpx.AsyncHTTPTransport(),
        credentials,
        base_url,
        signer=signer,
    )
    return httpx.AsyncClient(
        base_url=base_url,
        transport=auth_transport,
        timeout=timeout,
    )


def create_api(
    settings: CoinbaseSettings | None = None,
    *,
    credentials: Credentials | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> CoinbaseApi:
    """Create a ``CoinbaseApi`` for the active base URL of *settings*."""
    settings = settings or CoinbaseSettings()
    http = create_authenticated_http_client(
        settings.active_base_url,
        credentials or settings.credentials(),
        transport=transport,
        timeout=settings.timeout,
    )
    return CoinbaseApi(http)


def create_client(
    settings: CoinbaseSettings | None = None,
    *,
    credentials: Credentials | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    **pipeline_kwargs: Any,
) -> CoinbaseAdvancedTradeClient:
    """Create a ready-to-use client.

    Each call builds a new pipeline, so clients never share a circuit
    breaker. Extra keyword arguments go to ``ResiliencePipeline`` (for
    example ``sleep=`` in tests).
    """
    settings = settings or CoinbaseSettings()
    api = create_api(settings, credentials=credentials, transport=transport)
    pipeline = ResiliencePipeline.from_settings(settings, **pipeline_kwargs)
    return CoinbaseAdvancedTradeClient(api, pipeline)


__all__ = [
    "create_api",
    "create_authenticated_http_client",
    "create_client",
]
