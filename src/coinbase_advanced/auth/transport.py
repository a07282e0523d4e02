"""Bearer-token authentication as an httpx transport decorator.

``AuthenticatingTransport`` wraps any ``httpx.AsyncBaseTransport`` and is
handed to ``httpx.AsyncClient(transport=...)``. For every request it:

1. Signs ``"{METHOD} {base-url host}{path}"`` (path as sent, still
   percent-encoded) with a fresh ES256 token
2. Sets ``Authorization: Bearer <token>``
3. Forwards to the inner transport
4. Returns 2xx responses untouched; for anything else reads the body and
   raises ``HttpStatusError`` (``RateLimitError`` for 429)

Connectivity failures from the inner transport (``httpx.TransportError``,
including timeouts) are raised as ``ConnectivityError``. The retry and
circuit-breaker layers above therefore see every failure as an exception.
"""

from __future__ import annotations

import httpx

from ..core.errors import ConnectivityError, http_status_error
from ..core.logging import get_logger
from ..core.secrets import Credentials
from .tokens import CoinbaseJwtSigner

logger = get_logger(__name__)


class AuthenticatingTransport(httpx.AsyncBaseTransport):
    """Signs each request and turns non-2xx responses into exceptions.

    Stateless apart from the credentials: each request computes its own
    token, so one instance can serve any number of concurrent requests.
    """

    def __init__(
        self,
        inner: httpx.AsyncBaseTransport,
        credentials: Credentials,
        base_url: str,
        signer: CoinbaseJwtSigner | None = None,
    ):
        self._inner = inner
        self._credentials = credentials
        self._host = httpx.URL(base_url).host
        self._signer = signer or CoinbaseJwtSigner()

    @property
    def host(self) -> str:
        return self._host

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        token = self._signer.sign(
            request.method,
            self._host,
            request.url.raw_path.decode("ascii"),
            self._credentials.key_id,
            self._credentials.key_secret,
        )
        request.headers["Authorization"] = f"Bearer {token}"

        try:
            response = await self._inner.handle_async_request(request)
        except httpx.TransportError as e:
            raise ConnectivityError(
                f"Coinbase API request failed: {type(e).__name__}: {e}",
                cause=e,
            ).with_context(method=request.method, url=str(request.url)) from e

        if 200 <= response.status_code < 300:
            return response

        try:
            body = (await response.aread()).decode("utf-8", errors="replace")
        finally:
            await response.aclose()

        logger.debug(
            "coinbase_request_rejected",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
        )
        raise http_status_error(response.status_code, body).with_context(
            method=request.method,
            url=str(request.url),
        )

    async def aclose(self) -> None:
        await self._inner.aclose()


__all__ = ["AuthenticatingTransport"]
