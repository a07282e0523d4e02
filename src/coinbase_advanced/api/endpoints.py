"""
Typed binding of the Advanced Trade REST endpoints onto ``httpx``.

One coroutine per endpoint. Each method builds the request, awaits it on the
shared ``httpx.AsyncClient`` and returns the decoded JSON payload (or an
``OrderInformation`` for the two order-placement calls). Identifiers are
percent-encoded into a single path segment. Failures are never
handled here: the authenticating transport already turned every non-2xx or
connectivity failure into a ``TransportError``, and that propagates to the
resilience pipeline unchanged.

Endpoints::

    GET  /accounts                      list_accounts()
    GET  /accounts/{id}                 get_account(account_id)
    GET  /orders/historical/batch       get_orders(search)
    GET  /orders/historical/{id}        get_order(order_id)
    POST /orders                        place_order(order)
    POST /orders/close_position         close_position(request)
    GET  /best_bid_ask                  get_best_bid_ask(product_ids)
    GET  /products                      list_products()
    GET  /products/{id}                 get_product(product_id)
    GET  /products/{id}/candles         get_product_candles(...)
    GET  /portfolios                    get_portfolios()
    GET  /portfolios/{uuid}             get_portfolio_breakdown(portfolio_uuid)

Doc-Types:
    api-reference
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Sequence
from urllib.parse import quote

import httpx

from ..core.enums import CandleGranularity
from .models import ClosePositionRequest, OrderInformation, OrderRequest, OrderSearchRequest

JsonObject = dict[str, Any]


def _segment(value: str) -> str:
    """Escape an identifier as a single path segment."""
    return quote(str(value), safe="")


def _unix_seconds(value: int | datetime) -> int:
    if isinstance(value, datetime):
        return int(value.timestamp())
    return int(value)


class CoinbaseApi:
    """Endpoint methods over an authenticated ``httpx.AsyncClient``.

    The client must be built with ``base_url`` pointing at the brokerage root
    and an ``AuthenticatingTransport``; see ``factory.create_authenticated_http_client``.
    """

    def __init__(self, http: httpx.AsyncClient):
        self._http = http

    @property
    def http(self) -> httpx.AsyncClient:
        return self._http

    async def _get(self, path: str, params: Any = None) -> JsonObject:
        response = await self._http.get(path, params=params)
        return response.json()

    async def _post(self, path: str, body: JsonObject) -> JsonObject:
        response = await self._http.post(path, json=body)
        return response.json()

    # ── Accounts ─────────────────────────────────────────────────────

    async def list_accounts(self) -> JsonObject:
        return await self._get("/accounts")

    async def get_account(self, account_id: str) -> JsonObject:
        return await self._get(f"/accounts/{_segment(account_id)}")

    # ── Orders ───────────────────────────────────────────────────────

    async def get_orders(self, search: OrderSearchRequest | None = None) -> JsonObject:
        params = search.to_query_params() if search is not None else None
        return await self._get("/orders/historical/batch", params=params)

    async def get_order(self, order_id: str) -> JsonObject:
        return await self._get(f"/orders/historical/{_segment(order_id)}")

    async def place_order(self, order: OrderRequest) -> OrderInformation:
        payload = await self._post("/orders", order.to_payload())
        return OrderInformation.model_validate(payload)

    async def close_position(self, request: ClosePositionRequest) -> OrderInformation:
        payload = await self._post("/orders/close_position", request.to_payload())
        return OrderInformation.model_validate(payload)

    # ── Products ─────────────────────────────────────────────────────

    async def get_best_bid_ask(self, product_ids: Sequence[str] | None = None) -> JsonObject:
        params = [("product_ids", product_id) for product_id in product_ids or ()]
        return await self._get("/best_bid_ask", params=params or None)

    async def list_products(self) -> JsonObject:
        return await self._get("/products")

    async def get_product(self, product_id: str) -> JsonObject:
        return await self._get(f"/products/{_segment(product_id)}")

    async def get_product_candles(
        self,
        product_id: str,
        start: int | datetime,
        end: int | datetime,
        granularity: CandleGranularity | str,
    ) -> JsonObject:
        """Candles between ``start`` and ``end`` (unix seconds or datetimes)."""
        params = {
            "start": _unix_seconds(start),
            "end": _unix_seconds(end),
            "granularity": CandleGranularity(granularity).value,
        }
        return await self._get(f"/products/{_segment(product_id)}/candles", params=params)

    # ── Portfolios ───────────────────────────────────────────────────

    async def get_portfolios(self) -> JsonObject:
        return await self._get("/portfolios")

    async def get_portfolio_breakdown(self, portfolio_uuid: str) -> JsonObject:
        return await self._get(f"/portfolios/{_segment(portfolio_uuid)}")

    async def aclose(self) -> None:
        await self._http.aclose()


__all__ = ["CoinbaseApi"]
