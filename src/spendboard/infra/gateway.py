"""HTTP gateway speaking to the JSON API through a WSGI client."""

from __future__ import annotations

import asyncio
from typing import Any, Mapping, Optional

from flask import Flask

from ..domain.errors import NetworkError, ServerError, error_for_status
from ..domain.gateway import WireObject
from ..logging_config import get_logger

logger = get_logger("infra.gateway")


class HttpGateway:
    """Gateway implementation issuing HTTP requests against the API blueprint.

    ``client`` is anything exposing werkzeug's ``Client.open`` signature; the
    blocking round trip runs in a worker thread so the event loop stays free.
    """

    def __init__(self, client: Any, *, prefix: str = "/api") -> None:
        self.client = client
        self.prefix = prefix.rstrip("/")

    @classmethod
    def for_app(cls, app: Flask) -> "HttpGateway":
        prefix = app.config["SPENDBOARD_CONFIG"].API_PREFIX
        return cls(app.test_client(), prefix=prefix)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        body: Optional[Mapping[str, Any]] = None,
        query: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        url = f"{self.prefix}{path}"
        params = {key: value for key, value in (query or {}).items() if value is not None}
        try:
            response = await asyncio.to_thread(
                self.client.open,
                url,
                method=method,
                json=dict(body) if body is not None else None,
                query_string=params or None,
            )
        except OSError as exc:
            raise NetworkError() from exc
        except Exception as exc:
            logger.exception("Gateway request crashed", extra={"method": method, "url": url})
            raise ServerError() from exc

        if response.status_code >= 400:
            payload = response.get_json(silent=True) or {}
            message = payload.get("message") or payload.get("error")
            logger.info(
                "Gateway request failed",
                extra={"method": method, "url": url, "status": response.status_code},
            )
            raise error_for_status(response.status_code, message)

        if response.status_code == 204 or not response.data:
            return None
        payload = response.get_json(silent=True)
        if payload is None:
            raise ServerError("Server returned a non-JSON response")
        return payload

    async def list_transactions(self, *, year: Optional[int] = None) -> list[WireObject]:
        return await self._request("GET", "/transactions", query={"year": year})

    async def create_transaction(self, payload: Mapping[str, Any]) -> WireObject:
        return await self._request("POST", "/transactions", body=payload)

    async def update_transaction(
        self, transaction_id: int, changes: Mapping[str, Any]
    ) -> WireObject:
        return await self._request("PATCH", f"/transactions/{transaction_id}", body=changes)

    async def delete_transaction(self, transaction_id: int) -> None:
        await self._request("DELETE", f"/transactions/{transaction_id}")

    async def list_categories(self) -> list[WireObject]:
        return await self._request("GET", "/categories")

    async def create_category(self, payload: Mapping[str, Any]) -> WireObject:
        return await self._request("POST", "/categories", body=payload)

    async def list_budgets(self, *, month: Optional[str] = None) -> list[WireObject]:
        return await self._request("GET", "/budgets", query={"month": month})

    async def upsert_budget(self, payload: Mapping[str, Any]) -> WireObject:
        return await self._request("POST", "/budgets", body=payload)

    async def update_budget(self, budget_id: int, payload: Mapping[str, Any]) -> WireObject:
        return await self._request("PUT", f"/budgets/{budget_id}", body=payload)

    async def delete_budget(self, budget_id: int) -> None:
        await self._request("DELETE", f"/budgets/{budget_id}")
