"""
Typed asynchronous client for the Stellar Horizon REST API.
"""

from __future__ import annotations

from typing import Any, Dict

import backoff
import httpx
from loguru import logger

#: Horizon's maximum page size
PAGE_LIMIT = 200


def _log_backoff(details: Dict[str, Any]) -> None:
    logger.warning(
        "Horizon request failed ({!r}), retry {} in {:.1f}s",
        details["exception"],
        details["tries"],
        details["wait"],
    )


def _log_giveup(details: Dict[str, Any]) -> None:
    logger.warning(
        "Horizon request failed after {} tries: {!r}",
        details["tries"],
        details["exception"],
    )


class HorizonClient:
    """
    Minimal wrapper around :class:`httpx.AsyncClient` with automatic
    retries on transport errors (connection resets, timeouts).

    HTTP error statuses are not retried, they surface as
    :class:`httpx.HTTPStatusError`.
    """

    DEFAULT_TIMEOUT = 10.0

    def __init__(
        self,
        base_url: str,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url: str = base_url.rstrip("/")
        self.timeout = timeout or self.DEFAULT_TIMEOUT
        self._client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers={"Accept": "application/json"},
        )

    # ────────────────────────────────────────────────────────
    # Public endpoints
    # ────────────────────────────────────────────────────────
    async def get_account(self, address: str) -> Dict[str, Any]:
        """
        ``GET /accounts/{address}``
        """
        return await self.get_json(f"{self.base_url}/accounts/{address}")

    def transactions_url(self, address: str) -> str:
        """
        First page of the account transactions, newest first
        """
        return (
            f"{self.base_url}/accounts/{address}/transactions"
            f"?order=desc&limit={PAGE_LIMIT}"
        )

    @backoff.on_exception(
        backoff.expo,
        httpx.TransportError,
        max_tries=3,
        jitter=None,
        factor=2,
        logger=None,
        on_backoff=_log_backoff,
        on_giveup=_log_giveup,
    )
    async def get_json(self, url: str) -> Dict[str, Any]:
        """
        GET an absolute url (Horizon ``_links`` are absolute) and decode json.
        """
        response = await self._client.get(url, headers={"Accept": "application/json"})
        response.raise_for_status()

        data = response.json()
        if not isinstance(data, dict):
            raise ValueError(f"Expected JSON object from {url}")
        logger.trace("GET {} -> {}", url, response.status_code)
        return data

    # ────────────────────────────────────────────────────────
    # Context manager helpers
    # ────────────────────────────────────────────────────────
    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HorizonClient":
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        await self.aclose()
