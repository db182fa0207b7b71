from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from functools import cached_property
from typing import Any, AsyncIterator, Dict, List

from loguru import logger

from stablefetch.balances.service import BALANCE_TTL, balance_cache_key
from stablefetch.chains import STABLECOIN_CODE, STELLAR_DECIMALS, STELLAR_LABEL
from stablefetch.core import Core
from stablefetch.kv import CacheService
from stablefetch.ledger.client import PAGE_LIMIT, HorizonClient
from stablefetch.ledger.transaction import (
    LedgerTransaction,
    network_passphrase,
    parse_created_at,
)
from stablefetch.utils import as_utc, short_address, utc_now


def to_stroops(amount: Decimal) -> int:
    """
    Convert a whole-unit amount into smallest units (7 decimals), rounding half up.

    Examples:
        ::

            to_stroops(Decimal("12.5"))
            # 125000000
    """
    scaled = amount * Decimal(10**STELLAR_DECIMALS)
    return int(scaled.to_integral_value(rounding=ROUND_HALF_UP))


class LedgerService(Core):
    """
    Service for the stablecoin balance on the Stellar ledger.

    The current balance comes from the account endpoint. A historical
    balance is reconstructed by replaying the account's payments between
    the date and now, newest first, and taking them out of the current
    balance: incoming payments are subtracted, outgoing ones added back.

    **Request - Response flow**

    ::

                +---------------+              +---------+ +--------------+
                | LedgerService |              | Horizon | | CacheService |
                +---------------+              +---------+ +--------------+
        ---------------  |                          |             |
        | Request call |-|                          |             |
        |--------------| |                          |             |
                         | hget(address-date, stellar)            |
                         |--------------------------------------->|
                         |                          |             |
                         | If miss: GET /accounts   |             |
                         |------------------------->|             |
                         |                          |             |
                         | If date: GET transactions pages        |
                         |------------------------->|             |
                         |                          |             |
                         | hset + expire(24h)       |             |
                         |--------------------------------------->|
            -----------  |                          |             |
            | Response |-|                          |             |
            |----------| |                          |             |

    Args:
        cache: An instance of :class:`stablefetch.kv.CacheService`
        horizon: An instance of :class:`HorizonClient` (built from the
                 settings if ``None``)
        kwargs: Args for the :class:`stablefetch.core.Core`
    """

    _cache: CacheService

    def __init__(
        self, cache: CacheService, horizon: HorizonClient | None = None, **kwargs
    ):
        super().__init__(**kwargs)
        self._cache = cache
        self._horizon = horizon

    @staticmethod
    def create(**kwargs) -> LedgerService:
        """
        Create an instance of :class:`LedgerService`

        Args:
            kwargs: Args for the :class:`stablefetch.core.Core`

        Returns:
            An instance of :class:`LedgerService`
        """
        cache = CacheService.create(**kwargs)
        return LedgerService(cache, **kwargs)

    @cached_property
    def horizon(self) -> HorizonClient:
        """
        :class:`HorizonClient` for the configured network
        """
        if self._horizon is not None:
            return self._horizon
        return HorizonClient(
            self.settings.resolved_horizon_url, timeout=self.settings.request_timeout
        )

    async def get_stellar_balance(
        self, address: str, on_date: datetime | None = None
    ) -> int:
        """
        Stablecoin balance of a Stellar account.

        Args:
            address: Stellar account id (``G...``)
            on_date: date of a historical balance, current balance if ``None``

        Returns:
            Balance in smallest units (7 decimals), ``0`` if it couldn't be fetched
        """
        key = balance_cache_key(address, on_date)
        cached = self._cache.get_int(key, STELLAR_LABEL)
        if cached is not None:
            return cached

        logger.debug("Stellar balance cache miss for {}", short_address(address))
        try:
            account = await self.horizon.get_account(address)
            value = self._sum_account_balances(account)
            if on_date is not None:
                value += await self.calculate_stellar_balance_delta(address, on_date)
        except Exception as err:
            logger.error(
                "Something went wrong getting the stellar balances for {}: {!r}",
                short_address(address),
                err,
            )
            return 0

        balance = max(to_stroops(value), 0)
        self._cache.set_with_ttl(key, STELLAR_LABEL, str(balance), BALANCE_TTL)
        return balance

    async def calculate_stellar_balance_delta(
        self, address: str, on_date: datetime
    ) -> Decimal:
        """
        Amount to add to the current balance to get the balance as of ``on_date``.

        Incoming payments since the date count negative, outgoing positive.
        Payments in other assets are ignored.
        """
        delta = Decimal(0)
        for tx in await self.get_stellar_txs(address, on_date):
            for payment in tx.payments:
                if payment.code != STABLECOIN_CODE:
                    continue
                if payment.destination == address:
                    delta -= payment.amount
                if payment.source == address:
                    delta += payment.amount
        return delta

    async def iter_stellar_tx_pages(
        self, address: str, from_date: datetime
    ) -> AsyncIterator[List[Dict[str, Any]]]:
        """
        Raw transaction records page by page, newest first.

        Stops after a short page or once a page reaches past ``from_date``.
        A full page within range always triggers one more request.

        Raises:
            Any error of the underlying http client
        """
        from_date = as_utc(from_date)
        url = self.horizon.transactions_url(address)
        while True:
            data = await self.horizon.get_json(url)
            records = data["_embedded"]["records"]
            yield records

            if len(records) < PAGE_LIMIT:
                return
            if parse_created_at(records[-1]["created_at"]) < from_date:
                return
            next_url = data["_links"]["next"]["href"]
            if next_url == url:
                return
            url = next_url

    async def get_stellar_txs(
        self, address: str, from_date: datetime, to_date: datetime | None = None
    ) -> List[LedgerTransaction]:
        """
        Account transactions in ``[from_date, to_date)``, newest first.

        Args:
            address: Stellar account id
            from_date: inclusive lower bound
            to_date: exclusive upper bound, now if ``None``

        Returns:
            Decoded transactions. Any failure gives an empty list, the same
            as an account without transactions.
        """
        from_date = as_utc(from_date)
        to_date = utc_now() if to_date is None else as_utc(to_date)
        passphrase = network_passphrase(self.is_prod)
        try:
            records = []
            async for page in self.iter_stellar_tx_pages(address, from_date):
                records.extend(page)

            out = []
            for record in records:
                created_at = parse_created_at(record["created_at"])
                if from_date <= created_at < to_date:
                    out.append(LedgerTransaction.from_record(record, passphrase))
            return out
        except Exception as err:
            logger.error(
                "Something went wrong getting the stellar transactions for {}: {!r}",
                short_address(address),
                err,
            )
            return []

    async def aclose(self):
        """
        Close the Horizon client if this service created it.
        An injected client is left to its owner.
        """
        horizon = self.__dict__.pop("horizon", None)
        if horizon is not None and self._horizon is None:
            await horizon.aclose()

    def clear_cache(self):
        """
        Delete all cached entries
        """
        self._cache.clear_cache()

    def _sum_account_balances(self, account: Dict[str, Any]) -> Decimal:
        total = Decimal(0)
        for item in account["balances"]:
            if item.get("asset_code") == STABLECOIN_CODE:
                total += Decimal(item["balance"])
        return total
