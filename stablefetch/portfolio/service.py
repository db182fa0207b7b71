from __future__ import annotations

import asyncio
from datetime import datetime

from loguru import logger

from stablefetch.balances import BalancesService
from stablefetch.blocks import BlocksService
from stablefetch.chains import (
    EVM_DECIMALS,
    STELLAR_DECIMALS,
    ChainKey,
    chain_for,
)
from stablefetch.config import Settings
from stablefetch.core import Core
from stablefetch.kv import CacheService
from stablefetch.ledger import LedgerService
from stablefetch.portfolio.balances import Balances
from stablefetch.rpc import ChainRpc
from stablefetch.utils import is_evm_address, short_address, to_human


class PortfolioService(Core):
    """
    Entry point for the stablecoin holdings of an address.

    The address format alone selects the data source:

    - ``0x...`` addresses are looked up on all six EVM chains in
      parallel and summed,
    - anything else is treated as a Stellar account.

    The two paths are mutually exclusive. Outside of production no
    upstream or cache is touched and the total is ``0``.

    Args:
        balances_service: An instance of :class:`stablefetch.balances.BalancesService`
        ledger_service: An instance of :class:`stablefetch.ledger.LedgerService`
        kwargs: Args for the :class:`stablefetch.core.Core`
    """

    _balances_service: BalancesService
    _ledger_service: LedgerService

    def __init__(
        self,
        balances_service: BalancesService,
        ledger_service: LedgerService,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._balances_service = balances_service
        self._ledger_service = ledger_service

    @staticmethod
    def create(**kwargs) -> PortfolioService:
        """
        Create an instance of :class:`PortfolioService` with all the
        services sharing one cache.

        Args:
            kwargs: Args for the :class:`stablefetch.core.Core`,
                    :class:`stablefetch.rpc.ChainRpc` and
                    :class:`stablefetch.ledger.LedgerService`

        Returns:
            An instance of :class:`PortfolioService`
        """
        cache = CacheService.create(**kwargs)
        rpc = ChainRpc(**kwargs)
        blocks_service = BlocksService(cache, rpc, **kwargs)
        balances_service = BalancesService(cache, blocks_service, rpc, **kwargs)
        ledger_service = LedgerService(cache, **kwargs)
        return PortfolioService(balances_service, ledger_service, **kwargs)

    async def get_balances(
        self, address: str, on_date: datetime | None = None
    ) -> Balances:
        """
        Stablecoin holdings of an address.

        Args:
            address: EVM or Stellar address
            on_date: date of a historical snapshot, current if ``None``

        Returns:
            :class:`Balances`, with ``total_balance`` in whole tokens
        """
        if not self.is_prod:
            return Balances(total_balance=0)

        try:
            if is_evm_address(address):
                return await self._get_evm_balances(address, on_date)
            return await self._get_stellar_balances(address, on_date)
        except Exception:
            logger.exception("Can't aggregate balances for {}", short_address(address))
            return Balances(total_balance=0)

    async def aclose(self):
        """
        Release the http resources of the underlying services
        """
        await self._ledger_service.aclose()

    async def __aenter__(self) -> PortfolioService:
        return self

    async def __aexit__(self, exc_type, exc_value, traceback):
        await self.aclose()

    async def _get_evm_balances(
        self, address: str, on_date: datetime | None
    ) -> Balances:
        keys = list(ChainKey)
        results = await asyncio.gather(
            *[
                self._balances_service.get_chain_balance(
                    address, chain_for(key, self.is_prod), on_date
                )
                for key in keys
            ]
        )
        chain_balances = {
            f"{key.value}_balance": balance for key, balance in zip(keys, results)
        }
        total = to_human(sum(results), EVM_DECIMALS)
        logger.debug("Total EVM balance of {}: {}", short_address(address), total)
        return Balances(total, stellar_balance=0, **chain_balances)

    async def _get_stellar_balances(
        self, address: str, on_date: datetime | None
    ) -> Balances:
        stellar_balance = await self._ledger_service.get_stellar_balance(
            address, on_date
        )
        zeros = {f"{key.value}_balance": 0 for key in ChainKey}
        total = to_human(stellar_balance, STELLAR_DECIMALS)
        return Balances(total, stellar_balance=stellar_balance, **zeros)


async def get_balances(
    address: str, on_date: datetime | None = None, settings: Settings | None = None
) -> Balances:
    """
    Shortcut for :meth:`PortfolioService.get_balances` on a short-lived service.
    """
    async with PortfolioService.create(settings=settings) as service:
        return await service.get_balances(address, on_date)
