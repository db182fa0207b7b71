from __future__ import annotations

import asyncio
from datetime import datetime

from loguru import logger

from stablefetch.balances.balance import ChainBalance
from stablefetch.blocks import BlocksService
from stablefetch.chains import Chain
from stablefetch.core import Core
from stablefetch.kv import CacheService
from stablefetch.rpc import ChainRpc
from stablefetch.utils import short_address, utc_date

#: Balances are refreshed daily
BALANCE_TTL = 60 * 60 * 24


def balance_cache_key(address: str, date: datetime | None) -> str:
    return f"balance-{address}-{utc_date(date)}"


class BalancesService(Core):
    """
    Service for getting and caching stablecoin balances on EVM chains.

    **Request - Response flow**

    ::

                +-----------------+    +---------------+ +----------+ +--------------+
                | BalancesService |    | BlocksService | | ChainRpc | | CacheService |
                +-----------------+    +---------------+ +----------+ +--------------+
        ---------------  |                      |              |             |
        | Request call |-|                      |              |             |
        |--------------| |                      |              |             |
                         | hget(address-date, chain)           |             |
                         |---------------------------------------------------->|
                         |                      |              |             |
                         | If miss and date: resolve block     |             |
                         |--------------------->|              |             |
                         |                      |              |             |
                         | If miss: fetch balance              |             |
                         |------------------------------------>|             |
                         |                      |              |             |
                         | hset + expire(24h)   |              |             |
                         |---------------------------------------------------->|
            -----------  |                      |              |             |
            | Response |-|                      |              |             |
            |----------| |                      |              |             |

    A failure of the rpc (or of block resolution) never propagates: it's
    logged and the balance is reported as zero, so that one unavailable
    chain doesn't break the aggregate.

    Args:
        cache: An instance of :class:`stablefetch.kv.CacheService`
        blocks_service: An instance of :class:`stablefetch.blocks.BlocksService`
        rpc: An instance of :class:`stablefetch.rpc.ChainRpc`
        kwargs: Args for the :class:`stablefetch.core.Core`
    """

    _cache: CacheService
    _blocks_service: BlocksService
    _rpc: ChainRpc

    def __init__(
        self,
        cache: CacheService,
        blocks_service: BlocksService,
        rpc: ChainRpc,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._cache = cache
        self._blocks_service = blocks_service
        self._rpc = rpc

    @staticmethod
    def create(**kwargs) -> BalancesService:
        """
        Create an instance of :class:`BalancesService`

        Args:
            kwargs: Args for the :class:`stablefetch.core.Core` and
                    :class:`stablefetch.rpc.ChainRpc`

        Returns:
            An instance of :class:`BalancesService`
        """
        cache = CacheService.create(**kwargs)
        rpc = ChainRpc(**kwargs)
        blocks_service = BlocksService(cache, rpc, **kwargs)
        return BalancesService(cache, blocks_service, rpc, **kwargs)

    async def get_chain_balance(
        self, address: str, chain: Chain, on_date: datetime | None = None
    ) -> int:
        """
        Stablecoin balance of an address on a chain.

        Args:
            address: EVM address
            chain: EVM chain
            on_date: date of a historical balance, current balance if ``None``

        Returns:
            Balance in smallest units, ``0`` if it couldn't be fetched
        """
        key = balance_cache_key(address, on_date)
        cached = self._cache.get_int(key, chain.cache_field)
        if cached is not None:
            return cached

        logger.debug(
            "Balance cache miss for {} on {}", short_address(address), chain.name
        )
        try:
            balance = await asyncio.wait_for(
                self._fetch_balance(address, chain, on_date),
                timeout=self.settings.chain_timeout,
            )
        except Exception as err:
            logger.warning(
                "Can't fetch balance for {} on {}: {!r}",
                short_address(address),
                chain.name,
                err,
            )
            return 0

        self._cache.set_with_ttl(key, chain.cache_field, str(balance), BALANCE_TTL)
        return balance

    async def get_chain_balance_item(
        self, address: str, chain: Chain, on_date: datetime | None = None
    ) -> ChainBalance:
        """
        Same as :meth:`get_chain_balance`, wrapped into :class:`ChainBalance`
        """
        balance = await self.get_chain_balance(address, chain, on_date)
        return ChainBalance(chain.cache_field, address, utc_date(on_date), balance)

    def clear_cache(self):
        """
        Delete all cached entries
        """
        self._cache.clear_cache()

    async def _fetch_balance(
        self, address: str, chain: Chain, on_date: datetime | None
    ) -> int:
        if on_date is None:
            return await asyncio.to_thread(
                self._rpc.get_raw_balance, address, chain.id
            )
        block_number = await self._blocks_service.get_chain_block_number(
            on_date, chain
        )
        return await asyncio.to_thread(
            self._rpc.get_raw_balance, address, chain.id, block_number
        )
