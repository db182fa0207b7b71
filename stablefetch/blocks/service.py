from __future__ import annotations

import asyncio
from datetime import datetime

from loguru import logger

from stablefetch.chains import Chain
from stablefetch.core import Core
from stablefetch.kv import CacheService
from stablefetch.rpc import ChainRpc
from stablefetch.utils import utc_date

#: Resolved block numbers never change, keep them for half a year
BLOCK_NUMBER_TTL = 60 * 60 * 24 * 183


def block_number_cache_key(date: datetime) -> str:
    return f"blocknumber-{utc_date(date)}"


class BlocksService(Core):
    """
    Service for resolving and caching the block number of a calendar date.

    **Request/Response flow**

    ::

                +---------------+             +----------+ +--------------+
                | BlocksService |             | ChainRpc | | CacheService |
                +---------------+             +----------+ +--------------+
        -----------------  |                        |             |
        | Request block  |-|                        |             |
        |----------------| |                        |             |
                           | hget(date, chain)      |             |
                           |------------------------------------->|
                           |                        |             |
                           | If miss: resolve       |             |
                           |----------------------->|             |
                           |                        |             |
                           | hset + expire(183d)    |             |
                           |------------------------------------->|
              -----------  |                        |             |
              | Response |-|                        |             |
              |----------| |                        |             |

    The key only carries the UTC date, the field is the chain name. So
    all balances of all addresses on a given day share one resolution per
    chain.

    Args:
        cache: An instance of :class:`stablefetch.kv.CacheService`
        rpc: An instance of :class:`stablefetch.rpc.ChainRpc`
        kwargs: Args for the :class:`stablefetch.core.Core`
    """

    _cache: CacheService
    _rpc: ChainRpc

    def __init__(self, cache: CacheService, rpc: ChainRpc, **kwargs):
        super().__init__(**kwargs)
        self._cache = cache
        self._rpc = rpc

    @staticmethod
    def create(**kwargs) -> BlocksService:
        """
        Create an instance of :class:`BlocksService`

        Args:
            kwargs: Args for the :class:`stablefetch.core.Core` and
                    :class:`stablefetch.rpc.ChainRpc`

        Returns:
            An instance of :class:`BlocksService`
        """
        cache = CacheService.create(**kwargs)
        rpc = ChainRpc(**kwargs)
        return BlocksService(cache, rpc, **kwargs)

    async def get_chain_block_number(self, date: datetime, chain: Chain) -> int:
        """
        Block number at or before ``date`` on ``chain``.

        Args:
            date: point in time; only its UTC date is used for the cache key
            chain: EVM chain

        Returns:
            Block number

        Raises:
            Any error of the underlying rpc
        """
        key = block_number_cache_key(date)
        cached = self._cache.get_int(key, chain.cache_field)
        if cached is not None:
            return cached

        logger.debug("Resolving block number for {} on {}", utc_date(date), chain.name)
        block_number = await asyncio.to_thread(
            self._rpc.get_block_number_at_or_before_date, date, chain.id
        )
        self._cache.set_with_ttl(
            key, chain.cache_field, str(block_number), BLOCK_NUMBER_TTL
        )
        return block_number

    def clear_cache(self):
        """
        Delete all cached entries
        """
        self._cache.clear_cache()
