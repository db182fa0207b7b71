"""
Module for resolving and caching block numbers by calendar date.

The main class of this module is :class:`BlocksService`.

Example:
    ::

        service = BlocksService.create()
        polygon = chain_for(ChainKey.POLYGON, is_prod=True)

        await service.get_chain_block_number(datetime(2024, 1, 1), polygon)
        # => going for web3 rpc

        await service.get_chain_block_number(datetime(2024, 1, 1, 18), polygon)
        # => serving from cache, same UTC date
"""

from stablefetch.blocks.service import (
    BLOCK_NUMBER_TTL,
    BlocksService,
    block_number_cache_key,
)
