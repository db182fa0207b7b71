"""
Module for fetching and caching stablecoin balances on EVM chains.

The main class of this module is :class:`BalancesService`.
It fetches balances over web3 and caches them for a day.

Example:
    ::

        from stablefetch.balances import BalancesService
        from stablefetch.chains import ChainKey, chain_for

        service = BalancesService.create()
        polygon = chain_for(ChainKey.POLYGON, is_prod=True)
        address = "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"

        await service.get_chain_balance(address, polygon)
        # => going for web3 rpc

        await service.get_chain_balance(address, polygon)
        # => serving from cache

        await service.get_chain_balance(address, polygon, datetime(2024, 1, 1))
        # => resolving the block number, then going for web3 rpc
"""

from stablefetch.balances.balance import ChainBalance
from stablefetch.balances.service import (
    BALANCE_TTL,
    BalancesService,
    balance_cache_key,
)
