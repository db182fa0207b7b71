"""
Module for raw EVM access over web3: stablecoin balances and
date to block number resolution.

Nothing here is cached, see :mod:`stablefetch.balances` and
:mod:`stablefetch.blocks` for the caching layer.

Example:
    ::

        rpc = ChainRpc(w3s={137: Web3(Web3.HTTPProvider("https://polygon-rpc.com"))})
        block = rpc.get_block_number_at_or_before_date(datetime(2024, 1, 1), 137)
        balance = rpc.get_raw_balance("0x...", 137, block)
"""

from stablefetch.rpc.block import Block
from stablefetch.rpc.service import ChainRpc, ERC20_BALANCE_OF_ABI
