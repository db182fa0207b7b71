from __future__ import annotations

from datetime import datetime
from typing import Dict

from loguru import logger
from web3 import Web3
from web3.exceptions import BlockNotFound

from stablefetch.chains import STABLECOIN_ADDRESS
from stablefetch.core import Core
from stablefetch.rpc.block import Block
from stablefetch.utils import as_utc, short_address

web3_cache = {}

ERC20_BALANCE_OF_ABI = [
    {
        "constant": True,
        "inputs": [{"name": "_owner", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "balance", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    }
]


class ChainRpc(Core):
    """
    Raw, uncached access to EVM chains over web3.

    Implements the two calls the balance fetchers need:
    :meth:`get_raw_balance` and :meth:`get_block_number_at_or_before_date`.
    The calls are blocking; async services run them with
    :func:`asyncio.to_thread`.

    **Block resolution**

    Block numbers grow with timestamps, so the last block at or before a
    date is found with an interpolation search over ``[1, latest]``:

        1. Assume :math:`l` and :math:`r` are the left and right blocks with
           :math:`l_t \\le t < r_t`
        2. :math:`w = (t - l_t) / (r_t - l_t)`
        3. Sample block :math:`c_n = l_n \\cdot (1-w) + r_n \\cdot w`
        4. Replace :math:`l` or :math:`r` with :math:`c` and repeat
           until :math:`r_n - l_n = 1`

    Every other step samples the midpoint instead, which bounds the number
    of block fetches by roughly :math:`2 \\log_2 n` even when block times are
    uneven.

    Args:
        w3s: web3 instances by chain id (override ``settings.rpc_urls``)
        token_address: ERC-20 contract to query
        kwargs: Args for the :class:`stablefetch.core.Core`
    """

    _w3s: Dict[int, Web3]
    token_address: str

    def __init__(
        self,
        w3s: Dict[int, Web3] | None = None,
        token_address: str = STABLECOIN_ADDRESS,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._w3s = dict(w3s or {})
        self.token_address = token_address

    def w3(self, chain_id: int) -> Web3:
        """
        :class:`web3.Web3` instance for the chain
        """
        if chain_id in self._w3s:
            return self._w3s[chain_id]

        rpc = self.settings.rpc_urls.get(chain_id)
        if rpc is None:
            raise ValueError(
                f"Rpc url for chain {chain_id} is not set. \
                Use `STABLEFETCH_RPC_URLS` env variable or pass w3s explicitly"
            )

        if rpc not in web3_cache:
            web3_cache[rpc] = Web3(
                Web3.HTTPProvider(
                    rpc, request_kwargs={"timeout": self.settings.request_timeout}
                )
            )
        self._w3s[chain_id] = web3_cache[rpc]
        return self._w3s[chain_id]

    def get_raw_balance(
        self, address: str, chain_id: int, block_number: int | None = None
    ) -> int:
        """
        Stablecoin balance of an address in smallest units.

        Args:
            address: EVM address
            chain_id: Ethereum chain_id
            block_number: block for a historical balance, latest if ``None``

        Returns:
            Raw ERC-20 balance
        """
        w3 = self.w3(chain_id)
        contract = w3.eth.contract(
            address=Web3.to_checksum_address(self.token_address),
            abi=ERC20_BALANCE_OF_ABI,
        )
        block_identifier = "latest" if block_number is None else block_number
        balance = contract.functions.balanceOf(
            Web3.to_checksum_address(address)
        ).call(block_identifier=block_identifier)
        logger.debug(
            "Fetched balance of {} on chain {} at {}: {}",
            short_address(address),
            chain_id,
            block_identifier,
            balance,
        )
        return int(balance)

    def get_block_number_at_or_before_date(self, date: datetime, chain_id: int) -> int:
        """
        Number of the last block with a timestamp at or before ``date``.

        Args:
            date: point in time (naive datetimes are UTC)
            chain_id: Ethereum chain_id

        Returns:
            Block number; block 1 if the date predates the chain
        """
        timestamp = int(as_utc(date).timestamp())
        left_block = self._get_block(chain_id, 1)
        right_block = self._get_block(chain_id, "latest")

        if timestamp >= right_block.timestamp:
            return right_block.number
        if timestamp < left_block.timestamp:
            return left_block.number

        # invariant: left_block.timestamp <= timestamp < right_block.timestamp
        bisect = False
        while right_block.number - left_block.number > 1:
            if bisect:
                num = (left_block.number + right_block.number) // 2
            else:
                w = (timestamp - left_block.timestamp) / (
                    right_block.timestamp - left_block.timestamp
                )
                num = int((1 - w) * left_block.number + w * right_block.number)
                num = min(max(num, left_block.number + 1), right_block.number - 1)
            bisect = not bisect

            block = self._get_block(chain_id, num)
            if block.timestamp > timestamp:
                right_block = block
            else:
                left_block = block

        return left_block.number

    def _get_block(self, chain_id: int, number: int | str) -> Block:
        try:
            raw_block = self.w3(chain_id).eth.get_block(number)
        except BlockNotFound:
            raise ValueError(f"Block {number} not found on chain {chain_id}")
        return Block(chain_id, int(raw_block["number"]), int(raw_block["timestamp"]))
