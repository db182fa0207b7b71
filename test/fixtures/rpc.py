import threading
import time
from datetime import datetime
from typing import Any, Dict, Iterable

import pytest
from web3.exceptions import BlockNotFound

from fixtures.general import INITIAL_TIME

LATEST_BLOCK = 1_000_000
FIRST_BLOCK_TIME = INITIAL_TIME - 5_000_000
BLOCK_TIME = 12


class RpcMock:
    """
    In-memory replacement of :class:`stablefetch.rpc.ChainRpc`.

    The balance on a chain is ``balances[chain_id]`` for the latest block
    and ``balances[chain_id] + block_number`` for historical blocks.
    """

    number_of_balances: int
    number_of_block_resolutions: int

    def __init__(
        self,
        balances: Dict[int, int] | None = None,
        failing_chains: Iterable[int] = (),
        delay: float = 0,
    ):
        self.balances = balances or {}
        self.failing_chains = set(failing_chains)
        self.delay = delay
        self.number_of_balances = 0
        self.number_of_block_resolutions = 0
        self._lock = threading.Lock()

    def get_raw_balance(
        self, address: str, chain_id: int, block_number: int | None = None
    ) -> int:
        with self._lock:
            self.number_of_balances += 1
        if self.delay:
            time.sleep(self.delay)
        if chain_id in self.failing_chains:
            raise ConnectionError(f"rpc for chain {chain_id} is down")
        base = self.balances.get(chain_id, 0)
        if block_number is None:
            return base
        return base + block_number

    def get_block_number_at_or_before_date(self, date: datetime, chain_id: int) -> int:
        with self._lock:
            self.number_of_block_resolutions += 1
        if chain_id in self.failing_chains:
            raise ConnectionError(f"rpc for chain {chain_id} is down")
        return (int(date.timestamp()) - INITIAL_TIME) // 60 + 1000


class ContractCallMock:
    def __init__(self, w3: "Web3Mock", owner: str):
        self._w3 = w3
        self._owner = owner

    def call(self, block_identifier: int | str = "latest") -> int:
        self._w3.number_of_balances += 1
        number = LATEST_BLOCK if block_identifier == "latest" else block_identifier
        return int(self._owner[2:], 16) % 1000 + number * 10


class ContractFunctionsMock:
    def __init__(self, w3: "Web3Mock"):
        self._w3 = w3

    def balanceOf(self, owner: str) -> ContractCallMock:
        return ContractCallMock(self._w3, owner)


class ContractMock:
    def __init__(self, w3: "Web3Mock", address: str):
        self.address = address
        self.functions = ContractFunctionsMock(w3)


class Web3Mock:
    """
    Chain with ``LATEST_BLOCK`` blocks, one every ``BLOCK_TIME`` seconds
    """

    number_of_blocks: int
    number_of_balances: int

    def __init__(self):
        self.number_of_blocks = 0
        self.number_of_balances = 0

    @property
    def eth(self):
        return self

    def contract(self, address: str, abi: Any) -> ContractMock:
        return ContractMock(self, address)

    def get_block(self, num: int | str) -> Dict[str, Any]:
        self.number_of_blocks += 1
        if num == "latest":
            num = LATEST_BLOCK
        if num > LATEST_BLOCK:
            raise BlockNotFound()
        if num < 1:
            raise ValueError("Should never query block 0")
        return {"number": num, "timestamp": FIRST_BLOCK_TIME + num * BLOCK_TIME}


@pytest.fixture
def rpc_mock() -> RpcMock:
    """
    Rpc with 1 token on Polygon and 2 tokens on Base (prod chain ids)
    """
    return RpcMock({137: 10**18, 8453: 2 * 10**18})


@pytest.fixture
def w3_mock() -> Web3Mock:
    return Web3Mock()
