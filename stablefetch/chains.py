"""
EVM chains where the stablecoin is tracked.

Each logical network has a production and a test variant, selected by
``Settings.is_prod``.

Example:
    ::

        chain = chain_for(ChainKey.POLYGON, is_prod=True)
        # => Chain({"name": "Polygon", "id": 137, "decimals": 18})
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Dict

#: Token symbol / Stellar asset code of the tracked stablecoin
STABLECOIN_CODE = "USDGLO"
#: ERC-20 contract of the stablecoin (same address on every EVM chain)
STABLECOIN_ADDRESS = "0x4F604735c1cF31399C6E711D5962b2B3E0225AD3"
EVM_DECIMALS = 18
STELLAR_DECIMALS = 7
#: Cache field and result label for the Stellar ledger
STELLAR_LABEL = "stellar"


class Chain:
    """
    EVM compatible network
    """

    #: Display name (lowercased, it's the cache field)
    name: str
    #: Ethereum chain_id
    id: int
    #: Stablecoin decimals on this chain
    decimals: int

    def __init__(self, name: str, id: int, decimals: int = EVM_DECIMALS):
        self.name = name
        self.id = id
        self.decimals = decimals

    @property
    def cache_field(self) -> str:
        return self.name.lower()

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert :class:`Chain` to dict
        """
        return {"name": self.name, "id": self.id, "decimals": self.decimals}

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __hash__(self):
        return hash((self.name, self.id))

    def __repr__(self):
        return f"Chain({json.dumps(self.to_dict())})"


class ChainKey(str, Enum):
    """
    Logical networks. The order is the order of the fan-out.
    """

    POLYGON = "polygon"
    ETHEREUM = "ethereum"
    CELO = "celo"
    OPTIMISM = "optimism"
    ARBITRUM = "arbitrum"
    BASE = "base"


PROD_CHAINS: Dict[ChainKey, Chain] = {
    ChainKey.POLYGON: Chain("Polygon", 137),
    ChainKey.ETHEREUM: Chain("Ethereum", 1),
    ChainKey.CELO: Chain("Celo", 42220),
    ChainKey.OPTIMISM: Chain("OP Mainnet", 10),
    ChainKey.ARBITRUM: Chain("Arbitrum One", 42161),
    ChainKey.BASE: Chain("Base", 8453),
}

TEST_CHAINS: Dict[ChainKey, Chain] = {
    ChainKey.POLYGON: Chain("Polygon Mumbai", 80001),
    ChainKey.ETHEREUM: Chain("Goerli", 5),
    ChainKey.CELO: Chain("Alfajores", 44787),
    ChainKey.OPTIMISM: Chain("OP Sepolia", 11155420),
    ChainKey.ARBITRUM: Chain("Arbitrum Sepolia", 421614),
    ChainKey.BASE: Chain("Base Sepolia", 84532),
}


def chain_for(key: ChainKey, is_prod: bool) -> Chain:
    """
    Production or test variant of a logical network
    """
    return (PROD_CHAINS if is_prod else TEST_CHAINS)[key]

