from __future__ import annotations
import json
from typing import Any, Dict


class Block:
    """
    Block header data used for date -> block number resolution
    """

    #: Ethereum chain_id
    chain_id: int
    #: Block number
    number: int
    #: Block timestamp
    timestamp: int

    def __init__(self, chain_id: int, number: int, timestamp: int):
        self.chain_id = chain_id
        self.number = number
        self.timestamp = timestamp

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chainId": self.chain_id,
            "number": self.number,
            "timestamp": self.timestamp,
        }

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f"Block({json.dumps(self.to_dict())})"
