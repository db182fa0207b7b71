from __future__ import annotations
from typing import Any, Dict
import json


class ChainBalance:
    """
    ChainBalance represents a snapshot of the stablecoin balance on one chain.
    """

    #: Cache field of the chain (lowercased chain name or ``stellar``)
    chain: str
    #: The address for the balance (as given, Stellar addresses are case sensitive)
    address: str
    #: UTC date of the snapshot (``YYYY-MM-DD``), empty string for "current"
    date: str
    #: Balance in smallest units
    balance: int

    def __init__(self, chain: str, address: str, date: str, balance: int):
        self.chain = chain
        self.address = address
        self.date = date
        self.balance = balance

    @staticmethod
    def from_dict(dct: Dict[str, Any]) -> ChainBalance:
        """
        Create :class:`ChainBalance` from dict
        """
        return ChainBalance(
            chain=dct["chain"],
            address=dct["address"],
            date=dct["date"],
            balance=int(dct["balance"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert :class:`ChainBalance` to dict. The balance is a string
        since it doesn't fit a json number.
        """
        return {
            "chain": self.chain,
            "address": self.address,
            "date": self.date,
            "balance": str(self.balance),
        }

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f"ChainBalance({json.dumps(self.to_dict())})"
