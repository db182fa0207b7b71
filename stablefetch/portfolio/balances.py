from __future__ import annotations
from typing import Any, Dict
import json

from stablefetch.chains import ChainKey, STELLAR_LABEL

#: Per-chain fields of :class:`Balances`, in output order
BALANCE_FIELDS = [f"{key.value}_balance" for key in ChainKey] + [
    f"{STELLAR_LABEL}_balance"
]


def _camel(field: str) -> str:
    head, *rest = field.split("_")
    return head + "".join(word.capitalize() for word in rest)


class Balances:
    """
    Aggregated stablecoin holdings of one address.

    ``total_balance`` is in whole tokens (truncated), the per-chain
    balances are in smallest units of their chain (18 decimals on EVM,
    7 on Stellar).
    """

    #: Sum over chains in whole tokens
    total_balance: int
    polygon_balance: int
    ethereum_balance: int
    celo_balance: int
    optimism_balance: int
    arbitrum_balance: int
    base_balance: int
    stellar_balance: int

    def __init__(self, total_balance: int = 0, **chain_balances: int):
        unknown = set(chain_balances) - set(BALANCE_FIELDS)
        if unknown:
            raise TypeError(f"Unknown balance fields: {sorted(unknown)}")
        self.total_balance = total_balance
        for field in BALANCE_FIELDS:
            setattr(self, field, chain_balances.get(field, 0))
        self._detailed = len(chain_balances) > 0

    @staticmethod
    def from_dict(dct: Dict[str, Any]) -> Balances:
        """
        Create :class:`Balances` from the camelCase dict of :meth:`to_dict`
        """
        chain_balances = {
            field: int(dct[_camel(field)])
            for field in BALANCE_FIELDS
            if _camel(field) in dct
        }
        return Balances(int(dct["totalBalance"]), **chain_balances)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert :class:`Balances` to a camelCase dict (``totalBalance``,
        ``polygonBalance``, ...). Without per-chain data only
        ``totalBalance`` is present.
        """
        out: Dict[str, Any] = {"totalBalance": self.total_balance}
        if self._detailed:
            for field in BALANCE_FIELDS:
                out[_camel(field)] = getattr(self, field)
        return out

    def __eq__(self, other):
        if type(other) is type(self):
            return self.to_dict() == other.to_dict()
        return False

    def __repr__(self):
        return f"Balances({json.dumps(self.to_dict())})"
