from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, Dict
import json


class TokenTransfer:
    """
    ERC-20 transfer as returned by Blockscout-style explorers.

    Only the fields needed to walk a balance backwards are kept.
    """

    #: Sender address (stored lowercase)
    from_address: str
    #: Amount in smallest units
    value: int
    #: Unix time, seconds
    timestamp: int

    def __init__(self, from_address: str, value: int, timestamp: int):
        self.from_address = from_address.lower()
        self.value = value
        self.timestamp = timestamp

    @property
    def date(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)

    @property
    def millis(self) -> int:
        return self.timestamp * 1000

    @staticmethod
    def from_dict(dct: Dict[str, Any]) -> TokenTransfer:
        """
        Create :class:`TokenTransfer` from an explorer item
        (``{"from": ..., "value": "...", "timeStamp": "..."}``)
        """
        return TokenTransfer(
            from_address=dct["from"],
            value=int(dct["value"]),
            timestamp=int(dct["timeStamp"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert :class:`TokenTransfer` to the explorer shape
        """
        return {
            "from": self.from_address,
            "value": str(self.value),
            "timeStamp": str(self.timestamp),
        }

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f"TokenTransfer({json.dumps(self.to_dict())})"
