from __future__ import annotations
from typing import Any, Dict, Tuple
import json


class KVEntry:
    """
    A single ``(key, field) -> value`` cache entry.
    """

    #: Logical key, e.g. ``balance-0xabc...-2024-01-01``
    key: str
    #: Field under the key, e.g. the chain name
    field: str
    #: Serialized value
    value: str
    #: Unix time (seconds) when the entry expires, ``None`` if no TTL is set
    expires_at: float | None

    def __init__(
        self, key: str, field: str, value: str, expires_at: float | None = None
    ):
        self.key = key
        self.field = field
        self.value = value
        self.expires_at = expires_at

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and self.expires_at <= now

    @staticmethod
    def from_row(row: Tuple[str, str, str, float | None]) -> KVEntry:
        """
        Deserialize from database row

        Args:
            row: database row
        """
        return KVEntry(*row)

    def to_row(self) -> Tuple[str, str, str, float | None]:
        """
        Serialize to database row

        Returns:
            database row
        """
        return (self.key, self.field, self.value, self.expires_at)

    @staticmethod
    def from_dict(dct: Dict[str, Any]) -> KVEntry:
        """
        Create :class:`KVEntry` from dict
        """
        return KVEntry(
            key=dct["key"],
            field=dct["field"],
            value=dct["value"],
            expires_at=dct["expiresAt"],
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert :class:`KVEntry` to dict
        """
        return {
            "key": self.key,
            "field": self.field,
            "value": self.value,
            "expiresAt": self.expires_at,
        }

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f"KVEntry({json.dumps(self.to_dict())})"
