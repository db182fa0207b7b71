from __future__ import annotations
from sqlite3 import Error as SqliteError
from typing import Dict

from loguru import logger

from stablefetch.core import Core
from stablefetch.kv.entry import KVEntry
from stablefetch.kv.repo import KVRepo


class CacheService(Core):
    """
    Hash-field cache with key TTL, in the spirit of Redis ``HGET`` /
    ``HSET`` / ``EXPIRE``.

    The cache is a best-effort side channel: a failing read is reported
    as a miss and a failing write is logged and dropped, so callers can
    always fall back to the network.

    **Semantics**

    - An expired field reads as missing and is deleted lazily.
    - ``hset`` keeps the current TTL of a live key. Fields written
      under an expired key start without a TTL.
    - ``expire`` applies to every field under the key.
    - There's no atomicity between ``hset`` and ``expire``; a key can
      briefly exist without a TTL.

    Args:
        kv_repo: An instance of :class:`KVRepo`
        kwargs: Args for the :class:`stablefetch.core.Core`
    """

    _kv_repo: KVRepo

    def __init__(self, kv_repo: KVRepo, **kwargs):
        super().__init__(**kwargs)
        self._kv_repo = kv_repo

    @staticmethod
    def create(**kwargs) -> CacheService:
        """
        Create an instance of :class:`CacheService`

        Args:
            kwargs: Args for the :class:`stablefetch.core.Core`

        Returns:
            An instance of :class:`CacheService`
        """
        kv_repo = KVRepo(**kwargs)
        return CacheService(kv_repo, **kwargs)

    def hget(self, key: str, field: str) -> str | None:
        """
        Get a field under a key.

        Returns:
            Stored value, ``None`` if missing, expired or the cache is unavailable
        """
        try:
            entry = next(iter(self._kv_repo.find(key, field)), None)
            if entry is None:
                return None
            if entry.is_expired(self._kv_repo.clock()):
                self._kv_repo.delete(key, field)
                self._kv_repo.commit()
                return None
            return entry.value
        except SqliteError as err:
            logger.warning("Cache read failed for {}/{}: {}", key, field, err)
            return None

    def get_int(self, key: str, field: str) -> int | None:
        """
        Same as :meth:`hget`, parsed as an integer. Unparsable values are misses.
        """
        value = self.hget(key, field)
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            logger.warning("Ignoring malformed cache value for {}/{}: {!r}", key, field, value)
            return None

    def hset(self, key: str, mapping: Dict[str, str]) -> bool:
        """
        Set fields under a key.

        Returns:
            ``True`` if the value was persisted
        """
        try:
            expires_at = self._key_expiration(key)
            self._kv_repo.save(
                [KVEntry(key, field, str(v), expires_at) for field, v in mapping.items()]
            )
            self._kv_repo.commit()
            return True
        except SqliteError as err:
            logger.warning("Cache write failed for {}: {}", key, err)
            self._rollback()
            return False

    def expire(self, key: str, ttl: int) -> bool:
        """
        Set TTL (seconds) for all fields under the key.

        Returns:
            ``True`` if the TTL was persisted
        """
        try:
            self._kv_repo.set_expiration(key, self._kv_repo.clock() + ttl)
            self._kv_repo.commit()
            return True
        except SqliteError as err:
            logger.warning("Cache expire failed for {}: {}", key, err)
            self._rollback()
            return False

    def set_with_ttl(self, key: str, field: str, value: str, ttl: int) -> bool:
        """
        ``hset`` followed by ``expire``.
        """
        return self.hset(key, {field: value}) and self.expire(key, ttl)

    def clear_cache(self):
        """
        Delete all cached entries
        """
        self._kv_repo.purge()
        self._kv_repo.commit()

    def _key_expiration(self, key: str) -> float | None:
        now = self._kv_repo.clock()
        for entry in self._kv_repo.find(key):
            if not entry.is_expired(now):
                return entry.expires_at
        return None

    def _rollback(self):
        try:
            self._kv_repo.rollback()
        except SqliteError as err:
            logger.warning("Cache rollback failed: {}", err)
