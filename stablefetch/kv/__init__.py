"""
Module for the hash-field TTL cache shared by all fetchers.

The main class of this module is :class:`CacheService`.

Example:
    ::

        from stablefetch.kv import CacheService

        cache = CacheService.create(cache_path="cache.sqlite3")
        cache.hset("balance-0xabc-", {"polygon": "1000"})
        cache.expire("balance-0xabc-", 60 * 60 * 24)

        cache.hget("balance-0xabc-", "polygon")
        # => "1000"

        cache.hget("balance-0xabc-", "celo")
        # => None, the field is not cached for this chain yet
"""

from stablefetch.kv.entry import KVEntry
from stablefetch.kv.repo import KVRepo
from stablefetch.kv.service import CacheService
