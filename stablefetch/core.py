"""
Implements :class:`Core` that is used in other modules.
"""

from __future__ import annotations

import time
from functools import cached_property
from sqlite3 import Connection
from typing import Callable

from stablefetch.config import Settings, get_settings
from stablefetch.db import connection_from_path

db_cache = {}


class Core:
    """
    A base class for any class that wants to use the settings
    or the sqlite3 cache database.

    Resources are instantiated on demand. A service that never touches
    the cache never opens the database, so this class is
    lightweight and safe to derive from any other class.

    **Caching**

    The sqlite3 connection is cached by the OS path of the database.
    All cache access happens on the thread running the event loop, so
    a single connection per path is enough.

    Args:
        settings: configuration (``None`` loads it from the environment)
        cache_path: OS path to the cache database (overrides ``settings.cache_path``)
        conn: an instance of database connection (overrides cache_path)
        clock: callable returning the current unix time in seconds
    """

    #: OS path to the cache database.
    #: Can be ``None`` if :class:`sqlite3.Connection` is injected directly.
    cache_path: str | None
    clock: Callable[[], float]

    def __init__(
        self,
        settings: Settings | None = None,
        cache_path: str | None = None,
        conn: Connection | None = None,
        clock: Callable[[], float] | None = None,
        **kwargs,
    ):
        self._settings = settings
        self.cache_path = cache_path
        self._conn = conn
        self.clock = clock or time.time

    @cached_property
    def settings(self) -> Settings:
        """
        :class:`stablefetch.config.Settings` for this instance
        """
        if self._settings is not None:
            return self._settings
        return get_settings()

    @property
    def is_prod(self) -> bool:
        return self.settings.is_prod

    @cached_property
    def conn(self) -> Connection:
        """
        :class:`sqlite3.Connection` to a database cache
        """
        if self._conn is not None:
            return self._conn

        if self.cache_path is None:
            self.cache_path = self.settings.cache_path

        if not self.cache_path:
            raise ValueError(
                "Cache database path is not set. \
                Use `STABLEFETCH_CACHE_PATH` env variable or pass cache_path explicitly"
            )

        if self.cache_path not in db_cache:
            db_cache[self.cache_path] = connection_from_path(self.cache_path)

        return db_cache[self.cache_path]

