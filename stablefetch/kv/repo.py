from typing import Iterator, List
from stablefetch.core import Core
from stablefetch.kv.entry import KVEntry


class KVRepo(Core):
    """
    Reading and writing :class:`KVEntry` to database cache.

    The repo doesn't know about TTL semantics: it returns expired
    entries as well. Use :class:`stablefetch.kv.CacheService` for
    ``hget`` / ``hset`` / ``expire``.
    """

    def find(self, key: str, field: str | None = None) -> Iterator[KVEntry]:
        """
        Find entries under a key.

        Args:
            key: logical key
            field: only this field if given, all fields otherwise

        Returns:
            An iterator over found entries
        """
        if field is None:
            rows = self.conn.execute("SELECT * FROM kv WHERE key = ?", (key,))
        else:
            rows = self.conn.execute(
                "SELECT * FROM kv WHERE key = ? AND field = ?", (key, field)
            )
        return (KVEntry.from_row(r) for r in rows)

    def save(self, entries: List[KVEntry]):
        """
        Insert or replace a list of entries (value and expiration).

        Args:
            entries: List of entries to save
        """
        rows = [e.to_row() for e in entries]
        self.conn.executemany(
            "INSERT INTO kv VALUES(?,?,?,?) \
                ON CONFLICT(key, field) DO UPDATE SET \
                value = excluded.value, expires_at = excluded.expires_at",
            rows,
        )

    def set_expiration(self, key: str, expires_at: float | None):
        """
        Set expiration time for every field under the key.
        """
        self.conn.execute(
            "UPDATE kv SET expires_at = ? WHERE key = ?", (expires_at, key)
        )

    def delete(self, key: str, field: str):
        self.conn.execute("DELETE FROM kv WHERE key = ? AND field = ?", (key, field))

    def purge(self):
        """
        Clean all kv entries from the database cache.
        """
        self.conn.execute("DELETE FROM kv")

    def commit(self):
        self.conn.commit()

    def rollback(self):
        self.conn.rollback()
