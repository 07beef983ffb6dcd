"""Prefix-namespaced key-value bookkeeping on top of ``repo.meta``."""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from migraplan.repo import meta


class KeyValueStore:
    """A view of the bookkeeping table restricted to keys under ``prefix``.

    Every operation accepts an optional ``conn``. When given, the statement
    runs on it and becomes part of the caller's transaction; otherwise the
    store opens and commits a short transaction of its own.
    """

    def __init__(self, engine: AsyncEngine, table: str = "migration_meta", prefix: str = ""):
        self.engine = engine
        self.table = meta.check_table_name(table)
        self.key_prefix = prefix

    def prefix(self, sub: str) -> KeyValueStore:
        return KeyValueStore(self.engine, self.table, self.key_prefix + sub)

    @asynccontextmanager
    async def _connection(self, conn: AsyncConnection | None) -> AsyncIterator[AsyncConnection]:
        if conn is not None:
            yield conn
            return
        async with self.engine.begin() as own:
            yield own

    async def create_table(self) -> None:
        async with self._connection(None) as conn:
            await meta.ensure_meta_table(conn, self.table)

    async def get_or_default(self, key: str, default: Any, conn: AsyncConnection | None = None) -> Any:
        async with self._connection(conn) as c:
            return await meta.get_or_default(c, self.table, self.key_prefix + key, default)

    async def put(self, key: str, value: Any, conn: AsyncConnection | None = None) -> None:
        async with self._connection(conn) as c:
            await meta.put(c, self.table, self.key_prefix + key, value)

    async def delete(self, key: str, conn: AsyncConnection | None = None) -> None:
        async with self._connection(conn) as c:
            await meta.delete(c, self.table, self.key_prefix + key)

    async def all(self, conn: AsyncConnection | None = None) -> list[tuple[str, Any]]:
        async with self._connection(conn) as c:
            return await meta.all_with_prefix(c, self.table, self.key_prefix)
