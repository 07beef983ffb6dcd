from __future__ import annotations

import json
import re
from typing import Any

from sqlalchemy.ext.asyncio import AsyncConnection

from migraplan.sql import execute, fetch_all, fetch_one

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def check_table_name(table: str) -> str:
    if not _IDENTIFIER.match(table):
        raise ValueError(f"invalid bookkeeping table name: {table!r}")
    return table


async def ensure_meta_table(conn: AsyncConnection, table: str) -> None:
    await execute(
        conn,
        f"""
        CREATE TABLE IF NOT EXISTS {table} (
          meta_key VARCHAR(255) PRIMARY KEY,
          meta_value TEXT NOT NULL
        )
        """,
    )


async def get_or_default(conn: AsyncConnection, table: str, key: str, default: Any) -> Any:
    row = await fetch_one(
        conn,
        f"SELECT meta_value FROM {table} WHERE meta_key = :key",
        {"key": key},
    )
    if row is None:
        return default
    return json.loads(row["meta_value"])


async def put(conn: AsyncConnection, table: str, key: str, value: Any) -> None:
    await execute(
        conn,
        f"""
        INSERT INTO {table}(meta_key, meta_value)
        VALUES (:key, :value)
        ON CONFLICT (meta_key) DO UPDATE SET
          meta_value=EXCLUDED.meta_value
        """,
        {"key": key, "value": json.dumps(value)},
    )


async def delete(conn: AsyncConnection, table: str, key: str) -> None:
    await execute(conn, f"DELETE FROM {table} WHERE meta_key = :key", {"key": key})


async def all_with_prefix(conn: AsyncConnection, table: str, prefix: str) -> list[tuple[str, Any]]:
    """Return ``(key, value)`` pairs whose key starts with ``prefix``, prefix stripped."""
    rows = await fetch_all(
        conn,
        f"""
        SELECT meta_key, meta_value FROM {table}
        WHERE substr(meta_key, 1, :n) = :prefix
        ORDER BY meta_key
        """,
        {"n": len(prefix), "prefix": prefix},
    )
    return [(r["meta_key"][len(prefix):], json.loads(r["meta_value"])) for r in rows]
