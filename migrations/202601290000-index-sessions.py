"""202601290000 index sessions by account

Create Date: 2026-01-29
"""

from __future__ import annotations


async def up(schema, context) -> None:
    await schema.execute("CREATE INDEX IF NOT EXISTS ix_sessions_account ON sessions (account_id);")


async def down(schema, context) -> None:
    await schema.execute("DROP INDEX IF EXISTS ix_sessions_account;")
