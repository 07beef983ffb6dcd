"""202601200000 add sessions table

Create Date: 2026-01-20
"""

from __future__ import annotations


async def up(schema, context) -> None:
    await schema.execute(
        """
        CREATE TABLE IF NOT EXISTS sessions (
          session_id VARCHAR(64) PRIMARY KEY,
          account_id INTEGER NOT NULL REFERENCES accounts(id),
          expires_at TIMESTAMP
        );
        """
    )


async def down(schema, context) -> None:
    await schema.execute("DROP TABLE IF EXISTS sessions;")
