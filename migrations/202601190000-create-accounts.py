"""202601190000 create accounts table

Create Date: 2026-01-19
"""

from __future__ import annotations

import sqlalchemy as sa


async def up(schema, context) -> None:
    await schema.run(
        lambda op: op.create_table(
            "accounts",
            sa.Column("id", sa.Integer, primary_key=True),
            sa.Column("email", sa.String(255), nullable=False, unique=True),
            sa.Column("created_at", sa.DateTime),
        )
    )


async def down(schema, context) -> None:
    await schema.run(lambda op: op.drop_table("accounts"))
