"""Handles passed to migration bodies."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncConnection

from migraplan import sql
from migraplan.schemas import Direction


class SchemaEditor:
    """Schema-modification interface bound to the step's transaction.

    Plain SQL goes through ``execute``; Alembic operations through ``run``::

        async def up(schema, context):
            await schema.run(lambda op: op.create_table(
                "people", sa.Column("id", sa.Integer, primary_key=True)))
    """

    def __init__(self, conn: AsyncConnection):
        self.connection = conn

    async def execute(self, statement: str, params: dict[str, Any] | None = None) -> None:
        await sql.execute(self.connection, statement, params)

    async def fetch_all(self, statement: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        return await sql.fetch_all(self.connection, statement, params)

    async def run(self, fn: Callable[[Operations], Any]) -> Any:
        def _call(sync_conn):
            return fn(Operations(MigrationContext.configure(sync_conn)))

        return await self.connection.run_sync(_call)

    async def table_names(self) -> list[str]:
        return await self.connection.run_sync(lambda c: inspect(c).get_table_names())


@dataclass(frozen=True)
class StepContext:
    identifier: str
    direction: Direction
    application: str
    connection: AsyncConnection
