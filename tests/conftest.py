from __future__ import annotations

from pathlib import Path

import pytest
import pytest_asyncio
import sqlalchemy as sa

from migraplan.db import build_engine
from migraplan.loader import RegistrySource
from migraplan.migrator import Migrator

FILES = [
    "201601011200-AddPerson.py",
    "201601101200-AddName.py",
    "2016011012001-AddAge.py",
    "201602011403-AddAddress.py",
]
VERSIONS = [Path(f).stem for f in FILES]
TABLES = ["people", "names", "ages", "addresses"]


class TableStep:
    """Migration that creates one table on up and drops it on down."""

    def __init__(self, version: str, table: str, calls: list[tuple[str, str]]):
        self.version = version
        self.table = table
        self.calls = calls

    async def up(self, schema, context):
        assert context.identifier == self.version
        await schema.run(
            lambda op: op.create_table(self.table, sa.Column("id", sa.Integer, primary_key=True))
        )
        self.calls.append((self.version, "up"))

    async def down(self, schema, context):
        await schema.execute(f"DROP TABLE {self.table}")
        self.calls.append((self.version, "down"))


def ups(versions):
    return [(v, "up") for v in versions]


def downs(versions):
    return [(v, "down") for v in versions]


def tuples(plan):
    return [a.as_tuple() for a in plan]


async def table_names(engine) -> list[str]:
    async with engine.connect() as conn:
        return await conn.run_sync(lambda c: sa.inspect(c).get_table_names())


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'migrations.db'}")
    yield engine
    await engine.dispose()


@pytest.fixture
def calls() -> list[tuple[str, str]]:
    return []


@pytest.fixture
def steps(calls) -> dict[str, TableStep]:
    return {f: TableStep(v, t, calls) for f, v, t in zip(FILES, VERSIONS, TABLES)}


@pytest.fixture
def source(steps) -> RegistrySource:
    # Registered out of order; the catalog must sort them.
    return RegistrySource({f: steps[f] for f in reversed(FILES)})


@pytest.fixture
def migrator(engine, source) -> Migrator:
    return Migrator(engine, source, "myApplication")
