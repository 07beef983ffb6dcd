from __future__ import annotations

import inspect

import structlog
from sqlalchemy.ext.asyncio import AsyncEngine

from migraplan.cache import StateCache
from migraplan.catalog import VersionCatalog
from migraplan.editor import SchemaEditor, StepContext
from migraplan.loader import MigrationSource
from migraplan.schemas import NO_VERSION, UP, Action
from migraplan.state import AppliedState

log = structlog.get_logger(__name__)


class Executor:
    """Runs one planned action inside one database transaction.

    The migration body and the bookkeeping writes share the transaction:
    if either raises, schema changes and bookkeeping are rolled back
    together and the error propagates unchanged. Cached reads are cleared
    only after a successful commit.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        source: MigrationSource,
        catalog: VersionCatalog,
        state: AppliedState,
        cache: StateCache,
        application: str = "default",
    ):
        self.engine = engine
        self.source = source
        self.catalog = catalog
        self.state = state
        self.cache = cache
        self.application = application

    async def execute(self, action: Action) -> None:
        module = self.source.load(action.identifier)
        log.info("migration_step_start", version=action.identifier, direction=action.direction)

        try:
            async with self.engine.begin() as conn:
                schema = SchemaEditor(conn)
                context = StepContext(action.identifier, action.direction, self.application, conn)

                if action.direction == UP:
                    await _call(module.up, schema, context)
                    await self.state.mark_applied(action.identifier, conn)
                    await self.state.set_current(action.identifier, conn)
                else:
                    await _call(module.down, schema, context)
                    await self.state.unmark_applied(action.identifier, conn)
                    await self.state.set_current(self._previous(action.identifier), conn)
        except Exception as e:
            log.error(
                "migration_step_failed",
                version=action.identifier,
                direction=action.direction,
                error=str(e),
            )
            raise

        self.cache.clear()
        log.info("migration_step_done", version=action.identifier, direction=action.direction)

    def _previous(self, identifier: str) -> str:
        versions = self.catalog.load()
        try:
            index = versions.index(identifier)
        except ValueError:
            return NO_VERSION
        return versions[index - 1] if index >= 1 else NO_VERSION


async def _call(fn, schema: SchemaEditor, context: StepContext) -> None:
    result = fn(schema, context)
    if inspect.isawaitable(result):
        await result
