from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncEngine

from migraplan.cache import StateCache
from migraplan.catalog import VersionCatalog
from migraplan.errors import DataLossError
from migraplan.executor import Executor
from migraplan.loader import MigrationSource
from migraplan.planner import Target, plan_down, plan_up
from migraplan.schemas import DOWN, Action
from migraplan.state import AppliedState
from migraplan.store import KeyValueStore

log = structlog.get_logger(__name__)


class Migrator:
    """Brings a database to a target version, one transactional step at a time.

    Parameters
    ----------
    engine
        Async engine of the database being migrated. Bookkeeping lives in
        ``meta_table`` of the same database.
    source
        Lists the available identifiers and loads their modules.
    application
        Namespace for bookkeeping keys, so several applications can share
        one table.

    One instance owns its cache; running two instances against the same
    database at the same time is not supported.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        source: MigrationSource,
        application: str = "default",
        *,
        meta_table: str = "migration_meta",
    ):
        self.engine = engine
        self.application = application
        self.cache = StateCache()
        self.store = KeyValueStore(engine, meta_table, f"migration:{application}:")
        self.catalog = VersionCatalog(source, self.cache)
        self.state = AppliedState.from_store(self.store, self.cache)
        self.executor = Executor(engine, source, self.catalog, self.state, self.cache, application)
        self._ready = False

    async def _ensure_ready(self) -> None:
        if not self._ready:
            await self.store.create_table()
            self._ready = True

    def clear_cache(self) -> None:
        self.cache.clear()

    async def current(self) -> str:
        await self._ensure_ready()
        return await self.state.current_version()

    async def applied(self) -> list[str]:
        await self._ensure_ready()
        return list(await self.state.applied_versions())

    async def list_up(self, to: Target = None) -> list[Action]:
        await self._ensure_ready()
        plan = plan_up(self.catalog.load(), await self.state.applied_versions(), to)
        log.debug("plan_computed", kind="up", target=to, actions=len(plan))
        return plan

    async def list_down(self, to: Target = None) -> list[Action]:
        await self._ensure_ready()
        plan = plan_down(self.catalog.load(), await self.state.applied_versions(), to)
        log.debug("plan_computed", kind="down", target=to, actions=len(plan))
        return plan

    async def execute(self, action: Action) -> None:
        await self._ensure_ready()
        await self.executor.execute(action)

    async def _execute_all(self, plan: list[Action]) -> list[Action]:
        for action in plan:
            await self.executor.execute(action)
        return plan

    async def up(self, to: Target = None, force: bool = False) -> list[Action]:
        """Execute ``list_up(to)``; reverting steps requires ``force=True`` exactly."""
        plan = await self.list_up(to)
        downs = [a.identifier for a in plan if a.direction == DOWN]
        if downs and force is not True:
            log.warning("data_loss_guard", downs=downs)
            raise DataLossError(downs)
        return await self._execute_all(plan)

    async def down(self, to: Target = None) -> list[Action]:
        return await self._execute_all(await self.list_down(to))

    async def requires_migration(self) -> bool:
        return len(await self.list_up()) > 0
