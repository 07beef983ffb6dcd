"""Persisted bookkeeping: which migrations are applied and the last one."""
from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncConnection

from migraplan.cache import StateCache
from migraplan.catalog import sort_identifiers
from migraplan.schemas import NO_VERSION
from migraplan.store import KeyValueStore

LAST_KEY = "last"
VERSION_PREFIX = "version:"


class VersionPointer:
    """Scalar pointer to the most recently applied identifier."""

    def __init__(self, store: KeyValueStore, key: str = LAST_KEY):
        self.store = store
        self.key = key

    async def get(self) -> str:
        return await self.store.get_or_default(self.key, NO_VERSION)

    async def set(self, identifier: str, conn: AsyncConnection | None = None) -> None:
        await self.store.put(self.key, identifier, conn)


class AppliedVersionSet:
    """Membership set of applied identifiers, one ``true`` entry per member."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    async def members(self) -> list[str]:
        return [key for key, _ in await self.store.all()]

    async def add(self, identifier: str, conn: AsyncConnection | None = None) -> None:
        await self.store.put(identifier, True, conn)

    async def discard(self, identifier: str, conn: AsyncConnection | None = None) -> None:
        await self.store.delete(identifier, conn)


class AppliedState:
    def __init__(self, pointer: VersionPointer, versions: AppliedVersionSet, cache: StateCache | None = None):
        self.pointer = pointer
        self.versions = versions
        self.cache = cache if cache is not None else StateCache()

    @classmethod
    def from_store(cls, store: KeyValueStore, cache: StateCache | None = None) -> AppliedState:
        return cls(VersionPointer(store), AppliedVersionSet(store.prefix(VERSION_PREFIX)), cache)

    async def current_version(self) -> str:
        if self.cache.current is None:
            self.cache.current = await self.pointer.get()
        return self.cache.current

    async def applied_versions(self) -> list[str]:
        if self.cache.applied is None:
            self.cache.applied = sort_identifiers(await self.versions.members())
        return self.cache.applied

    async def mark_applied(self, identifier: str, conn: AsyncConnection | None = None) -> None:
        await self.versions.add(identifier, conn)

    async def unmark_applied(self, identifier: str, conn: AsyncConnection | None = None) -> None:
        await self.versions.discard(identifier, conn)

    async def set_current(self, identifier: str, conn: AsyncConnection | None = None) -> None:
        await self.pointer.set(identifier, conn)

    def invalidate(self) -> None:
        self.cache.current = None
        self.cache.applied = None
