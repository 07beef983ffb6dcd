from __future__ import annotations

from dataclasses import dataclass


@dataclass
class StateCache:
    """Process-local copies of the catalog and bookkeeping reads.

    Owned by one ``Migrator``; not safe to share between instances.
    """

    catalog: list[str] | None = None
    current: str | None = None
    applied: list[str] | None = None

    def clear(self) -> None:
        self.catalog = None
        self.current = None
        self.applied = None
