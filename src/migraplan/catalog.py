from __future__ import annotations

from typing import Iterable

import structlog

from migraplan.cache import StateCache
from migraplan.loader import MigrationSource, strip_suffix

log = structlog.get_logger(__name__)


def ordering_key(identifier: str) -> str:
    """The part of an identifier before its first ``-``."""
    return identifier.split("-", 1)[0]


def sort_identifiers(identifiers: Iterable[str]) -> list[str]:
    # sorted() is stable, so equal keys keep their listing order.
    return sorted(identifiers, key=ordering_key)


def _mixed_widths(identifiers: list[str]) -> list[int]:
    widths = {len(k) for k in map(ordering_key, identifiers) if k.isdigit()}
    return sorted(widths) if len(widths) > 1 else []


def _warn_mixed_widths(widths: list[int]) -> None:
    log.warning(
        "catalog_mixed_key_widths",
        widths=widths,
        hint="ordering keys compare as strings; zero-pad them to a fixed width",
    )


class VersionCatalog:
    def __init__(self, source: MigrationSource, cache: StateCache | None = None):
        self.source = source
        self.cache = cache if cache is not None else StateCache()
        # Catalog the width warning was last logged for.
        self._warned_for: list[str] | None = None

    def load(self) -> list[str]:
        if self.cache.catalog is not None:
            return self.cache.catalog

        seen: dict[str, None] = {}
        for name in self.source.list_identifiers():
            seen.setdefault(strip_suffix(name), None)
        versions = sort_identifiers(seen)
        widths = _mixed_widths(versions)
        if widths and versions != self._warned_for:
            _warn_mixed_widths(widths)
            self._warned_for = versions
        self.cache.catalog = versions
        return versions

    def invalidate(self) -> None:
        self.cache.catalog = None
