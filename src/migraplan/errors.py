from __future__ import annotations


class MigrationError(Exception):
    """Base class for errors raised by migraplan itself."""


class DataLossError(MigrationError):
    """Raised by ``Migrator.up`` when the plan would revert applied steps."""

    def __init__(self, downs: list[str]):
        self.downs = downs
        super().__init__(
            "migration might cause loss of data, continue with force flag if necessary"
        )


class MigrationLoadError(MigrationError):
    """A migration module is missing or does not expose ``up``/``down``."""
