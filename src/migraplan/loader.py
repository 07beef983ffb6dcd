"""Where migration identifiers and their modules come from."""
from __future__ import annotations

import importlib.util
from abc import ABC, abstractmethod
from pathlib import Path
from types import ModuleType
from typing import Any, Mapping

from migraplan.errors import MigrationLoadError


def strip_suffix(name: str) -> str:
    """Drop a storage suffix such as ``.py`` from a listing entry."""
    return Path(name).stem


def check_module(identifier: str, module: Any) -> Any:
    for op in ("up", "down"):
        if not callable(getattr(module, op, None)):
            raise MigrationLoadError(f"migration {identifier!r} has no callable {op}()")
    return module


class MigrationSource(ABC):
    @abstractmethod
    def list_identifiers(self) -> list[str]:
        """Enumerate available identifiers; order is not meaningful."""
        raise NotImplementedError

    @abstractmethod
    def load(self, identifier: str) -> Any:
        """Return an object exposing ``up(schema, context)`` and ``down(schema, context)``."""
        raise NotImplementedError


class DirectorySource(MigrationSource):
    """Migrations stored as ``<key>-<description>.py`` files in one directory."""

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)

    def list_identifiers(self) -> list[str]:
        # A missing directory raises FileNotFoundError for the caller to see.
        return [
            strip_suffix(p.name)
            for p in self.directory.iterdir()
            if p.is_file() and p.suffix == ".py" and not p.name.startswith("_")
        ]

    def load(self, identifier: str) -> ModuleType:
        path = self.directory / f"{identifier}.py"
        if not path.is_file():
            raise MigrationLoadError(f"migration {identifier!r} not found in {self.directory}")

        spec = importlib.util.spec_from_file_location(f"migraplan_step_{identifier}", path)
        if spec is None or spec.loader is None:
            raise MigrationLoadError(f"cannot import migration {identifier!r} from {path}")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return check_module(identifier, module)


class RegistrySource(MigrationSource):
    """In-process registry mapping identifiers to migration objects."""

    def __init__(self, migrations: Mapping[str, Any] | None = None):
        self._migrations: dict[str, Any] = {}
        for name, module in (migrations or {}).items():
            self.register(name, module)

    def register(self, name: str, module: Any) -> None:
        self._migrations[strip_suffix(name)] = module

    def list_identifiers(self) -> list[str]:
        return list(self._migrations)

    def load(self, identifier: str) -> Any:
        try:
            module = self._migrations[identifier]
        except KeyError:
            raise MigrationLoadError(f"migration {identifier!r} is not registered") from None
        return check_module(identifier, module)
