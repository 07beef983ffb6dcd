from migraplan.editor import SchemaEditor, StepContext
from migraplan.errors import DataLossError, MigrationError, MigrationLoadError
from migraplan.loader import DirectorySource, MigrationSource, RegistrySource
from migraplan.migrator import Migrator
from migraplan.schemas import Action

__all__ = [
    "Action",
    "DataLossError",
    "DirectorySource",
    "MigrationError",
    "MigrationLoadError",
    "MigrationSource",
    "Migrator",
    "RegistrySource",
    "SchemaEditor",
    "StepContext",
]
