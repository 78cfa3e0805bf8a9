from mongoseed.migration.exceptions import NoCollectionError, NoFindFilterFnError, NoModelError, UnknownTaskKindError
from mongoseed.migration.migrator import Migrator, new_migrator
from mongoseed.migration.schema import (
    CreateIndexTask,
    FindFilterFunction,
    SeedTableTask,
    SeededCallbackFunction,
    Task,
    TaskKind,
)
from mongoseed.migration.seeder import Seeder

__all__ = [
    "CreateIndexTask",
    "FindFilterFunction",
    "Migrator",
    "new_migrator",
    "NoCollectionError",
    "NoFindFilterFnError",
    "NoModelError",
    "SeededCallbackFunction",
    "Seeder",
    "SeedTableTask",
    "Task",
    "TaskKind",
    "UnknownTaskKindError",
]
