"""Pagination, index management and declarative seeding on top of MongoDB."""

from mongoseed.core import ErrorCollector, MultiError
from mongoseed.database import MongoHelper, MongoHelperBackend, MongoModel, ModelInterface
from mongoseed.migration import CreateIndexTask, Migrator, SeedTableTask, Seeder, Task, TaskKind
from mongoseed.pagination import FindOptions, PaginationResult, paginate

__all__ = [
    "CreateIndexTask",
    "ErrorCollector",
    "FindOptions",
    "Migrator",
    "ModelInterface",
    "MongoHelper",
    "MongoHelperBackend",
    "MongoModel",
    "MultiError",
    "paginate",
    "PaginationResult",
    "SeedTableTask",
    "Seeder",
    "Task",
    "TaskKind",
]
