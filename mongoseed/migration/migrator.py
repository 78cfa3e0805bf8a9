import asyncio
from typing import Mapping

from mongoseed.core import ErrorCollector, Mongoseed
from mongoseed.database.backends.helper_backend import MongoHelperBackend
from mongoseed.migration.exceptions import NoCollectionError, UnknownTaskKindError
from mongoseed.migration.schema import CreateIndexTask, SeedTableTask, Task, TaskKind
from mongoseed.migration.seeder import Seeder


class Migrator(Mongoseed):
    """Runs a named set of migration tasks.

    Each task is dispatched on its kind: index tasks go to the helper's index reconciliation, seed tasks to the
    seeder. Tasks are expected to be independent of each other; they run one after another in the iteration order of
    the mapping, and every task runs regardless of earlier failures.

    Args:
        helper (MongoHelperBackend): The store facade tasks operate through.
        seeder (Seeder | None): The seeder for seed tasks. Defaults to a Seeder on the same helper.

    Example:
        .. code-block:: python

            from mongoseed.migration import CreateIndexTask, Migrator, SeedTableTask

            migrator = Migrator(helper)
            await migrator.run(
                {
                    "users_email_index": CreateIndexTask(collection="users", index_name="email_1", keys={"email": 1}),
                    "seed_users": SeedTableTask(collection="users", items=users, find_filter_fn=by_email, model=User()),
                }
            )
    """

    def __init__(self, helper: MongoHelperBackend, seeder: Seeder | None = None, **kwargs):
        super().__init__(**kwargs)
        self.helper = helper
        self.seeder = seeder if seeder is not None else Seeder(helper)

    async def run(self, tasks: Mapping[str, Task] | None) -> None:
        """Run every task.

        Raises:
            MultiError: With one cause per failed task, after all tasks have run.
        """
        errors = ErrorCollector()
        for name, task in (tasks or {}).items():
            self.logger.info(f"Running migration task '{name}'.")
            try:
                await self._run_task(name, task)
            except Exception as e:
                self.logger.error(f"Migration task '{name}' failed: {e}")
                errors.append(e)
        errors.raise_if_errors()

    async def _run_task(self, name: str, task: Task) -> None:
        match task.kind:
            case TaskKind.CREATE_INDEX:
                await self._create_index(task)
            case TaskKind.SEED_TABLE:
                await self.seeder.seed_data(task)
            case _:
                raise UnknownTaskKindError(name, task.kind, type(task).__name__)

    async def _create_index(self, task: CreateIndexTask) -> None:
        if not task.collection:
            raise NoCollectionError()
        await self.helper.ensure_index(task.collection, task.index_name, task.keys)

    def run_sync(self, tasks: Mapping[str, Task] | None) -> None:
        """Run the tasks synchronously (wrapper around async run).

        Raises:
            RuntimeError: If called from a running event loop. Use ``await run()`` there instead.
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            pass
        else:
            raise RuntimeError("run_sync() called from async context. Use await run() instead.")
        asyncio.run(self.run(tasks))


def new_migrator(helper: MongoHelperBackend) -> Migrator:
    """Return a Migrator, with its own Seeder, for the given helper."""
    return Migrator(helper)
