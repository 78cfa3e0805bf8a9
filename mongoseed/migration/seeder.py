from copy import deepcopy
from typing import Any

from bson import ObjectId

from mongoseed.core import ErrorCollector, Mongoseed
from mongoseed.database.backends.helper_backend import MongoHelperBackend
from mongoseed.database.models import is_generated_id
from mongoseed.migration.exceptions import NoCollectionError, NoFindFilterFnError, NoModelError
from mongoseed.migration.schema import SeedTableTask


class Seeder(Mongoseed):
    """Reconciles the items of a seed task against the documents already stored.

    For each item the task's filter function builds a lookup filter. When no stored document matches, the item is
    inserted, with a freshly generated ObjectId when the model's identity is an ObjectId. When a document matches,
    the item takes over the stored identity and replaces that document.

    Items are processed one at a time, in order. A failing item, or a failing callback for it, is recorded and the
    batch carries on. All failures are raised together in a MultiError at the end.

    Args:
        helper (MongoHelperBackend): The store facade to read and write through.

    Example:
        .. code-block:: python

            seeder = Seeder(MongoHelper.from_uri("mongodb://localhost:27017", "mongoseed"))
            seeded = await seeder.seed_data(
                SeedTableTask(
                    collection="users",
                    items=[User(name="John", email="john@example.com")],
                    find_filter_fn=lambda user: {"email": user.email},
                    model=User(name="", email=""),
                )
            )
    """

    def __init__(self, helper: MongoHelperBackend, **kwargs):
        super().__init__(**kwargs)
        self.helper = helper

    @Mongoseed.autolog(
        suffix_formatter=lambda function, result: f"Operation {function.__name__} seeded {len(result)} items"
    )
    async def seed_data(self, task: SeedTableTask | None) -> list[Any]:
        """Insert or update every item of the task.

        Args:
            task: The seed task. None is a no-op.

        Returns:
            list: Copies of the items as written, carrying their identity, in input order.

        Raises:
            NoCollectionError: If the task names no collection.
            NoFindFilterFnError: If the task has no filter function.
            NoModelError: If the task has no model prototype.
            MultiError: If any item failed; every other item has still been processed.
        """
        if task is None:
            return []
        if not task.collection:
            raise NoCollectionError()
        if task.find_filter_fn is None:
            raise NoFindFilterFnError()
        if task.model is None:
            raise NoModelError()

        errors = ErrorCollector()
        seeded = []
        for index, it in enumerate(task.items):
            item = deepcopy(it)
            try:
                await self._seed_item(task, item)
                if task.callback is not None:
                    task.callback(item)
            except Exception as e:
                self.logger.warning(f"Failed to seed item {index} into {task.collection}: {e}")
                errors.append(e)
                continue
            seeded.append(item)

        errors.raise_if_errors()
        return seeded

    async def _seed_item(self, task: SeedTableTask, item: Any) -> None:
        existing = deepcopy(task.model)
        filter = task.find_filter_fn(item)
        if filter is not None:
            existing = await self.helper.find_one(task.collection, filter, existing)

        # Without a filter there is nothing to match against, so the item is always created
        if filter is None or not existing.exists():
            if is_generated_id(existing.get_id()):
                item.set_id(ObjectId())
            await self.helper.insert_one(task.collection, item)
            self.logger.debug(f"Inserted {item.get_id()} into {task.collection}.")
        else:
            item.set_id(existing.get_id())
            await self.helper.update_one(task.collection, filter, item)
            self.logger.debug(f"Updated {item.get_id()} in {task.collection}.")
