from enum import StrEnum
from typing import Any, Callable, Literal, Mapping

from pydantic import BaseModel, ConfigDict

from mongoseed.database.backends.helper_backend import IndexKeys

# Maps a seed item to the filter used to look up its stored counterpart. None means "never stored yet".
FindFilterFunction = Callable[[Any], Mapping[str, Any] | None]

# Called with each item once it has been inserted or updated.
SeededCallbackFunction = Callable[[Any], None]


class TaskKind(StrEnum):
    CREATE_INDEX = "create_index"
    SEED_TABLE = "seed_table"


class Task(BaseModel):
    """A unit of migration work against one collection.

    The ``kind`` field is the discriminant the migrator dispatches on. A bare ``Task`` has no kind and cannot be run.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: TaskKind | None = None
    collection: str = ""


class CreateIndexTask(Task):
    """Create a named index on the collection unless one with that name exists.

    Example:
        .. code-block:: python

            CreateIndexTask(collection="users", index_name="email_1", keys={"email": 1})
    """

    kind: Literal[TaskKind.CREATE_INDEX] = TaskKind.CREATE_INDEX
    index_name: str
    keys: IndexKeys


class SeedTableTask(Task):
    """Reconcile a list of declared items against the documents of a collection.

    Attributes:
        items: The items to seed, processed in order.
        find_filter_fn: Builds the filter used to look up the stored counterpart of an item.
        model: Identity-bearing prototype that found documents are decoded into. The type of its identity decides
            whether an identity is generated before insert.
        callback: Optional function called with each item after it was inserted or updated.

    Example:
        .. code-block:: python

            SeedTableTask(
                collection="users",
                items=[User(name="John", email="john@example.com")],
                find_filter_fn=lambda user: {"email": user.email},
                model=User(name="", email=""),
            )
    """

    kind: Literal[TaskKind.SEED_TABLE] = TaskKind.SEED_TABLE
    items: tuple[Any, ...] = ()
    find_filter_fn: FindFilterFunction | None = None
    model: Any = None
    callback: SeededCallbackFunction | None = None
