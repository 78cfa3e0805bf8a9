from abc import abstractmethod
from typing import Any, Mapping, Sequence

from mongoseed.core import MongoseedABC
from mongoseed.pagination import FindOptions, PaginationResult

IndexKeys = str | Mapping[str, Any] | Sequence[tuple[str, Any]]


class MongoHelperBackend(MongoseedABC):
    """Abstract facade over a document store.

    Every operation is issued against a named collection. Items are encoded from, and decoded into, the shape of a
    caller supplied model (a pydantic model class or instance, or ``dict`` for raw documents).

    Index reconciliation (:meth:`ensure_index`) is implemented here on top of :meth:`get_index` and
    :meth:`create_index`, so every backend gets the same create-if-absent behaviour.
    """

    @abstractmethod
    async def count(self, collection: str, filter: Mapping[str, Any] | None = None) -> int:
        """Count the documents matching the filter."""
        raise NotImplementedError

    @abstractmethod
    async def find(
        self,
        collection: str,
        filter: Mapping[str, Any] | None,
        model: Any,
        options: FindOptions | None = None,
    ) -> PaginationResult:
        """Find the documents matching the filter, one page at a time when a page size is given."""
        raise NotImplementedError

    @abstractmethod
    async def find_one(self, collection: str, filter: Mapping[str, Any] | None, model: Any) -> Any:
        """Find the first document matching the filter.

        Returns the document decoded into the shape of ``model``. When nothing matches ``model`` itself is returned
        untouched and no error is raised, so callers check the identity of the result.
        """
        raise NotImplementedError

    @abstractmethod
    async def insert_one(self, collection: str, item: Any) -> Any:
        """Insert the item and return the identity the store generated for it."""
        raise NotImplementedError

    @abstractmethod
    async def update_one(self, collection: str, filter: Mapping[str, Any] | None, item: Any) -> None:
        """Replace the document matching the filter with the item.

        Raises:
            NoMatchesError: If no document matched the filter.
        """
        raise NotImplementedError

    @abstractmethod
    async def aggregate(self, collection: str, pipeline: list[dict]) -> list[dict]:
        """Run an aggregation pipeline and return the raw result documents."""
        raise NotImplementedError

    @abstractmethod
    async def get_index(self, collection: str, name: str) -> dict | None:
        """Return the descriptor of the index with the given name, or None if the collection has no such index."""
        raise NotImplementedError

    @abstractmethod
    async def create_index(self, collection: str, name: str, keys: IndexKeys) -> str:
        """Create an index with the given name and key specification and return its name."""
        raise NotImplementedError

    async def has_index(self, collection: str, name: str) -> bool:
        return await self.get_index(collection, name) is not None

    @MongoseedABC.autolog()
    async def ensure_index(self, collection: str, name: str, keys: IndexKeys) -> bool:
        """Create the named index unless the collection already has an index with that name.

        Indexes are matched by name only, an existing index with different keys is left alone. Listing and creation
        errors propagate unchanged.

        Returns:
            bool: True if the index was created, False if it already existed.

        Example:
            .. code-block:: python

                await helper.ensure_index("users", "email_1", {"email": 1})
        """
        if await self.has_index(collection, name):
            self.logger.debug(f"Index {name} already exists on {collection}.")
            return False
        await self.create_index(collection, name, keys)
        self.logger.info(f"Created index {name} on {collection}.")
        return True
