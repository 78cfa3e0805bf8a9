from copy import deepcopy
from typing import Any, Mapping

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pydantic import BaseModel
from pymongo.errors import PyMongoError
from pymongo.results import InsertOneResult

from mongoseed.core.config import CoreSettings
from mongoseed.database.backends.helper_backend import IndexKeys, MongoHelperBackend
from mongoseed.database.core.exceptions import NoMatchesError, StoreOperationError, UnexpectedInsertResultError
from mongoseed.database.models import NIL_OBJECT_ID, ModelInterface, is_empty_id
from mongoseed.pagination import FindOptions, PaginationResult, paginate


# Attributes of plain model objects that hold the identity, stored as ``_id`` instead
IDENTITY_ATTRIBUTES = ("id", "_id")


def encode_document(item: Any) -> dict:
    """Encode an item into a document, leaving out an empty ``_id`` so the store generates one.

    Pydantic models are dumped by alias and mappings are copied. Any other object is encoded from its attributes; when
    it implements :class:`ModelInterface` its identity is taken from ``get_id()``.
    """
    if isinstance(item, BaseModel):
        document = item.model_dump(by_alias=True)
    elif isinstance(item, Mapping):
        document = dict(item)
    elif isinstance(item, ModelInterface):
        document = {key: value for key, value in vars(item).items() if key not in IDENTITY_ATTRIBUTES}
        document["_id"] = item.get_id()
    else:
        document = dict(vars(item))
    if "_id" in document and is_empty_id(document["_id"]):
        del document["_id"]
    return document


def decode_document(document: Mapping[str, Any], model: Any) -> Any:
    """Decode a document into the shape of ``model``.

    ``model`` may be a pydantic model class or instance, ``dict`` (or None) for raw documents, or any other class or
    instance implementing :class:`ModelInterface`. Plain objects are decoded into a copy of the instance (or a new
    instance of the class): fields are set as attributes and the identity through ``set_id``.
    """
    if isinstance(model, type) and issubclass(model, BaseModel):
        return model.model_validate(document)
    if isinstance(model, BaseModel):
        return type(model).model_validate(document)
    if model is None or model is dict or isinstance(model, dict):
        return dict(document)
    if isinstance(model, type) and issubclass(model, ModelInterface):
        return _decode_into(document, model())
    if isinstance(model, ModelInterface):
        return _decode_into(document, deepcopy(model))
    raise TypeError(f"Cannot decode documents into {type(model).__name__}.")


def _decode_into(document: Mapping[str, Any], target: Any) -> Any:
    for key, value in document.items():
        if key != "_id":
            setattr(target, key, value)
    if "_id" in document:
        target.set_id(document["_id"])
    return target


class MongoHelper(MongoHelperBackend):
    """MongoDB implementation of the store facade.

    Uses Motor for asynchronous access to a single database. All operations name their target collection, so one
    helper serves every collection of the database.

    Args:
        db (AsyncIOMotorDatabase): The database the helper operates on.

    Example:
        .. code-block:: python

            from mongoseed.database import MongoHelper, MongoModel
            from mongoseed.pagination import FindOptions

            class User(MongoModel):
                name: str

            helper = MongoHelper.from_uri("mongodb://localhost:27017", "mongoseed")
            await helper.insert_one("users", User(name="John"))
            page = await helper.find("users", {}, User, FindOptions(page_size=10, page=1))
    """

    def __init__(self, db: AsyncIOMotorDatabase, **kwargs):
        super().__init__(**kwargs)
        self.db = db

    @staticmethod
    def new_client(uri: str) -> AsyncIOMotorClient:
        """Create a Motor client for the given connection URI.

        Raises:
            pymongo.errors.InvalidURI: If the URI cannot be parsed.
        """
        return AsyncIOMotorClient(uri)

    @classmethod
    def from_uri(cls, uri: str, db_name: str, **kwargs) -> "MongoHelper":
        client = cls.new_client(uri)
        return cls(client[db_name], **kwargs)

    @classmethod
    def from_config(cls, settings: CoreSettings | None = None, **kwargs) -> "MongoHelper":
        """Create a helper from the MONGOSEED_MONGO settings (URI and database name)."""
        settings = settings or CoreSettings()
        mongo = settings.MONGOSEED_MONGO
        return cls.from_uri(mongo.URI.get_secret_value(), mongo.DB_NAME, **kwargs)

    def collection(self, name: str) -> AsyncIOMotorCollection:
        return self.db[name]

    async def count(self, collection: str, filter: Mapping[str, Any] | None = None) -> int:
        try:
            return await self.collection(collection).count_documents(filter or {})
        except PyMongoError as e:
            raise StoreOperationError("count", e) from e

    async def find(
        self,
        collection: str,
        filter: Mapping[str, Any] | None,
        model: Any,
        options: FindOptions | None = None,
    ) -> PaginationResult:
        """Find the documents matching the filter.

        The total count is taken first and the page numbers derived from it. With a page size set, only that page of
        documents is fetched; without one every matching document is returned. Without options the first page of
        MONGOSEED_MONGO.DEFAULT_PAGE_SIZE items is fetched (all items when that is 0).

        Raises:
            StoreOperationError: If counting or fetching fails.
        """
        options = options or FindOptions(page_size=int(self.config["MONGOSEED_MONGO"]["DEFAULT_PAGE_SIZE"]))
        filter = filter or {}

        total = await self.count(collection, filter)
        result = paginate(total, page=options.page, page_size=options.page_size)

        try:
            cursor = self.collection(collection).find(
                filter, skip=options.skip, limit=options.limit, sort=options.sort
            )
            documents = await cursor.to_list(length=None)
        except PyMongoError as e:
            raise StoreOperationError("find", e) from e

        result.items = [decode_document(document, model) for document in documents]
        return result

    async def find_one(self, collection: str, filter: Mapping[str, Any] | None, model: Any) -> Any:
        try:
            document = await self.collection(collection).find_one(filter or {})
        except PyMongoError as e:
            raise StoreOperationError("find_one", e) from e
        if document is None:
            return model
        return decode_document(document, model)

    async def insert_one(self, collection: str, item: Any) -> ObjectId:
        try:
            result = await self.collection(collection).insert_one(encode_document(item))
        except PyMongoError as e:
            raise StoreOperationError("insert_one", e) from e
        return self.get_id_from_insert_one_result(result)

    def get_id_from_insert_one_result(self, result: Any) -> ObjectId:
        """Extract the generated ObjectId from an insert result.

        An identity that is not an ObjectId (e.g. a caller supplied string) yields the nil ObjectId rather than an
        error. That case is logged since it can hide a store returning something unexpected.

        Raises:
            UnexpectedInsertResultError: If the result is not an insert result or carries no identity.
        """
        if not isinstance(result, InsertOneResult):
            raise UnexpectedInsertResultError()
        inserted_id = result.inserted_id
        if isinstance(inserted_id, ObjectId):
            return inserted_id
        if inserted_id is not None:
            self.logger.warning(
                f"Insert returned a {type(inserted_id).__name__} identity instead of an ObjectId, using the nil ObjectId."
            )
            return NIL_OBJECT_ID
        raise UnexpectedInsertResultError()

    async def update_one(self, collection: str, filter: Mapping[str, Any] | None, item: Any) -> None:
        try:
            result = await self.collection(collection).replace_one(filter or {}, encode_document(item))
        except PyMongoError as e:
            raise StoreOperationError("update_one", e) from e
        if result.matched_count == 0:
            raise NoMatchesError()

    async def aggregate(self, collection: str, pipeline: list[dict]) -> list[dict]:
        try:
            cursor = self.collection(collection).aggregate(pipeline)
            return await cursor.to_list(length=None)
        except PyMongoError as e:
            raise StoreOperationError("aggregate", e) from e

    async def get_index(self, collection: str, name: str) -> dict | None:
        async for index in self.collection(collection).list_indexes():
            if index.get("name") == name:
                return dict(index)
        return None

    async def create_index(self, collection: str, name: str, keys: IndexKeys) -> str:
        if isinstance(keys, Mapping):
            keys = list(keys.items())
        return await self.collection(collection).create_index(keys, name=name)

    def close(self) -> None:
        """Close the underlying client connection."""
        self.db.client.close()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return super().__exit__(exc_type, exc_val, exc_tb)
