from mongoseed.database.backends.helper_backend import IndexKeys, MongoHelperBackend
from mongoseed.database.backends.mongo_helper import MongoHelper
from mongoseed.database.core.exceptions import NoMatchesError, StoreOperationError, UnexpectedInsertResultError
from mongoseed.database.models import NIL_OBJECT_ID, ModelInterface, MongoModel, is_generated_id

__all__ = [
    "IndexKeys",
    "is_generated_id",
    "ModelInterface",
    "MongoHelper",
    "MongoHelperBackend",
    "MongoModel",
    "NIL_OBJECT_ID",
    "NoMatchesError",
    "StoreOperationError",
    "UnexpectedInsertResultError",
]
