from mongoseed.database.backends.helper_backend import IndexKeys, MongoHelperBackend
from mongoseed.database.backends.mongo_helper import MongoHelper, decode_document, encode_document

__all__ = ["decode_document", "encode_document", "IndexKeys", "MongoHelper", "MongoHelperBackend"]
