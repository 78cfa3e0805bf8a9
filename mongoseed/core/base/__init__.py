from mongoseed.core.base.mongoseed_base import Mongoseed, MongoseedABC, MongoseedABCMeta, MongoseedMeta

__all__ = ["Mongoseed", "MongoseedABC", "MongoseedABCMeta", "MongoseedMeta"]
