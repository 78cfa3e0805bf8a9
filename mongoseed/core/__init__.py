from mongoseed.core.utils.checks import ifnone
from mongoseed.core.config import Config, CoreConfig, CoreSettings
from mongoseed.core.logging.logger import get_logger, setup_logger

setup_logger()  # Initialize the default logger

from mongoseed.core.base import Mongoseed, MongoseedABC, MongoseedMeta
from mongoseed.core.errors import ErrorCollector, MultiError

__all__ = [
    "Config",
    "CoreConfig",
    "CoreSettings",
    "ErrorCollector",
    "get_logger",
    "ifnone",
    "Mongoseed",
    "MongoseedABC",
    "MongoseedMeta",
    "MultiError",
    "setup_logger",
]
