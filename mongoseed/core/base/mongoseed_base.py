"""Mongoseed class. Provides unified configuration, logging and context management."""

import inspect
import logging
import time
import traceback
from abc import ABC, ABCMeta
from functools import wraps
from typing import Callable, Optional

from mongoseed.core.config import CoreConfig, SettingsLike
from mongoseed.core.logging.logger import get_logger
from mongoseed.core.utils import ifnone

LOGGER_PARAM_NAMES = {
    "log_dir",
    "logger_level",
    "stream_level",
    "file_level",
    "file_mode",
    "propagate",
    "max_bytes",
    "backup_count",
    "use_structlog",
    "structlog_json",
    "structlog_bind",
}


class MongoseedMeta(type):
    """Metaclass for Mongoseed class.

    The MongoseedMeta metaclass enables classes deriving from Mongoseed to automatically use the same default logger
    within class methods as it does within instance methods. I.e. consider the following class:

    Example, logging in both class methods and instance methods::

        from mongoseed.core import Mongoseed

        class MyClass(Mongoseed):
            def instance_method(self):
                self.logger.info(f"Using logger: {self.logger.name}")  # Using logger: mongoseed.my_module.MyClass

            @classmethod
            def class_method(cls):
                cls.logger.info(f"Using logger: {cls.logger.name}")  # Using logger: mongoseed.my_module.MyClass
    """

    def __init__(cls, name, bases, attr_dict):
        super().__init__(name, bases, attr_dict)
        cls._logger = None
        cls._config = None
        cls._logger_kwargs = None

    @property
    def logger(cls):
        if cls._logger is None:
            cls._logger = get_logger(cls.unique_name, **(cls._logger_kwargs or {}))
        return cls._logger

    @logger.setter
    def logger(cls, new_logger):
        cls._logger = new_logger

    @property
    def unique_name(self) -> str:
        return self.__module__ + "." + self.__name__

    @property
    def config(cls):
        if cls._config is None:
            cls._config = CoreConfig()
        return cls._config

    @config.setter
    def config(cls, new_config):
        cls._config = new_config


class Mongoseed(metaclass=MongoseedMeta):
    """Base class for all mongoseed core classes.

    The Mongoseed class adds default context manager and logging methods. All classes that derive from Mongoseed can be
    used as context managers and will use a unified logging format.

    .. code-block:: python

        from mongoseed.core import Mongoseed

        class MyClass(Mongoseed):
            def instance_method(self):
                self.logger.info(f"Using logger: {self.logger.name}")  # Using logger: mongoseed.my_module.MyClass
    """

    def __init__(self, suppress: bool = False, *, config_overrides: SettingsLike | None = None, **kwargs):
        """
        Initialize the Mongoseed object.

        Args:
            suppress: Whether to suppress exceptions in context manager use.
            config_overrides: Additional settings to override the default config.
            **kwargs: Additional keyword arguments. Logger-related kwargs are passed to `get_logger`.
                Valid logger kwargs: log_dir, logger_level, stream_level, file_level,
                file_mode, propagate, max_bytes, backup_count, use_structlog, structlog_json, structlog_bind
        """
        remaining_kwargs = {k: v for k, v in kwargs.items() if k not in LOGGER_PARAM_NAMES}
        super().__init__(**remaining_kwargs)

        self.config = CoreConfig(config_overrides)
        self.suppress = suppress

        logger_kwargs = {k: v for k, v in kwargs.items() if k in LOGGER_PARAM_NAMES}
        type(self)._logger_kwargs = logger_kwargs
        self.logger = get_logger(self.unique_name, **logger_kwargs)

    @property
    def unique_name(self) -> str:
        return self.__module__ + "." + type(self).__name__

    @property
    def name(self) -> str:
        return type(self).__name__

    def __enter__(self):
        self.logger.debug(f"Initializing {self.name} as a context manager.")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.logger.debug(f"Exiting context manager for {self.name}.")
        if exc_type is not None:
            info = (exc_type, exc_val, exc_tb)
            self.logger.exception("Exception occurred", exc_info=info)
            return self.suppress
        return False

    @classmethod
    def autolog(
        cls,
        log_level=logging.DEBUG,
        prefix_formatter: Optional[Callable] = None,
        suffix_formatter: Optional[Callable] = None,
        exception_formatter: Optional[Callable] = None,
        include_duration: bool = True,
    ):
        """Decorator that adds logger.log calls to the decorated method before and after the method is called.

        By default, the autolog decorator will log the method name, arguments and keyword arguments before the method
        is called, and the method name and result after the method completes. Exceptions are logged and re-raised.
        Both sync methods and coroutine methods are supported. The decorated method must belong to a class with a
        logger at ``self.logger``.

        Args:
            log_level: The log_level passed to logger.log().
            prefix_formatter: Called with (function, args, kwargs) to build the message logged before the call.
            suffix_formatter: Called with (function, result) to build the message logged after the call.
            exception_formatter: Called with (function, error, stack trace) to build the message logged on failure.
            include_duration: If True, append the duration of the wrapped method to the completion and failure records.

        Example::

            from mongoseed.core import Mongoseed

            class MyClass(Mongoseed):
                @Mongoseed.autolog()
                async def divide(self, arg1, arg2):
                    return arg1 / arg2
        """
        prefix_formatter = ifnone(
            prefix_formatter,
            default=lambda function, args, kwargs: (
                f"Operation {function.__name__} started with args: {args} and kwargs: {kwargs}"
            ),
        )
        suffix_formatter = ifnone(
            suffix_formatter,
            default=lambda function, result: f"Operation {function.__name__} completed with result: {result}",
        )
        exception_formatter = ifnone(
            exception_formatter,
            default=lambda function, e, stack_trace: (
                f"Operation {function.__name__} failed with the following error: {e}\n{stack_trace}"
            ),
        )

        def with_duration(msg: str, started_at: float) -> str:
            if not include_duration:
                return msg
            elapsed_ms = (time.perf_counter() - started_at) * 1000.0
            return f"{msg} | duration_ms={elapsed_ms:.2f}"

        def decorator(function):
            if inspect.iscoroutinefunction(function):

                @wraps(function)
                async def wrapper(self, *args, **kwargs):
                    started_at = time.perf_counter()
                    self.logger.log(log_level, prefix_formatter(function, args, kwargs))
                    try:
                        result = await function(self, *args, **kwargs)
                    except Exception as e:
                        msg = exception_formatter(function, e, traceback.format_exc())
                        self.logger.error(with_duration(msg, started_at))
                        raise
                    self.logger.log(log_level, with_duration(suffix_formatter(function, result), started_at))
                    return result

            else:

                @wraps(function)
                def wrapper(self, *args, **kwargs):
                    started_at = time.perf_counter()
                    self.logger.log(log_level, prefix_formatter(function, args, kwargs))
                    try:
                        result = function(self, *args, **kwargs)
                    except Exception as e:
                        msg = exception_formatter(function, e, traceback.format_exc())
                        self.logger.error(with_duration(msg, started_at))
                        raise
                    self.logger.log(log_level, with_duration(suffix_formatter(function, result), started_at))
                    return result

            return wrapper

        return decorator


class MongoseedABCMeta(MongoseedMeta, ABCMeta):
    """Metaclass that combines MongoseedMeta and ABC metaclasses.

    Python only allows a class to have one metaclass, so this combined metaclass allows classes to inherit from both
    Mongoseed and ABC simultaneously.
    """

    pass


class MongoseedABC(Mongoseed, ABC, metaclass=MongoseedABCMeta):
    """Abstract base class combining Mongoseed class functionality with ABC support.

    Use this class instead of Mongoseed when you need to define abstract methods or properties in your class.

    Example:
        from abc import abstractmethod
        from mongoseed.core import MongoseedABC

        class MyAbstractBackend(MongoseedABC):
            @abstractmethod
            async def insert_one(self, collection, item):
                pass
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
