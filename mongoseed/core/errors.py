"""Error aggregation for batch operations.

Batch operations (seeding a collection, running a set of migration tasks) keep going after an individual unit fails.
Every failure is collected and reported together once the batch is finished.
"""

from typing import Iterable, Iterator


class MultiError(Exception):
    """An ordered collection of errors raised together once a batch has finished.

    A ``MultiError`` always carries at least one cause. An empty batch result is represented by the absence of an error,
    see :meth:`ErrorCollector.error_or_none`.

    Example:
        .. code-block:: python

            from mongoseed.core import MultiError

            try:
                await seeder.seed_data(task)
            except MultiError as e:
                for cause in e.errors:
                    print(type(cause).__name__, cause)
    """

    def __init__(self, errors: Iterable[Exception]):
        self.errors: list[Exception] = list(errors)
        super().__init__(self._format())

    def _format(self) -> str:
        if len(self.errors) == 1:
            return f"1 error occurred:\n\t* {self.errors[0]}\n"
        points = "\n\t* ".join(str(err) for err in self.errors)
        return f"{len(self.errors)} errors occurred:\n\t* {points}\n"

    def __iter__(self) -> Iterator[Exception]:
        return iter(self.errors)

    def __len__(self) -> int:
        return len(self.errors)

    def __eq__(self, other) -> bool:
        if not isinstance(other, MultiError):
            return NotImplemented
        return self.errors == other.errors

    __hash__ = Exception.__hash__


class ErrorCollector:
    """Accumulates errors across a batch.

    Example:
        .. code-block:: python

            errors = ErrorCollector()
            for item in items:
                try:
                    process(item)
                except Exception as e:
                    errors.append(e)
            errors.raise_if_errors()
    """

    def __init__(self):
        self.errors: list[Exception] = []

    def append(self, error: Exception) -> None:
        """Record an error. The causes of a MultiError are recorded individually, so aggregates stay flat."""
        if isinstance(error, MultiError):
            self.errors.extend(error.errors)
        else:
            self.errors.append(error)

    def __len__(self) -> int:
        return len(self.errors)

    def error_or_none(self) -> MultiError | None:
        """Return a MultiError wrapping the collected errors, or None when nothing was collected."""
        if not self.errors:
            return None
        return MultiError(self.errors)

    def raise_if_errors(self) -> None:
        """Raise the collected errors as a MultiError. Does nothing when no error was collected."""
        error = self.error_or_none()
        if error is not None:
            raise error
