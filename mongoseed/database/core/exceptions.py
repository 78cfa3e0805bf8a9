"""Database exceptions."""


class NoMatchesError(Exception):
    """Exception raised when an update matched no document."""

    def __init__(self, message: str = "no matches found for query"):
        super().__init__(message)


class UnexpectedInsertResultError(Exception):
    """Exception raised when the store returns something that is not a valid insert result."""

    def __init__(self, message: str = "unexpected insert result"):
        super().__init__(message)


class StoreOperationError(Exception):
    """Exception raised when a store operation fails.

    The driver error is chained as ``__cause__``; ``operation`` names the operation that failed.
    """

    def __init__(self, operation: str, cause: BaseException):
        self.operation = operation
        self.cause = cause
        super().__init__(f"failed on {operation}: {cause}")
