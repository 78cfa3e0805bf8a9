"""Migration exceptions."""


class NoCollectionError(Exception):
    """Exception raised when a task does not name its collection."""

    def __init__(self, message: str = "you must specify the collection"):
        super().__init__(message)


class NoFindFilterFnError(Exception):
    """Exception raised when a seed task has no function to build the lookup filter."""

    def __init__(self, message: str = "you must specify a find_filter_fn"):
        super().__init__(message)


class NoModelError(Exception):
    """Exception raised when a seed task has no model prototype to decode existing documents into."""

    def __init__(self, message: str = "you must specify a model"):
        super().__init__(message)


class UnknownTaskKindError(Exception):
    """Exception raised when a migration task has a kind the migrator cannot dispatch."""

    def __init__(self, task_name: str, kind: object, task_type: str):
        self.task_name = task_name
        self.kind = kind
        super().__init__(f"could not run migration task '{task_name}': unknown kind '{kind}' ({task_type})")
