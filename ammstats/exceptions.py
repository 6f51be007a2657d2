"""Module for custom exceptions. This should contain base classes. Children of these base classes should be defined in the modules where they are used."""


class DataNotFoundError(Exception):
    """Exception raised when data is not found. Currently a base class for :py:class:`RecordNotFound`."""

    def __init__(self, message: str):
        super().__init__(message)


class RecordNotFound(DataNotFoundError):
    """The storage did not have a document for the given collection and key."""

    def __init__(self, collection: str, key: str):
        self.collection = collection
        self.key = key
        super().__init__(f"No document {key} in collection {collection}")
