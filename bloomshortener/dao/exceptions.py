"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    ShortURLNotFoundError:
        Raised when a ShortURLModel is not found in the data store.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, timeouts, OOM, etc.).

    CachePutError:
        Raised when writing or updating a cache entry fails.

Example:
    >>> from bloomshortener.dao.exceptions import DataStoreError
    >>> raise DataStoreError("Can't connect to Redis.", operation='get', shortcode='abc123')
    Traceback (most recent call last):
        ...
    bloomshortener.dao.exceptions.DataStoreError: Can't connect to Redis.
"""


class DAOError(Exception):
    """Generic base class for DAO-related exceptions."""

    pass


class ShortURLNotFoundError(DAOError):
    """Exception raised when a ShortURLModel is not found in the data store."""

    pass


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, OOM, etc.

    Attributes:
        operation (str | None):
            Name of the DAO operation which failed (e.g. 'insert_if_absent').
        shortcode (str | None):
            Shortcode involved in the failed operation, if any.
    """

    def __init__(self, message: str, operation: str | None = None, shortcode: str | None = None):
        super().__init__(message)
        self.operation = operation
        self.shortcode = shortcode


class CachePutError(DAOError):
    """Exception raised when writing or updating a cache entry fails."""

    pass
