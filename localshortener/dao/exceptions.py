"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, timeouts, OOM, etc.).

    CorruptDataError:
        Raised when a stored document cannot be deserialized.

Example:
    >>> from localshortener.dao.exceptions import DataStoreError
    >>> raise DataStoreError("Can't connect to Redis at localhost:6379/0.")
    Traceback (most recent call last):
        ...
    localshortener.dao.exceptions.DataStoreError: Can't connect to Redis at localhost:6379/0.
"""

from localshortener.exceptions import LocalShortenerError


class DAOError(LocalShortenerError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'DAO_ERROR'


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, OOM, etc.
    """

    error_code = 'DATA_STORE_ERROR'


class CorruptDataError(DAOError):
    """Exception raised when a stored document has an unexpected shape."""

    error_code = 'CORRUPT_DATA'
