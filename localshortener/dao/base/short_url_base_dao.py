"""Abstract base class for ShortURL data access objects (DAOs).

This class establishes a consistent contract for all ShortURL DAO implementations,
regardless of the underlying storage mechanism (e.g., Redis, a JSON file, SQLite).

Responsibilities:
    - Load and save the complete collection of ShortURLModel records.
    - Standardize error handling across multiple data store implementations.

The collection is always written as a whole: there are no partial or
incremental updates, so the stored document is exactly the last collection
passed to `save()`.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from localshortener.dao.redis import ShortURLRedisDAO

        >>> dao = ShortURLRedisDAO(...)
        >>> records = dao.load()
        >>> dao.save([*records, new_record])
        <ShortURLRedisDAO>
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from localshortener.models import ShortURLModel


class ShortURLBaseDAO(ABC):
    """Interface for ShortURL data access objects (DAOs).

    Methods:
        load(**kwargs) -> list[ShortURLModel]:
            Deserialize the full collection.
            Returns [] if the collection is absent or corrupt (corruption is logged).
            Raises DataStoreError on connection or read failure.

        save(records: Sequence[ShortURLModel], **kwargs) -> ShortURLBaseDAO:
            Serialize and overwrite the full collection.
            Raises DataStoreError on connection or write failure.
    """

    @abstractmethod
    def load(self, **kwargs) -> list[ShortURLModel]:
        """Load the full collection of short URL records.

        Returns:
            list[ShortURLModel]: records in insertion order ([] if absent or corrupt).

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def save(self, records: Sequence[ShortURLModel], **kwargs) -> 'ShortURLBaseDAO':
        """Overwrite the stored collection with `records`.

        Args:
            records (Sequence[ShortURLModel]):
                The complete collection, in insertion order.

        Returns:
            ShortURLBaseDAO: self (for method chaining)

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass
