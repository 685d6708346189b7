"""Abstract base class for ShortURL data access objects (DAOs).

This class establishes a consistent contract for the authoritative short URL
store, regardless of the underlying storage mechanism (e.g., Redis, DynamoDB,
PostgreSQL).

Responsibilities:
    - Provide an interface for inserting (insert-if-absent) and retrieving ShortURLModel objects.
    - Enumerate every stored shortcode (used to rebuild the membership filter).
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from bloomshortener.models import ShortURLModel
        >>> from bloomshortener.dao.redis import ShortURLRedisDAO

        >>> dao = ShortURLRedisDAO(...)

        >>> short_url = ShortURLModel(
        ...     target="https://example.com/blog/article-123",
        ...     shortcode="a1B2c3",
        ... )
        >>> dao.insert_if_absent(short_url)
        True
        >>> dao.insert_if_absent(short_url)
        False

        >>> dao.get("a1B2c3").target
        'https://example.com/blog/article-123'

        >>> list(dao.shortcodes())
        ['a1B2c3']
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator

from bloomshortener.models import ShortURLModel


class ShortURLBaseDAO(ABC):
    """Interface for the durable (authoritative) short URL store.

    Methods:
        insert_if_absent(short_url: ShortURLModel, **kwargs) -> bool:
            Store a mapping unless its shortcode already exists.
            Returns True if written, False if an existing mapping won.
            Raises DataStoreError on connection or write failure.

        get(shortcode: str, **kwargs) -> ShortURLModel:
            Retrieve a ShortURLModel from the data store by shortcode.
            Raises ShortURLNotFoundError if the entry does not exist.
            Raises DataStoreError on connection or read failure.

        shortcodes(**kwargs) -> Iterator[str]:
            Iterate over every stored shortcode.
            Raises DataStoreError on connection or read failure.

        count(**kwargs) -> int:
            Return the number of stored mappings.
            Raises DataStoreError on connection or read failure.

        close() -> None:
            Release the underlying client/connection pool.

    NOTE:
        - Mappings are never updated in place. The DAO does not
          provide an interface to manually delete entries.
    """

    @abstractmethod
    def insert_if_absent(self, short_url: ShortURLModel, **kwargs) -> bool:
        """Insert a ShortURLModel unless its shortcode is already taken.

        The check and the write must be atomic: two concurrent inserts for the
        same shortcode resolve to exactly one winner.

        Args:
            short_url (ShortURLModel):
                The ShortURLModel instance to be inserted.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            bool: True if the mapping was written, False if one already existed.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, shortcode: str, **kwargs) -> ShortURLModel:
        """Retrieve a ShortURLModel from the data store by its shortcode.

        Args:
            shortcode (str):
                The shortcode of the ShortURLModel to be retrieved.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortURLModel: The stored ShortURLModel instance.

        Raises:
            ShortURLNotFoundError:
                If no ShortURLModel with the given shortcode exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def shortcodes(self, **kwargs) -> Iterator[str]:
        """Iterate over every shortcode currently in the data store.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def count(self, **kwargs) -> int:
        """Return the number of short URL mappings in the data store.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    def close(self) -> None:  # noqa: B027
        """Release resources held by the DAO. No-op by default."""
        pass
