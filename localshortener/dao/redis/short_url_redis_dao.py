"""Data Access Object (DAO) implementation for the short URL collection in Redis

The whole collection is stored as one JSON array under a single key, and
every save overwrites that key. This keeps the stored document identical to
the in-memory collection after each successful write.

Classes:
    ShortURLRedisDAO:
        DAO for loading and saving the ShortURLModel collection in a Redis datastore.

Example:
    >>> from localshortener.dao.redis import ShortURLRedisDAO

    >>> dao = ShortURLRedisDAO(prefix="localshortener:dev")
    >>> dao.load()
    []
    >>> dao.save([short_url])
    <ShortURLRedisDAO>
    >>> dao.load()[0].shortcode
    'abc123'
"""

import json
import logging
from collections.abc import Sequence

from beartype import beartype

from localshortener.models import ShortURLModel
from localshortener.dao.base import ShortURLBaseDAO
from localshortener.dao.redis.mixins import RedisClientMixin
from localshortener.dao.redis.helpers import handle_redis_connection_error
from localshortener.dao.exceptions import CorruptDataError
from localshortener.utils.constants import LogEvent


logger = logging.getLogger(__name__)


class ShortURLRedisDAO(RedisClientMixin, ShortURLBaseDAO):
    """Redis-based Data Access Object (DAO) for the short URL collection

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        load(**kwargs) -> list[ShortURLModel]:
            GET and deserialize the collection. A corrupt document is logged and
            treated as an empty collection.
            Raises DataStoreError on connectivity issues with Redis.

        save(records: Sequence[ShortURLModel], **kwargs) -> ShortURLRedisDAO:
            Serialize and SET the full collection.
            Raises DataStoreError on connectivity issues with Redis.
    """

    @handle_redis_connection_error
    def load(self, **kwargs) -> list[ShortURLModel]:
        """Load the stored short URL collection

        Returns:
            list[ShortURLModel]:
                Records in insertion order. [] if the key is absent or its
                document cannot be deserialized.

        Raises:
            DataStoreError:
                If Redis connectivity issues occur.
        """
        raw = self.redis.get(self.keys.links_collection_key())
        if raw is None:
            logger.debug('No stored short URL collection found.', extra={'event': LogEvent.STORAGE_LOADED, 'count': 0})
            return []

        try:
            records = self._deserialize(raw)
        except (CorruptDataError, KeyError, TypeError, ValueError) as e:
            # NOTE: json.JSONDecodeError is a ValueError
            logger.error(
                'Stored short URL collection is corrupt. Starting with an empty collection.',
                extra={'event': LogEvent.STORAGE_LOAD_CORRUPT, 'reason': f'{type(e).__name__}: {e}'},
            )
            return []

        logger.debug('Loaded short URL collection.', extra={'event': LogEvent.STORAGE_LOADED, 'count': len(records)})
        return records

    @handle_redis_connection_error
    @beartype
    def save(self, records: Sequence[ShortURLModel], **kwargs) -> 'ShortURLRedisDAO':
        """Overwrite the stored collection with `records`

        Args:
            records (Sequence[ShortURLModel]):
                The complete collection, in insertion order.

        Returns:
            ShortURLRedisDAO: self (for method chaining)

        Raises:
            DataStoreError:
                If Redis connectivity issues occur.
        """
        document = json.dumps([record.to_dict() for record in records])
        self.redis.set(self.keys.links_collection_key(), document)
        return self

    @staticmethod
    def _deserialize(raw: str | bytes) -> list[ShortURLModel]:
        documents = json.loads(raw)
        if not isinstance(documents, list):
            raise CorruptDataError(f'Expected a JSON array of records (got {type(documents).__name__}).')

        records = [ShortURLModel.from_dict(document) for document in documents]

        shortcodes = [record.shortcode for record in records]
        if len(set(shortcodes)) != len(shortcodes):
            raise CorruptDataError('Stored collection contains duplicate shortcodes.')

        return records
