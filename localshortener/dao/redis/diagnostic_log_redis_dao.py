"""Data Access Object (DAO) implementation for the diagnostic log in Redis

Entries are JSON documents in a Redis list. Appending trims the list to the
most recent `max_entries` within the same transaction, so the list never
holds more than the cap.

Classes:
    DiagnosticLogRedisDAO:
        DAO for appending, reading and clearing diagnostic log entries.

Example:
    >>> dao = DiagnosticLogRedisDAO(prefix="localshortener:dev")
    >>> dao.append({'timestamp': '...', 'level': 'INFO', 'message': 'Short URL created.', 'data': None})
    <DiagnosticLogRedisDAO>
    >>> dao.entries(level='INFO', limit=1)[0]['message']
    'Short URL created.'
"""

import json
from typing import Any, Optional

from beartype import beartype

from localshortener.dao.base import DiagnosticLogBaseDAO
from localshortener.dao.redis.mixins import RedisClientMixin
from localshortener.dao.redis.helpers import handle_redis_connection_error
from localshortener.utils.constants import MAX_LOG_ENTRIES


class DiagnosticLogRedisDAO(RedisClientMixin, DiagnosticLogBaseDAO):
    """Redis-based Data Access Object (DAO) for the capped diagnostic log

    Attributes:
        max_entries (int):
            Number of most recent entries retained. Defaults to 1000.
    """

    def __init__(self, *args, max_entries: int = MAX_LOG_ENTRIES, **kwargs):
        if not isinstance(max_entries, int) or max_entries <= 0:
            raise ValueError(f'max_entries must be a positive integer (given value: {max_entries}).')
        self.max_entries = max_entries
        super().__init__(*args, **kwargs)

    @handle_redis_connection_error
    @beartype
    def append(self, entry: dict[str, Any], **kwargs) -> 'DiagnosticLogRedisDAO':
        key = self.keys.diagnostic_logs_key()

        # NOTE: RPUSH and LTRIM run in one transaction so a reader never
        #       observes the list above its cap.
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.rpush(key, json.dumps(entry, default=str))
            pipe.ltrim(key, -self.max_entries, -1)
            pipe.execute()
        return self

    @handle_redis_connection_error
    @beartype
    def entries(self, level: Optional[str] = None, limit: Optional[int] = None, **kwargs) -> list[dict[str, Any]]:
        """Return stored entries, oldest first

        Args:
            level (Optional[str]):
                Keep only entries of this level ('INFO', 'WARN', 'ERROR', 'DEBUG').
            limit (Optional[int]):
                Keep only the `limit` most recent (matching) entries. 0 or None means no limit.

        Raises:
            ValueError:
                If `limit` is negative.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        if limit is not None and limit < 0:
            raise ValueError(f'Limit must be a non-negative integer (given value: {limit}).')

        entries = []
        for raw in self.redis.lrange(self.keys.diagnostic_logs_key(), 0, -1):
            try:
                entry = json.loads(raw)
            except ValueError:
                continue  # unreadable entry
            if isinstance(entry, dict):
                entries.append(entry)

        if level:
            entries = [entry for entry in entries if entry.get('level') == level.upper()]
        if limit:
            entries = entries[-limit:]
        return entries

    @handle_redis_connection_error
    def clear(self, **kwargs) -> 'DiagnosticLogRedisDAO':
        self.redis.delete(self.keys.diagnostic_logs_key())
        return self
