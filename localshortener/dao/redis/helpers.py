"""Error translation shared by the Redis DAOs

Callers above the DAO layer only know about DataStoreError, so every method
that talks to Redis is wrapped with `handle_redis_connection_error`.
"""

import functools
from collections.abc import Callable
from typing import Any, TypeVar

import redis

from localshortener.dao.exceptions import DataStoreError


__all__ = []


F = TypeVar('F', bound=Callable[..., Any])


def _redis_location(client: redis.Redis) -> str:
    """'host:port/db' of the client's connection pool, for error messages"""
    kwargs = client.connection_pool.connection_kwargs
    return '{}:{}/{}'.format(kwargs.get('host'), kwargs.get('port'), kwargs.get('db'))


def handle_redis_connection_error(method: F) -> F:
    """Re-raise redis-py errors from a DAO method as DataStoreError

    Unreachable servers and failing commands get distinct messages; the
    original exception is kept as `__cause__`.
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except redis.exceptions.ConnectionError as e:
            message = f"Can't connect to Redis at {_redis_location(self.redis)}."
            raise DataStoreError(message) from e
        except redis.exceptions.RedisError as e:
            message = f'Redis at {_redis_location(self.redis)} failed: {e}'
            raise DataStoreError(message) from e

    return wrapper
