"""Redis client plumbing shared by the Redis-backed DAOs.

A DAO either receives a ready client (tests, shared connection pools) or
builds one from connection parameters. Either way the client is pinged once
at construction, so an unreachable Redis fails fast with DataStoreError
instead of on the first read or write.

Classes:
    RedisClientMixin: client setup, key schema and healthcheck for Redis DAOs.

Example:
    >>> class DiagnosticLogRedisDAO(RedisClientMixin, DiagnosticLogBaseDAO):
    ...     pass
    ...
    >>> config = load_config('diagnostic_logs')
    >>> dao = DiagnosticLogRedisDAO.from_config(config['redis'], prefix='localshortener:dev')
    >>> dao.keys.diagnostic_logs_key()
    'localshortener:dev:logs'
"""

from typing import Any, Optional, Self

import redis

from localshortener.dao.exceptions import DataStoreError
from localshortener.dao.redis.helpers import _redis_location
from localshortener.dao.redis.redis_key_schema import RedisKeySchema


class RedisClientMixin:
    """Mixin providing `self.redis` and `self.keys` to Redis-backed DAOs.

    Attributes:
        redis (redis.Redis): client used by the DAO methods.
        keys (RedisKeySchema): namespaced key names for this app + environment.
    """

    def __init__(
        self,
        redis_host: Optional[str] = 'localhost',
        redis_port: Optional[int] = 6379,
        redis_db: Optional[int] = 0,
        redis_decode_responses: Optional[bool] = True,
        redis_username: Optional[str] = None,
        redis_password: Optional[str] = None,
        redis_client: Optional[redis.Redis] = None,
        prefix: Optional[str] = None,
    ):
        """Attach a Redis client and verify connectivity

        `redis_client` takes precedence; the remaining `redis_*` parameters
        are only used to build a client when none is given.

        Raises:
            DataStoreError:
                If Redis does not answer the initial PING.
        """
        self.redis = redis_client if redis_client is not None else self._connect(
            host=redis_host,
            port=int(redis_port),
            db=int(redis_db),
            decode_responses=redis_decode_responses,
            username=redis_username,
            password=redis_password,
        )
        self.keys = RedisKeySchema(prefix=prefix)

        self._healthcheck()

    @classmethod
    def from_config(cls, redis_config: dict[str, Any], prefix: Optional[str] = None, **kwargs) -> Self:
        """Build the DAO from the 'redis' section returned by `load_config()`

        Keys of `redis_config` ('host', 'port', ...) map onto the `redis_*`
        constructor parameters; extra keyword arguments are passed through.
        """
        return cls(**{f'redis_{k}': v for k, v in redis_config.items()}, prefix=prefix, **kwargs)

    @staticmethod
    def _connect(**connection_kwargs) -> redis.Redis:
        return redis.Redis(**connection_kwargs)

    def _healthcheck(self) -> None:
        """PING Redis; raise DataStoreError when it is unreachable"""
        try:
            self.redis.ping()
        except redis.exceptions.ConnectionError as e:
            raise DataStoreError(
                f"Can't connect to Redis at {_redis_location(self.redis)}. Check the provided configuration parameters."
            ) from e
