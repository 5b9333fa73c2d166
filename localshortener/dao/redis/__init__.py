from localshortener.dao.redis.redis_key_schema import RedisKeySchema
from localshortener.dao.redis.mixins import RedisClientMixin
from localshortener.dao.redis.short_url_redis_dao import ShortURLRedisDAO
from localshortener.dao.redis.diagnostic_log_redis_dao import DiagnosticLogRedisDAO


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'ShortURLRedisDAO',
    'DiagnosticLogRedisDAO',
]
