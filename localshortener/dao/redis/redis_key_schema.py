"""Key names used by the Redis DAOs

All keys live under an optional namespace, typically '<app>:<env>'
(see `localshortener.utils.config.app_prefix()`):

    <prefix>:links:collection   JSON document holding every short URL record
    <prefix>:logs               capped list of diagnostic log entries
"""

import functools
from collections.abc import Callable


__all__ = ['RedisKeySchema']

LINKS_COLLECTION = 'links:collection'
DIAGNOSTIC_LOGS = 'logs'


def prefix_key(func: Callable[..., str]) -> Callable[..., str]:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        return self._namespaced(func(self, *args, **kwargs))

    return wrapper


class RedisKeySchema:
    """Namespaced Redis key names, e.g. 'localshortener:dev:logs'"""

    def __init__(self, prefix: str | None = None):
        if not isinstance(prefix, (str, type(None))):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')
        self.prefix = prefix

    def _namespaced(self, key: str) -> str:
        if self.prefix is None:
            return key
        return ':'.join((self.prefix, key))

    @prefix_key
    def links_collection_key(self) -> str:
        return LINKS_COLLECTION

    @prefix_key
    def diagnostic_logs_key(self) -> str:
        return DIAGNOSTIC_LOGS
