import json
from collections.abc import Sequence
from unittest.mock import MagicMock

import pytest
import redis

from localshortener.dao.base import ShortURLBaseDAO, DiagnosticLogBaseDAO
from localshortener.dao.exceptions import DataStoreError
from localshortener.models import ShortURLModel, Location
from localshortener.registry import URLRegistry, ClickRecorder


class InMemoryShortURLDAO(ShortURLBaseDAO):
    """ShortURL DAO keeping the serialized collection in memory.

    Records go through to_dict()/from_dict() exactly like the Redis DAO, so
    tests observe what would have been written to the data store.
    """

    def __init__(self, records: Sequence[ShortURLModel] = ()):
        self.document = json.dumps([record.to_dict() for record in records])
        self.save_calls = 0
        self.fail_on_save = False
        self.fail_on_load = False

    def load(self, **kwargs) -> list[ShortURLModel]:
        if self.fail_on_load:
            raise DataStoreError("Can't connect to Redis at redis.test:6379/0.")
        return [ShortURLModel.from_dict(document) for document in json.loads(self.document)]

    def save(self, records: Sequence[ShortURLModel], **kwargs) -> 'InMemoryShortURLDAO':
        if self.fail_on_save:
            raise DataStoreError("Can't connect to Redis at redis.test:6379/0.")
        self.save_calls += 1
        self.document = json.dumps([record.to_dict() for record in records])
        return self


class InMemoryDiagnosticLogDAO(DiagnosticLogBaseDAO):
    def __init__(self):
        self.stored = []

    def append(self, entry, **kwargs):
        self.stored.append(entry)
        return self

    def entries(self, level=None, limit=None, **kwargs):
        entries = [entry for entry in self.stored if level is None or entry['level'] == level]
        return entries[-limit:] if limit else entries

    def clear(self, **kwargs):
        self.stored = []
        return self


@pytest.fixture
def app_prefix() -> str:
    return 'testapp:test'


@pytest.fixture
def redis_client() -> redis.Redis:
    """Mock a Redis pipeline-compatible client."""
    client = MagicMock(spec=redis.client.Pipeline)
    client.connection_pool = MagicMock(
        spec=redis.ConnectionPool,
        connection_kwargs={'host': 'redis.test', 'port': 6379, 'db': 0},
    )
    client.pipeline.return_value = client
    client.__enter__.return_value = client
    client.__exit__.return_value = None
    client.get.return_value = None
    client.lrange.return_value = []
    return client


@pytest.fixture
def sofia() -> Location:
    return Location(country='Bulgaria', city='Sofia', region='Sofia-Capital')


@pytest.fixture
def short_url_dao() -> InMemoryShortURLDAO:
    return InMemoryShortURLDAO()


@pytest.fixture
def locate(sofia: Location) -> MagicMock:
    return MagicMock(return_value=sofia)


@pytest.fixture
def registry(short_url_dao: InMemoryShortURLDAO, locate: MagicMock) -> URLRegistry:
    return URLRegistry(short_url_dao, base_url='https://sho.rt', click_recorder=ClickRecorder(locate=locate))


@pytest.fixture
def diagnostic_log_dao() -> InMemoryDiagnosticLogDAO:
    return InMemoryDiagnosticLogDAO()
