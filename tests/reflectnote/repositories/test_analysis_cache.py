import json
import os
from datetime import datetime, timezone

import pytest

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')

from reflectnote.core import config  # noqa: E402
from reflectnote.repositories.analyses import AnalysisCache  # noqa: E402
from reflectnote.storage import MemoryRecordStore  # noqa: E402


class _Clock:
    def __init__(self, *moments: datetime) -> None:
        self._moments = list(moments)

    def __call__(self) -> datetime:
        return self._moments.pop(0)


@pytest.fixture
def store() -> MemoryRecordStore:
    return MemoryRecordStore()


def test_get_analyses_defaults_to_empty_mapping(store: MemoryRecordStore) -> None:
    assert AnalysisCache(store).get_analyses() == {}


def test_set_analysis_stamps_timestamp_and_keeps_payload(store: MemoryRecordStore) -> None:
    clock = _Clock(datetime(2026, 3, 2, 9, 30, tzinfo=timezone.utc))
    cache = AnalysisCache(store, clock=clock)

    entry = cache.set_analysis('class-1:weekly', {'summary': 'Calm week', 'keywords': ['math', 'art']})

    assert entry.timestamp == '2026-03-02T09:30:00+00:00'
    assert entry.payload == {'summary': 'Calm week', 'keywords': ['math', 'art']}
    assert json.loads(store.get(config.ANALYSES_KEY)) == {
        'class-1:weekly': {
            'summary': 'Calm week',
            'keywords': ['math', 'art'],
            'timestamp': '2026-03-02T09:30:00+00:00',
        },
    }


def test_set_analysis_overwrites_same_key_and_keeps_others(store: MemoryRecordStore) -> None:
    clock = _Clock(
        datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc),
        datetime(2026, 3, 2, 10, 0, tzinfo=timezone.utc),
        datetime(2026, 3, 2, 11, 0, tzinfo=timezone.utc),
    )
    cache = AnalysisCache(store, clock=clock)

    cache.set_analysis('a', {'score': 1, 'note': 'first'})
    cache.set_analysis('b', {'score': 2})
    cache.set_analysis('a', {'score': 3})

    analyses = cache.get_analyses()
    assert sorted(analyses) == ['a', 'b']
    assert analyses['a'].payload == {'score': 3}
    assert analyses['a'].timestamp == '2026-03-02T11:00:00+00:00'
    assert cache.get_analysis('b').payload == {'score': 2}
    assert cache.get_analysis('missing') is None


def test_set_analysis_timestamp_wins_over_payload_timestamp(store: MemoryRecordStore) -> None:
    cache = AnalysisCache(store, clock=lambda: datetime(2026, 1, 1, tzinfo=timezone.utc))

    entry = cache.set_analysis('a', {'timestamp': 'stale'})

    assert entry.timestamp == '2026-01-01T00:00:00+00:00'


def test_set_analysis_keeps_null_payload_fields(store: MemoryRecordStore) -> None:
    cache = AnalysisCache(store, clock=lambda: datetime(2026, 1, 1, tzinfo=timezone.utc))

    cache.set_analysis('k', {'score': None, 'nested': {'a': None}, 'summary': 'x'})

    assert json.loads(store.get(config.ANALYSES_KEY))['k'] == {
        'score': None,
        'nested': {'a': None},
        'summary': 'x',
        'timestamp': '2026-01-01T00:00:00+00:00',
    }
    assert cache.get_analysis('k').payload == {'score': None, 'nested': {'a': None}, 'summary': 'x'}
