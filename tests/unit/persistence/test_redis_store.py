"""Unit tests for RedisCorrelationStore using fakeredis."""

from __future__ import annotations

from unittest.mock import patch

import fakeredis
import pytest

from framecue.core.exceptions import AlreadyRegistered, NotFound, StoreError
from framecue.persistence.redis_backend import RedisCorrelationStore


@pytest.fixture
def fake_server():
    return fakeredis.FakeServer()


@pytest.fixture
def fake_client(fake_server):
    return fakeredis.FakeRedis(server=fake_server, decode_responses=True)


@pytest.fixture
def store(fake_client):
    with patch("redis.Redis", return_value=fake_client):
        return RedisCorrelationStore(host="localhost", port=6379, db=0, ttl_seconds=600)


class TestRegister:
    def test_stores_with_ttl(self, store, fake_client):
        store.register("job-1", "token-1", "rekognition", "start-segment-detection", {"a": 1})
        assert 0 < fake_client.ttl("framecue:token:job-1") <= 600

    def test_second_registration_fails(self, store):
        store.register("job-1", "token-1", "rekognition", "start-segment-detection", {})
        with pytest.raises(AlreadyRegistered):
            store.register("job-1", "token-2", "rekognition", "start-segment-detection", {})
        assert store.get("job-1").token == "token-1"


class TestGet:
    def test_round_trips_record(self, store):
        store.register("job-1", "token-1", "textract", "start-document-analysis", {"output": {}})
        pending = store.get("job-1")
        assert pending.service == "textract"
        assert pending.api == "start-document-analysis"
        assert pending.data == {"output": {}}
        assert pending.expires_at > 0

    def test_missing_raises_not_found(self, store):
        with pytest.raises(NotFound):
            store.get("ghost")


class TestUnregister:
    def test_idempotent(self, store):
        store.register("job-1", "token-1", "rekognition", "start-segment-detection", {})
        store.unregister("job-1")
        store.unregister("job-1")
        with pytest.raises(NotFound):
            store.get("job-1")


class TestErrorWrapping:
    def test_get_wraps_redis_error(self):
        s = RedisCorrelationStore.__new__(RedisCorrelationStore)
        s._prefix = "framecue:token:"
        s._client = None  # will cause AttributeError -> StoreError
        with pytest.raises(StoreError):
            s.get("k")
