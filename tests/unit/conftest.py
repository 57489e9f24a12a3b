"""Unit test fixtures — in-memory backends wired into a dispatcher."""

from __future__ import annotations

import pytest

from framecue.normalizers import build_normalizers
from framecue.orchestration.dispatcher import CompletionDispatcher
from framecue.orchestration.handler import NotificationHandler
from tests.fakes import FakeClock, MemoryCorrelationStore, RecordingResumer


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return MemoryCorrelationStore(ttl_seconds=3600, clock=clock)


@pytest.fixture
def resumer():
    return RecordingResumer()


@pytest.fixture
def dispatcher(store, resumer, clock):
    return CompletionDispatcher(store=store, normalizers=build_normalizers(clock=clock), resumer=resumer)


@pytest.fixture
def handler(dispatcher):
    return NotificationHandler(dispatcher)
