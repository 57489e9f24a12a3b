"""Shared test doubles: memory backends, a settable clock and a scripted signed client."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from framecue.orchestration.memory_resumer import RecordingResumer
from framecue.persistence.memory_backend import MemoryCorrelationStore, MemoryResultStore


class FakeClock:
    """Callable clock pinned to a given instant until advanced."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 15, 9, 30, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


class FakeSignedClient:
    """Scripted ISignedClient: pops one response per call and records requests.

    ``calls`` holds ``(service, operation or path, payload)``; ``endpoints``
    holds the endpoint override of each call.
    """

    def __init__(self, responses: list[dict[str, Any]] | None = None) -> None:
        self.responses = list(responses or [])
        self.calls: list[tuple[str, str, dict[str, Any]]] = []
        self.endpoints: list[str | None] = []

    def send(self, service_name: str, operation_name: str, payload: dict[str, Any]) -> dict[str, Any]:
        self.calls.append((service_name, operation_name, payload))
        self.endpoints.append(None)
        return self.responses.pop(0)

    def post_json(
        self, service_name: str, path: str, payload: dict[str, Any], *, endpoint: str | None = None
    ) -> dict[str, Any]:
        self.calls.append((service_name, path, payload))
        self.endpoints.append(endpoint)
        return self.responses.pop(0)


__all__ = ["FakeClock", "FakeSignedClient", "MemoryCorrelationStore", "MemoryResultStore", "RecordingResumer"]
