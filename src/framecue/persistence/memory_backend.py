"""In-memory backends for unit tests and local runs."""

from __future__ import annotations

import json
from datetime import timedelta
from typing import Any

from framecue.core.clock import epoch_seconds, utc_now
from framecue.core.exceptions import AlreadyRegistered, NotFound
from framecue.core.types import Clock
from framecue.models.operations import PendingOperation


class MemoryCorrelationStore:
    """Dict-backed ICorrelationStore with clock-driven expiry."""

    def __init__(self, ttl_seconds: int = 7 * 24 * 3600, clock: Clock = utc_now) -> None:
        self._records: dict[str, dict[str, Any]] = {}
        self._ttl = ttl_seconds
        self._clock = clock

    def _live(self, job_id: str) -> dict[str, Any] | None:
        record = self._records.get(job_id)
        if record is None:
            return None
        if record["expiresAt"] <= epoch_seconds(self._clock()):
            del self._records[job_id]
            return None
        return record

    def register(self, job_id: str, token: str, service: str, api: str, data: dict[str, Any]) -> None:
        if self._live(job_id) is not None:
            raise AlreadyRegistered(job_id)
        self._records[job_id] = {
            "token": token,
            "service": service,
            "api": api,
            "data": json.dumps(data),
            "expiresAt": epoch_seconds(self._clock() + timedelta(seconds=self._ttl)),
        }

    def get(self, job_id: str) -> PendingOperation:
        record = self._live(job_id)
        if record is None:
            raise NotFound(job_id)
        return PendingOperation(
            job_id=job_id,
            token=record["token"],
            service=record["service"],
            api=record["api"],
            data=json.loads(record["data"]),
            expires_at=record["expiresAt"],
        )

    def unregister(self, job_id: str) -> None:
        self._records.pop(job_id, None)

    def __contains__(self, job_id: str) -> bool:
        return self._live(job_id) is not None


class MemoryResultStore:
    """Dict-backed IResultStore for unit tests, keyed by (bucket, key)."""

    def __init__(self) -> None:
        self._objects: dict[tuple[str, str], dict[str, Any]] = {}

    def put_key(self, bucket: str, key: str) -> None:
        """Register a placeholder object, e.g. a transcoded rendition."""
        self._objects[(bucket, key)] = {}

    def write_json(self, bucket: str, key: str, body: dict[str, Any]) -> str:
        self._objects[(bucket, key)] = json.loads(json.dumps(body))
        return key

    def read_json(self, bucket: str, key: str) -> dict[str, Any]:
        return self._objects[(bucket, key)]

    def list_keys(self, bucket: str, prefix: str) -> list[str]:
        return sorted(k for b, k in self._objects if b == bucket and k.startswith(prefix))
