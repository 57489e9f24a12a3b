"""Redis backend implementing ICorrelationStore."""

from __future__ import annotations

import json
from typing import Any

import redis

from framecue.core.clock import epoch_seconds, utc_now
from framecue.core.exceptions import AlreadyRegistered, NotFound, StoreError
from framecue.models.operations import PendingOperation


class RedisCorrelationStore:
    """ICorrelationStore backed by Redis ``SET NX EX``; expiry is the key TTL."""

    def __init__(self, host: str = "localhost", port: int = 6379, db: int = 0,
                 ttl_seconds: int = 7 * 24 * 3600, key_prefix: str = "framecue:token:") -> None:
        self._host = host
        self._port = port
        self._db = db
        self._ttl = ttl_seconds
        self._prefix = key_prefix
        self._client = redis.Redis(
            host=host, port=port, db=db, decode_responses=True,
        )

    def _key(self, job_id: str) -> str:
        return f"{self._prefix}{job_id}"

    def register(self, job_id: str, token: str, service: str, api: str, data: dict[str, Any]) -> None:
        value = json.dumps({"token": token, "service": service, "api": api, "data": data})
        try:
            created = self._client.set(self._key(job_id), value, nx=True, ex=self._ttl)
        except Exception as exc:
            raise StoreError(f"Redis SET failed for job={job_id!r}: {exc}") from exc
        if not created:
            raise AlreadyRegistered(job_id)

    def get(self, job_id: str) -> PendingOperation:
        try:
            raw = self._client.get(self._key(job_id))
            ttl = self._client.ttl(self._key(job_id)) if raw is not None else -2
        except Exception as exc:
            raise StoreError(f"Redis GET failed for job={job_id!r}: {exc}") from exc
        if raw is None:
            raise NotFound(job_id)
        record = json.loads(raw)
        return PendingOperation(
            job_id=job_id,
            token=record["token"],
            service=record["service"],
            api=record["api"],
            data=record.get("data") or {},
            expires_at=epoch_seconds(utc_now()) + ttl if ttl > 0 else 0,
        )

    def unregister(self, job_id: str) -> None:
        try:
            self._client.delete(self._key(job_id))
        except Exception as exc:
            raise StoreError(f"Redis DELETE failed for job={job_id!r}: {exc}") from exc
