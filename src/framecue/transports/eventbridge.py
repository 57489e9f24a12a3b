"""Poll-result (EventBridge) envelope adapter for transcode job state changes."""

from __future__ import annotations

from typing import Any

from framecue.core.exceptions import CorrelationError
from framecue.models.operations import RawNotification
from framecue.transports.sns import parse_timestamp


def parse_event_bridge(event: dict[str, Any]) -> RawNotification:
    detail = event.get("detail")
    if not isinstance(detail, dict):
        raise CorrelationError(None, "event missing detail")

    job_id = detail.get("jobId")
    status = detail.get("status")
    if not job_id or not status:
        raise CorrelationError(job_id, "event detail missing jobId or status")

    progress = (detail.get("jobProgress") or {}).get("jobPercentComplete")
    details: dict[str, Any] = {}
    if detail.get("outputGroupDetails"):
        details["outputGroupDetails"] = detail["outputGroupDetails"]
    if detail.get("userMetadata"):
        details["userMetadata"] = detail["userMetadata"]

    return RawNotification(
        job_id=str(job_id),
        status=str(status),
        timestamp=parse_timestamp(detail.get("timestamp")) or parse_timestamp(event.get("time")),
        source=str(event.get("source") or ""),
        error_code=None if detail.get("errorCode") is None else str(detail["errorCode"]),
        error_message=detail.get("errorMessage"),
        progress=None if progress is None else int(progress),
        details=details,
    )


def is_event_bridge(event: dict[str, Any]) -> bool:
    return "detail" in event and "source" in event
