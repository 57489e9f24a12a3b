"""Push-notification (SNS) envelope adapter.

Analysis services publish their job status to an SNS topic. Services
disagree on the casing of the job id field (``JobId`` vs ``jobId``), so
both are accepted here and the dispatcher only ever sees RawNotification.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from framecue.core.exceptions import CorrelationError
from framecue.models.operations import RawNotification

_KNOWN_FIELDS = {"JobId", "jobId", "Status", "status", "Timestamp", "ErrorCode", "errorCode",
                 "ErrorMessage", "errorMessage", "StatusMessage"}


def _first(message: dict[str, Any], *names: str) -> Any:
    for name in names:
        value = message.get(name)
        if value not in (None, ""):
            return value
    return None


def _as_str(value: Any) -> str | None:
    return None if value is None else str(value)


def parse_timestamp(value: Any) -> int | None:
    """Epoch ms from an ISO 8601 string or a numeric epoch (s or ms)."""
    if value in (None, ""):
        return None
    if isinstance(value, (int, float)):
        # Rekognition stamps messages in epoch ms; tolerate seconds too.
        return int(value) if value > 10**11 else int(value * 1000)
    try:
        return int(datetime.fromisoformat(str(value).replace("Z", "+00:00")).timestamp() * 1000)
    except ValueError:
        return None


def parse_sns_message(message: dict[str, Any] | str, timestamp: Any = None) -> RawNotification:
    """Convert one decoded SNS ``Message`` into a RawNotification."""
    if isinstance(message, str):
        try:
            message = json.loads(message)
        except json.JSONDecodeError as exc:
            raise CorrelationError(None, f"malformed SNS message: {exc}") from exc
    if not isinstance(message, dict):
        raise CorrelationError(None, "malformed SNS message")

    job_id = _first(message, "JobId", "jobId")
    status = _first(message, "Status", "status")
    if not job_id or not status:
        raise CorrelationError(job_id, "SNS message missing job id or status")

    return RawNotification(
        job_id=str(job_id),
        status=str(status),
        timestamp=parse_timestamp(timestamp) or parse_timestamp(message.get("Timestamp")),
        source="sns",
        error_code=_as_str(_first(message, "ErrorCode", "errorCode")),
        error_message=_as_str(_first(message, "ErrorMessage", "errorMessage", "StatusMessage")),
        details={k: v for k, v in message.items() if k not in _KNOWN_FIELDS},
    )


def parse_sns_event(event: dict[str, Any]) -> list[RawNotification]:
    """Convert a Lambda SNS event into one RawNotification per record."""
    records = event.get("Records") or []
    if not records:
        raise CorrelationError(None, "SNS event has no records")
    notifications = []
    for record in records:
        sns = record.get("Sns") or {}
        notifications.append(parse_sns_message(sns.get("Message") or "", sns.get("Timestamp")))
    return notifications


def is_sns_event(event: dict[str, Any]) -> bool:
    records = event.get("Records") or []
    return bool(records) and all("Sns" in record for record in records)
