"""Status normalizer for transcode (MediaConvert) job state change events."""

from __future__ import annotations

import logging
from typing import Any

from framecue.core.clock import epoch_ms, utc_now
from framecue.core.types import Clock
from framecue.models.operations import CanonicalStatus, NormalizationResult, RawNotification, WorkflowStep
from framecue.normalizers.snapshot import map_status, mark_completed, mark_failed, step_record

logger = logging.getLogger(__name__)


class TranscodeStatusNormalizer:
    """IStatusNormalizer for ``aws.mediaconvert`` job state changes."""

    SOURCE = "aws.mediaconvert"

    MAPPING: dict[str, CanonicalStatus] = {
        "SUBMITTED": CanonicalStatus.STARTED,
        "PROGRESSING": CanonicalStatus.IN_PROGRESS,
        "STATUS_UPDATE": CanonicalStatus.IN_PROGRESS,
        "COMPLETE": CanonicalStatus.COMPLETED,
        "CANCELED": CanonicalStatus.ERROR,
        "ERROR": CanonicalStatus.ERROR,
    }

    def __init__(self, default_step: str = WorkflowStep.START_MEDIACONVERT, clock: Clock = utc_now) -> None:
        self._default_step = str(default_step)
        self._clock = clock

    @staticmethod
    def error_message(notification: RawNotification) -> str:
        if notification.status == "CANCELED":
            return "user canceled job"
        message = f"{notification.status}: {notification.job_id}"
        if notification.status == "ERROR" and notification.error_message:
            message = notification.error_message
        if notification.error_code:
            message = f"{message} ({notification.error_code})"
        return message

    def normalize(
        self, notification: RawNotification, snapshot: dict[str, Any], *, step: str | None = None
    ) -> NormalizationResult:
        step = step or self._default_step
        status = map_status(self.MAPPING, notification.status)

        if status in (CanonicalStatus.STARTED, CanonicalStatus.IN_PROGRESS):
            if notification.progress is not None:
                step_record(snapshot, step)["progress"] = notification.progress
            return NormalizationResult(status=status, terminal=False, snapshot=snapshot)

        finished_at = epoch_ms(self._clock())
        if status is CanonicalStatus.COMPLETED:
            fields = {}
            if notification.details.get("outputGroupDetails"):
                fields["outputGroupDetails"] = notification.details["outputGroupDetails"]
            mark_completed(snapshot, step, finished_at, **fields)
            return NormalizationResult(status=status, terminal=True, success=True, snapshot=snapshot)

        message = self.error_message(notification)
        if notification.status not in self.MAPPING:
            logger.warning("unrecognized transcode status %r for job %s", notification.status, notification.job_id)
        mark_failed(snapshot, step, finished_at, message)
        return NormalizationResult(status=status, terminal=True, snapshot=snapshot, error=message)
