"""Status normalizers for video (Rekognition) and document (Textract) analysis SNS messages."""

from __future__ import annotations

from typing import Any

from framecue.core.clock import epoch_ms, utc_now
from framecue.core.types import Clock
from framecue.models.operations import CanonicalStatus, NormalizationResult, RawNotification, WorkflowStep
from framecue.normalizers.snapshot import map_status, mark_completed, mark_failed


def _analysis_fields(notification: RawNotification) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    if notification.details.get("API"):
        fields["api"] = notification.details["API"]
    if notification.details.get("JobTag"):
        fields["jobTag"] = notification.details["JobTag"]
    return fields


def _analysis_error(notification: RawNotification) -> str:
    message = f"{notification.status}: {notification.job_id}"
    if notification.error_message:
        message = f"{message} ({notification.error_message})"
    return message


class VideoAnalysisStatusNormalizer:
    """IStatusNormalizer for Rekognition Video job completion messages."""

    MAPPING: dict[str, CanonicalStatus] = {
        "IN_PROGRESS": CanonicalStatus.IN_PROGRESS,
        "SUCCEEDED": CanonicalStatus.COMPLETED,
        "ERROR": CanonicalStatus.ERROR,
        "FAILED": CanonicalStatus.ERROR,
    }

    def __init__(self, default_step: str = WorkflowStep.START_SEGMENT_DETECTION, clock: Clock = utc_now) -> None:
        self._default_step = str(default_step)
        self._clock = clock

    def normalize(
        self, notification: RawNotification, snapshot: dict[str, Any], *, step: str | None = None
    ) -> NormalizationResult:
        step = step or self._default_step
        status = map_status(self.MAPPING, notification.status)

        if status is CanonicalStatus.IN_PROGRESS:
            return NormalizationResult(status=status, terminal=False, snapshot=snapshot)

        finished_at = epoch_ms(self._clock())
        if status is CanonicalStatus.COMPLETED:
            mark_completed(snapshot, step, finished_at, **_analysis_fields(notification))
            return NormalizationResult(status=status, terminal=True, success=True, snapshot=snapshot)

        message = _analysis_error(notification)
        mark_failed(snapshot, step, finished_at, message)
        return NormalizationResult(status=status, terminal=True, snapshot=snapshot, error=message)


class DocumentAnalysisStatusNormalizer:
    """IStatusNormalizer for Textract job completion messages.

    ``PARTIAL_SUCCESS`` still resumes the workflow; the step record is
    flagged ``partial`` so later steps can tell.
    """

    MAPPING: dict[str, CanonicalStatus] = {
        "IN_PROGRESS": CanonicalStatus.IN_PROGRESS,
        "SUCCEEDED": CanonicalStatus.COMPLETED,
        "PARTIAL_SUCCESS": CanonicalStatus.COMPLETED,
        "ERROR": CanonicalStatus.ERROR,
        "FAILED": CanonicalStatus.ERROR,
    }

    def __init__(self, default_step: str = WorkflowStep.START_DOCUMENT_ANALYSIS, clock: Clock = utc_now) -> None:
        self._default_step = str(default_step)
        self._clock = clock

    def normalize(
        self, notification: RawNotification, snapshot: dict[str, Any], *, step: str | None = None
    ) -> NormalizationResult:
        step = step or self._default_step
        status = map_status(self.MAPPING, notification.status)

        if status is CanonicalStatus.IN_PROGRESS:
            return NormalizationResult(status=status, terminal=False, snapshot=snapshot)

        finished_at = epoch_ms(self._clock())
        if status is CanonicalStatus.COMPLETED:
            fields = _analysis_fields(notification)
            if notification.status == "PARTIAL_SUCCESS":
                fields["partial"] = True
            mark_completed(snapshot, step, finished_at, **fields)
            return NormalizationResult(status=status, terminal=True, success=True, snapshot=snapshot)

        message = _analysis_error(notification)
        mark_failed(snapshot, step, finished_at, message)
        return NormalizationResult(status=status, terminal=True, snapshot=snapshot, error=message)
