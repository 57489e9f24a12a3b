"""Pending operation, notification and dispatch models."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ServiceType(StrEnum):
    """Upstream service family that owns a long-running job."""

    TRANSCODE = "mediaconvert"
    VIDEO_ANALYSIS = "rekognition"
    DOCUMENT_ANALYSIS = "textract"


class CanonicalStatus(StrEnum):
    STARTED = "started"
    IN_PROGRESS = "inProgress"
    COMPLETED = "completed"
    ERROR = "error"


class WorkflowStep(StrEnum):
    """Names of the workflow steps; also the keys of ``snapshot["output"]``."""

    RUN_MEDIAINFO = "run-mediainfo"
    START_MEDIACONVERT = "start-mediaconvert"
    START_SEGMENT_DETECTION = "start-segment-detection"
    START_DOCUMENT_ANALYSIS = "start-document-analysis"
    COLLECT_DETECTION_RESULTS = "collect-detection-results"
    CREATE_TIMELINE = "create-timeline"


class PendingOperation(BaseModel):
    """A suspended workflow step waiting on an external job."""

    job_id: str
    token: str
    service: str
    api: str
    data: dict[str, Any] = Field(default_factory=dict)
    expires_at: int = 0


class RawNotification(BaseModel):
    """Transport-neutral job notification produced by the transport adapters."""

    job_id: str
    status: str
    timestamp: int | None = None  # epoch ms
    source: str = ""
    error_code: str | None = None
    error_message: str | None = None
    progress: int | None = None
    details: dict[str, Any] = Field(default_factory=dict)


class NormalizationResult(BaseModel):
    """Outcome of mapping one notification onto a workflow snapshot."""

    status: CanonicalStatus
    terminal: bool
    success: bool = False
    snapshot: dict[str, Any] = Field(default_factory=dict)
    error: str | None = None


class DispatchOutcome(BaseModel):
    job_id: str
    status: CanonicalStatus | None = None
    resumed: bool = False
    dropped: bool = False
    snapshot: dict[str, Any] | None = None
