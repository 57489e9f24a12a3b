"""Segment detection steps: start the analysis job, later collect its results.

Both steps call the analysis API through the signed client rather than an
SDK client.
"""

from __future__ import annotations

import logging
import posixpath
import secrets
from collections.abc import Callable
from typing import Any

from framecue.core.config import AnalysisConfig
from framecue.core.exceptions import ConfigurationError, FrameCueError, StepInputError
from framecue.core.protocols import ICorrelationStore, IResultStore, ISignedClient
from framecue.models.operations import ServiceType, WorkflowStep
from framecue.workflow.state import StepState, suspend

logger = logging.getLogger(__name__)

SERVICE_NAME = ServiceType.VIDEO_ANALYSIS.value
SEGMENT_TYPES = ["TECHNICAL_CUE", "SHOT"]
MAX_PAGES_PER_PART = 10


class SegmentDetectionStep:
    def __init__(
        self,
        *,
        client: ISignedClient,
        store: ICorrelationStore,
        results: IResultStore,
        config: AnalysisConfig,
        tag_factory: Callable[[], str] | None = None,
    ) -> None:
        self._client = client
        self._store = store
        self._results = results
        self._config = config
        self._tag_factory = tag_factory or (lambda: f"{config.solution_uuid}_{secrets.token_hex(8)}")

    def make_params(self, bucket: str, key: str, tag: str) -> dict[str, Any]:
        confidence = self._config.min_segment_confidence
        return {
            "JobTag": tag,
            "ClientRequestToken": tag,
            "Video": {"S3Object": {"Bucket": bucket, "Name": key}},
            "NotificationChannel": {
                "RoleArn": self._config.topic_role_arn,
                "SNSTopicArn": self._config.topic_arn,
            },
            "SegmentTypes": list(SEGMENT_TYPES),
            "Filters": {
                "ShotFilter": {"MinSegmentConfidence": confidence},
                "TechnicalCueFilter": {"MinSegmentConfidence": confidence},
            },
        }

    def start(self, state: StepState) -> dict[str, Any]:
        """Start segment detection on the transcoded mp4 and suspend until it finishes."""
        if not self._config.topic_arn or not self._config.topic_role_arn:
            raise ConfigurationError("missing analysis topic arn or role arn")

        transcoded = state.previous(WorkflowStep.START_MEDIACONVERT).get("output") or {}
        missing = [name for name in ("bucket", "prefix") if not transcoded.get(name)]
        if missing:
            raise StepInputError(f"missing output.{', '.join(missing)}")

        video = next(
            (key for key in self._results.list_keys(transcoded["bucket"], transcoded["prefix"])
             if posixpath.splitext(key)[1] == ".mp4"),
            None,
        )
        if video is None:
            raise StepInputError("fail to find transcoded mp4")

        params = self.make_params(transcoded["bucket"], video, self._tag_factory())
        response = self._client.send(SERVICE_NAME, "StartSegmentDetection", params)
        job_id = (response or {}).get("JobId")
        if not job_id:
            raise FrameCueError(f"{video} startSegmentDetection job failed")

        state.set_output(WorkflowStep.START_SEGMENT_DETECTION, {"jobId": job_id})
        suspend(
            self._store,
            job_id=job_id,
            token=state.token,
            service=SERVICE_NAME,
            step=WorkflowStep.START_SEGMENT_DETECTION,
            state=state,
        )
        logger.info("started segment detection job %s for %s", job_id, video)
        return state.to_snapshot()

    def collect(self, state: StepState) -> dict[str, Any]:
        """Page through the finished job's segments and store them as numbered JSON parts."""
        job_id = state.previous(WorkflowStep.START_SEGMENT_DETECTION).get("jobId")
        if not job_id:
            raise StepInputError("missing jobId")

        bucket = state.input["bucket"]
        prefix = state.output_path(state.input["key"], WorkflowStep.COLLECT_DETECTION_RESULTS)
        idx = 0
        next_token: str | None = None
        while True:
            next_token = self._collect_part(idx, job_id, next_token, bucket, prefix)
            idx += 1
            if not next_token:
                break

        state.set_output(WorkflowStep.COLLECT_DETECTION_RESULTS, {
            "output": {"bucket": bucket, "prefix": f"{prefix}/", "parts": idx},
        })
        return state.to_snapshot()

    def _collect_part(
        self, idx: int, job_id: str, next_token: str | None, bucket: str, prefix: str
    ) -> str | None:
        segments: list[dict[str, Any]] = []
        response: dict[str, Any] = {}
        for _ in range(MAX_PAGES_PER_PART):
            params: dict[str, Any] = {"JobId": job_id}
            if next_token:
                params["NextToken"] = next_token
            response = self._client.send(SERVICE_NAME, "GetSegmentDetection", params)
            segments.extend(response.get("Segments") or [])
            next_token = response.get("NextToken")
            if not next_token:
                break

        self._results.write_json(bucket, posixpath.join(prefix, f"{idx:08d}.json"), {
            "Segments": segments,
            "VideoMetadata": response.get("VideoMetadata"),
            "AudioMetadata": response.get("AudioMetadata"),
            "SelectedSegmentTypes": response.get("SelectedSegmentTypes"),
        })
        return next_token
