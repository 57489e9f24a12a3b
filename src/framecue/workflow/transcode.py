"""Transcode step: submit a MediaConvert job for the source media and suspend.

MediaConvert is a REST-JSON API on an account-specific endpoint; request and
response members are lowerCamelCase on the wire.
"""

from __future__ import annotations

import logging
from typing import Any

from framecue.core.config import TranscodeConfig
from framecue.core.exceptions import ConfigurationError, FrameCueError
from framecue.core.protocols import ICorrelationStore, ISignedClient
from framecue.models.operations import ServiceType, WorkflowStep
from framecue.workflow.state import StepState, suspend

logger = logging.getLogger(__name__)

SERVICE_NAME = ServiceType.TRANSCODE.value
CREATE_JOB_PATH = "/2017-08-29/jobs"
AUDIO_SELECTOR_NAME = "Audio Selector 1"


def _channels(track: dict[str, Any]) -> int | None:
    # mediainfo spells it "channelS" for some containers
    value = track.get("channelS", track.get("channels"))
    return None if value is None else int(value)


def _stream_order(track: dict[str, Any]) -> int:
    value = track.get("streamIdentifier")
    if value is None:
        value = track.get("streamOrder", 0)
    return int(value)


def parse_tracks(audio: list[dict[str, Any]]) -> list[int]:
    """Pick the 1-based audio track(s) to transcode from mediainfo audio tracks.

    One track: use it. Several: the first stereo (2+ channel) track, else the
    first Dolby E track, else the first two mono PCM tracks.
    """
    tracks = [
        {**track, "trackIdx": idx + 1}
        for idx, track in enumerate(sorted(audio, key=_stream_order))
    ]
    if not tracks:
        return []
    if len(tracks) == 1:
        return [tracks[0]["trackIdx"]]
    for track in tracks:
        if (_channels(track) or 0) >= 2:
            return [track["trackIdx"]]
    for track in tracks:
        if track.get("format") == "Dolby E":
            return [track["trackIdx"]]
    return [track["trackIdx"] for track in tracks if _channels(track) == 1][:2]


class TranscodeStep:
    def __init__(
        self,
        *,
        client: ISignedClient,
        store: ICorrelationStore,
        config: TranscodeConfig,
        solution_uuid: str,
    ) -> None:
        self._client = client
        self._store = store
        self._config = config
        self._solution_uuid = solution_uuid

    def make_output_group(self, bucket: str, prefix: str, audio_source: str | None) -> dict[str, Any]:
        output: dict[str, Any] = {
            "containerSettings": {"container": "MP4", "mp4Settings": {}},
            "videoDescription": {
                "codecSettings": {
                    "codec": "H_264",
                    "h264Settings": {
                        "rateControlMode": "QVBR",
                        "maxBitrate": 5000000,
                        "qvbrSettings": {"qvbrQualityLevel": 7},
                        "sceneChangeDetect": "TRANSITION_DETECTION",
                    },
                },
            },
        }
        if audio_source:
            output["audioDescriptions"] = [{
                "audioSourceName": audio_source,
                "codecSettings": {
                    "codec": "AAC",
                    "aacSettings": {"bitrate": 96000, "codingMode": "CODING_MODE_2_0", "sampleRate": 48000},
                },
            }]
        return {
            "name": "File Group",
            "outputGroupSettings": {
                "type": "FILE_GROUP_SETTINGS",
                "fileGroupSettings": {"destination": f"s3://{bucket}/{prefix}/"},
            },
            "outputs": [output],
        }

    def make_job(self, state: StepState, prefix: str) -> dict[str, Any]:
        bucket, key = state.input["bucket"], state.input["key"]
        mediainfo = (state.output.get(WorkflowStep.RUN_MEDIAINFO) or {}).get("mediainfo") or {}
        tracks = parse_tracks(list(mediainfo.get("audio") or []))

        job_input: dict[str, Any] = {
            "fileInput": f"s3://{bucket}/{key}",
            "videoSelector": {"colorSpace": "FOLLOW", "rotate": "AUTO"},
            "filterEnable": "AUTO",
            "psiControl": "USE_PSI",
            "filterStrength": 0,
            "deblockFilter": "DISABLED",
            "denoiseFilter": "DISABLED",
            "timecodeSource": "EMBEDDED",
        }
        if tracks:
            job_input["audioSelectors"] = {
                AUDIO_SELECTOR_NAME: {
                    "offset": 0,
                    "defaultSelection": "DEFAULT",
                    "selectorType": "TRACK",
                    "tracks": tracks,
                },
            }

        return {
            "role": self._config.role_arn,
            "settings": {
                "adAvailOffset": 0,
                "inputs": [job_input],
                "outputGroups": [
                    self.make_output_group(bucket, prefix, AUDIO_SELECTOR_NAME if tracks else None),
                ],
            },
            "userMetadata": {"solutionUuid": self._solution_uuid},
        }

    def start(self, state: StepState) -> dict[str, Any]:
        """Create the transcode job and suspend until its completion event arrives."""
        if not self._config.endpoint or not self._config.role_arn:
            raise ConfigurationError("missing transcode endpoint or role arn")

        prefix = state.output_path(state.input["key"], WorkflowStep.START_MEDIACONVERT)
        response = self._client.post_json(
            SERVICE_NAME, CREATE_JOB_PATH, self.make_job(state, prefix), endpoint=self._config.endpoint,
        )
        job_id = ((response or {}).get("job") or {}).get("id")
        if not job_id:
            raise FrameCueError(f"{state.input['key']} createJob failed")

        state.set_output(WorkflowStep.START_MEDIACONVERT, {
            "jobId": job_id,
            "output": {"bucket": state.input["bucket"], "prefix": f"{prefix}/"},
        })
        suspend(
            self._store,
            job_id=job_id,
            token=state.token,
            service=SERVICE_NAME,
            step=WorkflowStep.START_MEDIACONVERT,
            state=state,
        )
        logger.info("started transcode job %s for %s", job_id, state.input["key"])
        return state.to_snapshot()
