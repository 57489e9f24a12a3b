"""Unit tests for the transcode step and its audio track selection."""

from __future__ import annotations

from typing import Any

import pytest

from framecue.core.config import TranscodeConfig
from framecue.core.exceptions import ConfigurationError, FrameCueError
from framecue.models.operations import RawNotification
from framecue.workflow.state import StepState
from framecue.workflow.transcode import CREATE_JOB_PATH, TranscodeStep, parse_tracks
from tests.fakes import FakeSignedClient

ENDPOINT = "https://abcd1234.mediaconvert.us-east-1.amazonaws.com"
CONFIG = TranscodeConfig(endpoint=ENDPOINT, role_arn="arn:aws:iam::123456789012:role/framecue-mc")


def _event(audio: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    output = {}
    if audio is not None:
        output["run-mediainfo"] = {"mediainfo": {"audio": audio}}
    return {
        "state": "start-mediaconvert",
        "token": "task-token",
        "input": {"bucket": "media", "key": "uploads/clip.mov"},
        "output": output,
    }


def _step(client, store, config=CONFIG):
    return TranscodeStep(client=client, store=store, config=config, solution_uuid="uuid-1")


class TestParseTracks:
    def test_no_audio(self):
        assert parse_tracks([]) == []

    def test_single_track(self):
        assert parse_tracks([{"streamOrder": 3, "channels": 6}]) == [1]

    def test_first_stereo_in_stream_order(self):
        audio = [
            {"streamOrder": 2, "channels": 2},
            {"streamOrder": 1, "channels": 1},
        ]
        assert parse_tracks(audio) == [2]

    def test_dolby_e_when_no_stereo(self):
        audio = [{"streamOrder": 1, "channelS": 1, "format": "PCM"}, {"streamOrder": 2, "format": "Dolby E"}]
        assert parse_tracks(audio) == [2]

    def test_first_two_mono_tracks(self):
        audio = [{"streamIdentifier": i, "channels": 1, "format": "PCM"} for i in range(4)]
        assert parse_tracks(audio) == [1, 2]


class TestStart:
    def test_creates_job_and_suspends(self, store, clock):
        client = FakeSignedClient([{"job": {"id": "mc-job-1"}}])

        snapshot = _step(client, store).start(StepState(_event([{"streamOrder": 1, "channels": 2}]), clock=clock))

        [(service, path, job)] = client.calls
        assert (service, path) == ("mediaconvert", CREATE_JOB_PATH)
        assert client.endpoints == [ENDPOINT]
        assert job["role"] == CONFIG.role_arn
        assert job["userMetadata"] == {"solutionUuid": "uuid-1"}
        [job_input] = job["settings"]["inputs"]
        assert job_input["fileInput"] == "s3://media/uploads/clip.mov"
        assert job_input["audioSelectors"]["Audio Selector 1"]["tracks"] == [1]
        [group] = job["settings"]["outputGroups"]
        destination = group["outputGroupSettings"]["fileGroupSettings"]["destination"]
        assert destination == "s3://media/uploads/clip/start-mediaconvert/"
        assert group["outputs"][0]["audioDescriptions"][0]["audioSourceName"] == "Audio Selector 1"

        record = snapshot["output"]["start-mediaconvert"]
        assert record["jobId"] == "mc-job-1"
        assert record["output"] == {"bucket": "media", "prefix": "uploads/clip/start-mediaconvert/"}

        pending = store.get("mc-job-1")
        assert pending.token == "task-token"
        assert pending.service == "mediaconvert"
        assert pending.api == "start-mediaconvert"

    def test_without_audio_drops_audio_settings(self, store, clock):
        client = FakeSignedClient([{"job": {"id": "mc-job-2"}}])
        _step(client, store).start(StepState(_event(), clock=clock))

        job = client.calls[0][2]
        assert "audioSelectors" not in job["settings"]["inputs"][0]
        assert "audioDescriptions" not in job["settings"]["outputGroups"][0]["outputs"][0]

    def test_requires_endpoint_and_role(self, store, clock):
        with pytest.raises(ConfigurationError):
            _step(FakeSignedClient(), store, TranscodeConfig()).start(StepState(_event(), clock=clock))

    def test_missing_job_id(self, store, clock):
        with pytest.raises(FrameCueError):
            _step(FakeSignedClient([{}]), store).start(StepState(_event(), clock=clock))


class TestCompletionRoundTrip:
    def test_transcode_completion_resumes_the_step(self, store, handler, resumer, clock):
        client = FakeSignedClient([{"job": {"id": "mc-job-3"}}])
        _step(client, store).start(StepState(_event(), clock=clock))

        outcome = handler.handle(RawNotification(job_id="mc-job-3", status="COMPLETE", source="aws.mediaconvert"))

        assert outcome.resumed
        [(token, payload)] = resumer.successes
        assert token == "task-token"
        record = payload["output"]["start-mediaconvert"]
        assert record["status"] == "completed"
        assert record["output"]["prefix"] == "uploads/clip/start-mediaconvert/"
        assert "mc-job-3" not in store
