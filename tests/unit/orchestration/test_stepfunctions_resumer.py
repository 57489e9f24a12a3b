"""Unit tests for StepFunctionsResumer using botocore's Stubber."""

from __future__ import annotations

import json

import boto3
import pytest
from botocore.exceptions import EndpointConnectionError
from botocore.stub import Stubber

from framecue.core.exceptions import RequestError, ResumeError, TransportError
from framecue.core.protocols import IWorkflowResumer
from framecue.orchestration.stepfunctions_resumer import MAX_CAUSE_LENGTH, StepFunctionsResumer


@pytest.fixture
def sfn():
    return boto3.client(
        "stepfunctions",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )


@pytest.fixture
def stubber(sfn):
    with Stubber(sfn) as stub:
        yield stub
        stub.assert_no_pending_responses()


@pytest.fixture
def resumer(sfn):
    return StepFunctionsResumer(client=sfn)


def test_satisfies_protocol(resumer):
    assert isinstance(resumer, IWorkflowResumer)


def test_success_sends_json_output(resumer, stubber):
    payload = {"output": {"start-mediaconvert": {"status": "completed"}}}
    stubber.add_response("send_task_success", {}, {"taskToken": "tok", "output": json.dumps(payload)})
    resumer.resume_success("tok", payload)


def test_failure_truncates_cause(resumer, stubber):
    message = "x" * (MAX_CAUSE_LENGTH + 10)
    stubber.add_response(
        "send_task_failure", {},
        {"taskToken": "tok", "error": "Error", "cause": "x" * MAX_CAUSE_LENGTH},
    )
    resumer.resume_failure("tok", "Error", message)


@pytest.mark.parametrize("code", ["TaskDoesNotExist", "TaskTimedOut", "InvalidToken"])
def test_stale_token_is_resume_error(resumer, stubber, code):
    stubber.add_client_error("send_task_success", service_error_code=code, http_status_code=400)
    with pytest.raises(ResumeError):
        resumer.resume_success("tok", {})


def test_other_client_error_is_request_error(resumer, stubber):
    stubber.add_client_error(
        "send_task_failure", service_error_code="ThrottlingException",
        service_message="Rate exceeded", http_status_code=429,
    )
    with pytest.raises(RequestError) as exc_info:
        resumer.resume_failure("tok", "Error", "boom")
    assert exc_info.value.status_code == 429


def test_connection_failure_is_transport_error():
    class Unreachable:
        def send_task_success(self, **kwargs):
            raise EndpointConnectionError(endpoint_url="http://localhost:4566")

    with pytest.raises(TransportError):
        StepFunctionsResumer(client=Unreachable()).resume_success("tok", {})
