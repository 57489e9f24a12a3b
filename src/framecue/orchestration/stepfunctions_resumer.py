"""Step Functions backend implementing IWorkflowResumer."""

from __future__ import annotations

import json
import logging
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from framecue.core.exceptions import RequestError, ResumeError, TransportError

logger = logging.getLogger(__name__)

# Token already consumed, timed out, or never valid.
STALE_TOKEN_ERRORS = frozenset({"TaskDoesNotExist", "TaskTimedOut", "InvalidToken"})

MAX_ERROR_LENGTH = 256
MAX_CAUSE_LENGTH = 32768


class StepFunctionsResumer:
    """Production IWorkflowResumer: ``SendTaskSuccess`` / ``SendTaskFailure``."""

    def __init__(self, region: str = "us-east-1", endpoint_url: str | None = None,
                 client: Any = None) -> None:
        if client is None:
            kwargs: dict = {"region_name": region}
            if endpoint_url:
                kwargs["endpoint_url"] = endpoint_url
            client = boto3.client("stepfunctions", **kwargs)
        self._client = client

    def _call(self, operation: str, **params: Any) -> None:
        try:
            getattr(self._client, operation)(**params)
        except ClientError as exc:
            code = exc.response["Error"]["Code"]
            if code in STALE_TOKEN_ERRORS:
                raise ResumeError(f"{operation} rejected token: {code}") from exc
            status = exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode", 400)
            raise RequestError(status, exc.response["Error"].get("Message", code)) from exc
        except BotoCoreError as exc:
            raise TransportError(f"{operation} failed: {exc}") from exc

    def resume_success(self, token: str, payload: dict[str, Any]) -> None:
        self._call("send_task_success", taskToken=token, output=json.dumps(payload))

    def resume_failure(self, token: str, error_kind: str, message: str) -> None:
        self._call(
            "send_task_failure",
            taskToken=token,
            error=error_kind[:MAX_ERROR_LENGTH],
            cause=message[:MAX_CAUSE_LENGTH],
        )
