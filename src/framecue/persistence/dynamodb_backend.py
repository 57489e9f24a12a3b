"""DynamoDB backend implementing ICorrelationStore."""

from __future__ import annotations

import json
import logging
from datetime import timedelta
from decimal import Decimal
from typing import Any

import boto3
from botocore.exceptions import ClientError

from framecue.core.clock import epoch_seconds, utc_now
from framecue.core.exceptions import AlreadyRegistered, NotFound, StoreError
from framecue.core.types import Clock
from framecue.models.operations import PendingOperation

logger = logging.getLogger(__name__)


def _to_int(value: Any) -> int:
    if isinstance(value, Decimal):
        return int(value)
    return int(value or 0)


class DynamoDBCorrelationStore:
    """Production ICorrelationStore backed by a DynamoDB table keyed on ``jobId``.

    Items carry an ``expiresAt`` epoch-seconds attribute; the table's TTL
    removes them eventually, and ``get`` hides items already past it since
    TTL deletion lags.
    """

    def __init__(self, table_name: str = "framecue-service-token", table_suffix: str = "",
                 region: str = "us-east-1", endpoint_url: str | None = None,
                 ttl_seconds: int = 7 * 24 * 3600, clock: Clock = utc_now) -> None:
        self._table_name = f"{table_name}{table_suffix}"
        self._region = region
        self._endpoint_url = endpoint_url
        self._ttl = ttl_seconds
        self._clock = clock
        kwargs: dict = {"region_name": region}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        self._ddb = boto3.resource("dynamodb", **kwargs)
        self._table = self._ddb.Table(self._table_name)

    @property
    def table_name(self) -> str:
        return self._table_name

    def register(self, job_id: str, token: str, service: str, api: str, data: dict[str, Any]) -> None:
        expires_at = epoch_seconds(self._clock() + timedelta(seconds=self._ttl))
        try:
            self._table.put_item(
                Item={
                    "jobId": job_id,
                    "token": token,
                    "service": service,
                    "api": api,
                    "data": json.dumps(data),
                    "expiresAt": expires_at,
                },
                ConditionExpression="attribute_not_exists(jobId)",
            )
        except ClientError as exc:
            if exc.response["Error"]["Code"] == "ConditionalCheckFailedException":
                raise AlreadyRegistered(job_id) from exc
            raise StoreError(f"DynamoDB register failed for job={job_id!r}: {exc}") from exc
        logger.info("registered job %s (%s/%s)", job_id, service, api)

    def get(self, job_id: str) -> PendingOperation:
        try:
            resp = self._table.get_item(Key={"jobId": job_id}, ConsistentRead=True)
        except ClientError as exc:
            raise StoreError(f"DynamoDB get failed for job={job_id!r}: {exc}") from exc

        item = resp.get("Item")
        if not item:
            raise NotFound(job_id)
        expires_at = _to_int(item.get("expiresAt"))
        if expires_at and expires_at <= epoch_seconds(self._clock()):
            raise NotFound(job_id)

        return PendingOperation(
            job_id=item["jobId"],
            token=item["token"],
            service=item["service"],
            api=item["api"],
            data=json.loads(item.get("data") or "{}"),
            expires_at=expires_at,
        )

    def unregister(self, job_id: str) -> None:
        try:
            self._table.delete_item(Key={"jobId": job_id})
        except ClientError as exc:
            raise StoreError(f"DynamoDB unregister failed for job={job_id!r}: {exc}") from exc
