"""S3 backend implementing IResultStore for workflow media and analysis results."""

from __future__ import annotations

import json
import posixpath
from typing import Any

import boto3
from botocore.exceptions import ClientError

from framecue.core.exceptions import StoreError


class S3ResultStore:
    """Production IResultStore backed by S3. Every call names its bucket."""

    def __init__(self, region: str = "us-east-1", endpoint_url: str | None = None) -> None:
        self._region = region
        self._endpoint_url = endpoint_url
        kwargs: dict = {"region_name": region}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        self._client = boto3.client("s3", **kwargs)

    def write_json(self, bucket: str, key: str, body: dict[str, Any]) -> str:
        name = posixpath.basename(key)
        try:
            self._client.put_object(
                Bucket=bucket,
                Key=key,
                Body=json.dumps(body).encode("utf-8"),
                ContentType="application/json",
                ContentDisposition=f'attachment; filename="{name}"',
            )
            return key
        except ClientError as exc:
            raise StoreError(f"S3 write failed for s3://{bucket}/{key}: {exc}") from exc

    def read_json(self, bucket: str, key: str) -> dict[str, Any]:
        try:
            resp = self._client.get_object(Bucket=bucket, Key=key)
            return json.loads(resp["Body"].read())
        except ClientError as exc:
            raise StoreError(f"S3 read failed for s3://{bucket}/{key}: {exc}") from exc

    def list_keys(self, bucket: str, prefix: str) -> list[str]:
        try:
            keys: list[str] = []
            paginator = self._client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=bucket, Prefix=prefix):
                for obj in page.get("Contents", []):
                    keys.append(obj["Key"])
            return keys
        except ClientError as exc:
            raise StoreError(f"S3 list failed for s3://{bucket}/{prefix}: {exc}") from exc
