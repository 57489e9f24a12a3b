"""Pluggable correlation and result stores behind Protocol interfaces."""

from __future__ import annotations

from framecue.core.config import AppSettings
from framecue.core.exceptions import ConfigurationError
from framecue.core.protocols import ICorrelationStore
from framecue.persistence.dynamodb_backend import DynamoDBCorrelationStore
from framecue.persistence.memory_backend import MemoryCorrelationStore, MemoryResultStore
from framecue.persistence.redis_backend import RedisCorrelationStore
from framecue.persistence.s3_backend import S3ResultStore


def create_correlation_store(settings: AppSettings | None = None) -> ICorrelationStore:
    """Create the configured correlation store backend."""
    if settings is None:
        settings = AppSettings()

    correlation = settings.correlation
    if correlation.backend == "dynamodb":
        return DynamoDBCorrelationStore(
            table_name=correlation.table_name,
            table_suffix=correlation.table_suffix,
            region=settings.aws.region,
            endpoint_url=settings.aws.endpoint_url,
            ttl_seconds=correlation.ttl_seconds,
        )
    if correlation.backend == "redis":
        return RedisCorrelationStore(
            host=settings.redis.host,
            port=settings.redis.port,
            db=settings.redis.db,
            ttl_seconds=correlation.ttl_seconds,
            key_prefix=correlation.key_prefix,
        )
    if correlation.backend == "memory":
        return MemoryCorrelationStore(ttl_seconds=correlation.ttl_seconds)
    raise ConfigurationError(f"unknown correlation backend {correlation.backend!r}")


def create_result_store(settings: AppSettings | None = None) -> S3ResultStore:
    """Create the S3 store for workflow media and analysis results."""
    if settings is None:
        settings = AppSettings()
    return S3ResultStore(
        region=settings.aws.region,
        endpoint_url=settings.aws.endpoint_url,
    )


__all__ = [
    "DynamoDBCorrelationStore",
    "MemoryCorrelationStore",
    "MemoryResultStore",
    "RedisCorrelationStore",
    "S3ResultStore",
    "create_correlation_store",
    "create_result_store",
]
