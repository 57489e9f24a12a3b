"""Snapshot helpers shared by the status normalizers.

A workflow snapshot keeps one record per step under ``snapshot["output"]``;
normalizers only ever touch the record of the step that started the job.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from framecue.models.operations import CanonicalStatus


def map_status(table: Mapping[str, CanonicalStatus], raw_status: str | None) -> CanonicalStatus:
    """Look up a raw upstream status; anything unknown is an error."""
    return table.get(raw_status or "", CanonicalStatus.ERROR)


def step_record(snapshot: dict[str, Any], step: str) -> dict[str, Any]:
    output = snapshot.get("output")
    if not isinstance(output, dict):
        output = snapshot["output"] = {}
    record = output.get(step)
    if not isinstance(record, dict):
        record = output[step] = {}
    return record


def _stamp(record: dict[str, Any], finished_at: int) -> None:
    metrics = record.get("metrics")
    if not isinstance(metrics, dict):
        metrics = record["metrics"] = {}
    metrics["t1"] = finished_at


def mark_completed(snapshot: dict[str, Any], step: str, finished_at: int, **fields: Any) -> dict[str, Any]:
    record = step_record(snapshot, step)
    record.update(fields)
    record["status"] = CanonicalStatus.COMPLETED.value
    _stamp(record, finished_at)
    return record


def mark_failed(snapshot: dict[str, Any], step: str, finished_at: int, message: str) -> dict[str, Any]:
    record = step_record(snapshot, step)
    record["status"] = CanonicalStatus.ERROR.value
    record["errorMessage"] = message
    _stamp(record, finished_at)
    return record
