"""Workflow state carried between orchestrated steps."""

from __future__ import annotations

import copy
import posixpath
from typing import Any

from framecue.core.clock import epoch_ms, utc_now
from framecue.core.exceptions import StepInputError
from framecue.core.protocols import ICorrelationStore
from framecue.core.types import Clock


class StepState:
    """Input/output of one workflow execution as seen by a single step.

    ``input`` must name the source media (``bucket``, ``key``); ``output``
    holds one record per completed step, keyed by step name.
    """

    def __init__(self, event: dict[str, Any], clock: Clock = utc_now) -> None:
        self._clock = clock
        self.t0 = epoch_ms(clock())
        self.state: str | None = event.get("state")
        self.token: str | None = event.get("token")
        self.input: dict[str, Any] = copy.deepcopy(event.get("input") or {})
        self.output: dict[str, Any] = copy.deepcopy(event.get("output") or {})
        self.sanity_check()

    def sanity_check(self) -> None:
        if not self.input:
            raise StepInputError("missing input")
        if not self.input.get("bucket") or not self.input.get("key"):
            raise StepInputError("missing bucket and key")

    def previous(self, step: str) -> dict[str, Any]:
        record = self.output.get(step)
        if not isinstance(record, dict):
            raise StepInputError(f"missing output.{step}")
        return record

    def set_output(self, step: str, data: dict[str, Any]) -> None:
        self.output[step] = {
            **self.output.get(step, {}),
            **data,
            "metrics": {"t0": self.t0, "t1": epoch_ms(self._clock())},
        }

    def output_path(self, ref: str, sub_path: str = "") -> str:
        """``dir/name/sub_path`` for an object key ``dir/name.ext``."""
        directory, filename = posixpath.split(ref)
        name = posixpath.splitext(filename)[0]
        return posixpath.join(directory, name, sub_path) if sub_path else posixpath.join(directory, name)

    def to_snapshot(self) -> dict[str, Any]:
        return copy.deepcopy({"input": self.input, "output": self.output})


def suspend(
    store: ICorrelationStore,
    *,
    job_id: str,
    token: str | None,
    service: str,
    step: str,
    state: StepState,
) -> None:
    """Register the pending operation that will resume this step later."""
    if not token:
        raise StepInputError("missing task token")
    store.register(job_id, token, service, step, state.to_snapshot())
