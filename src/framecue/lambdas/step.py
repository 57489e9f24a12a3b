"""Lambda entry point for the workflow steps that start external jobs."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from framecue.context import AppContext
from framecue.core.exceptions import StepInputError
from framecue.models.operations import WorkflowStep
from framecue.persistence import create_result_store
from framecue.workflow.segment_detection import SegmentDetectionStep
from framecue.workflow.state import StepState
from framecue.workflow.transcode import TranscodeStep

logger = logging.getLogger(__name__)

StepRoute = Callable[[StepState], dict[str, Any]]

# Built on first invocation; signing needs credentials from the environment.
_ROUTES: dict[str, StepRoute] | None = None


def build_routes(context: AppContext) -> dict[str, StepRoute]:
    settings = context.settings
    transcode = TranscodeStep(
        client=context.signed_client,
        store=context.store,
        config=settings.transcode,
        solution_uuid=settings.analysis.solution_uuid,
    )
    segments = SegmentDetectionStep(
        client=context.signed_client,
        store=context.store,
        results=create_result_store(settings),
        config=settings.analysis,
    )
    return {
        WorkflowStep.START_MEDIACONVERT: transcode.start,
        WorkflowStep.START_SEGMENT_DETECTION: segments.start,
        WorkflowStep.COLLECT_DETECTION_RESULTS: segments.collect,
    }


def get_routes() -> dict[str, StepRoute]:
    global _ROUTES
    if _ROUTES is None:
        _ROUTES = build_routes(AppContext.from_settings(with_signing=True))
    return _ROUTES


def handler(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    state = StepState(event)
    try:
        route = get_routes().get(state.state or "")
        if route is None:
            raise StepInputError(f"{state.state} not impl")
        return route(state)
    except Exception:
        logger.exception("step %s failed", state.state)
        raise
