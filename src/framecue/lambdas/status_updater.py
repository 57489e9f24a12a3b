"""Lambda entry point for job status notifications (SNS and EventBridge)."""

from __future__ import annotations

import logging
from typing import Any

from framecue.context import AppContext

logger = logging.getLogger(__name__)

# Built once per execution environment.
CONTEXT = AppContext.from_settings()


def handler(event: dict[str, Any], context: Any = None) -> list[dict[str, Any]]:
    outcomes = CONTEXT.handler.handle_event(event)
    return [outcome.model_dump(mode="json") for outcome in outcomes]
