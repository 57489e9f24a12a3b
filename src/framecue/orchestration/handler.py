"""Per-transport entry points in front of the CompletionDispatcher."""

from __future__ import annotations

import logging
from typing import Any

from framecue.core.exceptions import CorrelationError, NotFound
from framecue.models.operations import DispatchOutcome, RawNotification
from framecue.orchestration.dispatcher import CompletionDispatcher
from framecue.transports import (
    is_event_bridge,
    is_sns_event,
    parse_event_bridge,
    parse_sns_event,
    parse_sns_message,
)

logger = logging.getLogger(__name__)


class NotificationHandler:
    """Adapts transport envelopes and applies the drop policy.

    A notification whose pending operation is gone (already resumed or
    expired) is dropped after logging; any other correlation failure is
    raised to the transport.
    """

    def __init__(self, dispatcher: CompletionDispatcher) -> None:
        self._dispatcher = dispatcher

    def handle(self, notification: RawNotification) -> DispatchOutcome:
        try:
            return self._dispatcher.dispatch(notification)
        except NotFound:
            logger.warning("dropping notification for job %s (%s)", notification.job_id, notification.status)
            return DispatchOutcome(job_id=notification.job_id, dropped=True)

    def handle_sns_event(self, event: dict[str, Any]) -> list[DispatchOutcome]:
        return [self.handle(notification) for notification in parse_sns_event(event)]

    def handle_sns_message(self, message: dict[str, Any] | str, timestamp: Any = None) -> DispatchOutcome:
        return self.handle(parse_sns_message(message, timestamp))

    def handle_event_bridge(self, event: dict[str, Any]) -> DispatchOutcome:
        return self.handle(parse_event_bridge(event))

    def handle_event(self, event: dict[str, Any]) -> list[DispatchOutcome]:
        """Route a raw Lambda event to the matching transport adapter."""
        if is_sns_event(event):
            return self.handle_sns_event(event)
        if is_event_bridge(event):
            return [self.handle_event_bridge(event)]
        raise CorrelationError(None, "unrecognized notification event")
