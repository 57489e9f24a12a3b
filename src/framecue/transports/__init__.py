"""Transport adapters: normalize notification envelopes to RawNotification."""

from __future__ import annotations

from framecue.transports.eventbridge import is_event_bridge, parse_event_bridge
from framecue.transports.sns import is_sns_event, parse_sns_event, parse_sns_message

__all__ = ["is_event_bridge", "is_sns_event", "parse_event_bridge", "parse_sns_event", "parse_sns_message"]
