"""Notification ingress: SNS HTTP(S) subscriptions and EventBridge API destinations."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, HTTPException, Request
from fastapi.concurrency import run_in_threadpool

from framecue.core.exceptions import CorrelationError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["notifications"])


@router.post("/sns")
async def sns(request: Request, envelope: dict[str, Any] = Body(...)) -> dict[str, Any]:
    """Dispatch an SNS delivery; subscription handshakes are acknowledged only."""
    message_type = envelope.get("Type") or request.headers.get("x-amz-sns-message-type")
    if message_type in ("SubscriptionConfirmation", "UnsubscribeConfirmation"):
        logger.info("ignoring SNS %s for %s", message_type, envelope.get("TopicArn"))
        return {"acknowledged": True}

    handler = request.app.state.context.handler
    try:
        outcome = await run_in_threadpool(
            handler.handle_sns_message, envelope.get("Message") or "", envelope.get("Timestamp"),
        )
    except CorrelationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return outcome.model_dump(mode="json")


@router.post("/events")
async def events(request: Request, event: dict[str, Any] = Body(...)) -> dict[str, Any]:
    """Dispatch an EventBridge job state change event."""
    handler = request.app.state.context.handler
    try:
        outcome = await run_in_threadpool(handler.handle_event_bridge, event)
    except CorrelationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return outcome.model_dump(mode="json")
