"""Protocol interfaces for all framecue abstractions.

Components are wired through constructor injection against these
Protocols: structural typing, no inheritance required, easy to test
with isinstance().
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from framecue.models.operations import NormalizationResult, PendingOperation, RawNotification
from framecue.models.signing import SignedRequest, SignedRequestResult


# ---------------------------------------------------------------------------
# Signed Request Client
# ---------------------------------------------------------------------------

@runtime_checkable
class ISigner(Protocol):
    """Canonical request signer."""

    def sign(self, request: SignedRequest, timestamp: datetime | None = None) -> SignedRequestResult: ...


@runtime_checkable
class ISignedClient(Protocol):
    """Sends signed JSON requests to a provider API."""

    def send(self, service_name: str, operation_name: str, payload: dict[str, Any]) -> dict[str, Any]: ...

    def post_json(
        self, service_name: str, path: str, payload: dict[str, Any], *, endpoint: str | None = None
    ) -> dict[str, Any]: ...


# ---------------------------------------------------------------------------
# Persistence: Correlation Store
# ---------------------------------------------------------------------------

@runtime_checkable
class ICorrelationStore(Protocol):
    """Job id -> pending operation store with conditional create."""

    def register(
        self, job_id: str, token: str, service: str, api: str, data: dict[str, Any]
    ) -> None: ...

    def get(self, job_id: str) -> PendingOperation: ...

    def unregister(self, job_id: str) -> None: ...


# ---------------------------------------------------------------------------
# Persistence: Result Store
# ---------------------------------------------------------------------------

@runtime_checkable
class IResultStore(Protocol):
    """Object storage for workflow media and collected analysis results."""

    def write_json(self, bucket: str, key: str, body: dict[str, Any]) -> str: ...

    def list_keys(self, bucket: str, prefix: str) -> list[str]: ...


# ---------------------------------------------------------------------------
# Status Normalizer
# ---------------------------------------------------------------------------

@runtime_checkable
class IStatusNormalizer(Protocol):
    """Maps one service's notification vocabulary onto a workflow snapshot."""

    def normalize(
        self, notification: RawNotification, snapshot: dict[str, Any], *, step: str | None = None
    ) -> NormalizationResult: ...


# ---------------------------------------------------------------------------
# Workflow Resumer
# ---------------------------------------------------------------------------

@runtime_checkable
class IWorkflowResumer(Protocol):
    """Signals the orchestrator to continue or fail a suspended step."""

    def resume_success(self, token: str, payload: dict[str, Any]) -> None: ...

    def resume_failure(self, token: str, error_kind: str, message: str) -> None: ...
