"""framecue exception hierarchy."""

from __future__ import annotations


class FrameCueError(Exception):
    """Base exception for all framecue errors."""


class ConfigurationError(FrameCueError):
    """Missing credentials, region, or other startup configuration."""


class TransportError(FrameCueError):
    """Network-level failure talking to a provider endpoint."""


class RequestError(FrameCueError):
    """Provider answered with a 4xx/5xx status."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"{status_code} {body}" if body else f"request failed with status {status_code}")


class AlreadyRegistered(FrameCueError):
    """A live pending operation already exists for the job id."""

    def __init__(self, job_id: str) -> None:
        self.job_id = job_id
        super().__init__(f"pending operation already registered for job {job_id}")


class CorrelationError(FrameCueError):
    """A notification could not be correlated with a pending operation."""

    def __init__(self, job_id: str | None, reason: str) -> None:
        self.job_id = job_id
        self.reason = reason
        super().__init__(f"fail to correlate job {job_id}: {reason}")


class NotFound(CorrelationError):
    """No live pending operation for the job id (absent or expired)."""

    def __init__(self, job_id: str) -> None:
        super().__init__(job_id, "no pending operation")


class UnsupportedService(CorrelationError):
    """The pending operation names a service with no status normalizer."""

    def __init__(self, job_id: str | None, service: str) -> None:
        self.service = service
        super().__init__(job_id, f"no normalizer for service {service!r}")


class ResumeError(FrameCueError):
    """The orchestrator rejected a resume call (stale or consumed token)."""


class StoreError(FrameCueError):
    """Correlation or result store backend failure."""


class StepInputError(FrameCueError):
    """A workflow step event is missing required input or prior output."""
