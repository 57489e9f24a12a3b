"""Recording IWorkflowResumer for unit tests and local runs."""

from __future__ import annotations

import copy
from typing import Any

from framecue.core.exceptions import ResumeError


class RecordingResumer:
    """Records resume calls; a token can be consumed once, like a real task token."""

    def __init__(self) -> None:
        self.successes: list[tuple[str, dict[str, Any]]] = []
        self.failures: list[tuple[str, str, str]] = []
        self._consumed: set[str] = set()

    def _consume(self, token: str) -> None:
        if token in self._consumed:
            raise ResumeError(f"task token already consumed: {token}")
        self._consumed.add(token)

    def resume_success(self, token: str, payload: dict[str, Any]) -> None:
        self._consume(token)
        self.successes.append((token, copy.deepcopy(payload)))

    def resume_failure(self, token: str, error_kind: str, message: str) -> None:
        self._consume(token)
        self.failures.append((token, error_kind, message))

    @property
    def calls(self) -> int:
        return len(self.successes) + len(self.failures)
