"""Re-export orchestration protocols from core."""

from __future__ import annotations

from framecue.core.protocols import ICorrelationStore, IStatusNormalizer, IWorkflowResumer

__all__ = ["ICorrelationStore", "IStatusNormalizer", "IWorkflowResumer"]
