"""Resolve a job notification back to its suspended workflow step."""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping

from framecue.core.exceptions import NotFound, ResumeError, StoreError, UnsupportedService
from framecue.models.operations import DispatchOutcome, NormalizationResult, PendingOperation, RawNotification
from framecue.orchestration.protocols import ICorrelationStore, IStatusNormalizer, IWorkflowResumer

logger = logging.getLogger(__name__)

FAILURE_KIND = "Error"


class CompletionDispatcher:
    """Looks up the pending operation, normalizes status and resumes at most once.

    Terminal notifications resume the workflow and then remove the pending
    operation; progress notifications leave it in place. A missing pending
    operation raises ``NotFound`` (a duplicate or expired job); resume
    rejections for stale tokens are logged and swallowed.
    """

    def __init__(
        self,
        *,
        store: ICorrelationStore,
        normalizers: Mapping[str, IStatusNormalizer],
        resumer: IWorkflowResumer,
    ) -> None:
        self._store = store
        self._normalizers = dict(normalizers)
        self._resumer = resumer

    def dispatch(self, notification: RawNotification) -> DispatchOutcome:
        job_id = notification.job_id
        fields = {"job_id": job_id, "upstream_status": notification.status, "source": notification.source}

        try:
            pending = self._store.get(job_id)
        except NotFound:
            logger.error("fail to get token, %s", job_id, extra={"structured": fields})
            raise

        normalizer = self._normalizers.get(pending.service)
        if normalizer is None:
            logger.error("fail to get service, %s", pending.service, extra={"structured": fields})
            raise UnsupportedService(job_id, pending.service)

        # Normalizers mutate their snapshot; never hand them the stored record.
        snapshot = copy.deepcopy(pending.data)
        result = normalizer.normalize(notification, snapshot, step=pending.api)
        fields["status"] = result.status.value

        if not result.terminal:
            logger.info("job %s %s", job_id, result.status.value, extra={"structured": fields})
            return DispatchOutcome(job_id=job_id, status=result.status, snapshot=result.snapshot)

        resumed = self._resume(pending, result, fields)
        self._unregister(job_id, fields)
        return DispatchOutcome(job_id=job_id, status=result.status, resumed=resumed, snapshot=result.snapshot)

    def _resume(self, pending: PendingOperation, result: NormalizationResult, fields: dict) -> bool:
        try:
            if result.success:
                self._resumer.resume_success(pending.token, result.snapshot)
            else:
                self._resumer.resume_failure(pending.token, FAILURE_KIND, result.error or "")
        except ResumeError as exc:
            logger.warning("resume rejected for job %s: %s", pending.job_id, exc, extra={"structured": fields})
            return False
        logger.info(
            "resumed job %s (%s)", pending.job_id, "success" if result.success else "failure",
            extra={"structured": fields},
        )
        return True

    def _unregister(self, job_id: str, fields: dict) -> None:
        try:
            self._store.unregister(job_id)
        except StoreError as exc:
            # Store expiry removes the record eventually.
            logger.warning("fail to unregister job %s: %s", job_id, exc, extra={"structured": fields})
