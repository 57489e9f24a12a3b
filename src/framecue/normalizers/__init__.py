"""Per-service status normalizers, selected by a pending operation's ``service``."""

from __future__ import annotations

from framecue.core.clock import utc_now
from framecue.core.exceptions import UnsupportedService
from framecue.core.protocols import IStatusNormalizer
from framecue.core.types import Clock
from framecue.models.operations import CanonicalStatus, ServiceType
from framecue.normalizers.analysis import DocumentAnalysisStatusNormalizer, VideoAnalysisStatusNormalizer
from framecue.normalizers.snapshot import map_status
from framecue.normalizers.transcode import TranscodeStatusNormalizer

STATUS_MAPPINGS = {
    ServiceType.TRANSCODE.value: TranscodeStatusNormalizer.MAPPING,
    ServiceType.VIDEO_ANALYSIS.value: VideoAnalysisStatusNormalizer.MAPPING,
    ServiceType.DOCUMENT_ANALYSIS.value: DocumentAnalysisStatusNormalizer.MAPPING,
}


def normalize_status(service: str, raw_status: str | None) -> CanonicalStatus:
    """Canonical status for one service's raw status; unknown statuses are ``error``."""
    mapping = STATUS_MAPPINGS.get(service)
    if mapping is None:
        raise UnsupportedService(None, service)
    return map_status(mapping, raw_status)


def build_normalizers(clock: Clock = utc_now) -> dict[str, IStatusNormalizer]:
    """Return the ``service -> normalizer`` registry."""
    return {
        ServiceType.TRANSCODE.value: TranscodeStatusNormalizer(clock=clock),
        ServiceType.VIDEO_ANALYSIS.value: VideoAnalysisStatusNormalizer(clock=clock),
        ServiceType.DOCUMENT_ANALYSIS.value: DocumentAnalysisStatusNormalizer(clock=clock),
    }


__all__ = [
    "STATUS_MAPPINGS",
    "DocumentAnalysisStatusNormalizer",
    "TranscodeStatusNormalizer",
    "VideoAnalysisStatusNormalizer",
    "build_normalizers",
    "normalize_status",
]
