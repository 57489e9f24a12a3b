"""Process context: every component built once at process start and passed explicitly.

There is nothing to tear down; all cross-invocation state lives in the
correlation store.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from framecue.core.config import AppSettings
from framecue.core.logging import configure_logging
from framecue.core.protocols import ICorrelationStore, ISignedClient, IStatusNormalizer, IWorkflowResumer
from framecue.normalizers import build_normalizers
from framecue.orchestration.dispatcher import CompletionDispatcher
from framecue.orchestration.handler import NotificationHandler
from framecue.orchestration.stepfunctions_resumer import StepFunctionsResumer
from framecue.persistence import create_correlation_store
from framecue.signing.client import SignedRequestClient


@dataclass
class AppContext:
    settings: AppSettings
    store: ICorrelationStore
    resumer: IWorkflowResumer
    normalizers: Mapping[str, IStatusNormalizer] = field(default_factory=build_normalizers)
    signed_client: ISignedClient | None = None
    dispatcher: CompletionDispatcher = field(init=False)
    handler: NotificationHandler = field(init=False)

    def __post_init__(self) -> None:
        self.dispatcher = CompletionDispatcher(
            store=self.store, normalizers=self.normalizers, resumer=self.resumer,
        )
        self.handler = NotificationHandler(self.dispatcher)

    @classmethod
    def from_settings(cls, settings: AppSettings | None = None, *, with_signing: bool = False) -> AppContext:
        """Wire production backends from settings.

        The signed client is only built on request since it needs
        credentials at construction time.
        """
        if settings is None:
            settings = AppSettings()
        configure_logging(settings.log_level, settings.log_json)
        return cls(
            settings=settings,
            store=create_correlation_store(settings),
            resumer=StepFunctionsResumer(
                region=settings.aws.region,
                endpoint_url=settings.stepfunctions.endpoint_url,
            ),
            signed_client=SignedRequestClient.from_settings(settings) if with_signing else None,
        )
