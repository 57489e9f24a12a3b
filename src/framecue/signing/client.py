"""Signed JSON client for provider APIs, used instead of an SDK client."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any

import boto3
import httpx

from framecue.core.clock import utc_now
from framecue.core.config import AppSettings
from framecue.core.exceptions import ConfigurationError, RequestError, TransportError
from framecue.core.protocols import ISigner
from framecue.core.types import Clock
from framecue.models.signing import SignedRequest
from framecue.signing.sigv4 import SigV4Signer

logger = logging.getLogger(__name__)

# x-amz-target prefix per JSON-protocol service.
TARGET_PREFIXES: dict[str, str] = {
    "rekognition": "RekognitionService",
    "textract": "Textract",
    "states": "AWSStepFunctions",
    "dynamodb": "DynamoDB_20120810",
}

# (service_name, endpoint or None) -> signer
SignerFactory = Callable[[str, str | None], ISigner]


class SignedRequestClient:
    """Production ISignedClient: signed POSTs over httpx.

    Signers come from ``signer_factory``; without one, SigV4 signers are
    built from the given credentials.
    """

    def __init__(
        self,
        *,
        region: str | None,
        access_key: str | None = None,
        secret_key: str | None = None,
        session_token: str | None = None,
        provider_domain: str = "amazonaws.com",
        content_type: str = "application/x-amz-json-1.1",
        accept_type: str = "application/json",
        timeout: float = 30.0,
        http_client: httpx.Client | None = None,
        signer_factory: SignerFactory | None = None,
        clock: Clock = utc_now,
    ) -> None:
        if signer_factory is None:
            if not access_key or not secret_key:
                raise ConfigurationError("missing credential")
            if not region:
                raise ConfigurationError("missing region")
        self._region = region
        self._access_key = access_key
        self._secret_key = secret_key
        self._session_token = session_token
        self._provider_domain = provider_domain
        self._content_type = content_type
        self._accept_type = accept_type
        self._clock = clock
        self._signer_factory = signer_factory or self._sigv4_signer
        self._http = http_client or httpx.Client(timeout=timeout)

    @classmethod
    def from_settings(
        cls, settings: AppSettings, http_client: httpx.Client | None = None
    ) -> SignedRequestClient:
        """Build a client from settings, falling back to the boto3 credential chain."""
        signing = settings.signing
        access_key, secret_key, session_token = (
            signing.access_key, signing.secret_key, signing.session_token,
        )
        if not access_key or not secret_key:
            credentials = boto3.Session(region_name=settings.aws.region).get_credentials()
            if credentials is None:
                raise ConfigurationError("missing credential")
            frozen = credentials.get_frozen_credentials()
            access_key, secret_key, session_token = frozen.access_key, frozen.secret_key, frozen.token

        return cls(
            region=settings.aws.region,
            access_key=access_key,
            secret_key=secret_key,
            session_token=session_token,
            provider_domain=signing.provider_domain,
            content_type=signing.default_content_type,
            accept_type=signing.default_accept_type,
            timeout=signing.timeout,
            http_client=http_client,
        )

    def _sigv4_signer(self, service_name: str, endpoint: str | None = None) -> SigV4Signer:
        return SigV4Signer(
            access_key=self._access_key,
            secret_key=self._secret_key,
            session_token=self._session_token,
            region=self._region,
            service_name=service_name,
            endpoint=endpoint,
            provider_domain=self._provider_domain,
            default_content_type=self._content_type,
            default_accept_type=self._accept_type,
            clock=self._clock,
        )

    def signer_for(self, service_name: str, endpoint: str | None = None) -> ISigner:
        return self._signer_factory(service_name, endpoint)

    def send(self, service_name: str, operation_name: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Call a JSON-protocol operation (``x-amz-target``) on the service's regional endpoint."""
        prefix = TARGET_PREFIXES.get(service_name, service_name)
        request = SignedRequest(
            method="POST",
            path="/",
            headers={"x-amz-target": f"{prefix}.{operation_name}"},
            body=json.dumps(payload),
        )
        return self._execute(service_name, request, None, f"{service_name}.{operation_name}")

    def post_json(
        self, service_name: str, path: str, payload: dict[str, Any], *, endpoint: str | None = None
    ) -> dict[str, Any]:
        """POST to a REST-JSON resource path, e.g. MediaConvert ``/2017-08-29/jobs``."""
        request = SignedRequest(
            method="POST",
            path=path,
            headers={"Content-Type": "application/json"},
            body=json.dumps(payload),
        )
        return self._execute(service_name, request, endpoint, f"{service_name} {path}")

    def _execute(
        self, service_name: str, request: SignedRequest, endpoint: str | None, label: str
    ) -> dict[str, Any]:
        signed = self.signer_for(service_name, endpoint).sign(request)

        try:
            response = self._http.post(signed.url, headers=signed.headers, content=signed.body.encode("utf-8"))
        except httpx.TransportError as exc:
            logger.error("%s transport failure: %s", label, exc)
            raise TransportError(f"{label} failed: {exc}") from exc

        if response.status_code >= 400:
            logger.warning(
                "%s returned %s", label, response.status_code,
                extra={"structured": {"status_code": response.status_code, "body": response.text}},
            )
            raise RequestError(response.status_code, response.text or response.reason_phrase)

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise RequestError(response.status_code, response.text) from exc

    def close(self) -> None:
        self._http.close()
