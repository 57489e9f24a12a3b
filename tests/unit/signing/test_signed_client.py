"""Unit tests for SignedRequestClient using httpx.MockTransport."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import httpx
import pytest

from framecue.core.config import AppSettings, SigningConfig
from framecue.core.exceptions import ConfigurationError, RequestError, TransportError
from framecue.core.protocols import ISignedClient, ISigner
from framecue.models.signing import SignedRequest, SignedRequestResult
from framecue.signing.client import SignedRequestClient

FIXED = datetime(2024, 1, 15, 9, 30, tzinfo=timezone.utc)


def _client(handler, **overrides):
    params = dict(
        region="us-east-1",
        access_key="AKIDEXAMPLE",
        secret_key="wJalrXUtnFEMI/K7MDENG+bPxRfiCYEXAMPLEKEY",
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
        clock=lambda: FIXED,
    )
    params.update(overrides)
    return SignedRequestClient(**params)


class TestSend:
    def test_posts_signed_json(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"JobId": "job-1"})

        result = _client(handler).send("rekognition", "StartSegmentDetection", {"JobTag": "t"})

        assert result == {"JobId": "job-1"}
        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == "https://rekognition.us-east-1.amazonaws.com/"
        assert request.headers["x-amz-target"] == "RekognitionService.StartSegmentDetection"
        assert request.headers["content-type"] == "application/x-amz-json-1.1"
        assert request.headers["x-amz-date"] == "20240115T093000Z"
        assert request.headers["authorization"].startswith(
            "AWS4-HMAC-SHA256 Credential=AKIDEXAMPLE/20240115/us-east-1/rekognition/aws4_request"
        )
        assert json.loads(request.content) == {"JobTag": "t"}

    def test_matches_golden_signature(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        _client(handler).send("rekognition", "GetSegmentDetection", {"JobId": "job-1"})
        assert seen[0].headers["authorization"].endswith(
            "Signature=87c4a61ea836cd98f64c0d56bdbf3329ed05b2193bf432d5a5e1de48c98df0b8"
        )

    def test_unknown_service_uses_name_as_target_prefix(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        _client(handler).send("custom", "DoThing", {})
        assert seen[0].headers["x-amz-target"] == "custom.DoThing"

    def test_empty_response_body(self):
        result = _client(lambda request: httpx.Response(200)).send("rekognition", "Op", {})
        assert result == {}

    def test_error_status_raises_request_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, text='{"__type":"InvalidParameterException"}')

        with pytest.raises(RequestError) as excinfo:
            _client(handler).send("rekognition", "GetSegmentDetection", {"JobId": "x"})
        assert excinfo.value.status_code == 400
        assert "InvalidParameterException" in excinfo.value.body

    def test_non_json_success_body_raises_request_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>gateway</html>")

        with pytest.raises(RequestError) as excinfo:
            _client(handler).send("rekognition", "GetSegmentDetection", {"JobId": "x"})
        assert excinfo.value.status_code == 200
        assert "gateway" in excinfo.value.body

    def test_connection_failure_raises_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TransportError):
            _client(handler).send("rekognition", "GetSegmentDetection", {})


class TestConfiguration:
    def test_missing_region(self):
        with pytest.raises(ConfigurationError):
            _client(lambda r: httpx.Response(200), region="")

    def test_missing_secret(self):
        with pytest.raises(ConfigurationError):
            _client(lambda r: httpx.Response(200), secret_key=None)

    def test_from_settings_uses_explicit_credentials(self):
        settings = AppSettings(signing=SigningConfig(access_key="AK", secret_key="SK", session_token="ST"))
        client = SignedRequestClient.from_settings(settings)
        signer = client.signer_for("textract")
        assert signer.access_key == "AK"
        assert signer.session_token == "ST"
        assert signer.region == settings.aws.region

    def test_from_settings_without_any_credentials(self, monkeypatch):
        monkeypatch.setattr(
            "framecue.signing.client.boto3.Session.get_credentials", lambda self: None,
        )
        with pytest.raises(ConfigurationError):
            SignedRequestClient.from_settings(AppSettings(signing=SigningConfig()))


class StaticSigner:
    """ISigner that stamps a fixed header and records what it signed."""

    def __init__(self, service_name: str, endpoint: str | None) -> None:
        self.service_name = service_name
        self.endpoint = endpoint or f"https://{service_name}.test"
        self.requests: list[SignedRequest] = []

    def sign(self, request: SignedRequest, timestamp: datetime | None = None) -> SignedRequestResult:
        self.requests.append(request)
        headers = {**request.headers, "Authorization": f"Static {self.service_name}"}
        return SignedRequestResult(url=f"{self.endpoint}{request.path}", headers=headers, body=request.body or "")


class TestInjectedSigner:
    def test_send_goes_through_factory_signer(self):
        signers: list[StaticSigner] = []

        def factory(service_name: str, endpoint: str | None) -> StaticSigner:
            signers.append(StaticSigner(service_name, endpoint))
            return signers[-1]

        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"ok": True})

        client = SignedRequestClient(
            region=None,
            http_client=httpx.Client(transport=httpx.MockTransport(handler)),
            signer_factory=factory,
        )

        assert client.send("textract", "GetDocumentAnalysis", {"JobId": "d"}) == {"ok": True}
        assert isinstance(signers[0], ISigner)
        assert signers[0].requests[0].headers == {"x-amz-target": "Textract.GetDocumentAnalysis"}
        assert seen[0].headers["authorization"] == "Static textract"
        assert str(seen[0].url) == "https://textract.test/"

    def test_client_satisfies_protocol(self):
        assert isinstance(_client(lambda r: httpx.Response(200)), ISignedClient)


class TestPostJson:
    def test_posts_to_endpoint_path(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201, json={"job": {"id": "mc-1"}})

        result = _client(handler).post_json(
            "mediaconvert", "/2017-08-29/jobs", {"role": "r"},
            endpoint="https://abcd1234.mediaconvert.us-east-1.amazonaws.com",
        )

        assert result == {"job": {"id": "mc-1"}}
        request = seen[0]
        assert str(request.url) == "https://abcd1234.mediaconvert.us-east-1.amazonaws.com/2017-08-29/jobs"
        assert request.headers["content-type"] == "application/json"
        assert "x-amz-target" not in request.headers
        assert "/us-east-1/mediaconvert/aws4_request" in request.headers["authorization"]
        assert json.loads(request.content) == {"role": "r"}
