"""AWS Signature Version 4 request signer.

Builds the canonical request, derives the scoped signing key and attaches
the ``Authorization`` header without going through an SDK. Output must be
bit-exact with the provider's verification, so the canonical forms below
follow the published algorithm literally:

    CanonicalRequest = METHOD \\n URI \\n QUERY \\n HEADERS \\n SIGNED_HEADERS \\n HEX(SHA256(body))
    StringToSign     = AWS4-HMAC-SHA256 \\n AMZDATE \\n SCOPE \\n HEX(SHA256(CanonicalRequest))
    SigningKey       = HMAC(HMAC(HMAC(HMAC("AWS4" + secret, date), region), service), "aws4_request")
"""

from __future__ import annotations

import hashlib
import hmac
import re
from collections.abc import Mapping
from datetime import datetime, timezone
from urllib.parse import quote, urlsplit

from framecue.core.clock import utc_now
from framecue.core.exceptions import ConfigurationError
from framecue.core.types import Clock
from framecue.models.signing import SignedRequest, SignedRequestResult

ALGORITHM = "AWS4-HMAC-SHA256"
AWS4 = "AWS4"
AWS4_REQUEST = "aws4_request"
X_AMZ_DATE = "x-amz-date"
X_AMZ_SECURITY_TOKEN = "x-amz-security-token"
HOST = "host"
AUTHORIZATION = "Authorization"
CONTENT_TYPE = "Content-Type"
ACCEPT = "Accept"

# Methods that never carry a side-effecting body; they always sign "".
_READ_METHODS = frozenset({"GET", "HEAD"})

_ENDPOINT_RE = re.compile(r"^(https?://[^/]+)(.*)$")


def _sha256_hex(value: str | bytes) -> str:
    if isinstance(value, str):
        value = value.encode("utf-8")
    return hashlib.sha256(value).hexdigest()


def _hmac(key: bytes, value: str) -> bytes:
    return hmac.new(key, value.encode("utf-8"), hashlib.sha256).digest()


def amz_date(timestamp: datetime) -> str:
    """ISO 8601 basic format, e.g. ``20150830T123600Z``."""
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def canonical_uri(path: str) -> str:
    """RFC 3986 encode each path segment, keeping the ``/`` separators."""
    return quote(path or "/", safe="/")


def canonical_query_string(query_params: Mapping[str, object]) -> str:
    if not query_params:
        return ""
    return "&".join(
        f"{quote(str(name), safe='')}={quote(str(query_params[name]), safe='')}"
        for name in sorted(query_params)
    )


def _lowered(headers: Mapping[str, str]) -> dict[str, str]:
    return {name.lower(): value for name, value in headers.items()}


def canonical_headers(headers: Mapping[str, str]) -> str:
    lowered = _lowered(headers)
    return "".join(f"{name}:{lowered[name]}\n" for name in sorted(lowered))


def signed_headers(headers: Mapping[str, str]) -> str:
    return ";".join(sorted(_lowered(headers)))


def canonical_request(
    method: str, path: str, query_params: Mapping[str, object], headers: Mapping[str, str], body: str
) -> str:
    return "\n".join([
        method,
        canonical_uri(path),
        canonical_query_string(query_params),
        canonical_headers(headers),
        signed_headers(headers),
        _sha256_hex(body),
    ])


def credential_scope(date_time: str, region: str, service_name: str) -> str:
    return f"{date_time[:8]}/{region}/{service_name}/{AWS4_REQUEST}"


def string_to_sign(date_time: str, scope: str, hashed_canonical_request: str) -> str:
    return f"{ALGORITHM}\n{date_time}\n{scope}\n{hashed_canonical_request}"


def derive_signing_key(secret_key: str, date_time: str, region: str, service_name: str) -> bytes:
    key = _hmac(f"{AWS4}{secret_key}".encode("utf-8"), date_time[:8])
    key = _hmac(key, region)
    key = _hmac(key, service_name)
    return _hmac(key, AWS4_REQUEST)


def _pop_header(headers: dict[str, str], name: str) -> None:
    for key in [k for k in headers if k.lower() == name.lower()]:
        del headers[key]


def _has_header(headers: Mapping[str, str], name: str) -> bool:
    return any(k.lower() == name.lower() for k in headers)


class SigV4Signer:
    """Signs requests for one service/region pair.

    ``clock`` supplies the signing time when ``sign`` is not given an explicit
    timestamp; for fixed inputs the output is byte-identical across runs.
    """

    def __init__(
        self,
        *,
        access_key: str | None,
        secret_key: str | None,
        region: str | None,
        service_name: str = "execute-api",
        endpoint: str | None = None,
        session_token: str | None = None,
        provider_domain: str = "amazonaws.com",
        default_content_type: str | None = "application/json",
        default_accept_type: str | None = "application/json",
        clock: Clock = utc_now,
    ) -> None:
        if not access_key or not secret_key:
            raise ConfigurationError("missing credential")
        if not region:
            raise ConfigurationError("missing region")

        self.access_key = access_key
        self._secret_key = secret_key
        self.session_token = session_token
        self.region = region
        self.service_name = service_name
        self.endpoint = endpoint or f"https://{service_name}.{region}.{provider_domain}"
        self.default_content_type = default_content_type
        self.default_accept_type = default_accept_type
        self._clock = clock

        match = _ENDPOINT_RE.match(self.endpoint)
        if match is None:
            raise ConfigurationError(f"invalid endpoint {self.endpoint!r}")
        self._base_url, self._base_path = match.group(1), match.group(2).rstrip("/")
        self._hostname = urlsplit(self._base_url).hostname or ""

    def authorization_header(self, scope: str, headers: Mapping[str, str], signature: str) -> str:
        return (
            f"{ALGORITHM} Credential={self.access_key}/{scope}, "
            f"SignedHeaders={signed_headers(headers)}, Signature={signature}"
        )

    def sign(self, request: SignedRequest, timestamp: datetime | None = None) -> SignedRequestResult:
        path = f"{self._base_path}{request.path}"
        verb = request.method.upper()
        query_params = dict(request.query_params)
        headers = dict(request.headers)

        if self.default_content_type and not _has_header(headers, CONTENT_TYPE):
            headers[CONTENT_TYPE] = self.default_content_type
        if self.default_accept_type and not _has_header(headers, ACCEPT):
            headers[ACCEPT] = self.default_accept_type

        body = "" if request.body is None or verb in _READ_METHODS else request.body
        if not body:
            _pop_header(headers, CONTENT_TYPE)

        date_time = amz_date(timestamp or self._clock())
        _pop_header(headers, X_AMZ_DATE)
        _pop_header(headers, HOST)
        headers[X_AMZ_DATE] = date_time
        headers[HOST] = self._hostname

        hashed = _sha256_hex(canonical_request(verb, path, query_params, headers, body))
        scope = credential_scope(date_time, self.region, self.service_name)
        key = derive_signing_key(self._secret_key, date_time, self.region, self.service_name)
        signature = hmac.new(key, string_to_sign(date_time, scope, hashed).encode("utf-8"), hashlib.sha256).hexdigest()

        headers[AUTHORIZATION] = self.authorization_header(scope, headers, signature)
        if self.session_token:
            headers[X_AMZ_SECURITY_TOKEN] = self.session_token
        # Implied by the connection.
        del headers[HOST]

        url = f"{self._base_url}{canonical_uri(path)}"
        query = canonical_query_string(query_params)
        if query:
            url = f"{url}?{query}"

        return SignedRequestResult(url=url, headers=headers, body=body)
