"""Request models for the signed provider client."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SignedRequest(BaseModel):
    """An outbound request before signing."""

    method: str = "POST"
    path: str = "/"
    query_params: dict[str, str] = Field(default_factory=dict)
    headers: dict[str, str] = Field(default_factory=dict)
    body: str | None = None


class SignedRequestResult(BaseModel):
    """A signed request ready to transmit."""

    url: str
    headers: dict[str, str]
    body: str = ""
