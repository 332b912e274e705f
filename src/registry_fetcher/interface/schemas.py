"""Pydantic request / response DTOs for the API boundary."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class MethodInfo(BaseModel):
    name: str
    description: str


class MethodListResponse(BaseModel):
    """Response from ``GET /tools``."""

    tools: list[MethodInfo]


class ToolResponse(BaseModel):
    """Successful response from ``POST /tools/{method}``."""

    method: str
    result: dict[str, Any]


class CredentialsRequest(BaseModel):
    """Body of ``PUT /credentials``; ``null`` clears the token."""

    token: str | None = None


class CredentialsResponse(BaseModel):
    authenticated: bool


class ErrorResponse(BaseModel):
    """Standard error envelope returned on all failure paths."""

    status: str = "error"
    message: str
