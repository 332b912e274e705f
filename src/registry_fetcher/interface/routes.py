"""API routes: thin controllers that delegate to the façade."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends

from registry_fetcher.infrastructure.github_rest_adapter import GitHubContentsAdapter
from registry_fetcher.interface.dependencies import get_adapter, get_facade
from registry_fetcher.interface.schemas import (
    CredentialsRequest,
    CredentialsResponse,
    ErrorResponse,
    MethodListResponse,
    ToolResponse,
)
from registry_fetcher.services.facade import RequestFacade

router = APIRouter()


@router.get("/tools", response_model=MethodListResponse)
async def list_tools(facade: RequestFacade = Depends(get_facade)) -> MethodListResponse:
    """List the request methods served by the façade."""
    return MethodListResponse.model_validate({"tools": facade.describe()})


@router.post(
    "/tools/{method}",
    response_model=ToolResponse,
    responses={
        401: {"model": ErrorResponse, "description": "GitHub credential rejected"},
        403: {"model": ErrorResponse, "description": "Access forbidden"},
        404: {"model": ErrorResponse, "description": "Component, block, path or method not found"},
        422: {"model": ErrorResponse, "description": "Invalid arguments"},
        429: {"model": ErrorResponse, "description": "GitHub API rate limit exceeded"},
        502: {"model": ErrorResponse, "description": "GitHub API or network error"},
        503: {"model": ErrorResponse, "description": "Circuit breaker open"},
    },
)
async def call_tool(
    method: str,
    arguments: dict[str, Any] | None = Body(default=None),
    facade: RequestFacade = Depends(get_facade),
) -> ToolResponse:
    """Run one request method with a JSON object of arguments."""
    result = await facade.handle(method, arguments or {})
    return ToolResponse(method=method, result=result)


@router.put("/credentials", response_model=CredentialsResponse)
async def update_credentials(
    body: CredentialsRequest,
    adapter: GitHubContentsAdapter = Depends(get_adapter),
) -> CredentialsResponse:
    """Replace or clear the GitHub bearer token at runtime."""
    adapter.update_token(body.token)
    return CredentialsResponse(authenticated=adapter.authenticated)


@router.get("/rate-limit")
async def rate_limit(
    adapter: GitHubContentsAdapter = Depends(get_adapter),
) -> dict[str, Any]:
    """Current GitHub API quota."""
    return await adapter.fetch_rate_limit()


@router.get("/circuit-breaker")
async def breaker_status(facade: RequestFacade = Depends(get_facade)) -> dict[str, object]:
    return facade.breaker.snapshot()


@router.post("/circuit-breaker/reset")
async def breaker_reset(facade: RequestFacade = Depends(get_facade)) -> dict[str, object]:
    facade.breaker.reset()
    return facade.breaker.snapshot()
