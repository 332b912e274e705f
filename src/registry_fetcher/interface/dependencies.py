"""FastAPI dependency injection wiring: the composition root."""

from __future__ import annotations

import httpx

from registry_fetcher.domain.exceptions import NotFoundError
from registry_fetcher.infrastructure.config import get_settings
from registry_fetcher.infrastructure.github_rest_adapter import GitHubContentsAdapter
from registry_fetcher.services.circuit_breaker import CircuitBreaker, CircuitBreakerConfig
from registry_fetcher.services.facade import RequestFacade
from registry_fetcher.services.resolver import RegistryResolver

_http_client: httpx.AsyncClient | None = None
_adapter: GitHubContentsAdapter | None = None
_facade: RequestFacade | None = None


async def startup() -> None:
    """Initialise shared resources from the lifespan context manager."""
    global _http_client, _adapter, _facade  # noqa: PLW0603

    settings = get_settings()
    _http_client = httpx.AsyncClient(timeout=httpx.Timeout(settings.request_timeout_seconds))
    _adapter = GitHubContentsAdapter(
        client=_http_client,
        repo=settings.repo,
        token=settings.token,
    )
    resolver = RegistryResolver(
        source=_adapter,
        layout=settings.layout,
        source_extensions=settings.source_extensions,
        max_tree_depth=settings.tree_max_depth,
    )
    breaker = CircuitBreaker(
        CircuitBreakerConfig(
            failure_threshold=settings.breaker_failure_threshold,
            timeout_ms=settings.breaker_timeout_ms,
            success_threshold=settings.breaker_success_threshold,
        ),
        name="github",
        excluded_exceptions=(NotFoundError,),
    )
    _facade = RequestFacade(resolver=resolver, breaker=breaker)


async def shutdown() -> None:
    """Release shared resources."""
    global _http_client, _adapter, _facade  # noqa: PLW0603

    if _http_client:
        await _http_client.aclose()
        _http_client = None
    _adapter = None
    _facade = None


def get_facade() -> RequestFacade:
    """Return the process-wide façade built at startup."""
    assert _facade is not None, "startup() was not called"
    return _facade


def get_adapter() -> GitHubContentsAdapter:
    """Return the process-wide GitHub adapter built at startup."""
    assert _adapter is not None, "startup() was not called"
    return _adapter
