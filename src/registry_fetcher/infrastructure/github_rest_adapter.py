"""GitHub REST API adapter: implements the RemoteSource port."""

from __future__ import annotations

import logging
import threading
from typing import Any, NoReturn

import httpx

from registry_fetcher.domain.entities import EntryKind, ListingEntry
from registry_fetcher.domain.exceptions import (
    AuthenticationFailedError,
    ForbiddenError,
    NetworkError,
    NotFoundError,
    RateLimitedError,
    RemoteError,
)
from registry_fetcher.domain.value_objects import RepoRef

logger = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"
RAW_BASE = "https://raw.githubusercontent.com"

_USER_AGENT = "registry-fetcher/1.0"
_API_ACCEPT = "application/vnd.github+json"
_TOKEN_HINT = (
    "Set the GITHUB_PERSONAL_ACCESS_TOKEN environment variable to increase the limit."
)


class GitHubContentsAdapter:
    """Concrete RemoteSource backed by the GitHub contents API and raw host.

    No retries happen here; failures are translated to domain exceptions and
    propagated to the caller.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        repo: RepoRef,
        token: str | None = None,
        *,
        api_base: str = GITHUB_API,
        raw_base: str = RAW_BASE,
    ) -> None:
        self._client = client
        self._repo = repo
        self._api_base = api_base.rstrip("/")
        self._raw_base = raw_base.rstrip("/")
        self._token_lock = threading.Lock()
        self._token: str | None = None
        self.update_token(token, announce=False)

    @property
    def default_repo(self) -> RepoRef:
        return self._repo

    @property
    def authenticated(self) -> bool:
        with self._token_lock:
            return self._token is not None

    def update_token(self, token: str | None, *, announce: bool = True) -> None:
        """Replace the bearer credential; an empty value clears it."""
        cleaned = token.strip() if token else ""
        with self._token_lock:
            self._token = cleaned or None
        if not announce:
            return
        if cleaned:
            logger.info("GitHub API token updated")
        else:
            logger.warning("GitHub API token removed; using unauthenticated requests")

    def _headers(self, accept: str | None = None) -> dict[str, str]:
        headers = {"User-Agent": _USER_AGENT}
        if accept:
            headers["Accept"] = accept
        with self._token_lock:
            token = self._token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    # ── Public API ──────────────────────────────────────────────────────

    async def fetch_listing(
        self, path: str, repo: RepoRef | None = None
    ) -> list[ListingEntry] | ListingEntry:
        """GET /repos/{owner}/{repo}/contents/{path}?ref={branch}.

        Returns a list for a directory and a single entry for a file.
        """
        repo = repo or self._repo
        resp = await self._api_get(
            repo.contents_endpoint(path), params={"ref": repo.branch}
        )
        data = _json_body(resp)

        if isinstance(data, list):
            return [_to_entry(item) for item in data if isinstance(item, dict)]

        if isinstance(data, dict):
            if "message" in data and "type" not in data:
                _raise_for_message(str(data["message"]), path)
            return _to_entry(data)

        raise RemoteError(resp.status_code, f"Unexpected listing response for {path}")

    async def fetch_raw(self, path: str, repo: RepoRef | None = None) -> str:
        """Fetch raw file content via raw.githubusercontent.com."""
        repo = repo or self._repo
        url = f"{self._raw_base}{repo.raw_path(path)}"
        resp = await self._get(url, headers=self._headers())
        if resp.is_success:
            return resp.text
        _raise_for_status(resp, path)

    async def fetch_rate_limit(self) -> dict[str, Any]:
        """GET /rate_limit → the host's quota document."""
        resp = await self._api_get("/rate_limit")
        data = _json_body(resp)
        return data if isinstance(data, dict) else {"raw": data}

    # ── Transport ───────────────────────────────────────────────────────

    async def _api_get(
        self,
        endpoint: str,
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Perform a GitHub API GET request with error translation."""
        url = f"{self._api_base}{endpoint}"
        resp = await self._get(url, headers=self._headers(_API_ACCEPT), params=params)
        if resp.is_success:
            return resp
        _raise_for_status(resp, endpoint)

    async def _get(
        self,
        url: str,
        headers: dict[str, str],
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        logger.debug("GET %s", url)
        try:
            return await self._client.get(url, headers=headers, params=params)
        except httpx.TimeoutException as exc:
            raise NetworkError(f"Network timeout fetching {url}: {exc}") from exc
        except httpx.TransportError as exc:
            raise NetworkError(
                f"Network error fetching {url}: {exc}. "
                "Please check your internet connection."
            ) from exc


# ── Helpers ─────────────────────────────────────────────────────────────────


def _json_body(resp: httpx.Response) -> Any:
    try:
        return resp.json()
    except ValueError as exc:
        raise RemoteError(resp.status_code, "Response body is not valid JSON") from exc


def _to_entry(item: dict[str, Any]) -> ListingEntry:
    kind = EntryKind.DIRECTORY if item.get("type") == "dir" else EntryKind.FILE
    return ListingEntry(
        name=str(item.get("name", "")),
        kind=kind,
        path=str(item.get("path", "")),
        size=_size(item),
        download_url=item.get("download_url") if kind is EntryKind.FILE else None,
        sha=item.get("sha"),
    )


def _size(item: dict[str, Any]) -> int:
    try:
        return int(item.get("size") or 0)
    except (TypeError, ValueError) as exc:
        raise RemoteError(
            200, f"Malformed size for {item.get('path', '?')}: {item.get('size')!r}"
        ) from exc


def _error_message(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.text.strip() or resp.reason_phrase or "Unknown error"
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return resp.reason_phrase or "Unknown error"


def _raise_for_message(message: str, path: str) -> NoReturn:
    """Translate an error object delivered with a success status."""
    if "rate limit" in message.lower():
        raise RateLimitedError(f"GitHub API rate limit exceeded: {message} {_TOKEN_HINT}")
    if "not found" in message.lower():
        raise NotFoundError(f"Path not found: {path}")
    raise RemoteError(200, message)


def _raise_for_status(resp: httpx.Response, path: str) -> NoReturn:
    status = resp.status_code
    message = _error_message(resp)

    if status == 404:
        raise NotFoundError(f"Not found: {path}")

    if status == 401:
        raise AuthenticationFailedError(
            "Authentication failed. Please check your GITHUB_PERSONAL_ACCESS_TOKEN "
            "if provided."
        )

    if status == 403:
        remaining = resp.headers.get("x-ratelimit-remaining", "")
        if "rate limit" in message.lower() or remaining == "0":
            raise RateLimitedError(f"GitHub API rate limit exceeded: {message} {_TOKEN_HINT}")
        raise ForbiddenError(f"Access forbidden: {message}")

    if status == 429:
        raise RateLimitedError(f"GitHub API rate limit exceeded (HTTP 429): {message}")

    raise RemoteError(status, message)
