from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

import httpx
import pytest

from registry_fetcher.domain.value_objects import RegistryLayout, RepoRef
from registry_fetcher.infrastructure.github_rest_adapter import GitHubContentsAdapter
from registry_fetcher.services.resolver import RegistryResolver

REPO = RepoRef(owner="acme", repo="svelte-ui", branch="main")
LAYOUT = RegistryLayout(base="registry")

_CONTENTS_PREFIX = re.compile(r"^/repos/[^/]+/[^/]+/contents/")


def file_entry(path: str, size: int = 10) -> dict[str, Any]:
    name = path.rsplit("/", 1)[-1]
    return {
        "name": name,
        "path": path,
        "type": "file",
        "size": size,
        "sha": f"sha-{name}",
        "download_url": f"https://raw.githubusercontent.com/acme/svelte-ui/main/{path}",
    }


def dir_entry(path: str) -> dict[str, Any]:
    return {
        "name": path.rsplit("/", 1)[-1],
        "path": path,
        "type": "dir",
        "size": 0,
        "sha": "sha-dir",
        "download_url": None,
    }


@dataclass
class FakeGitHub:
    """In-memory stand-in for the contents API and the raw-file host."""

    files: dict[str, str] = field(default_factory=dict)
    dirs: dict[str, list[dict[str, Any]]] = field(default_factory=dict)
    failures: dict[str, tuple[int, str, dict[str, str]]] = field(default_factory=dict)
    listing_factory: Callable[[str], Any] | None = None
    calls: list[tuple[str, str]] = field(default_factory=list)
    auth_headers: list[str | None] = field(default_factory=list)
    raw_auth_headers: list[str | None] = field(default_factory=list)

    def add_file(self, path: str, content: str) -> None:
        """Register a raw file and list it in its parent directory."""
        self.files[path] = content
        parent = path.rsplit("/", 1)[0]
        self.dirs.setdefault(parent, []).append(file_entry(path, len(content)))

    def add_dir(self, path: str) -> None:
        parent = path.rsplit("/", 1)[0]
        self.dirs.setdefault(path, [])
        if parent != path:
            self.dirs.setdefault(parent, []).append(dir_entry(path))

    def fail(
        self,
        path: str,
        status: int,
        message: str = "",
        headers: dict[str, str] | None = None,
    ) -> None:
        self.failures[path] = (status, message, headers or {})

    file_entry = staticmethod(file_entry)
    dir_entry = staticmethod(dir_entry)

    def _failure(self, path: str) -> httpx.Response:
        status, message, headers = self.failures[path]
        return httpx.Response(status, json={"message": message}, headers=headers)

    def count(self, kind: str) -> int:
        return sum(1 for call_kind, _ in self.calls if call_kind == kind)

    def handler(self, request: httpx.Request) -> httpx.Response:
        url_path = request.url.path
        if request.url.host == "api.github.com":
            self.auth_headers.append(request.headers.get("Authorization"))
            if url_path == "/rate_limit":
                return httpx.Response(200, json={"rate": {"limit": 60, "remaining": 59}})
            path = _CONTENTS_PREFIX.sub("", url_path)
            self.calls.append(("listing", path))
            if path in self.failures:
                return self._failure(path)
            if self.listing_factory is not None:
                return httpx.Response(200, json=self.listing_factory(path))
            if path in self.dirs:
                return httpx.Response(200, json=self.dirs[path])
            if path in self.files:
                return httpx.Response(200, json=file_entry(path, len(self.files[path])))
            return httpx.Response(404, json={"message": "Not Found"})

        self.raw_auth_headers.append(request.headers.get("Authorization"))
        prefix = f"/{REPO.owner}/{REPO.repo}/{REPO.branch}/"
        path = url_path[len(prefix):] if url_path.startswith(prefix) else url_path
        self.calls.append(("raw", path))
        if path in self.failures:
            return self._failure(path)
        if path in self.files:
            return httpx.Response(200, text=self.files[path])
        return httpx.Response(404, text="404: Not Found")


@pytest.fixture
def repo() -> RepoRef:
    return REPO


@pytest.fixture
def layout() -> RegistryLayout:
    return LAYOUT


@pytest.fixture
def host() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def with_adapter(host: FakeGitHub) -> Callable[..., Any]:
    """Run ``fn(adapter)`` against the fake host and return its result."""

    def run(fn: Callable[[GitHubContentsAdapter], Awaitable[Any]], token: str | None = None) -> Any:
        async def main() -> Any:
            transport = httpx.MockTransport(host.handler)
            async with httpx.AsyncClient(transport=transport) as client:
                adapter = GitHubContentsAdapter(client, REPO, token=token)
                return await fn(adapter)

        return asyncio.run(main())

    return run


@pytest.fixture
def with_resolver(with_adapter: Callable[..., Any]) -> Callable[..., Any]:
    """Run ``fn(resolver)`` with a resolver wired to the fake host."""

    def run(fn: Callable[[RegistryResolver], Awaitable[Any]], max_tree_depth: int = 3) -> Any:
        async def wrapped(adapter: GitHubContentsAdapter) -> Any:
            resolver = RegistryResolver(adapter, LAYOUT, max_tree_depth=max_tree_depth)
            return await fn(resolver)

        return with_adapter(wrapped)

    return run
