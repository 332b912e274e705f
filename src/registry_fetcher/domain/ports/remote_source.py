"""Remote source port, implemented by the infrastructure layer."""

from __future__ import annotations

from typing import Any, Protocol

from registry_fetcher.domain.entities import ListingEntry
from registry_fetcher.domain.value_objects import RepoRef


class RemoteSource(Protocol):
    """Abstract contract for reading a hosted repository."""

    @property
    def default_repo(self) -> RepoRef:
        """Repository used when a call does not name one."""
        ...

    async def fetch_listing(
        self, path: str, repo: RepoRef | None = None
    ) -> list[ListingEntry] | ListingEntry:
        """List a directory; a non-directory path yields a single entry."""
        ...

    async def fetch_raw(self, path: str, repo: RepoRef | None = None) -> str:
        """Return the raw text of a single file."""
        ...

    async def fetch_rate_limit(self) -> dict[str, Any]:
        """Return the host's current quota document."""
        ...

    def update_token(self, token: str | None) -> None:
        """Replace (or clear, with ``None``) the bearer credential."""
        ...
