"""Value objects: immutable descriptions of where registry content lives."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RepoRef:
    """An owner / repository / branch triple on the hosting service."""

    owner: str
    repo: str
    branch: str = "main"

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    def contents_endpoint(self, path: str) -> str:
        """Listing endpoint for *path*, relative to the API root."""
        return f"/repos/{self.owner}/{self.repo}/contents/{path.strip('/')}"

    def raw_path(self, path: str) -> str:
        """Raw-file location for *path*, relative to the raw-content host."""
        return f"/{self.owner}/{self.repo}/{self.branch}/{path.lstrip('/')}"


@dataclass(frozen=True, slots=True)
class RegistryLayout:
    """Well-known directories of the component registry inside the repository.

    Every path is derived from *base*, e.g. ``docs/src/lib/registry`` gives
    ``docs/src/lib/registry/ui`` for component sources.
    """

    base: str

    @property
    def ui(self) -> str:
        return f"{self.base}/ui"

    @property
    def examples(self) -> str:
        return f"{self.base}/examples"

    @property
    def blocks(self) -> str:
        return f"{self.base}/blocks"

    @property
    def hooks(self) -> str:
        return f"{self.base}/hooks"

    @property
    def lib(self) -> str:
        return f"{self.base}/lib"
