"""Domain entities: pure data structures with no external dependencies.

Every entity that leaves the service exposes ``to_dict()`` returning a
JSON-serialisable mapping; the interface layer never inspects the classes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class EntryKind(str, Enum):
    """Kind of an entry returned by the listing endpoint."""

    FILE = "file"
    DIRECTORY = "directory"


class BlockKind(str, Enum):
    """A block is either a single file or a directory of files."""

    SIMPLE = "simple"
    COMPLEX = "complex"


@dataclass(frozen=True, slots=True)
class ListingEntry:
    """A single item from the contents API."""

    name: str
    kind: EntryKind
    path: str
    size: int = 0
    download_url: str | None = None
    sha: str | None = None


# ── Components ──────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class SourceFile:
    """A fetched component source file with locally extracted names."""

    path: str
    content: str
    size: int
    lines: int
    dependencies: tuple[str, ...] = ()
    imports: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "content": self.content,
            "size": self.size,
            "lines": self.lines,
            "dependencies": list(self.dependencies),
            "imports": list(self.imports),
        }


@dataclass(frozen=True, slots=True)
class ComponentBundle:
    """Aggregated source files and derived metadata for one component."""

    name: str
    files: dict[str, SourceFile]
    dependencies: tuple[str, ...]
    imports: tuple[str, ...]
    total_files: int = 0
    structure: tuple[dict[str, Any], ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": "svelte-component",
            "files": {name: f.to_dict() for name, f in self.files.items()},
            "structure": [dict(item) for item in self.structure],
            "total_files": self.total_files,
            "dependencies": list(self.dependencies),
            "imports": list(self.imports),
        }


@dataclass(frozen=True, slots=True)
class ComponentDemo:
    """Demo source illustrating a component's usage."""

    name: str
    path: str
    code: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "path": self.path, "code": self.code}


@dataclass(frozen=True, slots=True)
class ComponentListing:
    """Sorted component names; ``fallback_used`` marks the built-in list."""

    components: tuple[str, ...]
    fallback_used: bool = False
    reason: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "components": list(self.components),
            "total": len(self.components),
            "fallback_used": self.fallback_used,
        }
        if self.reason:
            result["reason"] = self.reason
        return result


# ── Blocks ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class BlockFile:
    """One file of a block, with description and component usage."""

    path: str
    content: str
    size: int
    lines: int
    description: str | None = None
    dependencies: tuple[str, ...] = ()
    components_used: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "content": self.content,
            "size": self.size,
            "lines": self.lines,
            "description": self.description,
            "dependencies": list(self.dependencies),
            "components_used": list(self.components_used),
        }


BlockFileTree = dict[str, Union[BlockFile, dict[str, BlockFile]]]


@dataclass(frozen=True, slots=True)
class BlockBundle:
    """A prebuilt layout: a single code blob (simple) or a file tree (complex)."""

    name: str
    kind: BlockKind
    description: str
    dependencies: tuple[str, ...]
    components_used: tuple[str, ...]
    usage: str
    code: str | None = None
    files: BlockFileTree = field(default_factory=dict)
    structure: tuple[dict[str, Any], ...] = ()
    total_files: int = 0

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "name": self.name,
            "type": self.kind.value,
            "description": self.description,
            "dependencies": list(self.dependencies),
            "components_used": list(self.components_used),
            "usage": self.usage,
        }
        if self.kind is BlockKind.SIMPLE:
            code = self.code or ""
            result["code"] = code
            result["size"] = len(code.encode("utf-8"))
            result["lines"] = len(code.split("\n"))
            return result

        files: dict[str, Any] = {}
        for name, item in self.files.items():
            if isinstance(item, BlockFile):
                files[name] = item.to_dict()
            else:
                files[name] = {sub: f.to_dict() for sub, f in item.items()}
        result["files"] = files
        result["structure"] = [dict(item) for item in self.structure]
        result["total_files"] = self.total_files
        return result


# ── Repository tree ─────────────────────────────────────────────────────────


@dataclass(slots=True)
class DirectoryNode:
    """One node of a repository tree.

    Files carry ``download_url`` and ``sha``; directories carry ``children``
    and never a download URL.  ``children`` is ``None`` for a directory that
    was not descended into (depth ceiling or fetch failure).
    """

    path: str
    kind: EntryKind
    name: str = ""
    download_url: str | None = None
    sha: str | None = None
    children: dict[str, DirectoryNode] | None = None
    error: str | None = None
    truncated: bool = False
    description: str | None = None
    note: str | None = None

    @classmethod
    def file(cls, entry: ListingEntry) -> DirectoryNode:
        return cls(
            path=entry.path,
            kind=EntryKind.FILE,
            name=entry.name,
            download_url=entry.download_url,
            sha=entry.sha,
        )

    @classmethod
    def directory(cls, path: str, name: str = "") -> DirectoryNode:
        return cls(path=path, kind=EntryKind.DIRECTORY, name=name, children={})

    def depth(self) -> int:
        """Number of directory levels below this node (a file is 0)."""
        if not self.children:
            return 0
        return 1 + max(child.depth() for child in self.children.values())

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"path": self.path, "type": self.kind.value}
        if self.name:
            result["name"] = self.name
        if self.kind is EntryKind.FILE:
            result["url"] = self.download_url
            result["sha"] = self.sha
            return result
        if self.children is not None:
            result["children"] = {
                name: child.to_dict() for name, child in self.children.items()
            }
        for key in ("error", "description", "note"):
            value = getattr(self, key)
            if value:
                result[key] = value
        if self.truncated:
            result["truncated"] = True
        return result


@dataclass(frozen=True, slots=True)
class DirectoryTree:
    """Result of a tree build; ``fallback_used`` marks the static placeholder."""

    root: DirectoryNode
    fallback_used: bool = False
    reason: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result = self.root.to_dict()
        result["fallback_used"] = self.fallback_used
        if self.reason:
            result["reason"] = self.reason
        return result
