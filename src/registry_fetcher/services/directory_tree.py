"""Recursive repository tree builder.

Child directories are listed one after another, never fanned out, so the
number of listing calls against the host's quota stays predictable.  The
depth ceiling counts path segments below the starting path.
"""

from __future__ import annotations

import logging

from registry_fetcher.domain.entities import DirectoryNode, EntryKind, ListingEntry
from registry_fetcher.domain.exceptions import NotFoundError, RegistryFetcherError
from registry_fetcher.domain.ports.remote_source import RemoteSource
from registry_fetcher.domain.value_objects import RegistryLayout, RepoRef

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 3

SUBDIRECTORY_ERROR = "Failed to fetch contents"


class DirectoryTreeBuilder:
    """Builds :class:`DirectoryNode` trees through a :class:`RemoteSource`."""

    def __init__(self, source: RemoteSource, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        if max_depth < 0:
            msg = "max_depth must not be negative."
            raise ValueError(msg)
        self._source = source
        self._max_depth = max_depth

    async def build(self, repo: RepoRef, path: str) -> DirectoryNode:
        """List *path* and descend into sub-directories up to the depth ceiling.

        A failing sub-directory is recorded with an ``error`` marker; a failure
        on *path* itself propagates.
        """
        path = path.strip("/")
        listing = await self._source.fetch_listing(path, repo)
        if isinstance(listing, ListingEntry):
            if listing.kind is EntryKind.FILE:
                return DirectoryNode.file(listing)
            raise NotFoundError(f"Path not found: {path}")
        root = DirectoryNode.directory(path)
        await self._fill(root, listing, repo, depth=0)
        return root

    async def _fill(
        self,
        node: DirectoryNode,
        entries: list[ListingEntry],
        repo: RepoRef,
        depth: int,
    ) -> None:
        assert node.children is not None
        for entry in entries:
            if entry.kind is EntryKind.FILE:
                node.children[entry.name] = DirectoryNode.file(entry)
                continue

            child = DirectoryNode.directory(entry.path, entry.name)
            if depth + 1 > self._max_depth:
                child.children = None
                child.truncated = True
                node.children[entry.name] = child
                continue

            try:
                listing = await self._source.fetch_listing(entry.path, repo)
            except RegistryFetcherError as exc:
                logger.warning("Failed to fetch subdirectory %s: %s", entry.path, exc)
                child.children = None
                child.error = SUBDIRECTORY_ERROR
                node.children[entry.name] = child
                continue

            node.children[entry.name] = child
            if isinstance(listing, list):
                await self._fill(child, listing, repo, depth + 1)


def placeholder_tree(layout: RegistryLayout) -> DirectoryNode:
    """Static outline of the registry used when the host refuses to list it."""
    root = DirectoryNode.directory(layout.base)
    root.note = "Basic structure provided due to API limitations"
    sections = (
        ("ui", layout.ui, "Contains all Svelte UI components",
         "Component directories with .svelte files are located here"),
        ("examples", layout.examples, "Contains component demo examples",
         "Demo files showing component usage"),
        ("blocks", layout.blocks, "Contains pre-built blocks and layouts",
         "Complex components and page layouts"),
        ("hooks", layout.hooks, "Contains custom Svelte hooks",
         "Reusable Svelte hooks and utilities"),
        ("lib", layout.lib, "Contains utility libraries and functions",
         "Helper functions and utilities"),
    )
    assert root.children is not None
    for name, path, description, note in sections:
        root.children[name] = DirectoryNode(
            path=path,
            kind=EntryKind.DIRECTORY,
            name=name,
            description=description,
            note=note,
        )
    return root
