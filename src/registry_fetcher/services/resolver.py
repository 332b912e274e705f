"""Registry resolver: the retrieval use cases.

Composes the :class:`RemoteSource` port with the pure extractor functions to
produce component bundles, demos, metadata, block bundles, block listings and
repository trees.  Remote failures propagate unchanged except on the two
degraded paths: the component listing and the default-root directory tree
fall back to static data and say so in their result.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from registry_fetcher.domain.entities import (
    BlockBundle,
    BlockFile,
    BlockFileTree,
    BlockKind,
    ComponentBundle,
    ComponentDemo,
    ComponentListing,
    DirectoryTree,
    EntryKind,
    ListingEntry,
    SourceFile,
)
from registry_fetcher.domain.exceptions import (
    NotFoundError,
    RateLimitedError,
    RegistryFetcherError,
)
from registry_fetcher.domain.ports.remote_source import RemoteSource
from registry_fetcher.domain.value_objects import RegistryLayout, RepoRef
from registry_fetcher.services.block_catalog import BlockCatalog
from registry_fetcher.services.directory_tree import (
    DEFAULT_MAX_DEPTH,
    DirectoryTreeBuilder,
    placeholder_tree,
)
from registry_fetcher.services.extractor import (
    extract_component_usage,
    extract_dependencies,
    extract_imports,
    extract_leading_description,
)

logger = logging.getLogger(__name__)

FALLBACK_COMPONENTS: tuple[str, ...] = (
    "accordion", "alert", "alert-dialog", "aspect-ratio", "avatar", "badge",
    "breadcrumb", "button", "calendar", "card", "carousel", "checkbox",
    "collapsible", "command", "context-menu", "dialog", "drawer",
    "dropdown-menu", "form", "hover-card", "input", "input-otp", "label",
    "menubar", "navigation-menu", "pagination", "popover", "progress",
    "radio-group", "resizable", "scroll-area", "select", "separator", "sheet",
    "skeleton", "slider", "sonner", "switch", "table", "tabs", "textarea",
    "toggle", "toggle-group", "tooltip",
)

DEMO_SUFFIXES: tuple[str, ...] = ("-demo.svelte", ".svelte", "-01.svelte")


def _size(content: str) -> int:
    return len(content.encode("utf-8"))


def _line_count(content: str) -> int:
    return len(content.split("\n"))


def _file_type(name: str) -> str:
    return "svelte" if name.endswith(".svelte") else "typescript"


def _pascal_case(name: str) -> str:
    return name[:1].upper() + name[1:].replace("-", "")


def _merge(target: dict[str, None], names: tuple[str, ...]) -> None:
    for name in names:
        target.setdefault(name, None)


class RegistryResolver:
    """Retrieval operations over the component registry.

    Parameters
    ----------
    source:
        Adapter for the hosting service's listing and raw-file endpoints.
    layout:
        Registry directories inside the default repository.
    source_extensions:
        File suffixes treated as component source.
    max_tree_depth:
        Depth ceiling for :meth:`build_directory_tree`, relative to the
        starting path.
    """

    def __init__(
        self,
        source: RemoteSource,
        layout: RegistryLayout,
        source_extensions: tuple[str, ...] = (".svelte", ".ts"),
        max_tree_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self._source = source
        self._layout = layout
        self._extensions = tuple(source_extensions)
        self._tree_builder = DirectoryTreeBuilder(source, max_depth=max_tree_depth)

    @property
    def layout(self) -> RegistryLayout:
        return self._layout

    @property
    def default_repo(self) -> RepoRef:
        return self._source.default_repo

    # ── Components ──────────────────────────────────────────────────────

    async def get_component_source(self, name: str) -> ComponentBundle:
        """Fetch every source file of a component and aggregate its imports."""
        path = f"{self._layout.ui}/{name.lower()}"
        try:
            listing = await self._source.fetch_listing(path)
        except NotFoundError as exc:
            raise NotFoundError(f'Component "{name}" not found in the registry') from exc

        if not isinstance(listing, list) or not listing:
            raise NotFoundError(f'Component "{name}" not found in the registry')

        files: dict[str, SourceFile] = {}
        structure: list[dict[str, Any]] = []
        dependencies: dict[str, None] = {}
        imports: dict[str, None] = {}

        for entry in listing:
            if entry.kind is not EntryKind.FILE or not entry.name.endswith(self._extensions):
                continue
            content = await self._source.fetch_raw(entry.path)
            source_file = SourceFile(
                path=entry.name,
                content=content,
                size=_size(content),
                lines=_line_count(content),
                dependencies=extract_dependencies(content),
                imports=extract_imports(content),
            )
            files[entry.name] = source_file
            _merge(dependencies, source_file.dependencies)
            _merge(imports, source_file.imports)
            structure.append(
                {
                    "name": entry.name,
                    "type": "file",
                    "size": source_file.size,
                    "file_type": _file_type(entry.name),
                }
            )

        logger.info("Resolved component %s (%d file(s))", name, len(files))
        return ComponentBundle(
            name=name,
            files=files,
            dependencies=tuple(dependencies),
            imports=tuple(imports),
            total_files=len(listing),
            structure=tuple(structure),
        )

    async def get_component_demo(self, name: str) -> ComponentDemo:
        """Return the first demo file found under the conventional names."""
        base = f"{self._layout.examples}/{name.lower()}"
        for suffix in DEMO_SUFFIXES:
            path = f"{base}{suffix}"
            try:
                code = await self._source.fetch_raw(path)
            except NotFoundError:
                logger.debug("No demo at %s", path)
                continue
            return ComponentDemo(name=name, path=path, code=code)
        raise NotFoundError(f'Demo for component "{name}" not found in the registry')

    async def list_components(self) -> ComponentListing:
        """Sorted component directory names, or the built-in list on failure."""
        try:
            listing = await self._source.fetch_listing(self._layout.ui)
        except RegistryFetcherError as exc:
            level = logging.WARNING if isinstance(exc, RateLimitedError) else logging.ERROR
            logger.log(level, "Using fallback component list: %s", exc)
            return ComponentListing(
                components=FALLBACK_COMPONENTS, fallback_used=True, reason=str(exc)
            )

        names = []
        if isinstance(listing, list):
            names = sorted(e.name for e in listing if e.kind is EntryKind.DIRECTORY)
        if not names:
            logger.warning("No components found in %s, using fallback list", self._layout.ui)
            return ComponentListing(
                components=FALLBACK_COMPONENTS,
                fallback_used=True,
                reason="No components found in the registry",
            )
        return ComponentListing(components=tuple(names))

    async def get_component_metadata(self, name: str) -> dict[str, Any] | None:
        """Parsed ``meta.json`` merged with registry facts, or a synthesized stub.

        Returns ``None`` when the file exists but cannot be understood.
        """
        path = f"{self._layout.ui}/{name.lower()}/meta.json"
        base: dict[str, Any] = {
            "name": name,
            "type": "registry:ui",
            "framework": "svelte",
            "source": "shadcn-svelte",
        }
        try:
            raw = await self._source.fetch_raw(path)
        except NotFoundError:
            return {**base, "dependencies": [], "registryDependencies": []}

        try:
            meta = json.loads(raw)
        except ValueError:
            logger.error("Malformed metadata for %s at %s", name, path)
            return None
        if not isinstance(meta, dict):
            logger.error("Metadata for %s is not a JSON object", name)
            return None
        return {**meta, **base}

    # ── Blocks ──────────────────────────────────────────────────────────

    async def get_block_code(self, name: str, include_sub_components: bool = True) -> BlockBundle:
        """Fetch a block as a single file or, failing that, as a directory."""
        try:
            code = await self._source.fetch_raw(f"{self._layout.blocks}/{name}.svelte")
        except NotFoundError:
            logger.debug("No simple block %s, trying directory form", name)
        else:
            return self._simple_block(name, code)

        try:
            listing = await self._source.fetch_listing(f"{self._layout.blocks}/{name}")
        except NotFoundError as exc:
            raise NotFoundError(
                f'Block "{name}" not found. Use list_blocks to see available blocks.'
            ) from exc
        if not isinstance(listing, list) or not listing:
            raise NotFoundError(f'Block "{name}" not found.')

        return await self._complex_block(name, listing, include_sub_components)

    def _simple_block(self, name: str, code: str) -> BlockBundle:
        return BlockBundle(
            name=name,
            kind=BlockKind.SIMPLE,
            description=extract_leading_description(code) or f"Simple block: {name}",
            dependencies=extract_dependencies(code),
            components_used=extract_component_usage(code),
            usage=(
                "Import and use directly in your application:\n\n"
                f"import {_pascal_case(name)} from './blocks/{name}.svelte'"
            ),
            code=code,
        )

    async def _fetch_block_file(self, entry: ListingEntry, path: str) -> BlockFile:
        content = await self._source.fetch_raw(entry.path)
        return BlockFile(
            path=path,
            content=content,
            size=_size(content),
            lines=_line_count(content),
            description=extract_leading_description(content),
            dependencies=extract_dependencies(content),
            components_used=extract_component_usage(content),
        )

    async def _complex_block(
        self,
        name: str,
        listing: list[ListingEntry],
        include_sub_components: bool,
    ) -> BlockBundle:
        files: BlockFileTree = {}
        structure: list[dict[str, Any]] = []
        dependencies: dict[str, None] = {}
        components: dict[str, None] = {}
        description: str | None = None

        for entry in listing:
            if entry.kind is EntryKind.FILE:
                block_file = await self._fetch_block_file(entry, entry.name)
                files[entry.name] = block_file
                _merge(dependencies, block_file.dependencies)
                _merge(components, block_file.components_used)
                structure.append(
                    {
                        "name": entry.name,
                        "type": "file",
                        "size": block_file.size,
                        "description": block_file.description
                        or f"{entry.name} - Block file",
                    }
                )
                description = description or block_file.description
                continue

            if not include_sub_components:
                continue

            sub_listing = await self._source.fetch_listing(entry.path)
            if not isinstance(sub_listing, list):
                continue
            sub_files: dict[str, BlockFile] = {}
            for sub_entry in sub_listing:
                if sub_entry.kind is not EntryKind.FILE:
                    continue
                block_file = await self._fetch_block_file(
                    sub_entry, f"{entry.name}/{sub_entry.name}"
                )
                sub_files[sub_entry.name] = block_file
                _merge(dependencies, block_file.dependencies)
                _merge(components, block_file.components_used)
            files[entry.name] = sub_files
            structure.append(
                {
                    "name": entry.name,
                    "type": "directory",
                    "files": [
                        {"name": sub, "type": "file", "size": f.size}
                        for sub, f in sub_files.items()
                    ],
                    "count": len(sub_files),
                }
            )

        logger.info("Resolved complex block %s (%d top-level item(s))", name, len(files))
        return BlockBundle(
            name=name,
            kind=BlockKind.COMPLEX,
            description=description or f"Complex block: {name}",
            dependencies=tuple(dependencies),
            components_used=tuple(components),
            usage=complex_block_usage(name, structure),
            files=files,
            structure=tuple(structure),
            total_files=len(listing),
        )

    async def list_blocks(self, category: str | None = None) -> dict[str, Any]:
        """Categorised block listing, optionally narrowed to one category."""
        try:
            listing = await self._source.fetch_listing(self._layout.blocks)
        except NotFoundError as exc:
            raise NotFoundError("Blocks directory not found in the registry") from exc
        entries = listing if isinstance(listing, list) else [listing]

        catalog = BlockCatalog.from_entries(entries)
        if category:
            return catalog.filtered(category)
        return catalog.to_dict()

    # ── Repository tree ─────────────────────────────────────────────────

    async def build_directory_tree(
        self,
        owner: str | None = None,
        repo: str | None = None,
        path: str | None = None,
        branch: str | None = None,
    ) -> DirectoryTree:
        """Build a tree rooted at *path*; omitted arguments use the defaults.

        A rate-limited listing of the default root yields the static
        placeholder tree instead of an error.
        """
        default = self._source.default_repo
        ref = RepoRef(
            owner=owner or default.owner,
            repo=repo or default.repo,
            branch=branch or default.branch,
        )
        path = (path or self._layout.base).strip("/")
        try:
            root = await self._tree_builder.build(ref, path)
        except RateLimitedError as exc:
            if path != self._layout.base or ref != default:
                raise
            logger.warning("Using placeholder directory structure: %s", exc)
            return DirectoryTree(
                root=placeholder_tree(self._layout), fallback_used=True, reason=str(exc)
            )
        return DirectoryTree(root=root)


def complex_block_usage(name: str, structure: list[dict[str, Any]]) -> str:
    """Human-readable instructions for copying a complex block."""
    has_components = any(item["name"] == "components" for item in structure)
    lines = [f"To use the {name} block:", "", "1. Copy the main files to your project:"]
    for item in structure:
        if item["type"] == "file":
            lines.append(f"   - {item['name']}")
        elif item["name"] == "components":
            lines.append(f"   - components/ directory ({item['count']} files)")

    steps = ["Update import paths as needed", "Ensure all dependencies are installed"]
    if has_components:
        steps.insert(0, "Copy the components to your components directory")
    lines.append("")
    lines.extend(f"{number}. {step}" for number, step in enumerate(steps, start=2))
    return "\n".join(lines) + "\n"
