"""Request façade dispatching validated calls through the circuit breaker.

Every request runs ``validate → circuit breaker → resolver``.  Validation
failures never reach the breaker and an open breaker never reaches the
network.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from registry_fetcher.domain.exceptions import RegistryFetcherError, UnknownMethodError
from registry_fetcher.services import validation
from registry_fetcher.services.circuit_breaker import CircuitBreaker
from registry_fetcher.services.resolver import RegistryResolver

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Awaitable[Any]]


@dataclass(frozen=True, slots=True)
class MethodEntry:
    name: str
    description: str
    handler: Handler


class RequestFacade:
    """Dispatches method calls to the resolver.

    The façade owns the shared :class:`CircuitBreaker`; the composition root
    constructs both once per process.
    """

    def __init__(self, resolver: RegistryResolver, breaker: CircuitBreaker) -> None:
        self._resolver = resolver
        self._breaker = breaker
        self._methods: dict[str, MethodEntry] = {}
        self._register_methods()

    @property
    def breaker(self) -> CircuitBreaker:
        return self._breaker

    def describe(self) -> list[dict[str, str]]:
        """Served methods in registration order."""
        return [{"name": m.name, "description": m.description} for m in self._methods.values()]

    async def handle(self, method: str, raw_args: Any = None) -> dict[str, Any]:
        """Run *method* with *raw_args* and return a JSON-serialisable result."""
        entry = self._methods.get(method)
        if entry is None:
            raise UnknownMethodError(f"Method not found: {method}")

        args = validation.validate(method, raw_args if raw_args is not None else {})
        logger.info("Handling %s", method)
        try:
            return await self._breaker.call(lambda: entry.handler(args))
        except RegistryFetcherError as exc:
            logger.warning("%s failed: %s", method, exc)
            raise

    # ── Method table ────────────────────────────────────────────────────

    def _register(self, name: str, description: str, handler: Handler) -> None:
        self._methods[name] = MethodEntry(name=name, description=description, handler=handler)

    def _register_methods(self) -> None:
        self._register(
            "get_component",
            "Get the source code for a specific component",
            self._get_component,
        )
        self._register(
            "get_component_demo",
            "Get demo code illustrating how a component should be used",
            self._get_component_demo,
        )
        self._register(
            "list_components",
            "Get all available components",
            self._list_components,
        )
        self._register(
            "get_component_metadata",
            "Get metadata for a specific component",
            self._get_component_metadata,
        )
        self._register(
            "get_directory_structure",
            "Get the directory structure of the registry repository",
            self._get_directory_structure,
        )
        self._register(
            "get_block",
            "Get source code for a specific block (e.g. calendar-01, login-02)",
            self._get_block,
        )
        self._register(
            "list_blocks",
            "Get all available blocks with categorization",
            self._list_blocks,
        )

    # ── Handlers ────────────────────────────────────────────────────────

    async def _get_component(self, args: validation.ComponentNameArgs) -> dict[str, Any]:
        bundle = await self._resolver.get_component_source(args.component_name)
        return bundle.to_dict()

    async def _get_component_demo(self, args: validation.ComponentNameArgs) -> dict[str, Any]:
        demo = await self._resolver.get_component_demo(args.component_name)
        return demo.to_dict()

    async def _list_components(self, args: Any) -> dict[str, Any]:
        listing = await self._resolver.list_components()
        return listing.to_dict()

    async def _get_component_metadata(
        self, args: validation.ComponentNameArgs
    ) -> dict[str, Any]:
        metadata = await self._resolver.get_component_metadata(args.component_name)
        return {"name": args.component_name, "metadata": metadata}

    async def _get_directory_structure(
        self, args: validation.DirectoryStructureArgs
    ) -> dict[str, Any]:
        tree = await self._resolver.build_directory_tree(
            owner=args.owner, repo=args.repo, path=args.path, branch=args.branch
        )
        return tree.to_dict()

    async def _get_block(self, args: validation.BlockArgs) -> dict[str, Any]:
        bundle = await self._resolver.get_block_code(args.block_name, args.include_components)
        return bundle.to_dict()

    async def _list_blocks(self, args: validation.BlockListArgs) -> dict[str, Any]:
        return await self._resolver.list_blocks(args.category)
