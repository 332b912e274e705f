"""Block catalog: classify block listing entries into categories."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from registry_fetcher.domain.entities import BlockKind, EntryKind, ListingEntry

# Ordered precedence: the first matching rule wins.
CATEGORY_RULES: tuple[tuple[str, tuple[str, ...], str], ...] = (
    ("calendar", ("calendar",), "Calendar component for date selection and scheduling"),
    ("dashboard", ("dashboard",), "Dashboard layout with charts, metrics, and data display"),
    ("login", ("login", "signin"), "Authentication and login interface"),
    ("sidebar", ("sidebar",), "Navigation sidebar component"),
    ("authentication", ("auth",), "Authentication related components"),
    ("charts", ("chart", "graph"), "Data visualization and chart components"),
)
OTHER = "other"

CATEGORIES: tuple[str, ...] = tuple(rule[0] for rule in CATEGORY_RULES) + (OTHER,)

USAGE_HINT = (
    "Use 'get_block' with a specific block name to get full source code "
    "and implementation details."
)


@dataclass(frozen=True, slots=True)
class BlockSummary:
    name: str
    kind: BlockKind
    path: str
    size: int
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.kind.value,
            "path": self.path,
            "size": self.size,
            "description": self.description,
        }


def classify(name: str) -> tuple[str, str]:
    """Return ``(category, description)`` for a block entry name."""
    lower = name.lower()
    for category, needles, description in CATEGORY_RULES:
        if any(needle in lower for needle in needles):
            return category, description
    return OTHER, f"{name} - Custom UI block"


def _block_name(entry: ListingEntry) -> str:
    if entry.kind is EntryKind.FILE and entry.name.endswith(".svelte"):
        return entry.name[: -len(".svelte")]
    return entry.name


@dataclass(slots=True)
class BlockCatalog:
    """Blocks grouped by category, each group sorted by name."""

    categories: dict[str, list[BlockSummary]] = field(
        default_factory=lambda: {key: [] for key in CATEGORIES}
    )

    @classmethod
    def from_entries(cls, entries: Iterable[ListingEntry]) -> BlockCatalog:
        catalog = cls()
        for entry in entries:
            category, description = classify(entry.name)
            catalog.categories[category].append(
                BlockSummary(
                    name=_block_name(entry),
                    kind=BlockKind.SIMPLE if entry.kind is EntryKind.FILE else BlockKind.COMPLEX,
                    path=entry.path,
                    size=entry.size,
                    description=description,
                )
            )
        for blocks in catalog.categories.values():
            blocks.sort(key=lambda block: block.name)
        return catalog

    @property
    def available_categories(self) -> list[str]:
        return [key for key, blocks in self.categories.items() if blocks]

    @property
    def total(self) -> int:
        return sum(len(blocks) for blocks in self.categories.values())

    def to_dict(self) -> dict[str, Any]:
        """Full listing with summary counts."""
        available = self.available_categories
        return {
            "categories": {
                key: [block.to_dict() for block in blocks]
                for key, blocks in self.categories.items()
            },
            "total_blocks": self.total,
            "available_categories": available,
            "summary": {key: len(self.categories[key]) for key in available},
            "usage": USAGE_HINT,
            "examples": [f"{key}: {self.categories[key][0].name}" for key in available[:3]],
        }

    def filtered(self, category: str) -> dict[str, Any]:
        """Only the requested category, or an empty result naming the others."""
        key = category.strip().lower()
        blocks = self.categories.get(key)
        if blocks is not None:
            return {
                "category": category,
                "blocks": [block.to_dict() for block in blocks],
                "total": len(blocks),
                "description": f"{key.capitalize()} blocks available in the registry",
                "usage": USAGE_HINT,
            }
        available = self.available_categories
        return {
            "category": category,
            "blocks": [],
            "total": 0,
            "available_categories": available,
            "suggestion": (
                f"Category '{category}' not found. "
                f"Available categories: {', '.join(available)}"
            ),
        }
