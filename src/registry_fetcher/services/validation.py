"""Per-method argument validation.

Rules are pydantic models keyed by method name.  Unknown fields are dropped,
every violated field yields one ``"<field path>: <reason>"`` message, and a
method without a registered model passes its arguments through unchanged.
"""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from registry_fetcher.domain.exceptions import ValidationFailedError


class _Args(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class ComponentNameArgs(_Args):
    """Arguments of the single-component methods."""

    component_name: str = Field(alias="componentName", min_length=1, max_length=100)


class BlockArgs(_Args):
    """Arguments of ``get_block``."""

    block_name: str = Field(alias="blockName", min_length=1, max_length=200)
    include_components: bool = Field(default=True, alias="includeComponents")


class BlockListArgs(_Args):
    """Arguments of ``list_blocks``."""

    category: str | None = Field(default=None, max_length=100)


class DirectoryStructureArgs(_Args):
    """Arguments of ``get_directory_structure``; omitted fields use defaults."""

    path: str | None = Field(default=None, max_length=500)
    owner: str | None = Field(default=None, max_length=100)
    repo: str | None = Field(default=None, max_length=100)
    branch: str | None = Field(default=None, max_length=100)


VALIDATION_RULES: Mapping[str, type[_Args]] = {
    "get_component": ComponentNameArgs,
    "get_component_demo": ComponentNameArgs,
    "get_component_metadata": ComponentNameArgs,
    "get_block": BlockArgs,
    "list_blocks": BlockListArgs,
    "get_directory_structure": DirectoryStructureArgs,
}


def _format_errors(exc: ValidationError) -> list[str]:
    messages = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "arguments"
        messages.append(f"{loc}: {err.get('msg', 'validation error')}")
    return messages


def validate(method: str, raw_args: Any) -> Any:
    """Return typed arguments for *method* or raise :class:`ValidationFailedError`."""
    rule = VALIDATION_RULES.get(method)
    if rule is None:
        return raw_args

    if raw_args is None:
        raw_args = {}
    if not isinstance(raw_args, Mapping):
        raise ValidationFailedError(["arguments: must be an object"])

    try:
        return rule.model_validate(dict(raw_args))
    except ValidationError as exc:
        raise ValidationFailedError(_format_errors(exc)) from exc
