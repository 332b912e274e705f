from __future__ import annotations

import pytest

from registry_fetcher.domain.exceptions import ValidationFailedError
from registry_fetcher.services.validation import (
    BlockArgs,
    ComponentNameArgs,
    DirectoryStructureArgs,
    validate,
)


def test_component_name_is_required_and_non_empty() -> None:
    with pytest.raises(ValidationFailedError) as excinfo:
        validate("get_component", {"componentName": ""})

    assert len(excinfo.value.messages) == 1
    assert excinfo.value.messages[0].startswith("componentName:")


def test_missing_component_name_reports_field() -> None:
    with pytest.raises(ValidationFailedError) as excinfo:
        validate("get_component_demo", {})

    assert excinfo.value.messages[0].startswith("componentName:")


def test_component_name_length_upper_bound() -> None:
    with pytest.raises(ValidationFailedError):
        validate("get_component_metadata", {"componentName": "x" * 101})

    args = validate("get_component_metadata", {"componentName": "x" * 100})
    assert isinstance(args, ComponentNameArgs)


def test_unknown_fields_are_dropped() -> None:
    args = validate("get_component", {"componentName": "button", "extra": 1})

    assert isinstance(args, ComponentNameArgs)
    assert args.component_name == "button"
    assert "extra" not in args.model_dump()


def test_block_request_defaults_include_components() -> None:
    args = validate("get_block", {"blockName": "login-02"})

    assert isinstance(args, BlockArgs)
    assert args.block_name == "login-02"
    assert args.include_components is True


def test_every_violated_field_is_reported() -> None:
    with pytest.raises(ValidationFailedError) as excinfo:
        validate("get_block", {"blockName": "b" * 201, "includeComponents": "maybe"})

    fields = sorted(m.split(":", 1)[0] for m in excinfo.value.messages)
    assert fields == ["blockName", "includeComponents"]


def test_wrong_primitive_type_is_rejected() -> None:
    with pytest.raises(ValidationFailedError):
        validate("get_component", {"componentName": 42})


def test_directory_structure_fields_are_optional() -> None:
    args = validate("get_directory_structure", {})

    assert isinstance(args, DirectoryStructureArgs)
    assert args.path is None and args.owner is None


def test_non_object_arguments_fail() -> None:
    with pytest.raises(ValidationFailedError):
        validate("get_component", ["button"])


def test_methods_without_rules_pass_arguments_through() -> None:
    raw = {"anything": True}

    assert validate("list_components", raw) is raw
