from __future__ import annotations

from registry_fetcher.services.extractor import (
    extract_component_usage,
    extract_dependencies,
    extract_imports,
    extract_leading_description,
)

SVELTE_SOURCE = """<script lang="ts">
  import { Button } from "$lib/components/ui/button";
  import * as Card from "$lib/components/ui/card";
  import { cn, type WithElementRef } from "$lib/utils.js";
  import { Calendar as CalendarPrimitive } from "bits-ui";
  import { z } from "zod";
  import clsx from "clsx";
  import helper from "./helper";
  import root from "/abs/path";
  import { z as zz } from "zod";
</script>

<Card.Root>
  <Button variant="outline">Go</Button>
  <CalendarPrimitive.Day />
</Card.Root>
"""


def test_dependencies_skip_local_and_alias_specifiers() -> None:
    deps = extract_dependencies(SVELTE_SOURCE)

    assert deps == ("bits-ui", "zod", "clsx")
    assert not any(d.startswith(("./", "../", "$", "/")) for d in deps)


def test_relative_parent_import_is_not_a_dependency() -> None:
    assert extract_dependencies('import { cn } from "../utils";\n') == ()


def test_dependencies_span_multiline_named_imports() -> None:
    text = 'import {\n  Root,\n  Trigger\n} from "bits-ui";\nimport "./app.css";\n'

    assert extract_dependencies(text) == ("bits-ui",)


def test_imports_cover_named_default_and_namespace_bindings() -> None:
    names = extract_imports(SVELTE_SOURCE)

    assert names[:4] == ("Button", "cn", "WithElementRef", "CalendarPrimitive")
    assert "z" in names and "zz" in names
    assert "clsx" in names and "helper" in names and "root" in names
    assert "Card" in names
    assert len(names) == len(set(names))


def test_extraction_is_idempotent() -> None:
    assert extract_dependencies(SVELTE_SOURCE) == extract_dependencies(SVELTE_SOURCE)
    assert extract_imports(SVELTE_SOURCE) == extract_imports(SVELTE_SOURCE)


def test_component_usage_collects_capitalised_imports_and_tags() -> None:
    components = extract_component_usage(SVELTE_SOURCE)

    assert components == ("Button", "WithElementRef", "CalendarPrimitive", "Card")


def test_extractors_tolerate_garbage() -> None:
    garbage = "import { from ' <<< >>> import * as from"

    assert extract_dependencies(garbage) == ()
    assert extract_component_usage("") == ()
    assert extract_leading_description("") is None


def test_leading_block_comment_first_line() -> None:
    text = "/**\n * A login form with email.\n * Second line.\n */\nexport const x = 1;\n"

    assert extract_leading_description(text) == "A login form with email."


def test_leading_line_and_markup_comments() -> None:
    assert extract_leading_description("// Sidebar with icons\nconst a = 1;") == (
        "Sidebar with icons"
    )
    assert extract_leading_description("<!-- Dashboard shell -->\n<div></div>") == (
        "Dashboard shell"
    )


def test_comment_inside_opening_script_tag_counts_as_leading() -> None:
    text = '<script lang="ts">\n  // Calendar with range\n  import x from "y";\n</script>'

    assert extract_leading_description(text) == "Calendar with range"


def test_comment_after_other_content_is_ignored() -> None:
    assert extract_leading_description("const a = 1;\n// late comment\n") is None
