"""Lexical extraction of imports, dependencies and component usage.

These are best-effort regex heuristics over Svelte / TypeScript source, not a
parser.  Every function is pure, never raises on odd input, and returns
names deduplicated in first-seen order.
"""

from __future__ import annotations

import re
from typing import Iterable

LOCAL_PREFIXES: tuple[str, ...] = ("./", "../", "$", "/")

_DEPENDENCY_RE = re.compile(r"""import\s+[^'";]*?\s*from\s+['"]([@\w/\-.$]+)['"]""")

_NAMED_IMPORT_RE = re.compile(r"import\s+(?:type\s+)?\{([^}]+)\}\s+from")
_DEFAULT_IMPORT_RE = re.compile(r"import\s+(\w+)\s+from")
_NAMESPACE_IMPORT_RE = re.compile(r"import\s+\*\s+as\s+(\w+)\s+from")

_TAG_RE = re.compile(r"<([A-Z][a-zA-Z0-9]*)")

_LEADING_COMMENT_RE = re.compile(
    r"""\A\s*
    (?:<script[^>]*>\s*)?          # a Svelte file's opening script tag
    (?:
        /\*\*?(?P<block>.*?)\*/
      | //(?P<line>[^\n]*)
      | <!--(?P<markup>.*?)-->
    )""",
    re.DOTALL | re.VERBOSE,
)


def _unique(items: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(item for item in items if item))


def is_local_specifier(specifier: str) -> bool:
    """Return *True* for relative paths and project aliases such as ``$lib``."""
    return specifier.startswith(LOCAL_PREFIXES)


def _named_bindings(clause: str) -> list[str]:
    """Split ``{ a, b as c, type D }`` contents into the bound names."""
    names: list[str] = []
    for part in clause.split(","):
        part = part.strip()
        if part.startswith("type "):
            part = part[len("type "):].strip()
        if " as " in part:
            part = part.rsplit(" as ", 1)[1].strip()
        if part:
            names.append(part)
    return names


def extract_dependencies(text: str) -> tuple[str, ...]:
    """Return external module specifiers from ``import … from "x"`` statements."""
    specifiers = (match.group(1) for match in _DEPENDENCY_RE.finditer(text))
    return _unique(s for s in specifiers if not is_local_specifier(s))


def extract_imports(text: str) -> tuple[str, ...]:
    """Return identifiers bound by named, default and namespace imports."""
    names: list[str] = []
    for match in _NAMED_IMPORT_RE.finditer(text):
        names.extend(_named_bindings(match.group(1)))
    names.extend(match.group(1) for match in _DEFAULT_IMPORT_RE.finditer(text))
    names.extend(match.group(1) for match in _NAMESPACE_IMPORT_RE.finditer(text))
    return _unique(names)


def extract_component_usage(text: str) -> tuple[str, ...]:
    """Return capitalised named imports plus capitalised markup tag names."""
    components: list[str] = []
    for match in _NAMED_IMPORT_RE.finditer(text):
        components.extend(
            name for name in _named_bindings(match.group(1)) if name[0].isupper()
        )
    components.extend(match.group(1) for match in _TAG_RE.finditer(text))
    return _unique(components)


def extract_leading_description(text: str) -> str | None:
    """Return the first line of a leading comment, or ``None``.

    Only a comment that precedes all other content counts (an opening
    ``<script>`` tag is skipped over).
    """
    match = _LEADING_COMMENT_RE.match(text)
    if not match:
        return None
    body = match.group("block") or match.group("line") or match.group("markup") or ""
    for line in body.splitlines():
        line = line.strip().lstrip("*").strip()
        if line:
            return line
    return None
