from __future__ import annotations

import pytest

from registry_fetcher.domain.entities import EntryKind
from registry_fetcher.domain.exceptions import RateLimitedError
from registry_fetcher.services.directory_tree import SUBDIRECTORY_ERROR


def test_tree_records_files_and_directories(host, with_resolver) -> None:
    host.add_dir("registry/ui")
    host.add_dir("registry/ui/button")
    host.add_file("registry/ui/button/button.svelte", "<button />")
    host.add_file("registry/ui/index.ts", "export {};")

    tree = with_resolver(lambda r: r.build_directory_tree(path="registry/ui"))

    root = tree.root
    assert tree.fallback_used is False
    assert root.kind is EntryKind.DIRECTORY
    assert root.download_url is None
    leaf = root.children["button"].children["button.svelte"]
    assert leaf.kind is EntryKind.FILE
    assert leaf.sha == "sha-button.svelte"
    assert leaf.download_url.endswith("registry/ui/button/button.svelte")
    assert root.children["index.ts"].kind is EntryKind.FILE


def test_tree_depth_is_bounded_against_endless_nesting(host, with_resolver) -> None:
    host.listing_factory = lambda path: [host.dir_entry(f"{path}/nested")]

    tree = with_resolver(
        lambda r: r.build_directory_tree(path="registry/ui"), max_tree_depth=3
    )

    assert host.count("listing") == 4
    assert tree.root.depth() == 4
    node = tree.root
    for _ in range(4):
        node = node.children["nested"]
    assert node.truncated is True
    assert node.children is None


def test_depth_ceiling_is_relative_to_starting_path(host, with_resolver) -> None:
    host.listing_factory = lambda path: [host.dir_entry(f"{path}/n")]

    with_resolver(
        lambda r: r.build_directory_tree(path="a/b/c/d/e/f/g/h/i"),
        max_tree_depth=2,
    )

    assert host.count("listing") == 3


def test_subdirectory_failure_is_recorded_not_raised(host, with_resolver) -> None:
    host.add_dir("registry/ui")
    host.add_dir("registry/ui/broken")
    host.add_dir("registry/ui/fine")
    host.fail("registry/ui/broken", 500, "boom")

    tree = with_resolver(lambda r: r.build_directory_tree(path="registry/ui"))

    broken = tree.root.children["broken"]
    assert broken.error == SUBDIRECTORY_ERROR
    assert broken.kind is EntryKind.DIRECTORY
    assert tree.root.children["fine"].children == {}


def test_rate_limit_on_default_root_uses_placeholder(host, with_resolver) -> None:
    host.fail("registry", 403, "API rate limit exceeded")

    tree = with_resolver(lambda r: r.build_directory_tree())

    assert tree.fallback_used is True
    assert set(tree.root.children) == {"ui", "examples", "blocks", "hooks", "lib"}
    assert tree.to_dict()["note"] == "Basic structure provided due to API limitations"


def test_rate_limit_on_other_paths_propagates(host, with_resolver) -> None:
    host.fail("registry/ui", 403, "API rate limit exceeded")

    with pytest.raises(RateLimitedError):
        with_resolver(lambda r: r.build_directory_tree(path="registry/ui"))


def test_rate_limit_on_another_repository_propagates(host, with_resolver) -> None:
    host.fail("registry", 403, "API rate limit exceeded")

    with pytest.raises(RateLimitedError):
        with_resolver(lambda r: r.build_directory_tree(owner="someone", repo="elsewhere"))

    assert host.calls == [("listing", "registry")]


def test_file_path_yields_single_leaf(host, with_resolver) -> None:
    host.add_file("registry/ui/index.ts", "export {};")

    tree = with_resolver(lambda r: r.build_directory_tree(path="registry/ui/index.ts"))

    assert tree.root.kind is EntryKind.FILE
    assert tree.root.children is None
