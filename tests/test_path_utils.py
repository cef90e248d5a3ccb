from __future__ import annotations

import pytest

from paths.utils import (
    PackagePath,
    dot_relative,
    has_suffix,
    is_normalized,
    is_under_package_root,
    is_within,
    normalize,
    rebase,
    relative,
    same_module,
    strip_known_extension,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("/tmp/project/src/", "/tmp/project/src"),
        ("/tmp//project/./src/../gen", "/tmp/project/gen"),
        ("//tmp/project", "/tmp/project"),
        ("C:\\work\\src\\main.ts", "C:/work/src/main.ts"),
        ("lib/./utils.ts", "lib/utils.ts"),
        ("/", "/"),
    ],
)
def test_normalize_collapses_separators_and_dots(raw: str, expected: str) -> None:
    assert normalize(raw) == expected


def test_is_normalized() -> None:
    assert is_normalized("/tmp/project/src/main.ts")
    assert not is_normalized("/tmp/project/src/../src/main.ts")
    assert not is_normalized("/tmp/project/src/")


def test_relative_uses_directory_of_source_file() -> None:
    assert relative("/p/src/main.ts", "/p/src/lib/utils") == "lib/utils"
    assert relative("/p/src/gen/my.gen.ts", "/p/src/a/my.other") == "../a/my.other"


@pytest.mark.parametrize(
    ("from_file", "to_path", "expected"),
    [
        ("/p/src/main.ts", "/p/src/lib/utils", "./lib/utils"),
        ("/p/src/lib/utils.ts", "/p/src/lib/collections", "./collections"),
        ("/p/src/lib2/utils2.ts", "/p/src/lib/utils", "../lib/utils"),
        ("/p/src/a/b/c.ts", "/p/src/a", ".."),
    ],
)
def test_dot_relative_prefixes_sibling_paths(
    from_file: str, to_path: str, expected: str
) -> None:
    assert dot_relative(from_file, to_path) == expected


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/p/node_modules/pkg/core.d.ts", "/p/node_modules/pkg/core"),
        ("/p/src/my.other.css.ts", "/p/src/my.other.css"),
        ("/p/src/my.other.css.shim.ts", "/p/src/my.other.css.shim"),
        ("/p/src/models.pyi", "/p/src/models"),
        ("/p/src/widget.tsx", "/p/src/widget"),
        ("/p/src/README", "/p/src/README"),
        ("/p/src/.ts", "/p/src/.ts"),
    ],
)
def test_strip_known_extension_removes_one_suffix(path: str, expected: str) -> None:
    assert strip_known_extension(path) == expected


def test_strip_known_extension_respects_custom_extensions() -> None:
    assert strip_known_extension("/p/a.l0", [".l0"]) == "/p/a"
    assert strip_known_extension("/p/a.ts", [".l0"]) == "/p/a.ts"


def test_same_module_treats_declaration_and_source_as_identical() -> None:
    assert same_module("/p/src/a.ts", "/p/src/a.d.ts")
    assert same_module("/p/src/models.py", "/p/src/models.pyi")
    assert not same_module("/p/src/a.ts", "/p/src/b.ts")
    assert not same_module("/p/src/a.ts", "/p/src/A.ts")


def test_has_suffix_checks_basename_only() -> None:
    assert has_suffix("/p/src/my.gen", [".gen"])
    assert not has_suffix("/p/src.gen/main", [".gen"])
    assert not has_suffix("/p/src/.gen", [".gen"])


def test_is_within_is_segment_aware() -> None:
    assert is_within("/p/src/gen", "/p/src")
    assert is_within("/p/src", "/p/src")
    assert not is_within("/p/srcx/a.ts", "/p/src")
    assert is_within("/p/src/a.ts", "/")


def test_rebase_moves_path_between_roots() -> None:
    assert rebase("/p/src/a/b.ts", "/p/src", "/p/gen") == "/p/gen/a/b.ts"
    assert rebase("/p/src/gen/a.ts", "/p/src/gen", "/p/src") == "/p/src/a.ts"
    assert rebase("/p/src", "/p/src", "/p/gen") == "/p/gen"


def test_is_under_package_root_splits_package_and_sub_path() -> None:
    assert is_under_package_root("/p/node_modules/pkg/core") == PackagePath(
        "pkg", "core"
    )
    assert is_under_package_root("/p/node_modules/pkg/src/deep/file") == (
        "pkg",
        "src/deep/file",
    )


def test_is_under_package_root_keeps_scoped_names_together() -> None:
    assert is_under_package_root("/p/node_modules/@angular/core") == (
        "@angular/core",
        "",
    )
    assert is_under_package_root("/p/node_modules/@angular/router/src/providers") == (
        "@angular/router",
        "src/providers",
    )


def test_is_under_package_root_uses_right_most_marker() -> None:
    nested = "/p/node_modules/outer/node_modules/inner/lib/index"
    assert is_under_package_root(nested) == ("inner", "lib/index")


def test_is_under_package_root_requires_segment_after_marker() -> None:
    assert is_under_package_root("/p/node_modules") is None
    assert is_under_package_root("/p/src/main") is None


def test_is_under_package_root_with_custom_markers() -> None:
    path = "/venv/lib/python3.12/site-packages/requests/adapters"
    assert is_under_package_root(path, ["site-packages"]) == ("requests", "adapters")
    assert is_under_package_root(path) is None
