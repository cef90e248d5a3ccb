"""Slash-separated path helpers shared by the resolver and the metadata store."""

from __future__ import annotations

import posixpath
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from collections.abc import Iterable

# Declaration suffixes come first so that `.d.ts` wins over `.ts`.
DECLARATION_EXTENSIONS: tuple[str, ...] = (".d.ts", ".pyi")
MODULE_EXTENSIONS: tuple[str, ...] = (
    ".d.ts",
    ".pyi",
    ".tsx",
    ".ts",
    ".jsx",
    ".js",
    ".py",
)
DEFAULT_PACKAGE_ROOT_MARKERS: tuple[str, ...] = ("node_modules",)


class PackagePath(NamedTuple):
    """A path split at an external-package boundary."""

    package_name: str
    sub_path: str


def normalize(path: str) -> str:
    """Normalize a path to slash-separated canonical form.

    Examples:
        >>> normalize("/tmp//project/./src/../gen/")
        '/tmp/project/gen'
        >>> normalize("C:\\\\work\\\\src")
        'C:/work/src'
    """
    raw = path.replace("\\", "/")
    if not raw:
        return "."
    normalized = posixpath.normpath(raw)
    # normpath keeps exactly two leading slashes (POSIX allows it); collapse them.
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    return normalized


def is_absolute(path: str) -> bool:
    return path.startswith("/")


def is_normalized(path: str) -> bool:
    return normalize(path) == path


def is_within(path: str, root: str) -> bool:
    """Return True when `path` equals `root` or sits below it (segment-aware)."""
    if path == root:
        return True
    prefix = root if root.endswith("/") else f"{root}/"
    return path.startswith(prefix)


def rebase(path: str, old_root: str, new_root: str) -> str:
    """Move `path` from under `old_root` to the same place under `new_root`."""
    rel = posixpath.relpath(path, old_root)
    if rel == ".":
        return new_root
    return posixpath.join(new_root, rel)


def relative(from_file: str, to_path: str) -> str:
    """Relative path from the directory containing `from_file` to `to_path`."""
    return posixpath.relpath(to_path, posixpath.dirname(from_file))


def dot_relative(from_file: str, to_path: str) -> str:
    """Relative path usable as an import specifier.

    Examples:
        >>> dot_relative("/p/src/main.ts", "/p/src/lib/utils")
        './lib/utils'
        >>> dot_relative("/p/src/gen/my.gen.ts", "/p/src/my.other")
        '../my.other'
    """
    rel = relative(from_file, to_path)
    if rel == ".." or rel.startswith("../"):
        return rel
    return f"./{rel}"


def has_suffix(path: str, suffixes: Iterable[str]) -> bool:
    basename = posixpath.basename(path)
    return any(
        basename.endswith(suffix) and len(basename) > len(suffix)
        for suffix in suffixes
    )


def strip_known_extension(
    path: str, extensions: Iterable[str] = MODULE_EXTENSIONS
) -> str:
    """Remove one recognized module suffix, leaving the module identity.

    The longest matching suffix is removed, so a declaration file and its
    module source strip to the same identity.

    Examples:
        >>> strip_known_extension("/p/node_modules/pkg/core.d.ts")
        '/p/node_modules/pkg/core'
        >>> strip_known_extension("/p/src/my.other.css.ts")
        '/p/src/my.other.css'
    """
    basename = posixpath.basename(path)
    for ext in sorted(extensions, key=len, reverse=True):
        if basename.endswith(ext) and len(basename) > len(ext):
            return path[: -len(ext)]
    return path


def same_module(
    first: str, second: str, extensions: Iterable[str] = MODULE_EXTENSIONS
) -> bool:
    """Return True when both paths denote the same logical module."""
    exts = tuple(extensions)
    return strip_known_extension(first, exts) == strip_known_extension(second, exts)


def is_under_package_root(
    path: str, markers: Iterable[str] = DEFAULT_PACKAGE_ROOT_MARKERS
) -> PackagePath | None:
    """Split `path` at the right-most package-root marker directory.

    The first segment after the marker is the package name; a scoped name
    (``@scope/name``) spans two segments. The remainder is the sub-path inside
    the package. A marker that is the last segment is not a boundary.

    Examples:
        >>> is_under_package_root("/p/node_modules/@angular/router/index")
        PackagePath(package_name='@angular/router', sub_path='index')
        >>> is_under_package_root("/p/src/main") is None
        True
    """
    marker_set = frozenset(markers)
    segments = path.split("/")
    for index in range(len(segments) - 2, -1, -1):
        if segments[index] not in marker_set:
            continue
        remainder = [segment for segment in segments[index + 1 :] if segment]
        if not remainder:
            continue
        name_length = 2 if remainder[0].startswith("@") and len(remainder) > 1 else 1
        return PackagePath(
            package_name="/".join(remainder[:name_length]),
            sub_path="/".join(remainder[name_length:]),
        )
    return None


__all__ = [
    "DECLARATION_EXTENSIONS",
    "DEFAULT_PACKAGE_ROOT_MARKERS",
    "MODULE_EXTENSIONS",
    "PackagePath",
    "dot_relative",
    "has_suffix",
    "is_absolute",
    "is_normalized",
    "is_under_package_root",
    "is_within",
    "normalize",
    "rebase",
    "relative",
    "same_module",
    "strip_known_extension",
]
