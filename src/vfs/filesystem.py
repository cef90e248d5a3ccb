"""File system access for metadata loading and declaration parsing."""

from __future__ import annotations

import copy
import posixpath
from pathlib import Path
from typing import Protocol, Union

from paths.utils import is_absolute, normalize

Entry = Union[str, bytes, "Directory"]
Directory = dict[str, Entry]


class FileSystem(Protocol):
    """Read-only view of files addressed by absolute slash-separated paths."""

    def exists(self, path: str) -> bool: ...

    def is_directory(self, path: str) -> bool: ...

    def read_file(self, path: str) -> bytes:
        """Return file contents; raises FileNotFoundError when missing."""
        ...

    def list_directory(self, path: str) -> set[str]:
        """Return entry names; raises FileNotFoundError when missing."""
        ...


class LocalFileSystem:
    """FileSystem backed by the real disk."""

    def exists(self, path: str) -> bool:
        return Path(path).exists()

    def is_directory(self, path: str) -> bool:
        return Path(path).is_dir()

    def read_file(self, path: str) -> bytes:
        return Path(path).read_bytes()

    def list_directory(self, path: str) -> set[str]:
        return {child.name for child in Path(path).iterdir()}


class InMemoryFileSystem:
    """FileSystem over a nested dict tree rooted at ``/``.

    Strings and bytes are files, dicts are directories. Relative paths are
    resolved against `cwd`. The tree passed in is copied.

    Example:
        >>> fs = InMemoryFileSystem({"tmp": {"a.ts": "export let a;"}})
        >>> fs.read_file("/tmp/a.ts")
        b'export let a;'
    """

    def __init__(self, tree: Directory | None = None, *, cwd: str = "/") -> None:
        if not is_absolute(cwd):
            msg = f"cwd must be an absolute path, got {cwd!r}"
            raise ValueError(msg)
        self._root: Directory = copy.deepcopy(tree) if tree else {}
        self.cwd = normalize(cwd)

    def _absolute(self, path: str) -> str:
        if is_absolute(path):
            return normalize(path)
        return normalize(posixpath.join(self.cwd, path))

    def _segments(self, path: str) -> list[str]:
        return [segment for segment in self._absolute(path).split("/") if segment]

    def _lookup(self, path: str) -> Entry | None:
        entry: Entry = self._root
        for segment in self._segments(path):
            if not isinstance(entry, dict) or segment not in entry:
                return None
            entry = entry[segment]
        return entry

    def exists(self, path: str) -> bool:
        return self._lookup(path) is not None

    def is_directory(self, path: str) -> bool:
        return isinstance(self._lookup(path), dict)

    def read_file(self, path: str) -> bytes:
        entry = self._lookup(path)
        if entry is None:
            raise FileNotFoundError(path)
        if isinstance(entry, dict):
            raise IsADirectoryError(path)
        if isinstance(entry, str):
            return entry.encode("utf-8")
        return entry

    def list_directory(self, path: str) -> set[str]:
        entry = self._lookup(path)
        if entry is None:
            raise FileNotFoundError(path)
        if not isinstance(entry, dict):
            raise NotADirectoryError(path)
        return set(entry)

    def write_file(self, path: str, content: str | bytes) -> None:
        """Create or replace a file, creating parent directories."""
        *parents, name = self._segments(path)
        directory = self._root
        for segment in parents:
            child = directory.setdefault(segment, {})
            if not isinstance(child, dict):
                raise NotADirectoryError(path)
            directory = child
        directory[name] = content


__all__ = [
    "Directory",
    "Entry",
    "FileSystem",
    "InMemoryFileSystem",
    "LocalFileSystem",
]
