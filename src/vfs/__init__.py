"""File system collaborators for genref-core."""

from vfs.filesystem import FileSystem, InMemoryFileSystem, LocalFileSystem

__all__ = ["FileSystem", "InMemoryFileSystem", "LocalFileSystem"]
