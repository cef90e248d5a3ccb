"""Module reference resolution for genref-core."""

from resolve.layout import GENERATED_SUFFIXES, INDEX_NAMES, ProjectLayout
from resolve.specifiers import InvalidReferenceError, ModuleReferenceResolver

__all__ = [
    "GENERATED_SUFFIXES",
    "INDEX_NAMES",
    "InvalidReferenceError",
    "ModuleReferenceResolver",
    "ProjectLayout",
]
