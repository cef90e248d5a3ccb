"""Slash-separated path utilities for genref-core."""

from paths.utils import (
    DECLARATION_EXTENSIONS,
    DEFAULT_PACKAGE_ROOT_MARKERS,
    MODULE_EXTENSIONS,
    PackagePath,
    dot_relative,
    is_under_package_root,
    normalize,
    relative,
    same_module,
    strip_known_extension,
)

__all__ = [
    "DECLARATION_EXTENSIONS",
    "DEFAULT_PACKAGE_ROOT_MARKERS",
    "MODULE_EXTENSIONS",
    "PackagePath",
    "dot_relative",
    "is_under_package_root",
    "normalize",
    "relative",
    "same_module",
    "strip_known_extension",
]
