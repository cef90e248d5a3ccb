"""Import specifier computation between source, generated and packaged modules."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from paths.utils import (
    PackagePath,
    dot_relative,
    is_absolute,
    is_normalized,
    is_under_package_root,
    strip_known_extension,
)

if TYPE_CHECKING:
    from resolve.layout import ProjectLayout

logger = logging.getLogger(__name__)


class InvalidReferenceError(ValueError):
    """Raised when two files cannot be related by an import specifier."""


def _check_path(label: str, path: str) -> None:
    if not is_absolute(path):
        msg = f"{label} must be an absolute path, got {path!r}"
        raise InvalidReferenceError(msg)
    if not is_normalized(path):
        msg = f"{label} must be normalized, got {path!r}"
        raise InvalidReferenceError(msg)


class ModuleReferenceResolver:
    """Computes the specifier one module should use to import another.

    Generated files are addressed either by their real location under the
    output root or by their logical location in the source tree (a module
    name ending in a generated suffix). Files under a package root are always
    referenced by package name.
    """

    def __init__(self, layout: ProjectLayout) -> None:
        self.layout = layout

    def specifier_for(self, imported_file: str, importing_file: str) -> str:
        """Return the specifier `importing_file` uses to import `imported_file`.

        Raises:
            InvalidReferenceError: If either path is relative or not
                normalized, or both paths denote the same module.
        """
        _check_path("imported_file", imported_file)
        _check_path("importing_file", importing_file)
        layout = self.layout

        imported_module = strip_known_extension(
            imported_file, layout.module_extensions
        )
        importing_module = strip_known_extension(
            importing_file, layout.module_extensions
        )
        # Logical and physical paths of one generated file are the same module.
        if self._physical_module(imported_module) == self._physical_module(
            importing_module
        ):
            msg = f"A module cannot import itself: {imported_file}"
            raise InvalidReferenceError(msg)

        package = is_under_package_root(imported_module, layout.package_root_markers)
        if package is not None:
            specifier = self._package_specifier(package)
            logger.debug("package import %s -> %s", imported_file, specifier)
            return specifier

        from_path, to_path = self._coordinates(imported_module, importing_file)
        specifier = dot_relative(from_path, to_path)
        logger.debug(
            "relative import %s -> %s from %s (%s mode)",
            imported_file,
            specifier,
            importing_file,
            "nested" if layout.nested else "sibling",
        )
        return specifier

    def _physical_module(self, module: str) -> str:
        """Where a module really lives; output modules map to the output tree."""
        if self.layout.is_output(module):
            return self.layout.actual_location(module)
        return module

    def _package_specifier(self, package: PackagePath) -> str:
        """Package name plus sub-path; only an index module collapses.

        ``pkg/core`` stays ``pkg/core`` while ``pkg/index`` becomes ``pkg``.
        """
        parts = [package.package_name]
        parts.extend(segment for segment in package.sub_path.split("/") if segment)
        if len(parts) > 1 and parts[-1] in self.layout.index_names:
            parts.pop()
        return "/".join(parts)

    def _coordinates(self, imported: str, importing: str) -> tuple[str, str]:
        """Pick the (from_file, to_path) pair to relativize in one space."""
        layout = self.layout

        if not layout.is_output(importing):
            return importing, layout.logical_location(imported)

        if layout.is_output(imported):
            return layout.actual_location(importing), layout.actual_location(imported)

        # Generated importer, source module imported. Nested output sits one
        # level below the source tree; sibling output overlays it.
        if layout.nested:
            return layout.actual_location(importing), imported
        return layout.logical_location(importing), imported


__all__ = ["InvalidReferenceError", "ModuleReferenceResolver"]
