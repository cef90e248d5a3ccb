"""Project layout: where authored modules live and where generated ones go."""

from __future__ import annotations

from dataclasses import dataclass

from paths.utils import (
    DECLARATION_EXTENSIONS,
    DEFAULT_PACKAGE_ROOT_MARKERS,
    MODULE_EXTENSIONS,
    has_suffix,
    is_absolute,
    is_within,
    normalize,
    rebase,
    strip_known_extension,
)

# Module-name endings of generated companions (factories, style modules, shims).
GENERATED_SUFFIXES: tuple[str, ...] = (
    ".gen",
    ".ngfactory",
    ".ngstyle",
    ".ngsummary",
    ".css",
    ".shim",
)
INDEX_NAMES: tuple[str, ...] = ("index", "__init__")


@dataclass(frozen=True)
class ProjectLayout:
    """Immutable source/output root configuration.

    Nested mode: `output_root` equals or sits under `source_root`.
    Sibling mode: anything else (typically peer directories).
    """

    source_root: str
    output_root: str
    package_root_markers: tuple[str, ...] = DEFAULT_PACKAGE_ROOT_MARKERS
    module_extensions: tuple[str, ...] = MODULE_EXTENSIONS
    declaration_extensions: tuple[str, ...] = DECLARATION_EXTENSIONS
    generated_suffixes: tuple[str, ...] = GENERATED_SUFFIXES
    index_names: tuple[str, ...] = INDEX_NAMES

    def __post_init__(self) -> None:
        for label in ("source_root", "output_root"):
            value = getattr(self, label)
            if not is_absolute(normalize(value)):
                msg = f"{label} must be an absolute path, got {value!r}"
                raise ValueError(msg)
            object.__setattr__(self, label, normalize(value))
        for label in (
            "package_root_markers",
            "module_extensions",
            "declaration_extensions",
            "generated_suffixes",
            "index_names",
        ):
            object.__setattr__(self, label, tuple(getattr(self, label)))

    @property
    def nested(self) -> bool:
        return is_within(self.output_root, self.source_root)

    def module_id(self, path: str) -> str:
        return strip_known_extension(path, self.module_extensions)

    def is_declaration_file(self, path: str) -> bool:
        return has_suffix(path, self.declaration_extensions)

    def is_generated(self, path: str) -> bool:
        """True when the module name carries a generated-companion suffix."""
        return has_suffix(self.module_id(path), self.generated_suffixes)

    def in_output_tree(self, path: str) -> bool:
        return is_within(path, self.output_root)

    def is_output(self, path: str) -> bool:
        """Classify a file as output: physically under the output root or
        generated by name while addressed through the source tree."""
        return self.in_output_tree(path) or self.is_generated(path)

    def actual_location(self, path: str) -> str:
        """Where an output file is really written."""
        if self.in_output_tree(path) or not is_within(path, self.source_root):
            return path
        return rebase(path, self.source_root, self.output_root)

    def logical_location(self, path: str) -> str:
        """Where an output file would sit if it were an ordinary source file."""
        if self.output_root == self.source_root or not self.in_output_tree(path):
            return path
        return rebase(path, self.output_root, self.source_root)


__all__ = ["GENERATED_SUFFIXES", "INDEX_NAMES", "ProjectLayout"]
