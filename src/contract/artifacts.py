"""Metadata record contract definitions.

This module defines the stable naming and versioning contract for stored
module metadata.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass

# Legacy schema: symbols only, no class members or inheritance.
LEGACY_SCHEMA_VERSION = 1
# Current schema for module metadata records.
METADATA_SCHEMA_VERSION = 2
KNOWN_SCHEMA_VERSIONS = frozenset({LEGACY_SCHEMA_VERSION, METADATA_SCHEMA_VERSION})

# Stored record filename suffixes (stable contract identifiers).
METADATA_V1_SUFFIX = ".metadata.v1.json"
METADATA_SUFFIX = ".metadata.json"


@dataclass(frozen=True)
class MetadataFileSpec:
    """Naming convention for the files holding a module's stored records.

    A module identity (its path without extension) plus a suffix gives the
    record file. Files are read in suffix order, legacy first.
    """

    v1_suffix: str = METADATA_V1_SUFFIX
    v2_suffix: str = METADATA_SUFFIX

    @property
    def suffixes(self) -> tuple[str, ...]:
        if self.v1_suffix == self.v2_suffix:
            return (self.v1_suffix,)
        return (self.v1_suffix, self.v2_suffix)

    def paths_for(self, module_id: str) -> list[str]:
        return [f"{module_id}{suffix}" for suffix in self.suffixes]

    def module_id_for(self, metadata_path: str) -> str | None:
        """Return the module identity a record file belongs to, if any."""
        basename = posixpath.basename(metadata_path)
        for suffix in sorted(self.suffixes, key=len, reverse=True):
            if basename.endswith(suffix) and len(basename) > len(suffix):
                return metadata_path[: -len(suffix)]
        return None

    def is_metadata_file(self, path: str) -> bool:
        return self.module_id_for(path) is not None


__all__ = [
    "KNOWN_SCHEMA_VERSIONS",
    "LEGACY_SCHEMA_VERSION",
    "METADATA_SCHEMA_VERSION",
    "METADATA_SUFFIX",
    "METADATA_V1_SUFFIX",
    "MetadataFileSpec",
]
