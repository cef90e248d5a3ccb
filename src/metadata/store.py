"""Stored metadata loading with on-the-fly schema upgrade."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import orjson
from pydantic import ValidationError

from contract.artifacts import (
    LEGACY_SCHEMA_VERSION,
    METADATA_SCHEMA_VERSION,
    MetadataFileSpec,
)
from metadata.models import MetadataRecord
from metadata.upgrade import upgrade
from paths.utils import (
    DECLARATION_EXTENSIONS,
    MODULE_EXTENSIONS,
    has_suffix,
    normalize,
    strip_known_extension,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from metadata.models import SymbolTable
    from parse.declarations import DeclarationSource
    from vfs.filesystem import FileSystem

logger = logging.getLogger(__name__)


class MalformedRecordError(Exception):
    """Raised when a stored metadata file does not parse as metadata records."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class DegradedMetadataError(Exception):
    """Raised in strict mode when only legacy metadata can be produced."""

    def __init__(self, file: str) -> None:
        super().__init__(
            f"{file}: only version {LEGACY_SCHEMA_VERSION} metadata is stored and "
            "no declaration source is available to synthesize "
            f"version {METADATA_SCHEMA_VERSION}"
        )
        self.file = file


@dataclass(frozen=True)
class MetadataLookup:
    """Records for one module, oldest schema first.

    `degraded` marks a legacy-only result that could not be upgraded;
    `synthesized` marks a result whose last record was built in memory.
    """

    records: tuple[MetadataRecord, ...]
    degraded: bool = False
    synthesized: bool = False

    def find(self, version: int) -> MetadataRecord | None:
        return _find_version(self.records, version)


def _find_version(
    records: Sequence[MetadataRecord], version: int
) -> MetadataRecord | None:
    return next((r for r in records if r.schema_version == version), None)


def parse_records(path: str, raw: bytes) -> list[MetadataRecord]:
    """Parse the contents of a stored metadata file.

    A file holds one record object, an array of records, or ``null``.

    Raises:
        MalformedRecordError: If the content is not JSON or a record does not
            match the metadata schema.
    """
    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise MalformedRecordError(path, f"Invalid JSON: {exc}.") from exc

    if data is None:
        return []

    items = data if isinstance(data, list) else [data]
    records: list[MetadataRecord] = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            msg = f"Record {index} is not a JSON object."
            raise MalformedRecordError(path, msg)
        try:
            records.append(MetadataRecord.model_validate(item))
        except ValidationError as exc:
            msg = f"Record {index} failed schema validation: {exc}."
            raise MalformedRecordError(path, msg) from exc
    return records


def read_records(filesystem: FileSystem, path: str) -> list[MetadataRecord]:
    try:
        raw = filesystem.read_file(path)
    except IsADirectoryError as exc:
        raise MalformedRecordError(path, "Path is a directory.") from exc
    return parse_records(path, raw)


class MetadataStore:
    """Loads a module's stored metadata records through a file system.

    When a module only has a version-1 record and the declaration source
    reports its exported symbols, a version-2 record is synthesized and
    appended. Nothing is written back to storage.
    """

    def __init__(
        self,
        filesystem: FileSystem,
        declarations: DeclarationSource | None = None,
        *,
        file_spec: MetadataFileSpec | None = None,
        module_extensions: Iterable[str] = MODULE_EXTENSIONS,
        declaration_extensions: Iterable[str] = DECLARATION_EXTENSIONS,
        strict: bool = False,
    ) -> None:
        self.filesystem = filesystem
        self.declarations = declarations
        self.file_spec = file_spec or MetadataFileSpec()
        self.module_extensions = tuple(module_extensions)
        self.declaration_extensions = tuple(declaration_extensions)
        self.strict = strict

    def metadata_paths(self, file: str) -> list[str]:
        module_id = strip_known_extension(normalize(file), self.module_extensions)
        return self.file_spec.paths_for(module_id)

    def metadata_for(self, file: str) -> list[MetadataRecord] | None:
        """Return the module's records, or None when the module is unknown."""
        lookup = self.lookup(file)
        if lookup is None:
            return None
        return list(lookup.records)

    def lookup(self, file: str) -> MetadataLookup | None:
        """Load, and when needed upgrade, the metadata of `file`.

        Raises:
            MalformedRecordError: If a stored file is not valid metadata.
            DegradedMetadataError: In strict mode, if only version-1 metadata
                exists and no declared symbols are available.
        """
        file = normalize(file)
        stored = [p for p in self.metadata_paths(file) if self.filesystem.exists(p)]
        if not stored:
            return self._collect(file)

        records: list[MetadataRecord] = []
        for path in stored:
            records.extend(read_records(self.filesystem, path))
        logger.debug("loaded %d metadata record(s) for %s", len(records), file)

        legacy = _find_version(records, LEGACY_SCHEMA_VERSION)
        current = _find_version(records, METADATA_SCHEMA_VERSION)
        if legacy is None or current is not None:
            return MetadataLookup(records=tuple(records))

        declared = self._declared_symbols(file)
        if declared is None:
            if self.strict:
                raise DegradedMetadataError(file)
            logger.warning(
                "%s: version %d metadata only; no declarations to upgrade from",
                file,
                LEGACY_SCHEMA_VERSION,
            )
            return MetadataLookup(records=tuple(records), degraded=True)

        logger.debug(
            "upgrading version %d metadata for %s", LEGACY_SCHEMA_VERSION, file
        )
        return MetadataLookup(
            records=(*records, upgrade(legacy, declared)),
            synthesized=True,
        )

    def _collect(self, file: str) -> MetadataLookup | None:
        """Build metadata for a module source that has no stored records.

        Declaration files without stored records are unknown: their surface
        alone is not authoritative metadata.
        """
        if has_suffix(file, self.declaration_extensions):
            return None
        declared = self._declared_symbols(file)
        if not declared:
            return None
        record = MetadataRecord(
            schema_version=METADATA_SCHEMA_VERSION, symbols=declared
        )
        return MetadataLookup(records=(record,), synthesized=True)

    def _declared_symbols(self, file: str) -> SymbolTable | None:
        if self.declarations is None:
            return None
        return self.declarations.exported_symbols(file)


__all__ = [
    "DegradedMetadataError",
    "MalformedRecordError",
    "MetadataLookup",
    "MetadataStore",
    "parse_records",
    "read_records",
]
