"""Validation helpers for stored metadata records."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from contract.artifacts import (
    KNOWN_SCHEMA_VERSIONS,
    LEGACY_SCHEMA_VERSION,
    METADATA_SCHEMA_VERSION,
    MetadataFileSpec,
)
from metadata.store import MalformedRecordError, read_records

if TYPE_CHECKING:
    from collections.abc import Iterator

    from metadata.models import MetadataRecord
    from vfs.filesystem import FileSystem


@dataclass(frozen=True)
class ValidationMessage:
    path: str
    message: str
    record: int | None = None

    def location(self) -> str:
        if self.record is None:
            return self.path
        return f"{self.path}[{self.record}]"

    def to_dict(self) -> dict[str, object]:
        return {
            "path": self.path,
            "record": self.record,
            "message": self.message,
        }


@dataclass
class ValidationResult:
    errors: list[ValidationMessage] = field(default_factory=list)
    warnings: list[ValidationMessage] = field(default_factory=list)
    checked: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def iter_metadata_files(
    filesystem: FileSystem, directory: str, file_spec: MetadataFileSpec
) -> Iterator[str]:
    """Yield metadata file paths under `directory`, sorted for determinism."""
    for name in sorted(filesystem.list_directory(directory)):
        path = posixpath.join(directory, name)
        if filesystem.is_directory(path):
            yield from iter_metadata_files(filesystem, path, file_spec)
        elif file_spec.is_metadata_file(path):
            yield path


def validate_metadata(
    directory: str,
    filesystem: FileSystem,
    *,
    file_spec: MetadataFileSpec | None = None,
    strict_schema_version: bool = False,
) -> ValidationResult:
    """Check every stored metadata file under `directory`.

    Malformed files and unknown schema versions are errors. Modules whose
    stored records are legacy-only, or that repeat a schema version, are
    warnings (errors with `strict_schema_version`).
    """
    file_spec = file_spec or MetadataFileSpec()
    result = ValidationResult()

    if not filesystem.exists(directory):
        result.errors.append(
            ValidationMessage(path=directory, message="Directory does not exist.")
        )
        return result

    if not filesystem.is_directory(directory):
        result.errors.append(
            ValidationMessage(path=directory, message="Path is not a directory.")
        )
        return result

    by_module: dict[str, list[MetadataRecord]] = {}
    first_path: dict[str, str] = {}
    for path in iter_metadata_files(filesystem, directory, file_spec):
        result.checked.append(path)
        try:
            records = read_records(filesystem, path)
        except MalformedRecordError as exc:
            result.errors.append(ValidationMessage(path=path, message=exc.reason))
            continue

        for index, record in enumerate(records):
            if record.schema_version not in KNOWN_SCHEMA_VERSIONS:
                result.errors.append(
                    ValidationMessage(
                        path=path,
                        record=index,
                        message=(
                            "Unsupported schema version: "
                            f"expected one of {sorted(KNOWN_SCHEMA_VERSIONS)}, "
                            f"got {record.schema_version}."
                        ),
                    )
                )

        module_id = file_spec.module_id_for(path) or path
        by_module.setdefault(module_id, []).extend(records)
        first_path.setdefault(module_id, path)

    for module_id, records in sorted(by_module.items()):
        _check_module_versions(
            first_path[module_id],
            records,
            result,
            strict_schema_version=strict_schema_version,
        )

    return result


def _check_module_versions(
    path: str,
    records: list[MetadataRecord],
    result: ValidationResult,
    *,
    strict_schema_version: bool,
) -> None:
    versions = [record.schema_version for record in records]
    messages: list[str] = []

    if LEGACY_SCHEMA_VERSION in versions and METADATA_SCHEMA_VERSION not in versions:
        messages.append(
            f"Only schema version {LEGACY_SCHEMA_VERSION} is stored; "
            f"version {METADATA_SCHEMA_VERSION} must be synthesized on load."
        )

    duplicates = sorted({v for v in versions if versions.count(v) > 1})
    if duplicates:
        messages.append(f"Schema versions stored more than once: {duplicates}.")

    target = result.errors if strict_schema_version else result.warnings
    for message in messages:
        target.append(ValidationMessage(path=path, message=message))


__all__ = [
    "ValidationMessage",
    "ValidationResult",
    "iter_metadata_files",
    "validate_metadata",
]
