"""Version-1 to version-2 metadata upgrade."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from contract.artifacts import METADATA_SCHEMA_VERSION
from metadata.models import ClassMetadata, InterfaceMetadata

if TYPE_CHECKING:
    from collections.abc import Mapping

    from metadata.models import MemberMetadata, MetadataRecord, SymbolTable


def _merge_members(
    recorded: dict[str, list[MemberMetadata]] | None,
    declared: dict[str, list[MemberMetadata]] | None,
) -> dict[str, list[MemberMetadata]] | None:
    if recorded is None and declared is None:
        return None
    merged = dict(recorded or {})
    for name, overloads in (declared or {}).items():
        merged.setdefault(name, overloads)
    return merged


def _merge_descriptor(recorded: Any, declared: Any) -> Any:
    """Enrich a recorded descriptor with what the declaration adds.

    Only classes (and interfaces) of the same kind are merged; any other
    collision keeps the recorded entry.
    """
    for kind in (ClassMetadata, InterfaceMetadata):
        if isinstance(recorded, kind) and isinstance(declared, kind):
            update: dict[str, Any] = {}
            members = _merge_members(recorded.members, declared.members)
            if members is not None:
                update["members"] = members
            extends = declared.extends or recorded.extends
            if extends is not None:
                update["extends"] = extends
            return recorded.model_copy(update=update, deep=True)
    return recorded


def upgrade(v1: MetadataRecord, declared: Mapping[str, Any]) -> MetadataRecord:
    """Synthesize a version-2 record from a version-1 record.

    Declared names come first in declaration order, followed by names only
    the version-1 record knows. No version-1 entry is dropped: member maps are
    unioned with recorded members kept as-is, and ``extends`` is taken from
    the declaration when it has one. Exports and unknown keys of the
    version-1 record carry over. The input record is not modified.

    Args:
        v1: The stored legacy record.
        declared: Exported symbols reported by the declaration source.

    Returns:
        A new record with ``schema_version`` 2.
    """
    symbols: SymbolTable = {}
    for name, descriptor in declared.items():
        recorded = v1.symbols.get(name)
        if recorded is None:
            symbols[name] = descriptor
        else:
            symbols[name] = _merge_descriptor(recorded, descriptor)

    for name, recorded in v1.symbols.items():
        if name not in symbols:
            symbols[name] = recorded

    return v1.model_copy(
        update={"schema_version": METADATA_SCHEMA_VERSION, "symbols": symbols},
        deep=True,
    )


__all__ = ["upgrade"]
