"""Versioned module metadata for genref-core."""

from metadata.models import (
    ClassMetadata,
    FunctionMetadata,
    InterfaceMetadata,
    MemberMetadata,
    MetadataRecord,
    Reference,
    SymbolDescriptor,
    ValueMetadata,
)
from metadata.store import (
    DegradedMetadataError,
    MalformedRecordError,
    MetadataLookup,
    MetadataStore,
)
from metadata.upgrade import upgrade

__all__ = [
    "ClassMetadata",
    "DegradedMetadataError",
    "FunctionMetadata",
    "InterfaceMetadata",
    "MalformedRecordError",
    "MemberMetadata",
    "MetadataLookup",
    "MetadataRecord",
    "MetadataStore",
    "Reference",
    "SymbolDescriptor",
    "ValueMetadata",
    "upgrade",
]
