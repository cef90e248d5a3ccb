"""Stable metadata contract surface for genref-core.

Schema versions and record file naming are the authoritative boundary
between metadata producers and this package.
"""

from contract.artifacts import (
    KNOWN_SCHEMA_VERSIONS,
    LEGACY_SCHEMA_VERSION,
    METADATA_SCHEMA_VERSION,
    METADATA_SUFFIX,
    METADATA_V1_SUFFIX,
    MetadataFileSpec,
)


def __getattr__(name: str) -> object:
    if name in {"ValidationMessage", "ValidationResult", "validate_metadata"}:
        from contract.validation import (
            ValidationMessage,
            ValidationResult,
            validate_metadata,
        )

        return {
            "ValidationMessage": ValidationMessage,
            "ValidationResult": ValidationResult,
            "validate_metadata": validate_metadata,
        }[name]

    msg = f"module 'contract' has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "KNOWN_SCHEMA_VERSIONS",
    "LEGACY_SCHEMA_VERSION",
    "METADATA_SCHEMA_VERSION",
    "METADATA_SUFFIX",
    "METADATA_V1_SUFFIX",
    "MetadataFileSpec",
    "ValidationMessage",
    "ValidationResult",
    "validate_metadata",
]
