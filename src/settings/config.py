from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from contract.artifacts import METADATA_SUFFIX, METADATA_V1_SUFFIX, MetadataFileSpec
from paths.utils import (
    DECLARATION_EXTENSIONS,
    DEFAULT_PACKAGE_ROOT_MARKERS,
    MODULE_EXTENSIONS,
)
from resolve.layout import GENERATED_SUFFIXES, INDEX_NAMES, ProjectLayout

CONFIG_FILENAME = "genref.toml"


def _check_suffixes(values: list[str], label: str) -> list[str]:
    for value in values:
        if not value.startswith(".") or "/" in value or len(value) < 2:
            msg = f"{label} entries must look like '.ext', got {value!r}"
            raise ValueError(msg)
    return values


class _StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class MetadataConfig(_StrictModel):
    """Configuration for stored metadata records."""

    v1_suffix: str = Field(
        default=METADATA_V1_SUFFIX,
        description="Suffix of files holding version-1 records",
    )
    v2_suffix: str = Field(
        default=METADATA_SUFFIX,
        description="Suffix of files holding version-2 records",
    )
    strict: bool = Field(
        default=False,
        description="Fail instead of warning when metadata cannot be upgraded",
    )

    @field_validator("v1_suffix", "v2_suffix")
    @classmethod
    def validate_suffix(cls, v: str) -> str:
        return _check_suffixes([v], "metadata suffix")[0]


class GenrefConfig(_StrictModel):
    """Configuration for module reference resolution and metadata loading."""

    source_root: str = Field(
        default="src",
        description="Root of authored modules (relative to the project root)",
    )
    output_root: str = Field(
        default="gen",
        description="Root of generated modules; nested when under source_root",
    )
    package_root_markers: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PACKAGE_ROOT_MARKERS),
        description="Directory names that mark an external package boundary",
    )
    module_extensions: list[str] = Field(
        default_factory=lambda: list(MODULE_EXTENSIONS),
        description="Suffixes stripped from module identity",
    )
    declaration_extensions: list[str] = Field(
        default_factory=lambda: list(DECLARATION_EXTENSIONS),
        description="Suffixes of declaration files",
    )
    generated_suffixes: list[str] = Field(
        default_factory=lambda: list(GENERATED_SUFFIXES),
        description="Module-name endings of generated companion modules",
    )
    index_names: list[str] = Field(
        default_factory=lambda: list(INDEX_NAMES),
        description="Entry-point module names dropped from package specifiers",
    )
    metadata: MetadataConfig = Field(
        default_factory=MetadataConfig,
        description="Stored metadata naming and strictness",
    )

    @field_validator("package_root_markers")
    @classmethod
    def validate_markers(cls, v: list[str]) -> list[str]:
        if not v:
            msg = "package_root_markers must not be empty"
            raise ValueError(msg)
        for marker in v:
            if not marker or "/" in marker or marker in (".", ".."):
                msg = f"Invalid package root marker {marker!r}"
                raise ValueError(msg)
        return v

    @field_validator(
        "module_extensions", "declaration_extensions", "generated_suffixes"
    )
    @classmethod
    def validate_suffix_lists(cls, v: list[str]) -> list[str]:
        return _check_suffixes(v, "suffix list")

    def to_layout(self, root: Path) -> ProjectLayout:
        """Build the resolver layout with roots resolved against `root`."""
        return ProjectLayout(
            source_root=resolve_root(root, self.source_root).as_posix(),
            output_root=resolve_root(root, self.output_root).as_posix(),
            package_root_markers=tuple(self.package_root_markers),
            module_extensions=tuple(self.module_extensions),
            declaration_extensions=tuple(self.declaration_extensions),
            generated_suffixes=tuple(self.generated_suffixes),
            index_names=tuple(self.index_names),
        )

    def metadata_file_spec(self) -> MetadataFileSpec:
        return MetadataFileSpec(
            v1_suffix=self.metadata.v1_suffix,
            v2_suffix=self.metadata.v2_suffix,
        )


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def resolve_root(root: Path, value: str) -> Path:
    """Resolve a config-provided root directory.

    Relative values are taken relative to the project root; absolute values
    are used as given. Home-relative values are rejected.
    """
    if not value:
        msg = "root directories must be non-empty paths"
        raise ConfigError(msg)

    if value.startswith("~"):
        msg = f"root directory '{value}' must not be home-relative"
        raise ConfigError(msg)

    path = Path(value)
    if not path.is_absolute():
        path = root / path

    try:
        return path.resolve()
    except OSError as exc:
        msg = f"Failed to resolve root directory '{value}': {exc}"
        raise ConfigError(msg) from exc


def load_config(root: Path) -> GenrefConfig:
    """Load configuration from genref.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return GenrefConfig()

    try:
        with config_path.open("rb") as f:
            data: dict[str, Any] = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return GenrefConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
