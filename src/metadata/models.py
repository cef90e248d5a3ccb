"""Module metadata models.

A metadata record describes the exported symbols of one module under a given
schema version. The JSON form uses ``__symbolic`` tags, ``version`` and
``metadata`` keys; unknown keys are preserved so that stored records
round-trip verbatim.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    RootModel,
    Tag,
    TypeAdapter,
)

MemberKind = Literal["constructor", "method", "property"]


class _MetadataNode(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    def model_post_init(self, context: Any, /) -> None:
        # The tag is always part of the stored form, even when defaulted.
        if "symbolic" in type(self).model_fields:
            self.__pydantic_fields_set__.add("symbolic")


class Reference(_MetadataNode):
    """Name-based reference to a symbol, optionally in another module."""

    symbolic: Literal["reference"] = Field(default="reference", alias="__symbolic")
    name: str
    module: str | None = None


class MemberMetadata(_MetadataNode):
    """One declaration of a class member (overloads repeat)."""

    symbolic: MemberKind = Field(default="method", alias="__symbolic")
    decorators: list[Any] | None = None


class _ClassLike(_MetadataNode):
    extends: Reference | None = None
    members: dict[str, list[MemberMetadata]] | None = None


class ClassMetadata(_ClassLike):
    symbolic: Literal["class"] = Field(default="class", alias="__symbolic")
    decorators: list[Any] | None = None
    statics: dict[str, Any] | None = None


class InterfaceMetadata(_ClassLike):
    symbolic: Literal["interface"] = Field(default="interface", alias="__symbolic")


class FunctionMetadata(_MetadataNode):
    symbolic: Literal["function"] = Field(default="function", alias="__symbolic")
    parameters: list[str] | None = None
    value: Any = None


class ValueMetadata(RootModel[Any]):
    """Any other exported value: constants, references, error nodes."""

    model_config = ConfigDict(frozen=True)


_DESCRIPTOR_TAGS = frozenset({"class", "interface", "function"})


def _descriptor_tag(value: Any) -> str:
    if isinstance(value, dict):
        symbolic = value.get("__symbolic", value.get("symbolic"))
    else:
        symbolic = getattr(value, "symbolic", None)
    return symbolic if symbolic in _DESCRIPTOR_TAGS else "value"


SymbolDescriptor = Annotated[
    Union[
        Annotated[ClassMetadata, Tag("class")],
        Annotated[InterfaceMetadata, Tag("interface")],
        Annotated[FunctionMetadata, Tag("function")],
        Annotated[ValueMetadata, Tag("value")],
    ],
    Discriminator(_descriptor_tag),
]

SymbolTable = dict[str, SymbolDescriptor]


class ExportAlias(_MetadataNode):
    name: str
    as_: str = Field(alias="as")


class ModuleExport(_MetadataNode):
    """A re-export clause (``export {a, b as c} from "./x"``)."""

    from_: str = Field(alias="from")
    export: list[str | ExportAlias] | None = None


class MetadataRecord(_MetadataNode):
    """A module's exported symbols under one schema version."""

    symbolic: Literal["module"] = Field(default="module", alias="__symbolic")
    schema_version: int = Field(alias="version", ge=1)
    symbols: SymbolTable = Field(default_factory=dict, alias="metadata")
    exports: list[ModuleExport] | None = None

    def to_json(self) -> dict[str, Any]:
        """Return the JSON form used on disk.

        Only keys that were read or explicitly given are emitted, so stored
        records (explicit ``null`` values included) come back verbatim.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


_SYMBOL_TABLE_ADAPTER: TypeAdapter[dict[str, Any]] = TypeAdapter(SymbolTable)


def parse_symbol_table(data: Any) -> SymbolTable:
    """Validate a raw ``name -> descriptor`` mapping."""
    return _SYMBOL_TABLE_ADAPTER.validate_python(data)


def symbol_kind(descriptor: Any) -> str:
    """Return the ``__symbolic`` tag of a descriptor (``value`` for raw values)."""
    return _descriptor_tag(descriptor)


__all__ = [
    "ClassMetadata",
    "ExportAlias",
    "FunctionMetadata",
    "InterfaceMetadata",
    "MemberKind",
    "MemberMetadata",
    "MetadataRecord",
    "ModuleExport",
    "Reference",
    "SymbolDescriptor",
    "SymbolTable",
    "ValueMetadata",
    "parse_symbol_table",
    "symbol_kind",
]
