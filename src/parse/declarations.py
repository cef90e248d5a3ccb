"""Declaration sources: who tells us what a module exports."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

from metadata.models import parse_symbol_table
from paths.utils import normalize

if TYPE_CHECKING:
    from collections.abc import Mapping

    from metadata.models import SymbolTable


class DeclarationSource(Protocol):
    def exported_symbols(self, file: str) -> SymbolTable | None:
        """Return the exported symbols of `file`, or None when unknown."""
        ...


class MappingDeclarationSource:
    """Declaration source over precomputed symbol tables keyed by file path.

    Raw JSON-like descriptors are validated into metadata models up front.
    """

    def __init__(self, symbols_by_file: Mapping[str, Mapping[str, Any]]) -> None:
        self._symbols: dict[str, SymbolTable] = {
            normalize(path): parse_symbol_table(dict(symbols))
            for path, symbols in symbols_by_file.items()
        }

    def exported_symbols(self, file: str) -> SymbolTable | None:
        symbols = self._symbols.get(normalize(file))
        if symbols is None:
            return None
        return dict(symbols)


__all__ = ["DeclarationSource", "MappingDeclarationSource"]
