"""Declaration sources for genref-core."""

from parse.declarations import DeclarationSource, MappingDeclarationSource
from parse.treesitter_declarations import (
    TreeSitterDeclarationSource,
    extract_declarations,
)

__all__ = [
    "DeclarationSource",
    "MappingDeclarationSource",
    "TreeSitterDeclarationSource",
    "extract_declarations",
]
