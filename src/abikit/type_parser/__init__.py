"""Type-string primitives shared by the JSON ABI and EIP-712 parsers."""

from .scanning import split_top_level
from .specifier import MAX_NESTING_DEPTH, RootType, TupleType, TypeSpecifier, TypeStem
