"""Recursive-descent parser for Solidity type specifiers such as ``(address,uint256[])[3]``."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Union

from abikit.errors import TypeParserError

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_ARRAY_SIZE = re.compile(r"\[([0-9]*)\]")
_TUPLE_KEYWORD = "tuple"

# Tuples nested deeper than this are rejected; no real ABI comes close
MAX_NESTING_DEPTH = 64


@dataclass(frozen=True)
class RootType:
    """An elementary or user-defined type name, e.g. ``uint256`` or ``Person``."""

    span: str

    @property
    def name(self) -> str:
        """The type name."""
        return self.span


@dataclass(frozen=True)
class TupleType:
    """A parenthesized list of type specifiers, e.g. ``(address,uint256)``."""

    span: str
    types: tuple[TypeSpecifier, ...]


TypeStem = Union[RootType, TupleType]


@dataclass(frozen=True)
class TypeSpecifier:
    """A type stem followed by any number of array dimensions.

    Attributes
    ----------
    span: str
        The text the specifier was parsed from, without surrounding whitespace.
    stem: TypeStem
        The root type name or tuple the array dimensions apply to.
    sizes: tuple[int | None, ...]
        The array dimensions in textual order. None marks a dynamic ``[]`` dimension.
    """

    span: str
    stem: TypeStem
    sizes: tuple[int | None, ...] = ()

    @classmethod
    def parse(cls, type_string: str) -> TypeSpecifier:
        """Parse a whole type string.

        Arguments
        ---------
        type_string: str
            A type such as ``uint256``, ``Person[]`` or ``(bool,address)[2][]``.

        Returns
        -------
        TypeSpecifier
            The parsed type tree.
        """
        return _TypeStringParser(type_string).parse()

    @property
    def is_tuple(self) -> bool:
        """True if the stem is a tuple."""
        return isinstance(self.stem, TupleType)

    @property
    def is_array(self) -> bool:
        """True if the specifier has at least one array dimension."""
        return len(self.sizes) > 0

    @property
    def array_suffix(self) -> str:
        """The array dimensions rendered back to text, e.g. ``[2][]``."""
        return "".join("[]" if size is None else f"[{size}]" for size in self.sizes)

    def root_names(self) -> Iterator[str]:
        """Yield every root type name in the tree, depth first."""
        if isinstance(self.stem, TupleType):
            for inner in self.stem.types:
                yield from inner.root_names()
        else:
            yield self.stem.name

    def __str__(self) -> str:
        return self.span


class _TypeStringParser:
    """Single-use cursor over one type string."""

    def __init__(self, type_string: str):
        self.source = type_string
        self.text = type_string.strip()
        self.pos = 0
        self.depth = 0

    def parse(self) -> TypeSpecifier:
        if not self.text:
            raise TypeParserError(self.source, "empty type")
        specifier = self._type_specifier()
        if self.pos != len(self.text):
            raise self._error(f"unexpected {self.text[self.pos]!r} at position {self.pos}")
        return specifier

    def _type_specifier(self) -> TypeSpecifier:
        start = self.pos
        stem: TypeStem
        if self.text.startswith("(", self.pos) or self.text.startswith(_TUPLE_KEYWORD + "(", self.pos):
            stem = self._tuple_type()
        else:
            stem = self._root_type()
        sizes = self._array_sizes()
        return TypeSpecifier(span=self.text[start : self.pos], stem=stem, sizes=sizes)

    def _root_type(self) -> RootType:
        match = _IDENTIFIER.match(self.text, self.pos)
        if match is None:
            raise self._error(f"expected a type name at position {self.pos}")
        self.pos = match.end()
        return RootType(span=match.group())

    def _tuple_type(self) -> TupleType:
        start = self.pos
        self.depth += 1
        if self.depth > MAX_NESTING_DEPTH:
            raise self._error(f"tuples nested deeper than {MAX_NESTING_DEPTH} levels")
        if self.text.startswith(_TUPLE_KEYWORD, self.pos):
            self.pos += len(_TUPLE_KEYWORD)
        # opening parenthesis
        self.pos += 1
        types: list[TypeSpecifier] = []
        self._skip_whitespace()
        if self._peek() == ")":
            self.pos += 1
            self.depth -= 1
            return TupleType(span=self.text[start : self.pos], types=())
        while True:
            self._skip_whitespace()
            types.append(self._type_specifier())
            self._skip_whitespace()
            char = self._peek()
            if char == ",":
                self.pos += 1
            elif char == ")":
                self.pos += 1
                break
            elif char is None:
                raise self._error("unclosed tuple")
            else:
                raise self._error(f"expected ',' or ')' at position {self.pos}, found {char!r}")
        self.depth -= 1
        return TupleType(span=self.text[start : self.pos], types=tuple(types))

    def _array_sizes(self) -> tuple[int | None, ...]:
        sizes: list[int | None] = []
        while self._peek() == "[":
            match = _ARRAY_SIZE.match(self.text, self.pos)
            if match is None:
                raise self._error(f"malformed array dimension at position {self.pos}")
            digits = match.group(1)
            if digits:
                size = int(digits)
                if size == 0:
                    raise self._error("array dimensions must be positive")
                sizes.append(size)
            else:
                sizes.append(None)
            self.pos = match.end()
        return tuple(sizes)

    def _skip_whitespace(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def _peek(self) -> str | None:
        if self.pos < len(self.text):
            return self.text[self.pos]
        return None

    def _error(self, reason: str) -> TypeParserError:
        return TypeParserError(self.source, reason)
