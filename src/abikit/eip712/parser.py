"""Parse EIP-712 ``encodeType`` strings.

An ``encodeType`` string is a concatenation of struct definitions, e.g.
``Transaction(Person from,Person to,Asset tx)Asset(address token,uint256 amount)``.
See https://eips.ethereum.org/EIPS/eip-712#definition-of-encodetype
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from abikit.errors import AbiParseError, InvalidPropertyDefError, TypeParserError
from abikit.json_abi.identifier import validate_identifier
from abikit.type_parser import TypeSpecifier, split_top_level


@dataclass(frozen=True)
class PropDef:
    """One struct field, ``type name``, e.g. ``uint256 foo`` or ``(MyStruct[23],bool) bar``."""

    ty: TypeSpecifier
    name: str

    @classmethod
    def parse(cls, text: str) -> PropDef:
        """Parse a property, splitting the type from the name at the last space.

        Arguments
        ---------
        text: str
            The property.

        Returns
        -------
        PropDef
            The property.
        """
        ty, separator, name = text.rpartition(" ")
        if not separator:
            raise InvalidPropertyDefError(text)
        return cls(ty=TypeSpecifier.parse(ty.strip()), name=name.strip())


@dataclass(frozen=True)
class ComponentType:
    """One struct definition of an ``encodeType`` string.

    Attributes
    ----------
    span: str
        The consumed prefix of the parsed text, ``Name(...)``.
    type_name: str
        The struct name.
    props: tuple[PropDef, ...]
        The struct fields in declaration order.
    """

    span: str
    type_name: str
    props: tuple[PropDef, ...] = ()

    @classmethod
    def parse(cls, text: str) -> ComponentType:
        """Parse the struct definition at the start of the text.

        Arguments
        ---------
        text: str
            Text starting with ``Name(``. Anything after the matching ``)`` is left alone.

        Returns
        -------
        ComponentType
            The struct definition. ``span`` tells the caller how much text was consumed.
        """
        open_paren = text.find("(")
        if open_paren < 0:
            raise TypeParserError(text, "no opening parenthesis found")
        type_name = validate_identifier(text[:open_paren], context="struct name")
        pieces, end = split_top_level(text, depth=1, start=open_paren + 1)
        return cls(span=text[:end], type_name=type_name, props=tuple(PropDef.parse(piece) for piece in pieces))


@dataclass(frozen=True)
class EncodeType:
    """The struct definitions of an ``encodeType`` string, in textual order.

    By convention the first definition is the primary type being signed.
    """

    types: tuple[ComponentType, ...] = field(default_factory=tuple)

    @classmethod
    def parse(cls, text: str) -> EncodeType:
        """Parse struct definitions off the text until one fails to parse.

        Parsing stops quietly at the end of the text or at the first malformed definition;
        the definitions parsed up to that point are returned.

        Arguments
        ---------
        text: str
            The ``encodeType`` string.

        Returns
        -------
        EncodeType
            The definitions, possibly none.
        """
        types: list[ComponentType] = []
        remaining = text
        while True:
            try:
                component = ComponentType.parse(remaining)
            except AbiParseError as err:
                if remaining:
                    logging.debug("Stopped parsing encodeType with %r left over: %s", remaining, err)
                break
            types.append(component)
            remaining = remaining[len(component.span) :]
        return cls(types=tuple(types))

    @property
    def primary_type(self) -> ComponentType | None:
        """The first definition, None if there are none."""
        return self.types[0] if self.types else None

    def __iter__(self):
        return iter(self.types)

    def __len__(self) -> int:
        return len(self.types)
