"""Resolve EIP-712 struct definitions into the canonical ``encodeType`` string and its type hash."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable

from eth_abi.registry import registry
from hexbytes import HexBytes

from abikit.errors import AbiParseError, MissingTypeError
from abikit.json_abi.identifier import validate_identifier
from abikit.json_abi.utils import keccak256
from abikit.type_parser import TypeSpecifier

from .parser import ComponentType, EncodeType, PropDef


@lru_cache(maxsize=None)
def is_elementary_type(type_name: str) -> bool:
    """Returns True if the root type name is an ABI elementary type such as ``uint256`` or ``bytes32``.

    Arguments
    ---------
    type_name: str
        A root type name, without array dimensions.

    Returns
    -------
    bool
        False for struct names.
    """
    return registry.has_encoder(type_name)


@dataclass(frozen=True)
class PropertyDef:
    """An owned struct field."""

    type_name: str
    name: str

    @classmethod
    def from_prop_def(cls, prop: PropDef) -> PropertyDef:
        """Validate a parsed property and detach it from the parsed text."""
        validate_identifier(prop.name, context="property name")
        return cls(type_name=prop.ty.span, name=prop.name)

    def root_type_names(self) -> list[str]:
        """The root type names the property refers to, without array dimensions."""
        return list(TypeSpecifier.parse(self.type_name).root_names())

    def __str__(self) -> str:
        return f"{self.type_name} {self.name}"


@dataclass(frozen=True)
class TypeDef:
    """An owned struct definition."""

    type_name: str
    props: tuple[PropertyDef, ...] = ()

    @classmethod
    def from_component_type(cls, component: ComponentType) -> TypeDef:
        """Validate a parsed struct definition and detach it from the parsed text."""
        return cls(
            type_name=validate_identifier(component.type_name, context="struct name"),
            props=tuple(PropertyDef.from_prop_def(prop) for prop in component.props),
        )

    def encode_type_fragment(self) -> str:
        """The definition alone, ``Name(type name,...)``."""
        return f"{self.type_name}({','.join(str(prop) for prop in self.props)})"

    def referenced_struct_names(self) -> list[str]:
        """The non-elementary type names the fields refer to, in field order without repeats."""
        names: list[str] = []
        for prop in self.props:
            for root in prop.root_type_names():
                if not is_elementary_type(root) and root not in names:
                    names.append(root)
        return names


class Resolver:
    """A set of struct definitions that can be linearized for a primary type."""

    def __init__(self, types: Iterable[TypeDef] = ()):
        self._types: dict[str, TypeDef] = {}
        for typedef in types:
            self.ingest(typedef)

    @classmethod
    def from_encode_type(cls, encode_type: EncodeType | str) -> Resolver:
        """Build a resolver out of every definition of an ``encodeType`` string.

        Arguments
        ---------
        encode_type: EncodeType | str
            The parsed definitions, or the string to parse them from.

        Returns
        -------
        Resolver
            The resolver.
        """
        if isinstance(encode_type, str):
            encode_type = EncodeType.parse(encode_type)
        return cls(TypeDef.from_component_type(component) for component in encode_type)

    def ingest(self, typedef: TypeDef) -> None:
        """Add a struct definition.

        Re-adding an identical definition is a no-op; a different definition under the
        same name raises.

        Arguments
        ---------
        typedef: TypeDef
            The definition.
        """
        existing = self._types.get(typedef.type_name)
        if existing is not None and existing != typedef:
            raise AbiParseError(f"conflicting definitions for struct {typedef.type_name!r}")
        self._types[typedef.type_name] = typedef

    def __contains__(self, type_name: str) -> bool:
        return type_name in self._types

    def __getitem__(self, type_name: str) -> TypeDef:
        try:
            return self._types[type_name]
        except KeyError as err:
            raise MissingTypeError(type_name) from err

    def type_names(self) -> list[str]:
        """The names of every known struct, in ingestion order."""
        return list(self._types)

    def linearize(self, primary_type: str) -> list[TypeDef]:
        """Order the primary type and every struct it depends on, as EIP-712 requires.

        Arguments
        ---------
        primary_type: str
            The struct being encoded.

        Returns
        -------
        list[TypeDef]
            The primary type first, then its transitive dependencies sorted by name.
        """
        primary = self[primary_type]
        seen = {primary.type_name}
        pending = primary.referenced_struct_names()
        while pending:
            name = pending.pop()
            if name in seen:
                continue
            seen.add(name)
            pending.extend(self[name].referenced_struct_names())
        dependencies = sorted(seen - {primary.type_name})
        return [primary] + [self._types[name] for name in dependencies]

    def encode_type(self, primary_type: str) -> str:
        """The canonical ``encodeType`` string of the primary type.

        Arguments
        ---------
        primary_type: str
            The struct being encoded.

        Returns
        -------
        str
            E.g. ``Mail(Person from,Person to,string contents)Person(string name,address wallet)``.
        """
        return "".join(typedef.encode_type_fragment() for typedef in self.linearize(primary_type))

    def type_hash(self, primary_type: str) -> HexBytes:
        """The keccak256 hash of the canonical ``encodeType`` string.

        Arguments
        ---------
        primary_type: str
            The struct being encoded.

        Returns
        -------
        HexBytes
            The 32 byte type hash.
        """
        return keccak256(self.encode_type(primary_type))
