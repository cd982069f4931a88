"""Function, error and event parameters of a JSON ABI."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, cast

from eth_typing import ABIComponent, ABIComponentIndexed

from abikit.errors import AbiDecodeError
from abikit.type_parser import MAX_NESTING_DEPTH, TupleType, TypeSpecifier

from .identifier import validate_identifier
from .internal_type import InternalType

TUPLE = "tuple"


@dataclass
class Param:
    """A possibly named, possibly nested parameter.

    Attributes
    ----------
    name: str
        The parameter name, empty for unnamed parameters and tuple members.
    ty: str
        The type string. Tuples are spelled ``tuple`` followed by their array
        dimensions, e.g. ``tuple[3]``, and keep their members in ``components``.
    components: list[Param]
        The members of a tuple type, empty for every other type.
    internal_type: InternalType | None
        The compiler's annotation of the source-level type, if any.
    """

    name: str
    ty: str
    components: list[Param] = field(default_factory=list)
    internal_type: InternalType | None = None

    @classmethod
    def parse(cls, type_string: str, name: str = "") -> Param:
        """Build a parameter from a type string such as ``(address,uint256)[]``.

        Arguments
        ---------
        type_string: str
            The type of the parameter.
        name: str, optional
            The name of the parameter. Defaults to unnamed.

        Returns
        -------
        Param
            The parameter, with tuple members expanded into unnamed components.
        """
        return cls.from_type_specifier(TypeSpecifier.parse(type_string), name)

    @classmethod
    def from_type_specifier(
        cls, specifier: TypeSpecifier, name: str = "", internal_type: InternalType | None = None
    ) -> Param:
        """Build a parameter from an already parsed type specifier.

        Arguments
        ---------
        specifier: TypeSpecifier
            The parsed type.
        name: str, optional
            The name of the parameter. Defaults to unnamed.
        internal_type: InternalType, optional
            The annotation to attach to the parameter.

        Returns
        -------
        Param
            The parameter.
        """
        if isinstance(specifier.stem, TupleType):
            components = [Param.from_type_specifier(inner) for inner in specifier.stem.types]
            return cls(
                name=name,
                ty=TUPLE + specifier.array_suffix,
                components=components,
                internal_type=internal_type,
            )
        return cls(name=name, ty=specifier.span, internal_type=internal_type)

    @property
    def is_tuple(self) -> bool:
        """True if the parameter is a tuple or an array of tuples."""
        return self.ty == TUPLE or self.ty.startswith(TUPLE + "[")

    @property
    def is_struct(self) -> bool:
        """True if the compiler annotated the parameter as a struct."""
        return self.internal_type is not None and self.internal_type.is_struct

    def canonical_type(self) -> str:
        """The type as it appears in a signature, with tuples expanded to their members.

        Returns
        -------
        str
            E.g. ``(address,(uint256,bool)[])[2]`` for a ``tuple[2]`` parameter.
        """
        if not self.is_tuple:
            return self.ty
        inner = ",".join(component.canonical_type() for component in self.components)
        return f"({inner}){self.ty[len(TUPLE):]}"

    def to_dict(self) -> ABIComponent:
        """Serialize to the JSON ABI form.

        Returns
        -------
        ABIComponent
            ``{"name", "type", "components"?, "internalType"?}``.
        """
        return cast(ABIComponent, self._to_dict())

    def _to_dict(self, indexed: bool | None = None) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "type": self.ty}
        if indexed is not None:
            out["indexed"] = indexed
        if self.components:
            out["components"] = [component.to_dict() for component in self.components]
        if self.internal_type is not None:
            out["internalType"] = str(self.internal_type)
        return out

    @classmethod
    def from_dict(cls, data: Any) -> Param:
        """Deserialize from the JSON ABI form.

        Arguments
        ---------
        data: Any
            A JSON object with at least a ``type`` field.

        Returns
        -------
        Param
            The parameter. Raises if the name is not an identifier or the object
            does not have the shape of a parameter.
        """
        return cls(**_fields_from_dict(data))


@dataclass
class EventParam(Param):
    """An event parameter, which may be one of the indexed topics of the log.

    Attributes
    ----------
    indexed: bool
        Whether the value is stored in a topic rather than in the log data.
    """

    indexed: bool = False

    @classmethod
    def from_param(cls, param: Param, indexed: bool = False) -> EventParam:
        """Make an event parameter out of a plain parameter.

        Arguments
        ---------
        param: Param
            The parameter to copy the fields of.
        indexed: bool, optional
            Whether the parameter is indexed. Defaults to False.

        Returns
        -------
        EventParam
            The event parameter.
        """
        return cls(
            name=param.name,
            ty=param.ty,
            components=list(param.components),
            internal_type=param.internal_type,
            indexed=indexed,
        )

    def to_dict(self) -> ABIComponentIndexed:  # type: ignore[override]
        """Serialize to the JSON ABI form.

        Returns
        -------
        ABIComponentIndexed
            ``{"name", "type", "indexed", "components"?, "internalType"?}``.
        """
        return cast(ABIComponentIndexed, self._to_dict(indexed=self.indexed))

    @classmethod
    def from_dict(cls, data: Any) -> EventParam:
        fields = _fields_from_dict(data)
        indexed = data.get("indexed", False)
        if not isinstance(indexed, bool):
            raise AbiDecodeError(f"event parameter `indexed` must be a boolean, got {indexed!r}")
        return cls(indexed=indexed, **fields)


def _fields_from_dict(data: Any, depth: int = 0) -> dict[str, Any]:
    if depth > MAX_NESTING_DEPTH:
        raise AbiDecodeError(f"parameter components nested deeper than {MAX_NESTING_DEPTH} levels")
    if not isinstance(data, dict):
        raise AbiDecodeError(f"parameter must be a JSON object, got {type(data).__name__}")
    ty = data.get("type")
    if not isinstance(ty, str):
        raise AbiDecodeError(f"parameter is missing its type: {data!r}")
    name = data.get("name")
    if name is None:
        name = ""
    if not isinstance(name, str):
        raise AbiDecodeError(f"parameter name must be a string, got {name!r}")
    validate_identifier(name, context="parameter name", allow_empty=True)
    components = data.get("components") or []
    if not isinstance(components, list):
        raise AbiDecodeError(f"parameter components must be a list, got {components!r}")
    _validate_type(ty, has_components=bool(components))
    internal_type = data.get("internalType")
    if internal_type is not None and not isinstance(internal_type, str):
        raise AbiDecodeError(f"parameter internalType must be a string, got {internal_type!r}")
    return {
        "name": name,
        "ty": ty,
        # tuple members are never indexed, even inside an event
        "components": [Param(**_fields_from_dict(component, depth + 1)) for component in components],
        "internal_type": None if internal_type is None else InternalType.parse(internal_type),
    }


def _validate_type(ty: str, has_components: bool) -> None:
    # JSON spells tuples `tuple[..]` and lists their members in `components`
    if ty == TUPLE or ty.startswith(TUPLE + "["):
        array_suffix = ty[len(TUPLE) :]
        specifier = TypeSpecifier.parse("()" + array_suffix)
        expected = "()" + array_suffix
    else:
        specifier = TypeSpecifier.parse(ty)
        expected = ty
        if specifier.is_tuple:
            raise AbiDecodeError(f"tuple parameters must be typed `tuple` with components, got {ty!r}")
        if has_components:
            raise AbiDecodeError(f"only tuple parameters have components, got components for {ty!r}")
    if specifier.span != expected:
        raise AbiDecodeError(f"parameter type has surrounding whitespace: {ty!r}")
