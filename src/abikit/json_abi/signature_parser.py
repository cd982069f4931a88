"""Parse human-written signatures such as ``InsufficientBalance(uint256 available,(address,uint256) need)``.

Parameters are separated by commas at the outermost level of the parameter list, and
the type of each parameter is separated from its name by its first whitespace. Type
strings therefore never contain whitespace, e.g. ``(address,uint256) arg`` is valid while
``(address, uint256) arg`` is not.
"""

from __future__ import annotations

from abikit.errors import ParamShapeError, TypeParserError
from abikit.type_parser import TupleType, TypeSpecifier, split_top_level

from .identifier import validate_identifier
from .internal_type import InternalType
from .param import TUPLE, Param


def parse_error_signature(text: str) -> tuple[str, list[Param]]:
    """Parse ``Name(type name,...)`` into the error name and its named parameters.

    Arguments
    ---------
    text: str
        The signature.

    Returns
    -------
    tuple[str, list[Param]]
        The name and the parameters.
    """
    name, inputs, outputs = _parse_signature(text, require_names=True, allow_outputs=False)
    assert outputs is None
    return name, inputs


def parse_function_signature(text: str) -> tuple[str, list[Param], list[Param]]:
    """Parse ``name(type [name],...)`` with an optional ``(type [name],...)`` output list.

    Arguments
    ---------
    text: str
        The signature, e.g. ``balanceOf(address owner)(uint256)``.

    Returns
    -------
    tuple[str, list[Param], list[Param]]
        The name, the inputs and the outputs. Names are optional and default to empty.
    """
    name, inputs, outputs = _parse_signature(text, require_names=False, allow_outputs=True)
    return name, inputs, outputs or []


def parse_params(text: str, start: int = 0, require_names: bool = True) -> tuple[list[Param], int]:
    """Parse the parameter list whose opening parenthesis sits just before ``start``.

    Arguments
    ---------
    text: str
        The text holding the parameter list.
    start: int, optional
        The index just past the opening parenthesis. Defaults to 0.
    require_names: bool, optional
        Whether every parameter must be named. Defaults to True.

    Returns
    -------
    tuple[list[Param], int]
        The parameters and the index just past the closing parenthesis.
    """
    pieces, end = split_top_level(text, depth=1, start=start)
    return [parse_param(piece, require_name=require_names) for piece in pieces], end


def parse_param(text: str, require_name: bool = True) -> Param:
    """Parse one ``type name`` parameter.

    Arguments
    ---------
    text: str
        The parameter, e.g. ``uint256 amount`` or ``(address,uint256[2]) order``.
    require_name: bool, optional
        Whether the name is mandatory. Defaults to True.

    Returns
    -------
    Param
        The parameter. Tuple members become unnamed components.
    """
    parts = text.split(maxsplit=1)
    if not parts or (require_name and len(parts) < 2):
        raise ParamShapeError(text)
    type_string = parts[0]
    name = parts[1] if len(parts) == 2 else ""
    validate_identifier(name, context="parameter name", allow_empty=not require_name)
    return _param_from_specifier(TypeSpecifier.parse(type_string), name)


def _param_from_specifier(specifier: TypeSpecifier, name: str) -> Param:
    internal_type = InternalType.parse(specifier.span)
    if isinstance(specifier.stem, TupleType):
        return Param(
            name=name,
            ty=TUPLE + specifier.array_suffix,
            components=[_param_from_specifier(inner, "") for inner in specifier.stem.types],
            internal_type=internal_type,
        )
    return Param(name=name, ty=specifier.span, internal_type=internal_type)


def _parse_signature(
    text: str, require_names: bool, allow_outputs: bool
) -> tuple[str, list[Param], list[Param] | None]:
    text = text.strip()
    open_paren = text.find("(")
    if open_paren < 0:
        raise TypeParserError(text, "no opening parenthesis found")
    name = validate_identifier(text[:open_paren], context="signature name")
    inputs, end = parse_params(text, open_paren + 1, require_names)
    outputs: list[Param] | None = None
    if allow_outputs and text.startswith("(", end):
        outputs, end = parse_params(text, end + 1, require_names)
    if end != len(text):
        raise TypeParserError(text, f"unexpected text after the parameter list: {text[end:]!r}")
    return name, inputs, outputs
