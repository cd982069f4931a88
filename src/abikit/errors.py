"""Errors raised while parsing ABI items, type strings and EIP-712 type definitions."""

from __future__ import annotations


class AbiParseError(ValueError):
    """Base class for every failure reported by abikit."""


class TypeParserError(AbiParseError):
    """A type string is structurally malformed."""

    def __init__(self, type_string: str, reason: str | None = None):
        message = f"invalid type string: {type_string!r}"
        if reason is not None:
            message += f" ({reason})"
        super().__init__(message)
        self.type_string = type_string
        self.reason = reason


class ParamShapeError(AbiParseError):
    """A free-text parameter is missing the space between its type and its name."""

    def __init__(self, param_string: str):
        super().__init__(f"invalid parameter, expected `type name`: {param_string!r}")
        self.param_string = param_string


class InvalidPropertyDefError(AbiParseError):
    """An EIP-712 property is missing the space between its type and its name."""

    def __init__(self, property_string: str):
        super().__init__(f"invalid property definition, expected `type name`: {property_string!r}")
        self.property_string = property_string


class InvalidIdentifierError(AbiParseError):
    """A name is not a valid identifier."""

    def __init__(self, identifier: str, context: str | None = None):
        message = f"invalid identifier: {identifier!r}"
        if context is not None:
            message = f"{context}: {message}"
        super().__init__(message)
        self.identifier = identifier


class KindMismatchError(AbiParseError):
    """A JSON item was read as one kind of item but is tagged as another."""

    def __init__(self, expected: str, found: str):
        super().__init__(f"expected a JSON ABI {expected}, found {found}")
        self.expected = expected
        self.found = found


class AbiDecodeError(AbiParseError):
    """A JSON item does not have the shape of an ABI item."""


class MissingTypeError(AbiParseError):
    """An EIP-712 type references a struct that has no definition."""

    def __init__(self, type_name: str):
        super().__init__(f"missing type definition for {type_name!r}")
        self.type_name = type_name
