"""Identifier validation for ABI item, parameter and struct names."""

from __future__ import annotations

import re

from abikit.errors import InvalidIdentifierError

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def is_valid_identifier(name: str) -> bool:
    """Returns True if the name is made of ASCII letters, digits and underscores and does not start with a digit.

    Arguments
    ---------
    name: str
        The name to check.

    Returns
    -------
    bool
        Whether the name is a valid identifier.
    """
    return _IDENTIFIER.fullmatch(name) is not None


def validate_identifier(name: str, context: str | None = None, allow_empty: bool = False) -> str:
    """Raise if the name is not a valid identifier.

    Arguments
    ---------
    name: str
        The name to check.
    context: str, optional
        What the name belongs to, prepended to the error message.
    allow_empty: bool, optional
        Whether an empty name is accepted, as for unnamed parameters. Defaults to False.

    Returns
    -------
    str
        The name, unchanged.
    """
    if allow_empty and name == "":
        return name
    if not is_valid_identifier(name):
        raise InvalidIdentifierError(name, context)
    return name
