"""State mutability of callable ABI items."""

from __future__ import annotations

from enum import Enum
from typing import Any

from abikit.errors import AbiDecodeError


class StateMutability(Enum):
    r"""Whether a function reads or writes chain state and whether it accepts ether."""

    PURE = "pure"
    VIEW = "view"
    NON_PAYABLE = "nonpayable"
    PAYABLE = "payable"

    @classmethod
    def from_json(cls, data: dict[str, Any], default: StateMutability | None = None) -> StateMutability:
        """Read the state mutability of a JSON item.

        Items written by old compilers have no ``stateMutability`` field and carry
        ``payable`` and ``constant`` flags instead.

        Arguments
        ---------
        data: dict[str, Any]
            The JSON ABI item.
        default: StateMutability, optional
            What an item without any state mutability information gets. Defaults to nonpayable.

        Returns
        -------
        StateMutability
            The state mutability, ``default`` if the item says nothing.
        """
        value = data.get("stateMutability")
        if value is not None:
            try:
                return cls(value)
            except ValueError as err:
                raise AbiDecodeError(f"unknown stateMutability: {value!r}") from err
        if data.get("payable", False):
            return cls.PAYABLE
        if data.get("constant", False):
            return cls.VIEW
        return cls.NON_PAYABLE if default is None else default
