"""A whole contract ABI, grouped by item kind."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Iterator

from eth_typing import ABIElement

from abikit.errors import AbiDecodeError

from .item import AbiItem, Constructor, Error, Event, Fallback, Function, Item, Receive


@dataclass
class JsonAbi:
    """The items of a contract ABI.

    Functions, events and errors are keyed by name; each name maps to its overloads in
    declaration order.
    """

    constructor: Constructor | None = None
    fallback: Fallback | None = None
    receive: Receive | None = None
    functions: dict[str, list[Function]] = field(default_factory=dict)
    events: dict[str, list[Event]] = field(default_factory=dict)
    errors: dict[str, list[Error]] = field(default_factory=dict)

    @classmethod
    def from_items(cls, items: Iterable[Item | AbiItem]) -> JsonAbi:
        """Group items by kind.

        Arguments
        ---------
        items: Iterable[Item | AbiItem]
            The items, in declaration order.

        Returns
        -------
        JsonAbi
            The grouped ABI. Raises AbiDecodeError if a constructor, fallback or receive
            function is declared twice.
        """
        abi = cls()
        for item in items:
            abi.add(item.into_owned() if isinstance(item, AbiItem) else item)
        return abi

    @classmethod
    def from_json(cls, data: Any) -> JsonAbi:
        """Build an ABI from decoded JSON.

        Arguments
        ---------
        data: Any
            Either a list of JSON items or a compiler artifact with an ``abi`` field.

        Returns
        -------
        JsonAbi
            The grouped ABI.
        """
        if isinstance(data, dict) and "abi" in data:
            data = data["abi"]
        if not isinstance(data, list):
            raise AbiDecodeError(f"ABI must be a list of items, got {type(data).__name__}")
        return cls.from_items(AbiItem.from_dict(item) for item in data)

    def add(self, item: Item) -> None:
        """Add one item.

        Arguments
        ---------
        item: Item
            The item to add.
        """
        if isinstance(item, Function):
            self.functions.setdefault(item.name, []).append(item)
        elif isinstance(item, Event):
            self.events.setdefault(item.name, []).append(item)
        elif isinstance(item, Error):
            self.errors.setdefault(item.name, []).append(item)
        elif isinstance(item, Constructor):
            if self.constructor is not None:
                raise AbiDecodeError("ABI declares more than one constructor")
            self.constructor = item
        elif isinstance(item, Fallback):
            if self.fallback is not None:
                raise AbiDecodeError("ABI declares more than one fallback function")
            self.fallback = item
        elif isinstance(item, Receive):
            if self.receive is not None:
                raise AbiDecodeError("ABI declares more than one receive function")
            self.receive = item
        else:
            raise TypeError(f"expected an ABI item, got {type(item).__name__}")

    def items(self) -> Iterator[Item]:
        """Yield the constructor, fallback and receive functions, then functions, events and errors."""
        for special in (self.constructor, self.fallback, self.receive):
            if special is not None:
                yield special
        for group in (self.functions, self.events, self.errors):
            for overloads in group.values():
                yield from overloads

    def __len__(self) -> int:
        return sum(1 for _ in self.items())

    def to_dicts(self) -> list[ABIElement]:
        """Serialize every item to its JSON ABI form."""
        return [item.to_dict() for item in self.items()]

    def function_selectors(self) -> dict[str, str]:
        """Map every function signature to its hex selector, e.g. ``{"transfer(address,uint256)": "0xa9059cbb"}``."""
        selectors: dict[str, str] = {}
        for overloads in self.functions.values():
            for function in overloads:
                function_signature = function.signature()
                if function_signature in selectors:
                    logging.warning("Duplicate function signature %s in ABI", function_signature)
                selectors[function_signature] = function.selector().to_0x_hex()
        return selectors

    def error_by_selector(self, error_selector: bytes | str) -> Error | None:
        """Find the error whose selector matches.

        Arguments
        ---------
        error_selector: bytes | str
            The four byte selector, as bytes or as a 0x-prefixed hex string.

        Returns
        -------
        Error | None
            The matching error, None if no error of the ABI has that selector.
        """
        if isinstance(error_selector, str):
            error_selector = bytes.fromhex(error_selector.removeprefix("0x"))
        for overloads in self.errors.values():
            for error in overloads:
                if error.selector() == error_selector:
                    return error
        return None


def load_abi(abi_path: str | Path) -> JsonAbi:
    """Load an ABI from a JSON file.

    Arguments
    ---------
    abi_path: str | Path
        The path to a JSON list of items or to a compiler artifact with an ``abi`` field.

    Returns
    -------
    JsonAbi
        The grouped ABI.
    """
    with open(abi_path, "r", encoding="utf-8") as abi_file:
        data = json.load(abi_file)
    abi = JsonAbi.from_json(data)
    logging.debug("Loaded %d ABI items from %s", len(abi), abi_path)
    return abi
