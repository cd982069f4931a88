"""Extend the default JSON encoder to include abikit types."""

import json
from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any

from hexbytes import HexBytes

from abikit.json_abi import InternalType
from abikit.type_parser import TypeSpecifier


class AbiJSONEncoder(json.JSONEncoder):
    r"""Custom encoder for JSON string dumps."""

    # pylint: disable=too-many-return-statements
    def default(self, o: Any) -> Any:
        """Override default behavior.

        Arguments
        ---------
        o: Any
            The object to be converted to JSON.

        Returns
        -------
        Any
            The corresponding object ready to be serialized to JSON.
        """
        if isinstance(o, HexBytes):
            return o.to_0x_hex()
        if isinstance(o, bytes):
            return "0x" + o.hex()
        if isinstance(o, set):
            return list(o)
        if isinstance(o, Enum):
            return o.value
        if isinstance(o, (TypeSpecifier, InternalType)):
            return str(o)
        if hasattr(o, "to_dict"):
            return o.to_dict()
        if is_dataclass(o) and not isinstance(o, type):
            # shallow, so nested values come back through this method
            return {field.name: getattr(o, field.name) for field in fields(o)}
        # Let the base class default method raise the TypeError
        return json.JSONEncoder.default(self, o)
