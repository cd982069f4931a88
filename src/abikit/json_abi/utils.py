"""Canonical signatures and the selectors hashed from them."""

from __future__ import annotations

from typing import Sequence

from eth_utils.crypto import keccak
from hexbytes import HexBytes

from .param import EventParam, Param

SELECTOR_SIZE = 4


def signature(name: str, inputs: Sequence[Param], outputs: Sequence[Param] | None = None) -> str:
    """Build the canonical signature ``name(inputs)`` or ``name(inputs)(outputs)``.

    Arguments
    ---------
    name: str
        The name of the function or error.
    inputs: Sequence[Param]
        The input parameters.
    outputs: Sequence[Param] | None, optional
        The output parameters, only given for a full function signature.

    Returns
    -------
    str
        The signature, e.g. ``swap((address,uint256)[],bool)``. Parameter names and
        internal types never appear in it.
    """
    out = f"{name}({_joined_types(inputs)})"
    if outputs is not None:
        out += f"({_joined_types(outputs)})"
    return out


def event_signature(name: str, inputs: Sequence[EventParam]) -> str:
    """Build the canonical signature of an event.

    Indexed and non-indexed inputs all appear in declaration order.

    Arguments
    ---------
    name: str
        The name of the event.
    inputs: Sequence[EventParam]
        The event inputs.

    Returns
    -------
    str
        The signature, e.g. ``Transfer(address,address,uint256)``.
    """
    return signature(name, inputs)


def keccak256(text: str) -> HexBytes:
    """Hash the UTF-8 encoding of a text with keccak256.

    Arguments
    ---------
    text: str
        The text to hash.

    Returns
    -------
    HexBytes
        The 32 byte digest.
    """
    return HexBytes(keccak(text=text))


def selector(preimage: str) -> HexBytes:
    """The first four bytes of the keccak256 hash of a signature.

    Arguments
    ---------
    preimage: str
        The canonical signature.

    Returns
    -------
    HexBytes
        The 4 byte selector.
    """
    return HexBytes(keccak256(preimage)[:SELECTOR_SIZE])


def _joined_types(params: Sequence[Param]) -> str:
    return ",".join(param.canonical_type() for param in params)
