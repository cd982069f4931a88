"""Tests for abi.py"""

from __future__ import annotations

import json
import logging

import pytest

from abikit.errors import AbiDecodeError

from .abi import JsonAbi, load_abi
from .item import AbiItem, Error, Function

TOKEN_ABI = [
    {"type": "constructor", "inputs": [{"name": "supply", "type": "uint256"}], "stateMutability": "nonpayable"},
    {"type": "receive", "stateMutability": "payable"},
    {
        "type": "function",
        "name": "transfer",
        "inputs": [{"name": "to", "type": "address"}, {"name": "amount", "type": "uint256"}],
        "outputs": [{"name": "", "type": "bool"}],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "balanceOf",
        "inputs": [{"name": "owner", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "event",
        "name": "Approval",
        "inputs": [
            {"name": "owner", "type": "address", "indexed": True},
            {"name": "spender", "type": "address", "indexed": True},
            {"name": "value", "type": "uint256", "indexed": False},
        ],
        "anonymous": False,
    },
    {"type": "error", "name": "InvalidToken", "inputs": []},
    {
        "type": "error",
        "name": "CustomError",
        "inputs": [{"name": "amount", "type": "uint256"}, {"name": "flag", "type": "bool"}],
    },
]


class TestJsonAbi:
    """Tests for JsonAbi."""

    def test_grouping(self):
        """Items are grouped by kind and name."""
        abi = JsonAbi.from_json(TOKEN_ABI)
        assert abi.constructor is not None
        assert abi.receive is not None
        assert abi.fallback is None
        assert list(abi.functions) == ["transfer", "balanceOf"]
        assert list(abi.events) == ["Approval"]
        assert list(abi.errors) == ["InvalidToken", "CustomError"]
        assert len(abi) == len(TOKEN_ABI)

    def test_round_trip(self):
        """to_dicts gives back the items in grouping order."""
        abi = JsonAbi.from_json(TOKEN_ABI)
        assert abi.to_dicts() == TOKEN_ABI

    def test_artifact(self):
        """Compiler artifacts carry the ABI in an `abi` field."""
        abi = JsonAbi.from_json({"abi": TOKEN_ABI, "bytecode": "0x"})
        assert abi.function_selectors() == {
            "transfer(address,uint256)": "0xa9059cbb",
            "balanceOf(address)": "0x70a08231",
        }
        approval = abi.events["Approval"][0]
        assert approval.selector().to_0x_hex() == (
            "0x8c5be1e5ebec7d5bd14f71427d1e84f3dd0314c0f7b2291e5b200ac8c7c3b925"
        )

    def test_overloads(self):
        """Overloads share a name and keep their declaration order."""
        abi = JsonAbi.from_items(
            [
                Function.parse("safeTransferFrom(address,address,uint256)"),
                Function.parse("safeTransferFrom(address,address,uint256,bytes)"),
            ]
        )
        assert [function.signature() for function in abi.functions["safeTransferFrom"]] == [
            "safeTransferFrom(address,address,uint256)",
            "safeTransferFrom(address,address,uint256,bytes)",
        ]

    def test_from_borrowed_items(self):
        """Borrowed items are copied into the ABI."""
        error = Error.parse("Oops(uint256 code)")
        abi = JsonAbi.from_items([AbiItem.borrowed(error)])
        assert abi.errors["Oops"][0] == error
        assert abi.errors["Oops"][0] is not error

    def test_duplicate_signature_warns(self, caplog):
        """Two functions with one signature are reported."""
        abi = JsonAbi.from_items([Function.parse("f(uint256 a)"), Function.parse("f(uint256 b)")])
        with caplog.at_level(logging.WARNING):
            selectors = abi.function_selectors()
        assert list(selectors) == ["f(uint256)"]
        assert "Duplicate function signature f(uint256)" in caplog.text

    @pytest.mark.parametrize("kind", ["constructor", "fallback", "receive"])
    def test_duplicate_special_function(self, kind):
        """Constructors, fallback and receive functions are unique."""
        item = {"type": kind, "inputs": [], "stateMutability": "payable"}
        with pytest.raises(AbiDecodeError):
            JsonAbi.from_json([item, item])

    def test_not_a_list(self):
        """The ABI must be a list of items."""
        with pytest.raises(AbiDecodeError):
            JsonAbi.from_json({"bytecode": "0x"})

    def test_error_by_selector(self):
        """Errors are found by their selector, given as bytes or hex."""
        abi = JsonAbi.from_json(TOKEN_ABI)
        invalid_token = abi.error_by_selector("0xc1ab6dc1")
        assert invalid_token is not None
        assert invalid_token.name == "InvalidToken"
        custom_error = abi.error_by_selector(bytes.fromhex("659c1f59"))
        assert custom_error is not None
        assert custom_error.name == "CustomError"
        assert abi.error_by_selector("0x08c379a0") is None


def test_load_abi(tmp_path):
    """ABIs are loaded from JSON files."""
    abi_path = tmp_path / "Token.json"
    abi_path.write_text(json.dumps(TOKEN_ABI), encoding="utf-8")
    abi = load_abi(abi_path)
    assert len(abi) == len(TOKEN_ABI)
    assert load_abi(str(abi_path)) == abi
