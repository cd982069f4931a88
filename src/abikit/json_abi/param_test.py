"""Tests for param.py"""

from __future__ import annotations

import pytest

from abikit.errors import AbiDecodeError, AbiParseError, InvalidIdentifierError, TypeParserError
from abikit.type_parser import MAX_NESTING_DEPTH

from .internal_type import InternalType
from .item import Function
from .param import EventParam, Param


class TestParamParse:
    """Tests for Param.parse and Param.canonical_type."""

    @pytest.mark.parametrize(
        "type_string",
        [
            "uint256",
            "address[]",
            "bytes32[2][]",
            "(address,uint256)",
            "(address,(uint256,bool)[])[2]",
            "((bool[3],string)[][4],bytes)",
            "()",
        ],
    )
    def test_canonical_round_trip(self, type_string):
        """Canonically spelled types render back unchanged."""
        assert Param.parse(type_string).canonical_type() == type_string

    def test_tuple_members(self):
        """Tuple members become unnamed components and the tuple keeps its dimensions."""
        param = Param.parse("(address,(uint256,bool)[])[2]", name="orders")
        assert param.name == "orders"
        assert param.ty == "tuple[2]"
        assert param.is_tuple
        assert [component.ty for component in param.components] == ["address", "tuple[]"]
        assert all(component.name == "" for component in param.components)
        assert [component.ty for component in param.components[1].components] == ["uint256", "bool"]

    def test_tuple_keyword_is_canonicalized(self):
        """The tuple keyword and whitespace do not survive canonicalization."""
        assert Param.parse("tuple( address , bool )[]").canonical_type() == "(address,bool)[]"

    def test_malformed(self):
        """Malformed types raise TypeParserError."""
        with pytest.raises(TypeParserError):
            Param.parse("(address,uint256")


class TestParamJson:
    """Tests for the JSON form of parameters."""

    def test_to_dict_omits_empty_fields(self):
        """components and internalType only appear when set."""
        assert Param("amount", "uint256").to_dict() == {"name": "amount", "type": "uint256"}

    def test_to_dict_key_order(self):
        """Keys come out as name, type, components, internalType."""
        param = Param.from_dict(
            {
                "name": "order",
                "type": "tuple",
                "components": [{"name": "maker", "type": "address"}],
                "internalType": "struct Exchange.Order",
            }
        )
        assert list(param.to_dict()) == ["name", "type", "components", "internalType"]
        assert param.internal_type == InternalType.parse("struct Exchange.Order")

    def test_event_param_key_order(self):
        """indexed comes right after type."""
        param = EventParam.from_dict({"name": "from", "type": "address", "indexed": True, "internalType": "address"})
        assert param.indexed
        assert list(param.to_dict()) == ["name", "type", "indexed", "internalType"]

    def test_event_param_components_are_plain(self):
        """Tuple members of an event parameter are plain parameters."""
        param = EventParam.from_dict(
            {"name": "data", "type": "tuple", "indexed": False, "components": [{"name": "x", "type": "uint8"}]}
        )
        assert type(param.components[0]) is Param  # pylint: disable=unidiomatic-typecheck
        assert "indexed" not in param.to_dict()["components"][0]

    def test_from_param(self):
        """A plain parameter can be made into an event parameter."""
        param = EventParam.from_param(Param.parse("(address,bool)", "pair"), indexed=True)
        assert param.indexed
        assert param.canonical_type() == "(address,bool)"

    def test_missing_name_is_unnamed(self):
        """A missing or null name is the empty name."""
        assert Param.from_dict({"type": "bool"}).name == ""
        assert Param.from_dict({"type": "bool", "name": None}).name == ""

    @pytest.mark.parametrize(
        "data",
        [
            {"name": "x"},
            {"name": "x", "type": 3},
            {"name": 3, "type": "bool"},
            {"name": "x", "type": "tuple", "components": "address"},
            {"name": "x", "type": "bool", "internalType": ["bool"]},
            "bool",
        ],
    )
    def test_malformed(self, data):
        """Parameters with the wrong shape raise AbiDecodeError."""
        with pytest.raises(AbiDecodeError):
            Param.from_dict(data)

    @pytest.mark.parametrize(
        "data",
        [
            {"name": "x", "type": "uint256)"},
            {"name": "x", "type": "tuple[2"},
            {"name": "x", "type": "tuple[0]", "components": [{"type": "bool"}]},
            {"name": "x", "type": "uint256[0]"},
            {"name": "x", "type": ""},
            {"name": "x", "type": "address", "components": [{"type": "bool"}]},
            {"name": "x", "type": "(address,bool)"},
            {"name": "x", "type": " uint256"},
            {"name": "x", "type": "tuple", "components": [{"type": "bool]"}]},
        ],
    )
    def test_malformed_type(self, data):
        """Types must parse, and only tuples have components."""
        with pytest.raises(AbiParseError):
            Param.from_dict(data)

    def test_malformed_type_in_item(self):
        """A bad parameter type fails the whole item instead of producing a bogus signature."""
        with pytest.raises(AbiParseError):
            Function.from_dict({"type": "function", "name": "f", "inputs": [{"name": "x", "type": "uint256)"}]})

    def test_empty_tuple(self):
        """A tuple without components is the empty tuple."""
        assert Param.from_dict({"name": "x", "type": "tuple[3]"}).canonical_type() == "()[3]"

    def test_components_nested_too_deep(self):
        """Component nesting is bounded like type-string nesting."""
        data: dict = {"name": "", "type": "bool"}
        for _ in range(MAX_NESTING_DEPTH + 1):
            data = {"name": "", "type": "tuple", "components": [data]}
        with pytest.raises(AbiDecodeError):
            Param.from_dict(data)

    def test_indexed_must_be_bool(self):
        """indexed must be a JSON boolean."""
        with pytest.raises(AbiDecodeError):
            EventParam.from_dict({"name": "x", "type": "bool", "indexed": "yes"})

    def test_bad_name(self):
        """Parameter names must be identifiers."""
        with pytest.raises(InvalidIdentifierError):
            Param.from_dict({"name": "my param", "type": "bool"})
