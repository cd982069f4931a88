"""JSON ABI items: constructors, fallback and receive functions, functions, events and errors.

Every item kind is a dataclass that serializes to its tagged JSON object. ``AbiItem`` wraps an
item of any kind. It either borrows an item owned by someone else or owns its own, and its
mutating accessors copy a borrowed item before handing out anything that can be modified.
"""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from typing import Any, ClassVar, TypeVar, Union, cast

from eth_typing import ABIConstructor, ABIElement, ABIError, ABIEvent, ABIFallback, ABIFunction, ABIReceive
from hexbytes import HexBytes

from abikit.errors import AbiDecodeError, KindMismatchError

from .identifier import validate_identifier
from .param import EventParam, Param
from .signature_parser import parse_error_signature, parse_function_signature
from .state_mutability import StateMutability
from .utils import event_signature, keccak256, selector, signature

ItemT = TypeVar("ItemT", bound="_AbiItemBase")
ParamT = TypeVar("ParamT", bound=Param)


class _AbiItemBase:
    """Serialization shared by every item kind."""

    kind: ClassVar[str]

    def to_dict(self) -> ABIElement:
        """Serialize to the tagged JSON ABI form."""
        raise NotImplementedError

    def to_json(self, **kwargs: Any) -> str:
        """Serialize to a JSON string. Keyword arguments are forwarded to ``json.dumps``."""
        return json.dumps(self.to_dict(), **kwargs)

    @classmethod
    def from_dict(cls: type[ItemT], data: Any) -> ItemT:
        """Deserialize an item of this kind from its tagged JSON ABI form.

        Arguments
        ---------
        data: Any
            The JSON object.

        Returns
        -------
        Self
            The item. Raises KindMismatchError if the object is tagged as another kind.
        """
        item = AbiItem.from_dict(data).item
        if not isinstance(item, cls):
            raise KindMismatchError(expected=cls.__name__, found=type(item).__name__)
        return item

    @classmethod
    def from_json(cls: type[ItemT], text: str | bytes) -> ItemT:
        """Deserialize an item of this kind from a JSON string."""
        return cls.from_dict(json.loads(text))

    @classmethod
    def _from_fields(cls: type[ItemT], data: dict[str, Any]) -> ItemT:
        raise NotImplementedError


@dataclass
class Constructor(_AbiItemBase):
    """A contract constructor."""

    kind: ClassVar[str] = "constructor"

    inputs: list[Param] = field(default_factory=list)
    state_mutability: StateMutability = StateMutability.NON_PAYABLE

    def to_dict(self) -> ABIConstructor:
        return cast(
            ABIConstructor,
            {
                "type": self.kind,
                "inputs": [param.to_dict() for param in self.inputs],
                "stateMutability": self.state_mutability.value,
            },
        )

    @classmethod
    def _from_fields(cls, data: dict[str, Any]) -> Constructor:
        return cls(inputs=_params(data, "inputs", Param), state_mutability=StateMutability.from_json(data))


@dataclass
class Fallback(_AbiItemBase):
    """The function called when no other function matches the calldata."""

    kind: ClassVar[str] = "fallback"

    state_mutability: StateMutability = StateMutability.NON_PAYABLE

    def to_dict(self) -> ABIFallback:
        return cast(ABIFallback, {"type": self.kind, "stateMutability": self.state_mutability.value})

    @classmethod
    def _from_fields(cls, data: dict[str, Any]) -> Fallback:
        return cls(state_mutability=StateMutability.from_json(data))


@dataclass
class Receive(_AbiItemBase):
    """The function called for plain ether transfers. Always payable."""

    kind: ClassVar[str] = "receive"

    state_mutability: StateMutability = StateMutability.PAYABLE

    def to_dict(self) -> ABIReceive:
        return cast(ABIReceive, {"type": self.kind, "stateMutability": self.state_mutability.value})

    @classmethod
    def _from_fields(cls, data: dict[str, Any]) -> Receive:
        return cls(state_mutability=StateMutability.from_json(data, default=StateMutability.PAYABLE))


@dataclass
class Function(_AbiItemBase):
    """A named contract function."""

    kind: ClassVar[str] = "function"

    name: str
    inputs: list[Param] = field(default_factory=list)
    outputs: list[Param] = field(default_factory=list)
    state_mutability: StateMutability = StateMutability.NON_PAYABLE

    @classmethod
    def parse(cls, text: str) -> Function:
        """Parse a signature such as ``transfer(address to,uint256)(bool)``.

        Parameter names are optional. The output list is optional too.

        Arguments
        ---------
        text: str
            The signature.

        Returns
        -------
        Function
            A non-payable function.
        """
        name, inputs, outputs = parse_function_signature(text)
        return cls(name=name, inputs=inputs, outputs=outputs)

    def signature(self) -> str:
        """The signature ``name(inputs)`` that is hashed into the selector."""
        return signature(self.name, self.inputs)

    def signature_full(self) -> str:
        """The signature including the outputs, ``name(inputs)(outputs)``."""
        return signature(self.name, self.inputs, self.outputs)

    def selector(self) -> HexBytes:
        """The first four bytes of ``keccak256(self.signature())``."""
        return selector(self.signature())

    def to_dict(self) -> ABIFunction:
        return cast(
            ABIFunction,
            {
                "type": self.kind,
                "name": self.name,
                "inputs": [param.to_dict() for param in self.inputs],
                "outputs": [param.to_dict() for param in self.outputs],
                "stateMutability": self.state_mutability.value,
            },
        )

    @classmethod
    def _from_fields(cls, data: dict[str, Any]) -> Function:
        return cls(
            name=_name(data, cls.kind),
            inputs=_params(data, "inputs", Param),
            outputs=_params(data, "outputs", Param),
            state_mutability=StateMutability.from_json(data),
        )


@dataclass
class Event(_AbiItemBase):
    """A log emitted by a contract.

    Anonymous events do not store their selector as the first topic, which leaves room
    for one more indexed input.
    """

    kind: ClassVar[str] = "event"

    name: str
    inputs: list[EventParam] = field(default_factory=list)
    anonymous: bool = False

    def signature(self) -> str:
        """The signature ``name(inputs)``, indexed or not."""
        return event_signature(self.name, self.inputs)

    def selector(self) -> HexBytes:
        """The full 32 byte ``keccak256(self.signature())``, topic 0 of non-anonymous logs."""
        return keccak256(self.signature())

    def indexed_inputs(self) -> list[EventParam]:
        """The inputs stored in topics."""
        return [param for param in self.inputs if param.indexed]

    def to_dict(self) -> ABIEvent:
        return cast(
            ABIEvent,
            {
                "type": self.kind,
                "name": self.name,
                "inputs": [param.to_dict() for param in self.inputs],
                "anonymous": self.anonymous,
            },
        )

    @classmethod
    def _from_fields(cls, data: dict[str, Any]) -> Event:
        anonymous = data.get("anonymous", False)
        if not isinstance(anonymous, bool):
            raise AbiDecodeError(f"event `anonymous` must be a boolean, got {anonymous!r}")
        return cls(name=_name(data, cls.kind), inputs=_params(data, "inputs", EventParam), anonymous=anonymous)


@dataclass
class Error(_AbiItemBase):
    """A custom error a contract reverts with."""

    kind: ClassVar[str] = "error"

    name: str
    inputs: list[Param] = field(default_factory=list)

    @classmethod
    def parse(cls, text: str) -> Error:
        """Parse a signature such as ``Myerror(uint256 a,(address,uint256) arg2)``.

        Every parameter must be named, and the type and name are separated by a single space.

        Arguments
        ---------
        text: str
            The signature.

        Returns
        -------
        Error
            The error.
        """
        name, inputs = parse_error_signature(text)
        return cls(name=name, inputs=inputs)

    def signature(self) -> str:
        """The signature ``name(inputs)`` that is hashed into the selector."""
        return signature(self.name, self.inputs)

    def selector(self) -> HexBytes:
        """The first four bytes of ``keccak256(self.signature())``."""
        return selector(self.signature())

    def to_dict(self) -> ABIError:
        return cast(
            ABIError,
            {"type": self.kind, "name": self.name, "inputs": [param.to_dict() for param in self.inputs]},
        )

    @classmethod
    def _from_fields(cls, data: dict[str, Any]) -> Error:
        return cls(name=_name(data, cls.kind), inputs=_params(data, "inputs", Param))


Item = Union[Constructor, Fallback, Receive, Function, Event, Error]

ITEM_TYPES: dict[str, type[Item]] = {
    item_type.kind: item_type for item_type in (Constructor, Fallback, Receive, Function, Event, Error)
}


class AbiItem:
    """An ABI item of any kind, either borrowed from its owner or owned.

    Reading accessors return None for kinds that lack the field. Mutating accessors first
    replace a borrowed item by a private deep copy, so the owner of the borrowed item never
    observes the change.

    Arguments
    ---------
    item: Item
        The item to wrap.
    owned: bool, optional
        Whether the wrapper owns the item. Defaults to True.
    """

    def __init__(self, item: Item, owned: bool = True):
        if not isinstance(item, tuple(ITEM_TYPES.values())):
            raise TypeError(f"expected an ABI item, got {type(item).__name__}")
        self._item: Item = item
        self._owned = owned

    @classmethod
    def borrowed(cls, item: Item) -> AbiItem:
        """Wrap an item without taking ownership of it."""
        return cls(item, owned=False)

    @property
    def item(self) -> Item:
        """The wrapped item. Do not modify it through this property; use the mutating accessors."""
        return self._item

    @property
    def is_owned(self) -> bool:
        """Whether the wrapped item is a private copy."""
        return self._owned

    @property
    def kind(self) -> str:
        """The JSON tag of the item, e.g. ``function``."""
        return self._item.kind

    @property
    def debug_name(self) -> str:
        """The class name of the item, e.g. ``Function``."""
        return type(self._item).__name__

    def to_mut(self) -> Item:
        """Return the owned item, copying a borrowed one first."""
        if not self._owned:
            self._item = copy.deepcopy(self._item)
            self._owned = True
        return self._item

    def into_owned(self) -> Item:
        """Return an item that nobody else holds a reference to through this wrapper."""
        if self._owned:
            return self._item
        return copy.deepcopy(self._item)

    def name(self) -> str | None:
        """The name of a function, event or error."""
        if isinstance(self._item, (Function, Event, Error)):
            return self._item.name
        return None

    def set_name(self, name: str) -> bool:
        """Rename a function, event or error.

        Returns
        -------
        bool
            False, and nothing is copied, for kinds without a name.
        """
        if not isinstance(self._item, (Function, Event, Error)):
            return False
        item = cast(Union[Function, Event, Error], self.to_mut())
        item.name = name
        return True

    def state_mutability(self) -> StateMutability | None:
        """The state mutability of a constructor, fallback, receive or function."""
        if isinstance(self._item, (Constructor, Fallback, Receive, Function)):
            return self._item.state_mutability
        return None

    def set_state_mutability(self, state_mutability: StateMutability) -> bool:
        """Change the state mutability of a constructor, fallback, receive or function.

        Returns
        -------
        bool
            False, and nothing is copied, for events and errors.
        """
        if not isinstance(self._item, (Constructor, Fallback, Receive, Function)):
            return False
        item = cast(Union[Constructor, Fallback, Receive, Function], self.to_mut())
        item.state_mutability = state_mutability
        return True

    def inputs(self) -> list[Param] | None:
        """The inputs of a constructor, function or error. Use ``event_inputs`` for events."""
        if isinstance(self._item, (Constructor, Function, Error)):
            return self._item.inputs
        return None

    def inputs_mut(self) -> list[Param] | None:
        """The modifiable inputs of a constructor, function or error."""
        if not isinstance(self._item, (Constructor, Function, Error)):
            return None
        return cast(Union[Constructor, Function, Error], self.to_mut()).inputs

    def event_inputs(self) -> list[EventParam] | None:
        """The inputs of an event."""
        if isinstance(self._item, Event):
            return self._item.inputs
        return None

    def event_inputs_mut(self) -> list[EventParam] | None:
        """The modifiable inputs of an event."""
        if not isinstance(self._item, Event):
            return None
        return cast(Event, self.to_mut()).inputs

    def outputs(self) -> list[Param] | None:
        """The outputs of a function."""
        if isinstance(self._item, Function):
            return self._item.outputs
        return None

    def outputs_mut(self) -> list[Param] | None:
        """The modifiable outputs of a function."""
        if not isinstance(self._item, Function):
            return None
        return cast(Function, self.to_mut()).outputs

    def signature(self) -> str | None:
        """The signature of a function, event or error."""
        if isinstance(self._item, (Function, Event, Error)):
            return self._item.signature()
        return None

    def selector(self) -> HexBytes | None:
        """The selector of a function or error, or the topic 0 hash of an event."""
        if isinstance(self._item, (Function, Event, Error)):
            return self._item.selector()
        return None

    def to_dict(self) -> ABIElement:
        """Serialize to the tagged JSON ABI form."""
        return self._item.to_dict()

    def to_json(self, **kwargs: Any) -> str:
        """Serialize to a JSON string. Keyword arguments are forwarded to ``json.dumps``."""
        return self._item.to_json(**kwargs)

    @classmethod
    def from_dict(cls, data: Any) -> AbiItem:
        """Deserialize an item of any kind.

        Arguments
        ---------
        data: Any
            The JSON object. Its ``type`` tag picks the kind and defaults to ``function``.

        Returns
        -------
        AbiItem
            An owned item.
        """
        if not isinstance(data, dict):
            raise AbiDecodeError(f"ABI item must be a JSON object, got {type(data).__name__}")
        tag = data.get("type", Function.kind)
        item_type = ITEM_TYPES.get(tag) if isinstance(tag, str) else None
        if item_type is None:
            raise AbiDecodeError(f"unknown ABI item type: {tag!r}")
        name = data.get("name")
        if name is not None:
            if not isinstance(name, str):
                raise AbiDecodeError(f"{tag} name must be a string, got {name!r}")
            validate_identifier(name, context=f"{tag} name")
        return cls(item_type._from_fields(data))  # pylint: disable=protected-access

    @classmethod
    def from_json(cls, text: str | bytes) -> AbiItem:
        """Deserialize an item of any kind from a JSON string."""
        return cls.from_dict(json.loads(text))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AbiItem):
            return NotImplemented
        return self._item == other._item

    def __repr__(self) -> str:
        ownership = "owned" if self._owned else "borrowed"
        return f"AbiItem({self._item!r}, {ownership})"


def _name(data: dict[str, Any], kind: str) -> str:
    name = data.get("name")
    if not isinstance(name, str):
        raise AbiDecodeError(f"{kind} is missing its name")
    return name


def _params(data: dict[str, Any], key: str, param_type: type[ParamT]) -> list[ParamT]:
    params = data.get(key)
    if params is None:
        return []
    if not isinstance(params, list):
        raise AbiDecodeError(f"`{key}` must be a list, got {params!r}")
    return [param_type.from_dict(param) for param in params]
