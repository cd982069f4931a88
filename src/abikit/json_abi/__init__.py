"""JSON ABI items, their parameters and the signatures and selectors derived from them."""

from .abi import JsonAbi, load_abi
from .identifier import is_valid_identifier, validate_identifier
from .internal_type import InternalType, InternalTypeKind
from .item import AbiItem, Constructor, Error, Event, Fallback, Function, Item, Receive
from .param import EventParam, Param
from .signature_parser import parse_error_signature, parse_function_signature, parse_param
from .state_mutability import StateMutability
from .utils import event_signature, keccak256, selector, signature
