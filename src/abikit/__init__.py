"""Parse and canonicalize contract ABIs and EIP-712 type definitions."""

from .eip712 import ComponentType, EncodeType, PropDef, Resolver
from .errors import (
    AbiDecodeError,
    AbiParseError,
    InvalidIdentifierError,
    InvalidPropertyDefError,
    KindMismatchError,
    MissingTypeError,
    ParamShapeError,
    TypeParserError,
)
from .json_abi import (
    AbiItem,
    Constructor,
    Error,
    Event,
    EventParam,
    Fallback,
    Function,
    InternalType,
    JsonAbi,
    Param,
    Receive,
    StateMutability,
    load_abi,
)
from .type_parser import TypeSpecifier
