"""EIP-712 ``encodeType`` parsing and resolution."""

from .parser import ComponentType, EncodeType, PropDef
from .resolver import PropertyDef, Resolver, TypeDef, is_elementary_type
