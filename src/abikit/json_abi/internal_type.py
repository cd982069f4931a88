"""The ``internalType`` annotation solc attaches to ABI parameters."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

ADDRESS_PAYABLE = "address payable"


class InternalTypeKind(Enum):
    r"""The kind of Solidity type an internalType names."""

    ADDRESS_PAYABLE = "address payable"
    CONTRACT = "contract"
    ENUM = "enum"
    STRUCT = "struct"
    OTHER = "other"


_PREFIXED_KINDS = (InternalTypeKind.CONTRACT, InternalTypeKind.ENUM, InternalTypeKind.STRUCT)


@dataclass(frozen=True)
class InternalType:
    """A parsed internalType, e.g. ``struct Pool.Info[]`` or ``contract IERC20``.

    Attributes
    ----------
    kind: InternalTypeKind
        What the annotation names.
    ty: str
        The type name, including any array suffix.
    contract: str | None
        The contract the type is declared in, for enums, structs and other named types.
    """

    kind: InternalTypeKind
    ty: str
    contract: str | None = None

    @classmethod
    def parse(cls, internal_type: str) -> InternalType:
        """Parse an internalType string.

        Arguments
        ---------
        internal_type: str
            The annotation as it appears in the JSON ABI.

        Returns
        -------
        InternalType
            The parsed annotation. Anything that is not an address payable, contract,
            enum or struct is kept verbatim as an ``OTHER`` type.
        """
        if internal_type == ADDRESS_PAYABLE:
            return cls(InternalTypeKind.ADDRESS_PAYABLE, "address")
        for kind in _PREFIXED_KINDS:
            prefix = kind.value + " "
            if internal_type.startswith(prefix):
                rest = internal_type[len(prefix) :]
                if kind is InternalTypeKind.CONTRACT:
                    return cls(kind, rest)
                contract, ty = _split_contract(rest)
                return cls(kind, ty, contract)
        contract, ty = _split_contract(internal_type)
        return cls(InternalTypeKind.OTHER, ty, contract)

    @property
    def is_struct(self) -> bool:
        """True if the annotation names a struct."""
        return self.kind is InternalTypeKind.STRUCT

    @property
    def struct_name(self) -> str | None:
        """The struct name without its contract or array suffix, None for other kinds."""
        if not self.is_struct:
            return None
        return self.ty.split("[", 1)[0]

    def __str__(self) -> str:
        if self.kind is InternalTypeKind.ADDRESS_PAYABLE:
            return ADDRESS_PAYABLE
        qualified = self.ty if self.contract is None else f"{self.contract}.{self.ty}"
        if self.kind is InternalTypeKind.OTHER:
            return qualified
        return f"{self.kind.value} {qualified}"


def _split_contract(qualified: str) -> tuple[str | None, str]:
    # `Pool.Info[]` is the type `Info[]` declared in contract `Pool`; tuples keep their dots
    if "." in qualified and not qualified.startswith("("):
        contract, ty = qualified.split(".", 1)
        return contract, ty
    return None, qualified
