"""
The ChildIndex and DerivationPath classes for use in hierarchical deterministic derivation
"""
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from bitwallet.core import XKEYS, InvalidChildNumber, InvalidDerivationPath
from bitwallet.data import NetworkProfile, MAINNET

__all__ = ["ChildIndex", "DerivationPath", "PathKind"]

HARDENED_OFFSET = XKEYS.HARDENED_OFFSET
HARDENED_SUFFIXES = ("'", "h", "H")


@dataclass(frozen=True)
class ChildIndex:
    """
    A normal index i is encoded as i, a hardened index as i + 2^31. In both cases 0 <= i < 2^31.
    """
    index: int
    hardened: bool = False

    def __post_init__(self):
        if not 0 <= self.index < HARDENED_OFFSET:
            raise InvalidChildNumber(f"Child index {self.index} out of range [0, {HARDENED_OFFSET})")

    @classmethod
    def normal(cls, index: int):
        return cls(index, False)

    @classmethod
    def harden(cls, index: int):
        return cls(index, True)

    @classmethod
    def from_u32(cls, number: int):
        if not 0 <= number <= XKEYS.MAX_INDEX:
            raise InvalidChildNumber(f"Child number {number} out of u32 range")
        if number >= HARDENED_OFFSET:
            return cls(number - HARDENED_OFFSET, True)
        return cls(number, False)

    @classmethod
    def from_string(cls, text: str):
        hardened = text.endswith(HARDENED_SUFFIXES)
        digits = text[:-1] if hardened else text
        if not digits.isdigit():
            raise InvalidChildNumber(f"Invalid child index: {text!r}")
        return cls(int(digits), hardened)

    def to_u32(self) -> int:
        return self.index + HARDENED_OFFSET if self.hardened else self.index

    def to_bytes(self) -> bytes:
        """Big-endian u32, as used in HMAC messages and extended key serialization"""
        return self.to_u32().to_bytes(4, "big")

    def __str__(self):
        return f"{self.index}'" if self.hardened else str(self.index)


class PathKind(Enum):
    BIP32 = "bip32"
    BIP44 = "bip44"
    BIP49 = "bip49"


class DerivationPath:
    """
    An ordered sequence of child indices, written m/a/b'/c.

    BIP44 and BIP49 paths have exactly the form m/purpose'/coin_type'/account'/change/index.
    """
    __slots__ = ("indices", "kind")

    def __init__(self, indices: Iterable[ChildIndex] = (), kind: PathKind = PathKind.BIP32):
        self.indices = tuple(indices)
        self.kind = kind

        if len(self.indices) > XKEYS.MAX_PATH_LENGTH:
            raise InvalidDerivationPath(f"Derivation path longer than {XKEYS.MAX_PATH_LENGTH} indices")
        if kind is not PathKind.BIP32 and not self._is_account_path(self.indices, self._purpose(kind)):
            raise InvalidDerivationPath(f"{self} is not a valid {kind.name} path")

    def __eq__(self, other):
        if not isinstance(other, DerivationPath):
            return False
        return self.indices == other.indices and self.kind == other.kind

    def __hash__(self):
        return hash((self.indices, self.kind))

    def __iter__(self):
        return iter(self.indices)

    def __len__(self):
        return len(self.indices)

    def __str__(self):
        return "/".join(["m"] + [str(i) for i in self.indices])

    def __repr__(self):
        return f"DerivationPath({self}, kind={self.kind.name})"

    @staticmethod
    def _purpose(kind: PathKind) -> int:
        return XKEYS.BIP44_PURPOSE if kind is PathKind.BIP44 else XKEYS.BIP49_PURPOSE

    @staticmethod
    def _is_account_path(indices: tuple, purpose: int) -> bool:
        """purpose' / coin_type' / account' / change / index"""
        if len(indices) != 5:
            return False
        purpose_i, coin_i, account_i, change_i, address_i = indices
        return (purpose_i == ChildIndex.harden(purpose) and coin_i.hardened and account_i.hardened
                and not change_i.hardened and not address_i.hardened)

    @classmethod
    def from_string(cls, path: str):
        """
        Parse m/0'/1/2h. The kind is inferred: a path of the BIP44/BIP49 account form is tagged as such.
        """
        parts = path.strip().split("/")
        if parts[0] != "m":
            raise InvalidDerivationPath(f"Derivation path must start with 'm': {path!r}")
        if parts[-1] == "" and len(parts) > 1:
            parts = parts[:-1]
        try:
            indices = tuple(ChildIndex.from_string(p) for p in parts[1:])
        except InvalidChildNumber as e:
            raise InvalidDerivationPath(f"Invalid derivation path {path!r}: {e}") from e
        return cls(indices, cls._infer_kind(indices))

    @classmethod
    def _infer_kind(cls, indices: tuple) -> PathKind:
        for kind in (PathKind.BIP44, PathKind.BIP49):
            if cls._is_account_path(indices, cls._purpose(kind)):
                return kind
        return PathKind.BIP32

    @classmethod
    def bip32(cls, indices: Iterable[ChildIndex]):
        return cls(indices, PathKind.BIP32)

    @classmethod
    def bip44(cls, account: int = 0, change: int = 0, index: int = 0, network: NetworkProfile = MAINNET):
        return cls._account_path(PathKind.BIP44, account, change, index, network)

    @classmethod
    def bip49(cls, account: int = 0, change: int = 0, index: int = 0, network: NetworkProfile = MAINNET):
        return cls._account_path(PathKind.BIP49, account, change, index, network)

    @classmethod
    def _account_path(cls, kind: PathKind, account: int, change: int, index: int, network: NetworkProfile):
        indices = (
            ChildIndex.harden(cls._purpose(kind)),
            ChildIndex.harden(network.coin_type),
            ChildIndex.harden(account),
            ChildIndex.normal(change),
            ChildIndex.normal(index),
        )
        return cls(indices, kind)

    @classmethod
    def coerce(cls, path):
        """Accept a DerivationPath, a path string or an iterable of ChildIndex (or u32 child numbers)"""
        if isinstance(path, DerivationPath):
            return path
        if isinstance(path, str):
            return cls.from_string(path)
        indices = tuple(ChildIndex.from_u32(i) if isinstance(i, int) else i for i in path)
        return cls(indices, cls._infer_kind(indices))
