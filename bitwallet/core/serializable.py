"""
The Serializable base class for wire-format objects: transactions, their inputs and outputs, and witness programs
"""
import json
from abc import ABC, abstractmethod
from io import BytesIO

__all__ = ["Serializable"]


class Serializable(ABC):
    """
    An object with a canonical byte encoding. Two objects of the same class are equal iff their encodings are.

    Instances are mutable (a transaction gains signatures) and unhashable.
    """
    __slots__ = ()
    __hash__ = None

    @classmethod
    @abstractmethod
    def from_bytes(cls, byte_stream: bytes | BytesIO):
        raise NotImplementedError(f"{cls.__name__} must implement from_bytes()")

    @classmethod
    def from_hex(cls, hex_string: str):
        """Parse the object from its hex encoding, as shown by block explorers and RPC"""
        return cls.from_bytes(bytes.fromhex(hex_string))

    @abstractmethod
    def to_bytes(self) -> bytes:
        raise NotImplementedError(f"{self.__class__.__name__} must implement to_bytes()")

    def to_hex(self) -> str:
        return self.to_bytes().hex()

    @abstractmethod
    def to_dict(self) -> dict:
        raise NotImplementedError(f"{self.__class__.__name__} must implement to_dict()")

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    def __eq__(self, other) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.to_bytes() == other.to_bytes()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.to_hex()})"
