"""
SigHash Enum class
"""
from enum import IntEnum

__all__ = ["SigHash"]

ANYONECANPAY_FLAG = 0x80
BASE_TYPE_MASK = 0x1f


class SigHash(IntEnum):
    ALL = 0x01
    NONE = 0x02
    SINGLE = 0x03
    ALL_ANYONECANPAY = 0x81
    NONE_ANYONECANPAY = 0x82
    SINGLE_ANYONECANPAY = 0x83

    @property
    def anyone_can_pay(self) -> bool:
        return bool(self.value & ANYONECANPAY_FLAG)

    @property
    def base_type(self) -> "SigHash":
        """The sighash type with the ANYONECANPAY flag removed"""
        return SigHash(self.value & BASE_TYPE_MASK)

    def to_byte(self) -> bytes:
        """
        The single byte appended to a DER signature
        """
        return self.value.to_bytes(1, "little")

    def for_hashing(self):
        """
        The sighash as a 4-byte little-endian integer, appended to the signature preimage
        """
        return self.value.to_bytes(4, "little")
