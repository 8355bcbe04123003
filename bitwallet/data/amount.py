"""
The BitcoinAmount class: a satoshi count with checked arithmetic
"""
from decimal import Decimal

from bitwallet.core import AmountError

__all__ = ["BitcoinAmount", "COIN", "MAX_COINS"]

COIN = 100_000_000  # Satoshis per bitcoin
MAX_COINS = 21_000_000
MAX_SATOSHI = MAX_COINS * COIN


class BitcoinAmount:
    """
    A signed amount in satoshis, bounded to +/- 21 million bitcoin.
    """
    __slots__ = ("satoshi",)

    def __init__(self, satoshi: int):
        if not isinstance(satoshi, int):
            raise AmountError(f"Satoshi amount must be an integer, received {type(satoshi)}")
        if not -MAX_SATOSHI <= satoshi <= MAX_SATOSHI:
            raise AmountError(f"Amount {satoshi} exceeds the maximum of {MAX_SATOSHI} satoshi")
        self.satoshi = satoshi

    @classmethod
    def from_satoshi(cls, satoshi: int):
        return cls(satoshi)

    @classmethod
    def from_btc(cls, btc: int | str | Decimal):
        """
        Convert a bitcoin amount to satoshis. Fractions of a satoshi are rejected.
        """
        satoshi = Decimal(str(btc)) * COIN
        if satoshi != satoshi.to_integral_value():
            raise AmountError(f"Amount {btc} is not a whole number of satoshis")
        return cls(int(satoshi))

    def add(self, other: "BitcoinAmount") -> "BitcoinAmount":
        return BitcoinAmount(self.satoshi + other.satoshi)

    def sub(self, other: "BitcoinAmount") -> "BitcoinAmount":
        return BitcoinAmount(self.satoshi - other.satoshi)

    def __add__(self, other):
        if not isinstance(other, BitcoinAmount):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other):
        if not isinstance(other, BitcoinAmount):
            return NotImplemented
        return self.sub(other)

    def __eq__(self, other):
        if not isinstance(other, BitcoinAmount):
            return NotImplemented
        return self.satoshi == other.satoshi

    def __lt__(self, other):
        if not isinstance(other, BitcoinAmount):
            return NotImplemented
        return self.satoshi < other.satoshi

    def __hash__(self):
        return hash(self.satoshi)

    def __int__(self):
        return self.satoshi

    @property
    def btc(self) -> Decimal:
        return Decimal(self.satoshi) / COIN

    def __str__(self):
        return f"{self.btc:.8f} BTC"

    def __repr__(self):
        return f"BitcoinAmount({self.satoshi})"
