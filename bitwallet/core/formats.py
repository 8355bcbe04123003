"""
The Bitcoin standard formats
"""
from enum import Enum
from typing import Final

__all__ = ["ADDRESS", "AddressFormat", "DATA", "ECC", "LOGGING", "OPCODES", "TX", "WALLET", "XKEYS"]


class AddressFormat(Enum):
    """
    The four supported output formats
    """
    P2PKH = "p2pkh"
    P2SH_P2WPKH = "p2sh_p2wpkh"
    BECH32 = "bech32"
    P2WSH = "p2wsh"

    @property
    def is_segwit(self) -> bool:
        return self is not AddressFormat.P2PKH

    @property
    def is_native_segwit(self) -> bool:
        return self in (AddressFormat.BECH32, AddressFormat.P2WSH)

    def __str__(self):
        return self.value


class DATA:
    """
    Constants used in data manipulation
    """
    MAX_COMPACTSIZE: Final[int] = 0xffffffffffffffff
    CHECKSUM_BYTES: Final[int] = 4


class LOGGING:
    """
    Logger defaults. The level can be overridden through the LEVEL_ENV environment variable
    """
    NAMESPACE: Final[str] = "bitwallet"
    LEVEL: Final[str] = "INFO"
    LEVEL_ENV: Final[str] = "BITWALLET_LOG_LEVEL"
    FORMAT: Final[str] = "%(asctime)s [%(name)s] [%(levelname)s]: %(message)s"


class ECC:
    COORD_BYTES: Final[int] = 32
    PRIVATE_KEY_BYTES: Final[int] = 32
    COMPRESSED_BYTES: Final[int] = 33
    UNCOMPRESSED_BYTES: Final[int] = 65


class WALLET:
    """
    We provide a Mnemonic dictionary which is BIP39 compliant. This forces the Mnemonic to be of a certain size
    depending on the entropy byte length chosen
    """
    MNEMONIC: Final[dict] = {
        16: {"bit_length": 128, "word_count": 12, "checksum_bits": 4},
        20: {"bit_length": 160, "word_count": 15, "checksum_bits": 5},
        24: {"bit_length": 192, "word_count": 18, "checksum_bits": 6},
        28: {"bit_length": 224, "word_count": 21, "checksum_bits": 7},
        32: {"bit_length": 256, "word_count": 24, "checksum_bits": 8},
    }
    DEFAULT_ENTROPY_BYTES: Final[int] = 16
    WORD_BITS: Final[int] = 11
    WORDLIST_SIZE: Final[int] = 2048
    BITLEN_KEY: Final[str] = "bit_length"
    WORD_KEY: Final[str] = "word_count"
    CHECKSUM_KEY: Final[str] = "checksum_bits"
    SEED_ITERATIONS: Final[int] = 2048
    DKLEN: Final[int] = 64
    SALT_PREFIX: Final[str] = "mnemonic"
    DEFAULT_LANGUAGE: Final[str] = "english"


class XKEYS:
    """
    Constants related to the extended public and private keys
    """
    SEED_KEY: Final[bytes] = b'Bitcoin seed'
    CHAIN_LENGTH: Final[int] = 32
    FINGERPRINT_LENGTH: Final[int] = 4
    VERSION_LENGTH: Final[int] = 4
    MAX_DEPTH: Final[int] = 255
    SERIAL_LENGTH: Final[int] = 78
    ENCODED_LENGTH: Final[int] = 82  # serial + checksum

    # Hardened derivation threshold
    HARDENED_OFFSET: Final[int] = 0x80000000
    MAX_INDEX: Final[int] = 0xffffffff

    # BIP32 paths
    MAX_PATH_LENGTH: Final[int] = 255
    BIP44_PURPOSE: Final[int] = 44
    BIP49_PURPOSE: Final[int] = 49


class ADDRESS:
    """
    Address text and payload bounds
    """
    MIN_LENGTH: Final[int] = 14
    MAX_LENGTH: Final[int] = 74
    BASE58_DECODED_LENGTH: Final[int] = 25
    HASH_LENGTH: Final[int] = 20
    SCRIPT_HASH_LENGTH: Final[int] = 32
    HRP_LENGTH: Final[int] = 2


class TX:
    """
    Transaction byte sizes
    """
    TXID: Final[int] = 32
    VOUT: Final[int] = 4
    SEQUENCE: Final[int] = 4
    AMOUNT: Final[int] = 8
    VERSION: Final[int] = 4
    LOCKTIME: Final[int] = 4
    SIGHASH: Final[int] = 4
    MARKER: Final[bytes] = b'\x00'
    FLAG: Final[bytes] = b'\x01'
    DEFAULT_VERSION: Final[int] = 1
    DEFAULT_SEQUENCE: Final[int] = 0xffffffff


# --- OPCODES USED IN STANDARD SCRIPTS --- #

class OPCODES:
    OP_0: Final[int] = 0x00
    OP_PUSHDATA1: Final[int] = 0x4c
    OP_PUSHDATA2: Final[int] = 0x4d
    OP_PUSHDATA4: Final[int] = 0x4e
    OP_1: Final[int] = 0x51
    OP_16: Final[int] = 0x60
    OP_DUP: Final[int] = 0x76
    OP_EQUAL: Final[int] = 0x87
    OP_EQUALVERIFY: Final[int] = 0x88
    OP_HASH160: Final[int] = 0xa9
    OP_CHECKSIG: Final[int] = 0xac
