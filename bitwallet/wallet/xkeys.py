"""
Extended Keys (xpub/xprv) Implementation for the bitwallet Wallet
Implements BIP32 Hierarchical Deterministic Wallet key derivation
"""
import json
from functools import reduce

from bitwallet.core import (XKEYS, ECC, AddressFormat, ExtendedKeyError, InvalidChildNumber, MaximumChildDepthReached,
                            ECCPrivateKeyError, get_stream, read_stream, get_logger)
from bitwallet.cryptography import SECP256K1, hash160, hmac_sha512, hash256
from bitwallet.data import (encode_base58, decode_base58check, NetworkProfile, MAINNET, lookup_version_bytes, PubKey,
                            PrivateKey)
from bitwallet.wallet.address import Address
from bitwallet.wallet.derivation import ChildIndex, DerivationPath, PathKind

__all__ = ["ExtendedKey"]

logger = get_logger(__name__)

SEED_KEY = XKEYS.SEED_KEY
CHAIN_LENGTH = XKEYS.CHAIN_LENGTH
FINGERPRINT_LENGTH = XKEYS.FINGERPRINT_LENGTH


class ExtendedKey:
    """
    Extended private or public key.

    Serialization
    -----------------------------------------------------------------
    |   Field               |   Byte Size   |   Format              |
    -----------------------------------------------------------------
    |   Version             |   4           |   network + format    |
    |   Depth               |   1           |   u8                  |
    |   Parent fingerprint  |   4           |   HASH160[:4]         |
    |   Child number        |   4           |   big-endian          |
    |   Chain code          |   32          |   bytes               |
    |   Key data            |   33          |   0x00 || k  or  P    |
    |   Checksum            |   4           |   HASH256[:4]         |
    -----------------------------------------------------------------
    """
    __slots__ = ('address_format', 'network', 'depth', 'parent_fingerprint', 'child_index', 'chain_code', 'key_data')

    def __init__(self,
                 key_data: bytes,
                 chain_code: bytes,
                 depth: int = 0,
                 parent_fingerprint: bytes = b'\x00' * FINGERPRINT_LENGTH,
                 child_index: ChildIndex = ChildIndex(0),
                 address_format: AddressFormat = AddressFormat.P2PKH,
                 network: NetworkProfile = MAINNET,
                 ):
        """
        Args:
            key_data: 32-byte private scalar or 33-byte compressed public key
            chain_code: Chain code for key derivation (32 bytes)
            depth: Depth in the derivation path
            parent_fingerprint: Fingerprint of parent key (4 bytes)
            child_index: Index of this key under its parent
            address_format: Output format, selecting the version bytes
            network: Network profile, selecting the version bytes
        """
        if len(parent_fingerprint) != FINGERPRINT_LENGTH:
            raise ExtendedKeyError("Parent fingerprint must be 4 bytes")
        if len(chain_code) != CHAIN_LENGTH:
            raise ExtendedKeyError("Chain code must be 32 bytes")
        if not 0 <= depth <= XKEYS.MAX_DEPTH:
            raise ExtendedKeyError(f"Depth {depth} out of range")
        if len(key_data) == ECC.PRIVATE_KEY_BYTES:
            if not 0 < int.from_bytes(key_data, "big") < SECP256K1.order:
                raise ECCPrivateKeyError("Extended private key scalar must be in [1, n-1]")
        elif len(key_data) == ECC.COMPRESSED_BYTES:
            PubKey.from_bytes(key_data)
        else:
            raise ExtendedKeyError(f"Key data must be 32 or 33 bytes, found {len(key_data)}")

        self.key_data = key_data
        self.chain_code = chain_code
        self.depth = depth
        self.parent_fingerprint = parent_fingerprint
        self.child_index = child_index
        self.address_format = address_format
        self.network = network

    # --- OVERRIDES --- #

    def __eq__(self, other) -> bool:
        if not isinstance(other, ExtendedKey):
            return False
        return (self.key_data, self.chain_code, self.depth, self.parent_fingerprint, self.child_index,
                self.address_format, self.network) == (other.key_data, other.chain_code, other.depth,
                                                       other.parent_fingerprint, other.child_index,
                                                       other.address_format, other.network)

    def __hash__(self) -> int:
        return hash((self.key_data, self.chain_code, self.depth, self.child_index, self.address_format))

    def __repr__(self):
        kind = "private" if self.is_private else "public"
        return f"ExtendedKey({kind}, depth={self.depth}, child={self.child_index}, format={self.address_format})"

    # --- CONSTRUCTORS --- #

    @classmethod
    def new_master(cls, seed: bytes, address_format: AddressFormat = AddressFormat.P2PKH,
                   network: NetworkProfile = MAINNET):
        """
        HMAC-SHA512(key="Bitcoin seed", message=seed): the left half is the scalar and the right half the chain code
        """
        seed_hash = hmac_sha512(key=SEED_KEY, message=seed)
        privkey, chain_code = seed_hash[:32], seed_hash[32:]

        logger.debug(f"New {network} master key for format {address_format}")
        return cls(privkey, chain_code, address_format=address_format, network=network)

    @classmethod
    def from_string(cls, text: str):
        """
        Parse a Base58 serialized extended key. The decoded data must be exactly 82 bytes with a valid checksum.
        """
        serial = decode_base58check(text, expected_length=XKEYS.ENCODED_LENGTH)
        return cls.from_serial(serial)

    @classmethod
    def from_serial(cls, serial: bytes):
        """
        Read the 78-byte serialized key (without checksum)
        """
        stream = get_stream(serial)

        version = read_stream(stream, XKEYS.VERSION_LENGTH, "version")
        depth = read_stream(stream, 1, "depth")[0]
        parent_fingerprint = read_stream(stream, FINGERPRINT_LENGTH, "parent_fingerprint")
        child_number = int.from_bytes(read_stream(stream, 4, "child_number"), "big")
        chain_code = read_stream(stream, CHAIN_LENGTH, "chain_code")
        key_data = read_stream(stream, ECC.COMPRESSED_BYTES, "key_data")

        network, address_format, is_private = lookup_version_bytes(version)

        if is_private:
            if key_data[0] != 0:
                raise ExtendedKeyError("Extended private key data must start with 0x00")
            key_data = key_data[1:]
        elif key_data[0] not in (2, 3):
            raise ExtendedKeyError("Extended public key data must be a compressed public key")

        return cls(key_data, chain_code, depth, parent_fingerprint, ChildIndex.from_u32(child_number),
                   address_format, network)

    # --- PROPERTIES --- #

    @property
    def is_private(self) -> bool:
        return len(self.key_data) == ECC.PRIVATE_KEY_BYTES

    @property
    def is_public(self) -> bool:
        return len(self.key_data) == ECC.COMPRESSED_BYTES

    # --- KEYS --- #

    def private_key(self) -> PrivateKey:
        if not self.is_private:
            raise ExtendedKeyError("Extended public key has no private key")
        return PrivateKey.from_bytes(self.key_data, True, self.network)

    def public_key(self) -> PubKey:
        if self.is_private:
            return self.private_key().public_key()
        return PubKey.from_bytes(self.key_data)

    def fingerprint(self) -> bytes:
        """HASH160 of the compressed public key, first 4 bytes"""
        return hash160(self.public_key().compressed())[:FINGERPRINT_LENGTH]

    def to_extended_public_key(self) -> "ExtendedKey":
        if self.is_public:
            return self
        return ExtendedKey(self.public_key().compressed(), self.chain_code, self.depth, self.parent_fingerprint,
                           self.child_index, self.address_format, self.network)

    def to_address(self, address_format: AddressFormat | None = None) -> Address:
        return Address.from_public_key(self.public_key(), address_format or self.address_format, self.network)

    # --- DERIVATION --- #

    def derive(self, path) -> "ExtendedKey":
        """
        Derive the key at the given path relative to this key. Accepts a DerivationPath, a path string or an
        iterable of ChildIndex. A BIP49 path yields a P2SH_P2WPKH key.
        """
        path = DerivationPath.coerce(path)
        child = reduce(lambda key, index: key.derive_child(index), path.indices, self)

        if path.kind is PathKind.BIP49 and child.address_format is not AddressFormat.P2SH_P2WPKH:
            child = ExtendedKey(child.key_data, child.chain_code, child.depth, child.parent_fingerprint,
                                child.child_index, AddressFormat.P2SH_P2WPKH, child.network)
        return child

    def derive_child(self, index: ChildIndex | int) -> "ExtendedKey":
        """
        Derive the direct child at the given index
        """
        if isinstance(index, int):
            index = ChildIndex.from_u32(index)

        if self.depth == XKEYS.MAX_DEPTH:
            raise MaximumChildDepthReached(f"Cannot derive past depth {XKEYS.MAX_DEPTH}")

        # Hardened: 0x00 || k || index | Normal: compressed pubkey || index
        if index.hardened:
            if self.is_public:
                raise InvalidChildNumber(f"Cannot derive hardened child {index} from a public key")
            data = b'\x00' + self.key_data + index.to_bytes()
        else:
            data = self.public_key().compressed() + index.to_bytes()

        key_hash = hmac_sha512(key=self.chain_code, message=data)
        tweak_int = int.from_bytes(key_hash[:32], "big")
        child_chain_code = key_hash[32:]

        if tweak_int >= SECP256K1.order:
            raise ExtendedKeyError(f"Invalid tweak for child {index}, proceed with the next index")

        if self.is_private:
            child_int = (int.from_bytes(self.key_data, "big") + tweak_int) % SECP256K1.order
            if child_int == 0:
                raise ExtendedKeyError(f"Invalid child key for index {index}, proceed with the next index")
            child_key_data = child_int.to_bytes(ECC.PRIVATE_KEY_BYTES, "big")
        else:
            child_point = SECP256K1.add_points(SECP256K1.multiply_generator(tweak_int), self.public_key().to_point())
            if not child_point:
                raise ExtendedKeyError(f"Invalid child key for index {index}, proceed with the next index")
            child_key_data = PubKey(child_point).compressed()

        logger.debug(f"Derived child {index} at depth {self.depth + 1}")
        return ExtendedKey(
            key_data=child_key_data,
            chain_code=child_chain_code,
            depth=self.depth + 1,
            parent_fingerprint=self.fingerprint(),
            child_index=index,
            address_format=self.address_format,
            network=self.network
        )

    # --- SERIALIZATION --- #

    def version(self) -> bytes:
        if self.is_private:
            return self.network.extended_private_version(self.address_format)
        return self.network.extended_public_version(self.address_format)

    def to_serial(self) -> bytes:
        """
        version || depth || parent fingerprint || child number || chain code || key data
        """
        key_data = b'\x00' + self.key_data if self.is_private else self.key_data
        parts = [
            self.version(),
            self.depth.to_bytes(1, "big"),
            self.parent_fingerprint,
            self.child_index.to_bytes(),
            self.chain_code,
            key_data
        ]
        return b''.join(parts)

    def to_bytes(self) -> bytes:
        """Serialized key with its 4-byte checksum"""
        serial = self.to_serial()
        return serial + hash256(serial)[:4]

    def to_string(self) -> str:
        return encode_base58(self.to_bytes())

    def __str__(self):
        return self.to_string()

    # --- DISPLAY --- #
    def to_dict(self):
        first_key = "prvkey" if self.is_private else "pubkey"
        return {
            first_key: self.key_data.hex(),
            "chain_code": self.chain_code.hex(),
            "depth": self.depth,
            "parent_fingerprint": self.parent_fingerprint.hex(),
            "child_index": str(self.child_index),
            "format": str(self.address_format),
            "network": str(self.network),
            "serialized": self.to_string()
        }

    def to_json(self):
        return json.dumps(self.to_dict(), indent=2)
