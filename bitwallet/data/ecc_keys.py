"""
The PrivateKey and PubKey classes - secp256k1 key pairs along with their serializations
"""
import json
import secrets
from typing import Callable

from bitwallet.core import (ECC, ECCPrivateKeyError, SERIALIZED, get_stream, read_stream, read_big_int, PubKeyError,
                            PrivateKeyError, InvalidByteLength)
from bitwallet.cryptography import SECP256K1, Point, EllipticCurve, hash160, ecdsa, verify_ecdsa
from bitwallet.data.encoding import encode_base58check, decode_base58check
from bitwallet.data.network import NetworkProfile, MAINNET, network_from_wif_prefix

__all__ = ["PrivateKey", "PubKey"]

BYTE_LEN = ECC.COORD_BYTES
WIF_COMPRESSION_FLAG = b'\x01'


class PubKey:
    """
    A point on secp256k1 along with whether it serializes in compressed (33 byte) or uncompressed (65 byte) form
    """
    __slots__ = ("point", "is_compressed")

    def __init__(self, point: Point, is_compressed: bool = True, curve: EllipticCurve = SECP256K1):
        if not point or not curve.is_point_on_curve(point):
            raise PubKeyError(f"Point {point} is not a valid public key")
        self.point = point
        self.is_compressed = is_compressed

    def __eq__(self, other):
        if not isinstance(other, PubKey):
            return False
        return self.point == other.point and self.is_compressed == other.is_compressed

    def __hash__(self):
        return hash((self.point, self.is_compressed))

    @classmethod
    def from_private_int(cls, private_key: int, is_compressed: bool = True, curve: EllipticCurve = SECP256K1):
        if not 0 < private_key < curve.order:
            raise ECCPrivateKeyError("Private key must be in [1, n-1]")
        return cls(curve.multiply_generator(private_key), is_compressed)

    @classmethod
    def from_bytes(cls, byte_stream: SERIALIZED, curve: EllipticCurve = SECP256K1):
        """
        Parse a 33-byte compressed or 65-byte uncompressed SEC encoding
        """
        stream = get_stream(byte_stream)

        type_byte = read_stream(stream, 1, "pubkey type byte")
        x_int = read_big_int(stream, BYTE_LEN, "pubkey_x")

        if type_byte in (b'\x02', b'\x03'):
            even_y = curve.find_y_from_x(x_int)
            y_int = even_y if type_byte == b'\x02' else curve.p - even_y
            is_compressed = True
        elif type_byte == b'\x04':
            y_int = read_big_int(stream, BYTE_LEN, "pubkey_y")
            is_compressed = False
        else:
            raise PubKeyError(f"Unidentified type byte for Public Key: {type_byte.hex()}")

        if stream.read(1):
            raise PubKeyError("Excess data after public key")

        return cls(Point(x_int, y_int), is_compressed)

    def _x_bytes(self):
        return self.point.x.to_bytes(length=BYTE_LEN, byteorder='big')

    def _y_bytes(self):
        return self.point.y.to_bytes(length=BYTE_LEN, byteorder='big')

    def compressed(self) -> bytes:
        """Returns the serialized 33-byte compressed pubkey"""
        init_byte = b'\x02' if self.point.y % 2 == 0 else b'\x03'
        return init_byte + self._x_bytes()

    def uncompressed(self) -> bytes:
        """Return the serialized 65-byte pubkey"""
        return b'\x04' + self._x_bytes() + self._y_bytes()

    def to_bytes(self) -> bytes:
        return self.compressed() if self.is_compressed else self.uncompressed()

    def to_point(self) -> Point:
        return self.point

    def hash160(self) -> bytes:
        """HASH160 of the serialized key, in its own compression"""
        return hash160(self.to_bytes())

    def verify(self, signature: tuple[int, int], message: bytes) -> bool:
        return verify_ecdsa(signature, message, self.point)

    def to_dict(self):
        pkx, pky = self.point.tuple
        return {
            "pubkey_point": (hex(pkx), hex(pky)),
            "uncompressed": self.uncompressed().hex(),
            "compressed": self.compressed().hex(),
        }

    def to_json(self):
        return json.dumps(self.to_dict(), indent=2)

    def __repr__(self):
        return f"PubKey({self.to_bytes().hex()})"


class PrivateKey:
    """
    A secp256k1 scalar along with its compression flag and network.

    WIF
    -----------------------------------------------------------------
    |   Field               |   Byte Size   |   Format              |
    -----------------------------------------------------------------
    |   Prefix              |   1           |   network WIF prefix  |
    |   Key                 |   32          |   big-endian          |
    |   Compression flag*   |   1           |   0x01                |
    |   Checksum            |   4           |   HASH256[:4]         |
    -----------------------------------------------------------------
    * only present for keys whose public key is compressed
    """
    __slots__ = ("secret", "is_compressed", "network")

    def __init__(self, secret: int, is_compressed: bool = True, network: NetworkProfile = MAINNET,
                 curve: EllipticCurve = SECP256K1):
        if not 0 < secret < curve.order:
            raise ECCPrivateKeyError("Private key must be in [1, n-1]")
        self.secret = secret
        self.is_compressed = is_compressed
        self.network = network

    def __eq__(self, other):
        if not isinstance(other, PrivateKey):
            return False
        return (self.secret, self.is_compressed, self.network) == (other.secret, other.is_compressed, other.network)

    def __hash__(self):
        return hash((self.secret, self.is_compressed, self.network))

    def __repr__(self):
        # Never show the secret
        return f"PrivateKey(pubkey={self.public_key().to_bytes().hex()}, network={self.network})"

    @classmethod
    def generate(cls, network: NetworkProfile = MAINNET, rng: Callable[[int], bytes] = secrets.token_bytes):
        """
        Generate a new compressed private key from the given random byte source
        """
        while True:
            secret = int.from_bytes(rng(ECC.PRIVATE_KEY_BYTES), "big")
            if 0 < secret < SECP256K1.order:
                return cls(secret, True, network)

    @classmethod
    def from_bytes(cls, key: bytes, is_compressed: bool = True, network: NetworkProfile = MAINNET):
        if len(key) != ECC.PRIVATE_KEY_BYTES:
            raise InvalidByteLength(f"Private key must be {ECC.PRIVATE_KEY_BYTES} bytes, found {len(key)}")
        return cls(int.from_bytes(key, "big"), is_compressed, network)

    @classmethod
    def from_wif(cls, wif: str, network: NetworkProfile | None = None):
        """
        Parse a WIF string. Decoded data must be 37 (uncompressed) or 38 (compressed) bytes.
        """
        payload = decode_base58check(wif)

        if len(payload) == ECC.PRIVATE_KEY_BYTES + 2:
            if payload[-1:] != WIF_COMPRESSION_FLAG:
                raise PrivateKeyError(f"Invalid WIF compression flag: {payload[-1:].hex()}")
            is_compressed = True
            key = payload[1:-1]
        elif len(payload) == ECC.PRIVATE_KEY_BYTES + 1:
            is_compressed = False
            key = payload[1:]
        else:
            raise InvalidByteLength(f"Invalid WIF payload length: {len(payload)}")

        wif_network = network_from_wif_prefix(payload[0])
        if network is not None and wif_network != network:
            raise PrivateKeyError(f"WIF is for {wif_network}, expected {network}")

        return cls.from_bytes(key, is_compressed, wif_network)

    def to_bytes(self) -> bytes:
        return self.secret.to_bytes(ECC.PRIVATE_KEY_BYTES, "big")

    def to_wif(self) -> str:
        parts = [self.network.wif_prefix.to_bytes(1, "big"), self.to_bytes()]
        if self.is_compressed:
            parts.append(WIF_COMPRESSION_FLAG)
        return encode_base58check(b''.join(parts))

    def public_key(self) -> PubKey:
        return PubKey.from_private_int(self.secret, self.is_compressed)

    def sign(self, message: bytes, rng: Callable[[int], int] = secrets.randbelow) -> tuple[int, int]:
        """Low-s ECDSA signature (r, s) of the given 32-byte digest"""
        return ecdsa(self.secret, message, rng)
