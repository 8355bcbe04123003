"""
The Address class - renders public keys and scripts as network addresses, and parses address strings
"""
import json

from bitwallet.core import (ADDRESS, AddressFormat, AddressError, IncompatibleFormats, InvalidCharacterLength,
                            InvalidPrefix, DataEncodingError, get_logger)
from bitwallet.cryptography import hash160, sha256
from bitwallet.data import (encode_base58check, decode_base58check, encode_bech32, decode_bech32, NetworkProfile,
                            MAINNET, NETWORKS, network_from_address_prefix, network_from_hrp, PubKey, PrivateKey)
from bitwallet.script import WitnessProgram, create_script_pub_key, p2wpkh_redeem_script

__all__ = ["Address"]

logger = get_logger(__name__)

BECH32_HRPS = tuple(network.bech32_hrp for network in NETWORKS)


class Address:
    """
    A Bitcoin address in one of four formats:
        P2PKH:       Base58Check(prefix || HASH160(pubkey))
        P2SH_P2WPKH: Base58Check(prefix || HASH160(0x00 0x14 || HASH160(compressed pubkey)))
        BECH32:      bech32(hrp, 0 || HASH160(compressed pubkey))
        P2WSH:       bech32(hrp, 0 || SHA256(script))
    """
    __slots__ = ("address", "address_format", "network")

    def __init__(self, address: str, address_format: AddressFormat, network: NetworkProfile = MAINNET):
        self.address = address
        self.address_format = address_format
        self.network = network

    def __eq__(self, other):
        if not isinstance(other, Address):
            return False
        return (self.address, self.address_format, self.network) == (other.address, other.address_format,
                                                                     other.network)

    def __hash__(self):
        return hash((self.address, self.address_format))

    def __str__(self):
        return self.address

    def __repr__(self):
        return f"Address({self.address}, format={self.address_format}, network={self.network})"

    @property
    def format(self) -> AddressFormat:
        return self.address_format

    # --- CONSTRUCTORS --- #

    @classmethod
    def from_public_key(cls, public_key: PubKey, address_format: AddressFormat = AddressFormat.P2PKH,
                        network: NetworkProfile = MAINNET):
        match address_format:
            case AddressFormat.P2PKH:
                return cls.p2pkh(public_key, network)
            case AddressFormat.P2SH_P2WPKH:
                return cls.p2sh_p2wpkh(public_key, network)
            case AddressFormat.BECH32:
                return cls.bech32(public_key, network)
            case _:
                raise IncompatibleFormats(f"Cannot create a {address_format} address from a public key")

    @classmethod
    def from_private_key(cls, private_key: PrivateKey, address_format: AddressFormat = AddressFormat.P2PKH):
        return cls.from_public_key(private_key.public_key(), address_format, private_key.network)

    @classmethod
    def p2pkh(cls, public_key: PubKey, network: NetworkProfile = MAINNET):
        """The key hash is taken over the key in its own compression"""
        data = network.p2pkh_prefix.to_bytes(1, "big") + hash160(public_key.to_bytes())
        return cls(encode_base58check(data), AddressFormat.P2PKH, network)

    @classmethod
    def p2sh_p2wpkh(cls, public_key: PubKey, network: NetworkProfile = MAINNET):
        redeem_script = p2wpkh_redeem_script(public_key.compressed())
        data = network.p2sh_prefix.to_bytes(1, "big") + hash160(redeem_script)
        return cls(encode_base58check(data), AddressFormat.P2SH_P2WPKH, network)

    @classmethod
    def bech32(cls, public_key: PubKey, network: NetworkProfile = MAINNET):
        address = encode_bech32(hash160(public_key.compressed()), network.bech32_hrp, 0)
        return cls(address, AddressFormat.BECH32, network)

    @classmethod
    def p2wsh(cls, script: bytes, network: NetworkProfile = MAINNET):
        address = encode_bech32(sha256(script), network.bech32_hrp, 0)
        return cls(address, AddressFormat.P2WSH, network)

    @classmethod
    def from_string(cls, address: str, network: NetworkProfile | None = None):
        """
        Parse an address. Bech32 addresses are recognized by their human-readable part, anything else is read as
        Base58Check. If a network is given, the address must belong to it.
        """
        if not ADDRESS.MIN_LENGTH <= len(address) <= ADDRESS.MAX_LENGTH:
            raise InvalidCharacterLength(
                f"Address length {len(address)} outside [{ADDRESS.MIN_LENGTH}, {ADDRESS.MAX_LENGTH}]")

        prefix = address[:ADDRESS.HRP_LENGTH].lower()
        if prefix in BECH32_HRPS:
            parsed = cls._from_bech32(address)
        else:
            parsed = cls._from_base58(address)

        if network is not None and parsed.network != network:
            raise InvalidPrefix(f"Address {address} belongs to {parsed.network}, expected {network}")

        logger.debug(f"Parsed {parsed.address_format} address on {parsed.network}")
        return parsed

    @classmethod
    def _from_bech32(cls, address: str):
        try:
            hrp, witver, program = decode_bech32(address)
        except DataEncodingError as e:
            raise AddressError(f"Invalid bech32 address {address}: {e}") from e

        witness_program = WitnessProgram.from_bytes(bytes([witver, len(program)]) + program)
        network = network_from_hrp(hrp)

        if witness_program.version != 0:
            raise AddressError(f"Unsupported witness version {witness_program.version}")
        if len(witness_program.program) == ADDRESS.HASH_LENGTH:
            address_format = AddressFormat.BECH32
        else:
            address_format = AddressFormat.P2WSH
        return cls(address, address_format, network)

    @classmethod
    def _from_base58(cls, address: str):
        data = decode_base58check(address, expected_length=ADDRESS.BASE58_DECODED_LENGTH)
        network, address_format = network_from_address_prefix(data[0])
        return cls(address, address_format, network)

    # --- PAYLOAD --- #

    def payload(self) -> bytes:
        """The 20-byte hash of a base58 address or the witness program of a segwit address"""
        if self.address_format.is_native_segwit:
            return decode_bech32(self.address)[2]
        return decode_base58check(self.address)[1:]

    def witness_version(self) -> int:
        if not self.address_format.is_native_segwit:
            raise IncompatibleFormats(f"{self.address_format} address has no witness version")
        return decode_bech32(self.address)[1]

    def to_script_pub_key(self) -> bytes:
        return create_script_pub_key(self)

    def to_dict(self) -> dict:
        return {
            "address": self.address,
            "format": str(self.address_format),
            "network": str(self.network),
            "payload": self.payload().hex()
        }

    def to_json(self):
        return json.dumps(self.to_dict(), indent=2)
