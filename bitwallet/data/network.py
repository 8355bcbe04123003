"""
Network profiles: the per-network constants for addresses, private keys and extended keys

A profile is passed as a value (network=MAINNET) wherever a network-dependent encoding is produced or parsed.
"""
from dataclasses import dataclass, field

from bitwallet.core import AddressFormat, InvalidPrefix, InvalidVersionBytes, UnsupportedFormat, UnsupportedNetwork

__all__ = ["NetworkProfile", "MAINNET", "TESTNET", "NETWORKS", "get_network", "network_from_hrp",
           "network_from_address_prefix", "network_from_wif_prefix", "lookup_version_bytes"]


@dataclass(frozen=True)
class NetworkProfile:
    """
    Constants distinguishing one Bitcoin network from another.

    xkey_versions maps an address format to its (private, public) extended key version bytes.
    """
    name: str
    p2pkh_prefix: int
    p2sh_prefix: int
    bech32_hrp: str
    wif_prefix: int
    coin_type: int
    xkey_versions: dict = field(default_factory=dict, compare=False, hash=False)

    def __str__(self):
        return self.name

    def address_prefix(self, address_format: AddressFormat) -> int:
        """Base58 version byte for the given format"""
        if address_format == AddressFormat.P2PKH:
            return self.p2pkh_prefix
        if address_format == AddressFormat.P2SH_P2WPKH:
            return self.p2sh_prefix
        raise InvalidPrefix(f"Format {address_format} has no base58 prefix")

    def format_from_prefix(self, prefix: int) -> AddressFormat:
        if prefix == self.p2pkh_prefix:
            return AddressFormat.P2PKH
        if prefix == self.p2sh_prefix:
            return AddressFormat.P2SH_P2WPKH
        raise InvalidPrefix(f"Unknown address prefix {prefix:#04x} for {self.name}")

    def extended_private_version(self, address_format: AddressFormat) -> bytes:
        return self._versions(address_format)[0]

    def extended_public_version(self, address_format: AddressFormat) -> bytes:
        return self._versions(address_format)[1]

    def _versions(self, address_format: AddressFormat) -> tuple[bytes, bytes]:
        versions = self.xkey_versions.get(address_format)
        if versions is None:
            raise UnsupportedFormat(f"No extended key version bytes for {address_format} on {self.name}")
        return versions


MAINNET = NetworkProfile(
    name="mainnet",
    p2pkh_prefix=0x00,
    p2sh_prefix=0x05,
    bech32_hrp="bc",
    wif_prefix=0x80,
    coin_type=0,
    xkey_versions={
        AddressFormat.P2PKH: (bytes.fromhex("0488ade4"), bytes.fromhex("0488b21e")),  # xprv / xpub
        AddressFormat.P2SH_P2WPKH: (bytes.fromhex("049d7878"), bytes.fromhex("049d7cb2")),  # yprv / ypub
        AddressFormat.BECH32: (bytes.fromhex("04b2430c"), bytes.fromhex("04b24746")),  # zprv / zpub
    }
)

TESTNET = NetworkProfile(
    name="testnet",
    p2pkh_prefix=0x6f,
    p2sh_prefix=0xc4,
    bech32_hrp="tb",
    wif_prefix=0xef,
    coin_type=1,
    xkey_versions={
        AddressFormat.P2PKH: (bytes.fromhex("04358394"), bytes.fromhex("043587cf")),  # tprv / tpub
        AddressFormat.P2SH_P2WPKH: (bytes.fromhex("044a4e28"), bytes.fromhex("044a5262")),  # uprv / upub
        AddressFormat.BECH32: (bytes.fromhex("045f18bc"), bytes.fromhex("045f1cf6")),  # vprv / vpub
    }
)

NETWORKS = (MAINNET, TESTNET)


def get_network(name: str) -> NetworkProfile:
    for network in NETWORKS:
        if network.name == name.lower():
            return network
    raise UnsupportedNetwork(f"Unknown network: {name}")


def network_from_hrp(hrp: str) -> NetworkProfile:
    for network in NETWORKS:
        if network.bech32_hrp == hrp.lower():
            return network
    raise InvalidPrefix(f"Unknown bech32 human-readable part: {hrp}")


def network_from_address_prefix(prefix: int) -> tuple[NetworkProfile, AddressFormat]:
    for network in NETWORKS:
        if prefix in (network.p2pkh_prefix, network.p2sh_prefix):
            return network, network.format_from_prefix(prefix)
    raise InvalidPrefix(f"Unknown address prefix: {prefix:#04x}")


def network_from_wif_prefix(prefix: int) -> NetworkProfile:
    for network in NETWORKS:
        if network.wif_prefix == prefix:
            return network
    raise InvalidPrefix(f"Unknown WIF prefix: {prefix:#04x}")


def lookup_version_bytes(version: bytes) -> tuple[NetworkProfile, AddressFormat, bool]:
    """
    Return the network, format and is_private flag for the given extended key version bytes
    """
    for network in NETWORKS:
        for address_format, (private_version, public_version) in network.xkey_versions.items():
            if version == private_version:
                return network, address_format, True
            if version == public_version:
                return network, address_format, False
    raise InvalidVersionBytes(f"Unknown extended key version bytes: {version.hex()}")
