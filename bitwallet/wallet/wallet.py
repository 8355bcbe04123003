"""
The Wallet class - ties together Mnemonic and ExtendedKey for HD wallet functionality
"""
import json

from bitwallet.core import AddressFormat, InvalidDerivationPath, get_logger
from bitwallet.data import NetworkProfile, MAINNET
from bitwallet.wallet.address import Address
from bitwallet.wallet.derivation import DerivationPath
from bitwallet.wallet.mnemonic import Mnemonic
from bitwallet.wallet.xkeys import ExtendedKey

__all__ = ["Wallet"]

logger = get_logger(__name__)

PURPOSE_FORMATS = {
    44: AddressFormat.P2PKH,
    49: AddressFormat.P2SH_P2WPKH,
    84: AddressFormat.BECH32,
}


class Wallet:
    """
    Hierarchical Deterministic Wallet implementing BIP32/BIP39/BIP44
    """
    __slots__ = ('mnemonic', 'master_key', 'network')

    def __init__(self, mnemonic: Mnemonic | None, master_key: ExtendedKey):
        self.mnemonic = mnemonic
        self.master_key = master_key
        self.network = master_key.network

    @classmethod
    def generate(cls, word_count: int = 12, password: str = "", network: NetworkProfile = MAINNET):
        """
        Create a wallet with a freshly generated mnemonic
        """
        return cls.from_mnemonic(Mnemonic.generate(word_count), password, network)

    @classmethod
    def from_phrase(cls, phrase: str, password: str = "", network: NetworkProfile = MAINNET):
        return cls.from_mnemonic(Mnemonic.from_phrase(phrase), password, network)

    @classmethod
    def from_mnemonic(cls, mnemonic: Mnemonic, password: str = "", network: NetworkProfile = MAINNET):
        return cls(mnemonic, mnemonic.to_extended_private_key(password, network=network))

    @classmethod
    def from_seed(cls, seed: bytes, network: NetworkProfile = MAINNET):
        """
        Create a wallet directly from a seed (bypasses mnemonic)
        """
        return cls(None, ExtendedKey.new_master(seed, network=network))

    def derive_path(self, path: str | DerivationPath) -> ExtendedKey:
        """
        Derive a key at the given path, e.g. "m/44'/0'/0'/0/0"
        """
        path = DerivationPath.coerce(path)
        logger.debug(f"Deriving {path}")
        return self.master_key.derive(path)

    def account_address(self, purpose: int = 44, account: int = 0, change: int = 0, index: int = 0) -> Address:
        """
        Address at m/purpose'/coin_type'/account'/change/index, in the format matching the purpose
        (44: P2PKH, 49: P2SH_P2WPKH, 84: BECH32)
        """
        address_format = PURPOSE_FORMATS.get(purpose)
        if address_format is None:
            raise InvalidDerivationPath(f"Unsupported purpose {purpose}. Must be one of {tuple(PURPOSE_FORMATS)}")
        path = f"m/{purpose}'/{self.network.coin_type}'/{account}'/{change}/{index}"
        return self.derive_path(path).to_address(address_format)

    def get_master_pubkey(self) -> ExtendedKey:
        return self.master_key.to_extended_public_key()

    def to_dict(self) -> dict:
        return {
            "mnemonic": self.mnemonic.to_phrase() if self.mnemonic else None,
            "network": str(self.network),
            "master_xprv": self.master_key.to_string(),
            "master_xpub": self.get_master_pubkey().to_string(),
        }

    def to_json(self):
        return json.dumps(self.to_dict(), indent=2)
