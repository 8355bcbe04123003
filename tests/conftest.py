"""
Fixtures used in the tests
"""
import pytest

from bitwallet.core import AddressFormat
from bitwallet.data import PrivateKey, TESTNET
from bitwallet.tx import SignatureEngine
from bitwallet.wallet import Mnemonic, ExtendedKey
from tests.utility import ABANDON_PHRASE

BIP32_VECTOR_1_SEED = bytes.fromhex("000102030405060708090a0b0c0d0e0f")


@pytest.fixture()
def signature_engine():
    return SignatureEngine()


@pytest.fixture()
def abandon_mnemonic():
    return Mnemonic.from_phrase(ABANDON_PHRASE)


@pytest.fixture()
def vector_1_master():
    return ExtendedKey.new_master(BIP32_VECTOR_1_SEED)


@pytest.fixture()
def testnet_key():
    return PrivateKey.generate(TESTNET)


@pytest.fixture(params=[AddressFormat.P2PKH, AddressFormat.P2SH_P2WPKH, AddressFormat.BECH32])
def key_format(request):
    """The formats addressable directly from a public key"""
    return request.param
