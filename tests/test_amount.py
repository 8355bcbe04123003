"""
Tests for BitcoinAmount and the network profiles
"""
from decimal import Decimal

import pytest

from bitwallet.core import AmountError, AddressFormat, InvalidPrefix, UnsupportedNetwork, InvalidVersionBytes
from bitwallet.data import (BitcoinAmount, COIN, MAX_COINS, MAINNET, TESTNET, get_network, network_from_hrp,
                            network_from_address_prefix, network_from_wif_prefix, lookup_version_bytes)


def test_amount_conversion():
    assert BitcoinAmount.from_btc("0.00000001").satoshi == 1
    assert BitcoinAmount.from_btc(1) == BitcoinAmount(COIN)
    assert BitcoinAmount(150_000_000).btc == Decimal("1.5")
    assert str(BitcoinAmount(1)) == "0.00000001 BTC"

    with pytest.raises(AmountError):
        BitcoinAmount.from_btc("0.000000001")


def test_amount_arithmetic():
    a, b = BitcoinAmount(5), BitcoinAmount(3)
    assert (a + b).satoshi == 8
    assert (b - a).satoshi == -2
    assert b < a

    maximum = BitcoinAmount(MAX_COINS * COIN)
    with pytest.raises(AmountError):
        maximum + BitcoinAmount(1)
    with pytest.raises(AmountError):
        BitcoinAmount(1.5)


def test_network_lookups():
    assert get_network("Testnet") == TESTNET
    assert network_from_hrp("bc") == MAINNET
    assert network_from_address_prefix(0xc4) == (TESTNET, AddressFormat.P2SH_P2WPKH)
    assert network_from_wif_prefix(0x80) == MAINNET
    assert lookup_version_bytes(bytes.fromhex("04b24746")) == (MAINNET, AddressFormat.BECH32, False)
    assert lookup_version_bytes(bytes.fromhex("044a4e28")) == (TESTNET, AddressFormat.P2SH_P2WPKH, True)

    with pytest.raises(UnsupportedNetwork):
        get_network("regtest")
    with pytest.raises(InvalidPrefix):
        network_from_hrp("ltc")
    with pytest.raises(InvalidVersionBytes):
        lookup_version_bytes(b'\x00\x00\x00\x00')


def test_network_prefixes():
    assert MAINNET.address_prefix(AddressFormat.P2PKH) == 0x00
    assert TESTNET.address_prefix(AddressFormat.P2SH_P2WPKH) == 0xc4
    assert TESTNET.coin_type == 1

    with pytest.raises(InvalidPrefix):
        MAINNET.address_prefix(AddressFormat.BECH32)
