"""
Tests for the SignatureEngine: sighash algorithms and signing of each address format
"""
import pytest

from bitwallet.core import AddressFormat, InvalidInputs
from bitwallet.cryptography import hash160
from bitwallet.data import PrivateKey, PubKey
from bitwallet.script import SigHash, p2pkh_script_code, p2wpkh_redeem_script, encode_pushdata
from bitwallet.tx import Transaction, TxInput, Outpoint
from tests.utility import funded_input, spending_tx, split_pushes, random_txid, fixed_rng

# BIP143 native P2WPKH example
BIP143_OUTPOINT_0 = "fff7f7881a8099afa6940d42d1e7f6362bec38171ea3edf433541db4e4ad969f00000000"
BIP143_OUTPOINT_1 = "ef51e1b804cc89d182d279655c3aa89e815b1b309fe287d9b2b55d57b90ec68a01000000"
BIP143_OUTPUTS = ("202cb206000000001976a9148280b37df378db99f66f85c95a783a76ac7a6d5988ac"
                  "9093510d000000001976a9143bde42dbee7e4dbe6a21b2d50ce2f0167faa815988ac")
BIP143_UNSIGNED_TX = ("01000000" + "02" + BIP143_OUTPOINT_0 + "00" + "eeffffff" + BIP143_OUTPOINT_1 + "00" + "ffffffff"
                      + "02" + BIP143_OUTPUTS + "11000000")
BIP143_PUBKEY_HASH = "1d0f172a0ecb48aee1be1f2687d2963ae33f71a1"
BIP143_SIGHASH = "c37af31116d1b27caf68aae9e3ac82f1477929014d5b917657d0eb49478cb670"

# The first input of the same example spends a legacy P2PK output, signed with SIGHASH_ALL
BIP143_P2PK_PUBKEY = "03c9f4836b9a4f77fc0d81f7bcb01b7f1b35916864b9476c241ce9fc198bd25432"
BIP143_P2PK_SCRIPT = "21" + BIP143_P2PK_PUBKEY + "ac"
BIP143_P2PK_SIGNATURE = ("30450221008b9d1dc26ba6a9cb62127b02742fa9d754cd3bebf337f7a55d114c8e5cdd30be022040529b194ba3f9"
                         "281a99f2b1c0a19c0489bc22ede944ccf4ecbab4cc618ef3ed01")
BIP143_P2PKH_SCRIPT = "76a9141d0f172a0ecb48aee1be1f2687d2963ae33f71a188ac"

# Legacy sighash of the unsigned example per input, spent script and sighash type
LEGACY_SIGHASH_VECTORS = [
    (0, BIP143_P2PK_SCRIPT, SigHash.ALL, "63cec688ee06a91e913875356dd4dea2f8e0f2a2659885372da2a37e32c7532e"),
    (0, BIP143_P2PK_SCRIPT, SigHash.NONE, "b5b85036f284c90e641fc6b6fd25fbe29f632a75051e05b0b006a6fbfedd0af2"),
    (0, BIP143_P2PK_SCRIPT, SigHash.SINGLE, "0be090c73eb6bac7b789bb553a2a9775e8d5bcbe292f359f57fd0a13363de709"),
    (1, BIP143_P2PKH_SCRIPT, SigHash.SINGLE, "33cd468bd6b82f04bcef180b748c521d6fdee3b11711a2f27b2e465915afaec2"),
    (0, BIP143_P2PK_SCRIPT, SigHash.ALL_ANYONECANPAY,
     "1f948bed57a053e52f7bcaf5767ded39306b9168b0e204a76f087f2059d63088"),
    (1, BIP143_P2PKH_SCRIPT, SigHash.SINGLE_ANYONECANPAY,
     "865c7791b88917498a4c402176c302f146c53a6c2f50ecda08548f515237dca6"),
]


def test_bip143_sighash(signature_engine):
    """
    We verify the segwit sighash of the second input of the BIP143 native P2WPKH example
    """
    tx = Transaction.from_bytes(bytes.fromhex(BIP143_UNSIGNED_TX))
    script_code = p2pkh_script_code(bytes.fromhex(BIP143_PUBKEY_HASH))

    sighash = signature_engine.get_segwit_sighash(tx, 1, script_code, 600_000_000, SigHash.ALL)
    assert sighash.hex() == BIP143_SIGHASH, "BIP143 sighash mismatch"


def test_legacy_sighash_published_signature(signature_engine):
    """
    The published signature of the P2PK input verifies against our legacy sighash
    """
    tx = Transaction.from_hex(BIP143_UNSIGNED_TX)
    digest = signature_engine.get_legacy_sighash(tx, 0, bytes.fromhex(BIP143_P2PK_SCRIPT), SigHash.ALL)
    public_key = PubKey.from_bytes(bytes.fromhex(BIP143_P2PK_PUBKEY))

    assert signature_engine.verify_ecdsa_sig(bytes.fromhex(BIP143_P2PK_SIGNATURE), digest, public_key), \
        "Published P2PK signature failed to verify"


@pytest.mark.parametrize("input_index, script, sighash, expected", LEGACY_SIGHASH_VECTORS)
def test_legacy_sighash_vectors(signature_engine, input_index, script, sighash, expected):
    tx = Transaction.from_hex(BIP143_UNSIGNED_TX)
    digest = signature_engine.get_legacy_sighash(tx, input_index, bytes.fromhex(script), sighash)
    assert digest.hex() == expected, f"Legacy sighash mismatch for {sighash.name} on input {input_index}"


def test_sighash_single_without_output(signature_engine):
    """
    Legacy SINGLE with no output at the input index signs the integer 1
    """
    key = PrivateKey.generate()
    inputs = [funded_input(key, AddressFormat.P2PKH) for _ in range(2)]
    tx = spending_tx(inputs)

    digest = signature_engine.get_legacy_sighash(tx, 1, inputs[1].outpoint.script_pub_key, SigHash.SINGLE)
    assert digest == (1).to_bytes(32, "little")


def test_legacy_sighash_types_differ(signature_engine):
    key = PrivateKey.generate()
    inputs = [funded_input(key, AddressFormat.P2PKH) for _ in range(2)]
    tx = spending_tx(inputs)
    script_pub_key = inputs[0].outpoint.script_pub_key

    digests = {signature_engine.get_legacy_sighash(tx, 0, script_pub_key, sighash) for sighash in SigHash}
    assert len(digests) == len(SigHash), "Each sighash type must commit to different data"


def test_sign_p2pkh(signature_engine, testnet_key):
    """
    We sign a legacy input and verify the signature against the legacy sighash
    """
    txin = funded_input(testnet_key, AddressFormat.P2PKH)
    tx = spending_tx([txin])
    signed = tx.sign(testnet_key)

    signed_input = signed.inputs[0]
    signature, pubkey = split_pushes(signed_input.script_sig)

    assert signed_input.is_signed and not signed.segwit_flag
    assert pubkey == testnet_key.public_key().to_bytes()
    assert signature[-1:] == SigHash.ALL.to_byte()

    digest = signature_engine.get_legacy_sighash(tx, 0, txin.outpoint.script_pub_key)
    assert signature_engine.verify_ecdsa_sig(signature, digest, testnet_key.public_key()), \
        "Failed to verify P2PKH signature"

    # Parsing the signed transaction recovers its bytes
    assert Transaction.from_bytes(signed.serialize()).serialize() == signed.serialize()


def test_sign_is_pure(testnet_key):
    """
    Signing returns a new transaction and leaves the original untouched
    """
    tx = spending_tx([funded_input(testnet_key, AddressFormat.P2PKH), funded_input(testnet_key, AddressFormat.BECH32)])
    before = tx.serialize()

    signed = tx.sign(testnet_key)
    assert tx.serialize() == before
    assert not any(txin.is_signed for txin in tx.inputs)
    assert all(txin.is_signed for txin in signed.inputs)


def test_sign_bech32(signature_engine, testnet_key):
    amount = 250_000
    txin = funded_input(testnet_key, AddressFormat.BECH32, amount)
    tx = spending_tx([txin])
    signed = tx.sign(testnet_key)

    signed_input = signed.inputs[0]
    signature, pubkey = signed_input.witnesses

    assert signed.segwit_flag and signed_input.script_sig == b''
    assert pubkey == testnet_key.public_key().compressed()

    script_code = p2pkh_script_code(hash160(pubkey))
    digest = signature_engine.get_segwit_sighash(tx, 0, script_code, amount)
    assert signature_engine.verify_ecdsa_sig(signature, digest, testnet_key.public_key()), \
        "Failed to verify P2WPKH signature"

    recovered = Transaction.from_bytes(signed.serialize())
    assert recovered.segwit_flag and recovered.inputs[0].is_signed
    assert recovered.serialize() == signed.serialize()
    assert recovered.txid == tx.txid, "Witness data must not change the txid"


def test_sign_p2sh_p2wpkh(signature_engine, testnet_key):
    txin = funded_input(testnet_key, AddressFormat.P2SH_P2WPKH)
    tx = spending_tx([txin])
    signed = tx.sign(testnet_key)

    signed_input = signed.inputs[0]
    compressed = testnet_key.public_key().compressed()

    assert signed_input.script_sig == encode_pushdata(p2wpkh_redeem_script(compressed))
    assert signed_input.witnesses[1] == compressed

    digest = signature_engine.get_segwit_sighash(tx, 0, p2pkh_script_code(hash160(compressed)), 100_000)
    assert signature_engine.verify_ecdsa_sig(signed_input.witnesses[0], digest, testnet_key.public_key())


@pytest.mark.parametrize("companion_first", [True, False])
def test_sign_p2wsh(signature_engine, testnet_key, companion_first):
    """
    The companion signature is placed before or after our own, followed by the witness script
    """
    companion = bytes.fromhex("30440220") + b'\x11' * 32 + bytes.fromhex("0220") + b'\x22' * 32 + b'\x01'
    txin = funded_input(testnet_key, AddressFormat.P2WSH, additional_witness=(companion, companion_first),
                        witness_script_data=b'\x01')
    tx = spending_tx([txin])
    signed = tx.sign(testnet_key, rng=fixed_rng())

    witnesses = signed.inputs[0].witnesses
    own_signature = signature_engine.sign_input(tx, 0, testnet_key, rng=fixed_rng())
    expected_pair = [companion, own_signature] if companion_first else [own_signature, companion]

    assert witnesses[:2] == expected_pair, "Companion signature in the wrong position"
    assert witnesses[2] == b'\x01'
    assert witnesses[3] == txin.outpoint.redeem_script


def test_p2wsh_requires_companion(testnet_key):
    tx = spending_tx([funded_input(testnet_key, AddressFormat.P2WSH)])
    with pytest.raises(InvalidInputs):
        tx.sign(testnet_key)


def test_segwit_requires_amount(testnet_key):
    tx = spending_tx([funded_input(testnet_key, AddressFormat.BECH32, amount=None)])
    with pytest.raises(InvalidInputs):
        tx.sign(testnet_key)


def test_skip_inputs(testnet_key):
    """
    Inputs already signed, without an address, or for another key are left untouched
    """
    other_key = PrivateKey.generate(testnet_key.network)
    foreign = funded_input(other_key, AddressFormat.P2PKH)
    presigned = TxInput(Outpoint(random_txid(), 0), script_sig=b'\x01\x02')
    unknown = TxInput(Outpoint(random_txid(), 1))
    own = funded_input(testnet_key, AddressFormat.BECH32)

    tx = spending_tx([foreign, presigned, unknown, own])
    signed = tx.sign(testnet_key)

    assert not signed.inputs[0].is_signed and signed.inputs[0].script_sig == b''
    assert signed.inputs[1].script_sig == b'\x01\x02'
    assert not signed.inputs[2].is_signed
    assert signed.inputs[3].is_signed and signed.inputs[3].witnesses


def test_sign_with_sighash_type(signature_engine, testnet_key):
    txin = funded_input(testnet_key, AddressFormat.P2PKH, sighash_code=SigHash.NONE_ANYONECANPAY)
    tx = spending_tx([txin])
    signed = tx.sign(testnet_key)

    signature, _ = split_pushes(signed.inputs[0].script_sig)
    assert signature[-1:] == b'\x82'

    digest = signature_engine.get_legacy_sighash(tx, 0, txin.outpoint.script_pub_key, SigHash.NONE_ANYONECANPAY)
    assert signature_engine.verify_ecdsa_sig(signature, digest, testnet_key.public_key())
    assert Transaction.from_bytes(signed.serialize()).inputs[0].sighash_code == SigHash.NONE_ANYONECANPAY
