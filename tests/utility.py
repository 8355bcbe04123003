"""
Test utilities
"""
from secrets import token_bytes

from bitwallet.core import TX, AddressFormat
from bitwallet.data import PrivateKey, TESTNET, MAINNET
from bitwallet.tx import Outpoint, TxInput, TxOutput, Transaction
from bitwallet.wallet import Address

# --- KNOWN VALUES --- #
ABANDON_PHRASE = "abandon abandon abandon abandon abandon abandon abandon abandon abandon abandon abandon about"
ABANDON_SEED = ("5eb00bbddcf069084889a8ab9155568165f5c453ccb85e70811aaed6f6da5fc1"
                "9a5ac40b389cd370d086206dec8aa6c43daea6690f20ad3d8d48b2d2ce9e38e4")


# --- RANDOM --- #
def random_txid() -> bytes:
    return token_bytes(TX.TXID)


def random_private_key(network=MAINNET) -> PrivateKey:
    return PrivateKey.generate(network)


def fixed_rng(value: int = 0x1234567890abcdef):
    """Deterministic nonce source for ECDSA"""
    return lambda n: value % n


# --- TRANSACTIONS --- #
def p2wsh_script(private_key: PrivateKey) -> bytes:
    """<pubkey> OP_CHECKSIG"""
    pubkey = private_key.public_key().compressed()
    return len(pubkey).to_bytes(1, "little") + pubkey + b'\xac'


def funded_input(private_key: PrivateKey, address_format: AddressFormat, amount: int | None = 100_000,
                 **kwargs) -> TxInput:
    """
    An unsigned input spending an output locked to the given key in the given format
    """
    network = private_key.network
    redeem_script = None
    if address_format == AddressFormat.P2WSH:
        redeem_script = p2wsh_script(private_key)
        address = Address.p2wsh(redeem_script, network)
    else:
        address = Address.from_private_key(private_key, address_format)

    outpoint = Outpoint(random_txid(), 0, amount, redeem_script=redeem_script, address=address)
    return TxInput(outpoint, **kwargs)


def spending_tx(inputs: list[TxInput], amount: int = 90_000, network=TESTNET) -> Transaction:
    """
    A transaction paying the given amount to a fresh P2PKH address
    """
    destination = Address.from_private_key(random_private_key(network))
    return Transaction(inputs, [TxOutput.from_address(destination, amount)])


def split_pushes(script: bytes) -> list[bytes]:
    """Split a script made only of direct pushes into the pushed items"""
    items = []
    i = 0
    while i < len(script):
        length = script[i]
        items.append(script[i + 1:i + 1 + length])
        i += 1 + length
    return items
