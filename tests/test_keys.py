"""
Tests for the PrivateKey and PubKey classes
"""
import pytest

from bitwallet.core import ECCPrivateKeyError, PubKeyError, PrivateKeyError, InvalidByteLength
from bitwallet.cryptography import SECP256K1, sha256
from bitwallet.data import PrivateKey, PubKey, MAINNET, TESTNET

KNOWN_SECRET = 0x0C28FCA386C7A227600B2FE50B7CAE11EC86D3BF1FBE471BE89827E19D72AA1D
KNOWN_WIF_UNCOMPRESSED = "5HueCGU8rMjxEXxiPuD5BDku4MkFqeZyd4dZ1jvhTVqvbTLvyTJ"
KNOWN_WIF_COMPRESSED = "KwdMAjGmerYanjeui5SHS7JkmpZvVipYvB2LJGU1ZxJwYvP98617"

GENERATOR_COMPRESSED = "0279be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"


def test_wif_known():
    """
    We verify the known WIF encodings of a fixed private key
    """
    uncompressed = PrivateKey(KNOWN_SECRET, is_compressed=False)
    compressed = PrivateKey(KNOWN_SECRET)

    assert uncompressed.to_wif() == KNOWN_WIF_UNCOMPRESSED, "Uncompressed WIF mismatch"
    assert compressed.to_wif() == KNOWN_WIF_COMPRESSED, "Compressed WIF mismatch"

    assert PrivateKey.from_wif(KNOWN_WIF_UNCOMPRESSED) == uncompressed
    assert PrivateKey.from_wif(KNOWN_WIF_COMPRESSED) == compressed


def test_wif_network():
    key = PrivateKey.generate(TESTNET)
    wif = key.to_wif()

    assert wif[0] in "c9", "Testnet WIF must start with c (compressed) or 9 (uncompressed)"
    assert PrivateKey.from_wif(wif).network == TESTNET

    with pytest.raises(PrivateKeyError):
        PrivateKey.from_wif(wif, network=MAINNET)


def test_private_key_bounds():
    with pytest.raises(ECCPrivateKeyError):
        PrivateKey(0)
    with pytest.raises(ECCPrivateKeyError):
        PrivateKey(SECP256K1.order)
    with pytest.raises(InvalidByteLength):
        PrivateKey.from_bytes(b'\x01' * 31)


def test_pubkey_encodings():
    """
    The public key of 1 is the generator
    """
    pubkey = PrivateKey(1).public_key()

    assert pubkey.to_point() == SECP256K1.generator
    assert pubkey.compressed().hex() == GENERATOR_COMPRESSED
    assert pubkey.uncompressed()[:1] == b'\x04' and len(pubkey.uncompressed()) == 65

    # Compressed and uncompressed encodings recover the same point
    from_compressed = PubKey.from_bytes(pubkey.compressed())
    from_uncompressed = PubKey.from_bytes(pubkey.uncompressed())
    assert from_compressed.to_point() == from_uncompressed.to_point() == pubkey.to_point()
    assert from_compressed.is_compressed and not from_uncompressed.is_compressed


def test_pubkey_odd_y():
    """
    We verify the 0x03 prefix recovers the odd root
    """
    for secret in range(1, 10):
        pubkey = PrivateKey(secret).public_key()
        recovered = PubKey.from_bytes(pubkey.compressed())
        assert recovered == pubkey, f"Failed to recover public key of {secret} from compressed encoding"


def test_pubkey_errors():
    with pytest.raises(PubKeyError):
        PubKey.from_bytes(b'\x05' + bytes.fromhex(GENERATOR_COMPRESSED)[1:])
    with pytest.raises(PubKeyError):
        PubKey.from_bytes(bytes.fromhex(GENERATOR_COMPRESSED) + b'\x00')


def test_sign_and_verify():
    key = PrivateKey.generate()
    digest = sha256(b"sign me")

    signature = key.sign(digest)
    assert key.public_key().verify(signature, digest), "Failed to verify signature with the signer's public key"
    assert not PrivateKey.generate().public_key().verify(signature, digest)
