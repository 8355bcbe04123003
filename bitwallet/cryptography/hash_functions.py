"""
Shortcuts for the hash functions used by the wallet. Each function returns the bytes digest
"""
import hashlib
import hmac

import unicodedata
from ripemd.ripemd160 import ripemd160 as _ripemd160

from bitwallet.core import WALLET

__all__ = ["hash160", "hash256", "hmac_sha512", "pbkdf2", "ripemd160", "sha256", "sha512"]


# --- SHA --- #
def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def sha512(data: bytes) -> bytes:
    return hashlib.sha512(data).digest()


# --- RIPEMD --- #

def ripemd160(data: bytes) -> bytes:
    return _ripemd160(data)


# --- BTC HASH FUNCTIONS --- #

def hash256(data: bytes) -> bytes:
    """SHA256(SHA256(data))"""
    return sha256(sha256(data))


def hash160(data: bytes) -> bytes:
    """RIPEMD160(SHA256(data))"""
    return ripemd160(sha256(data))


# --- WALLET HASHES --- #
def hmac_sha512(key: bytes, message: bytes) -> bytes:
    return hmac.new(key=key, msg=message, digestmod=hashlib.sha512).digest()


def pbkdf2(mnemonic: str, passphrase: str = '', iterations: int = WALLET.SEED_ITERATIONS,
           dklen: int = WALLET.DKLEN) -> bytes:
    """
    Derives a seed from a mnemonic phrase using PBKDF2-HMAC-SHA512.

    mnemonic: The space separated mnemonic phrase.
    passphrase: An optional passphrase string (default: empty string).
    iterations: Number of iterations for PBKDF2 (default: 2048).
    dklen: Length of the derived key in bytes (default: 64 bytes).
    return: The derived key bytes.
    """
    # Normalize the mnemonic and passphrase using NFKD
    normalized_mnemonic = unicodedata.normalize('NFKD', mnemonic)
    normalized_passphrase = unicodedata.normalize('NFKD', passphrase)

    # Salt is "mnemonic" + normalized passphrase
    salt = f"{WALLET.SALT_PREFIX}{normalized_passphrase}".encode('utf-8')
    password_bytes = normalized_mnemonic.encode('utf-8')

    return hashlib.pbkdf2_hmac('sha512', password_bytes, salt, iterations, dklen)
