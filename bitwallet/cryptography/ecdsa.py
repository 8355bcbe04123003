"""
Methods to create and verify a signature created using ECDSA
"""
import secrets
from typing import Callable, Tuple

from bitwallet.core.exceptions import ECDSAError
from bitwallet.cryptography.ecc import SECP256K1, Point

__all__ = ["ecdsa", "verify_ecdsa"]

curve = SECP256K1


def _message_to_int(message: bytes, n: int) -> int:
    """Keep the n leftmost bits of the message"""
    z = int.from_bytes(message, 'big')
    excess = len(message) * 8 - n.bit_length()
    if excess > 0:
        z >>= excess
    return z


def ecdsa(private_key: int, message: bytes, rng: Callable[[int], int] = secrets.randbelow) -> Tuple[int, int]:
    """
    Generates an ECDSA signature for a given private_key and message hash on secp256k1.

    Parameters:
    ----------
    private_key : int
        The signer's private key.
    message : bytes
        The hash of the message (typically a transaction sighash) that will be signed.
    rng : Callable[[int], int]
        Nonce source. Called with the group order n, must return an integer in [0, n-1].

    Returns:
    --------
    tuple
        The ECDSA signature (r, s). (using low s as per BIP-62)

    Algorithm:
    ----------
    1) Compute z as the integer value of the first n bits of message hash.
    2) Select a random integer k in [1, n-1].
    3) Calculate curve point (x, y) = k * generator.
    4) Compute r = x (mod n) and s = k^(-1)(z + r * private_key) (mod n).
    5) If r or s is 0, repeat from step 2.
    6) Return the signature (r, min(s, n - s)).
    """
    n = curve.order
    if not 1 <= private_key < n:
        raise ECDSAError("Private key out of bounds for ECDSA")

    z = _message_to_int(message, n)

    while True:
        k = rng(n)
        if not 1 <= k < n:
            continue

        x, _ = curve.multiply_generator(k)
        r = x % n
        if r == 0:
            continue

        s = (pow(k, -1, n) * (z + r * private_key)) % n
        if s == 0:
            continue
        break

    # Low s
    if s > n // 2:
        s = n - s

    return r, s


def verify_ecdsa(signature: tuple, message: bytes, public_key: Point | tuple) -> bool:
    """
    We verify that the given signature corresponds to the correct public_key for the given message.

    Algorithm
    --------
    Let n denote the group order of the elliptic curve.

    1) Verify that (r,s) are integers in the interval [1,n-1]
    2) Let z be the integer value of the first n bits of the message
    3) Let u1 = z * s^(-1) (mod n) and u2 = r * s^(-1) (mod n)
    4) Calculate the curve point (x,y) = (u1 * generator) + (u2 * public_key)
    5) If r = x (mod n), the signature is valid.
    """
    n = curve.order
    r, s = signature
    if isinstance(public_key, tuple):
        public_key = Point(*public_key)

    if not (1 <= r < n):
        raise ECDSAError(f"ECDSA r value {r} out of bounds.")
    if not (1 <= s < n):
        raise ECDSAError(f"ECDSA s value {s} out of bounds.")

    z = _message_to_int(message, n)

    s_inv = pow(s, -1, n)
    u1 = (z * s_inv) % n
    u2 = (r * s_inv) % n

    final_pt = curve.add_points(curve.multiply_generator(u1), curve.scalar_multiplication(u2, public_key))
    if not final_pt:
        return False

    return r == final_pt.x % n
