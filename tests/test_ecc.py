"""
Tests for the secp256k1 curve and ECDSA
"""
from secrets import randbelow, token_bytes

import pytest

from bitwallet.core import ECCError, ECDSAError
from bitwallet.cryptography import SECP256K1, Point, ecdsa, verify_ecdsa, sha256

curve = SECP256K1


def test_generator():
    """
    We verify the generator is on the curve and has the curve order
    """
    assert curve.is_point_on_curve(curve.generator), "Generator not on curve"
    assert not curve.multiply_generator(curve.order), "n * G must be the point at infinity"
    assert curve.multiply_generator(1) == curve.generator


def test_point_arithmetic():
    """
    Addition, doubling and scalar multiplication agree
    """
    k = randbelow(curve.order - 1) + 1
    pt = curve.multiply_generator(k)

    assert curve.is_point_on_curve(pt), "Scalar multiple not on curve"
    assert curve.add_points(pt, pt) == curve.multiply_generator(2 * k), "Doubling does not agree with 2k * G"
    assert curve.scalar_multiplication(3, pt) == curve.multiply_generator(3 * k)

    # P + (-P) = O
    negative = Point(pt.x, curve.p - pt.y)
    assert not curve.add_points(pt, negative), "Sum of inverses must be the point at infinity"
    assert curve.add_points(pt, Point()) == pt, "Point at infinity must be the identity"


def test_find_y_from_x():
    pt = curve.multiply_generator(randbelow(curve.order - 1) + 1)
    y = curve.find_y_from_x(pt.x)

    assert y % 2 == 0, "Recovered y must be even"
    assert y in (pt.y, curve.p - pt.y), "Recovered y does not match either root"

    with pytest.raises(ECCError):
        curve.find_y_from_x(curve.p)


def test_ecdsa():
    """
    We sign a random message and verify the signature under the right and wrong keys
    """
    private_key = randbelow(curve.order - 1) + 1
    public_key = curve.multiply_generator(private_key)
    message = sha256(token_bytes(64))

    r, s = ecdsa(private_key, message)
    assert s <= curve.order // 2, "Signature must use low s"
    assert verify_ecdsa((r, s), message, public_key), "Failed to verify ECDSA signature"
    assert verify_ecdsa((r, s), message, public_key.tuple), "Failed to verify with tuple public key"

    other_key = curve.multiply_generator(private_key + 1 if private_key < curve.order - 1 else 1)
    assert not verify_ecdsa((r, s), message, other_key), "Signature verified against the wrong key"
    assert not verify_ecdsa((r, s), sha256(message), public_key), "Signature verified against the wrong message"


def test_ecdsa_deterministic_nonce():
    """
    The nonce source is injectable: a fixed nonce gives a fixed signature
    """
    message = sha256(b"bitwallet")
    sig1 = ecdsa(12345, message, rng=lambda n: 999)
    sig2 = ecdsa(12345, message, rng=lambda n: 999)
    assert sig1 == sig2


def test_ecdsa_errors():
    with pytest.raises(ECDSAError):
        ecdsa(0, sha256(b""))
    with pytest.raises(ECDSAError):
        verify_ecdsa((0, 1), sha256(b""), curve.generator)
