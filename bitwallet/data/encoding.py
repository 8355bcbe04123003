"""
Methods for encoding and decoding: Base58, Base58Check, Bech32 and DER signatures
"""
import bech32
from cryptography.hazmat.primitives.asymmetric.utils import encode_dss_signature, decode_dss_signature

from bitwallet.core import DataEncodingError, InvalidChecksum, InvalidByteLength, DATA
from bitwallet.cryptography import hash256

__all__ = ["encode_base58", "decode_base58", "encode_base58check", "decode_base58check", "encode_bech32",
           "decode_bech32", "encode_der_signature", "decode_der_signature"]

# --- BASE58 ENCODING --- #
BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
BASE58_INDEX = {char: index for index, char in enumerate(BASE58_ALPHABET)}


def encode_base58(data: bytes) -> str:
    """
    We return the base58 encoding of the given bytes data
    """
    base = len(BASE58_ALPHABET)
    n = int.from_bytes(data, byteorder="big")
    encoded_string = ""

    while n > 0:
        n, temp_index = divmod(n, base)
        encoded_string = BASE58_ALPHABET[temp_index] + encoded_string

    # Each leading zero byte is a leading '1'
    leading_zeros = len(data) - len(data.lstrip(b'\x00'))
    return ("1" * leading_zeros) + encoded_string


def decode_base58(data: str) -> bytes:
    """
    Given a base58 encoded string, return the underlying bytes
    """
    total = 0
    for char in data:
        char_i = BASE58_INDEX.get(char)
        if char_i is None:
            raise DataEncodingError(f"Invalid base58 character: {char!r}")
        total = total * 58 + char_i

    decoded_bytes = total.to_bytes((total.bit_length() + 7) // 8, "big")

    # Each leading '1' represents a leading zero byte
    leading_zeros = len(data) - len(data.lstrip("1"))
    return (b'\x00' * leading_zeros) + decoded_bytes


def encode_base58check(data: bytes) -> str:
    """
    Given bytes data, we return the base58 encoding along with checksum
    """
    checksum = hash256(data)[:DATA.CHECKSUM_BYTES]
    return encode_base58(data + checksum)


def decode_base58check(data: str, expected_length: int | None = None) -> bytes:
    """
    Given a string of base58Check chars, we decode it and return the payload without checksum.
    If expected_length is given, the decoded bytes (checksum included) must be exactly that long.
    """
    decoded = decode_base58(data)
    if expected_length is not None and len(decoded) != expected_length:
        raise InvalidByteLength(f"Expected {expected_length} decoded bytes, found {len(decoded)}")
    if len(decoded) <= DATA.CHECKSUM_BYTES:
        raise InvalidByteLength(f"Decoded data too short for a checksum: {len(decoded)} bytes")

    payload, checksum = decoded[:-DATA.CHECKSUM_BYTES], decoded[-DATA.CHECKSUM_BYTES:]
    if hash256(payload)[:DATA.CHECKSUM_BYTES] != checksum:
        raise InvalidChecksum(f"Decoded checksum {checksum.hex()} does not match payload")
    return payload


# --- BECH32 ENCODING --- #
def encode_bech32(program: bytes, hrp: str = "bc", witver: int = 0) -> str:
    """
    Returns the Bech32 encoding of the provided witness program.

    Parameters
    ----------
    program : bytes
        The witness program (20 bytes for P2WPKH, 32 bytes for P2WSH)
    hrp : str
        Human-readable part (e.g. 'bc' for mainnet, 'tb' for testnet)
    witver : int
        Witness version
    """
    if not (0 <= witver <= 16):
        raise DataEncodingError("Witness version must be between 0 and 16.")

    converted_data = bech32.convertbits(list(program), 8, 5, pad=True)
    if converted_data is None:
        raise DataEncodingError("Failed to convert data from 8-bit to 5-bit.")

    address = bech32.bech32_encode(hrp, [witver] + converted_data)

    # Decode the address to verify checksum
    decoded_hrp, decoded_data = bech32.bech32_decode(address)
    if decoded_hrp != hrp or decoded_data is None:
        raise DataEncodingError("Checksum verification failed. The generated Bech32 address is invalid.")

    return address


def decode_bech32(address: str) -> tuple[str, int, bytes]:
    """
    Given a bech32 address we return the hrp, the witness version and the witness program
    """
    hrp, decoded_data = bech32.bech32_decode(address)
    if hrp is None or not decoded_data:
        raise DataEncodingError(f"Invalid bech32 string: {address}")

    witver, data = decoded_data[0], decoded_data[1:]
    converted_data = bech32.convertbits(data, 5, 8, pad=False)
    if converted_data is None:
        raise DataEncodingError("Failed to convert bech32 data from 5-bit to 8-bit.")

    return hrp, witver, bytes(converted_data)


# --- DER SIGNATURE ENCODING --- #
def encode_der_signature(r: int, s: int) -> bytes:
    """
    Encodes ECDSA integers r and s into a DER-encoded signature.
    """
    return encode_dss_signature(r, s)


def decode_der_signature(der_sig: bytes) -> tuple[int, int]:
    """
    Decodes a DER-encoded ECDSA signature back into integers r and s.
    """
    try:
        return decode_dss_signature(der_sig)
    except ValueError as e:
        raise DataEncodingError(f"Invalid DER signature: {der_sig.hex()}") from e
