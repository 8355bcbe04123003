"""
Test for CompactSize encoding
"""
from random import randint

import pytest

from bitwallet.core import InvalidVariableSizeInteger, WriteError, ReadError
from bitwallet.data import read_compact_size, write_compact_size, read_vector, write_vector, read_witness_vector


def test_read_compactsize():
    """
    We create 4 distinct compact size numbers and verify we can read them
    """
    # Get random ints
    cs_1_int = randint(0, 0xfc)
    cs_2_int = randint(0xfd, 0xffff)
    cs_3_int = randint(0x10000, 0xffffffff)
    cs_4_int = randint(0x100000000, 0xffffffffffffffff)

    # Format to CompactSize encoding
    cs1 = cs_1_int.to_bytes(1, "little")
    cs2 = b'\xfd' + cs_2_int.to_bytes(2, "little")
    cs3 = b'\xfe' + cs_3_int.to_bytes(4, "little")
    cs4 = b'\xff' + cs_4_int.to_bytes(8, "little")

    # Verify decoding yields original integers
    assert read_compact_size(cs1) == cs_1_int, "CompactSize decoding fails for 1-byte integer"
    assert read_compact_size(cs2) == cs_2_int, "CompactSize decoding fails for 2-byte integer"
    assert read_compact_size(cs3) == cs_3_int, "CompactSize decoding fails for 4-byte integer"
    assert read_compact_size(cs4) == cs_4_int, "CompactSize decoding fails for 8-byte integer"


def test_write_compactsize():
    """
    We create 4 distinct integers and verify they encode to proper CompactSize format
    """
    # Boundaries of each encoding width
    assert write_compact_size(0xfc) == b'\xfc'
    assert write_compact_size(0xfd) == b'\xfd\xfd\x00'
    assert write_compact_size(0xffff) == b'\xfd\xff\xff'
    assert write_compact_size(0x10000) == b'\xfe\x00\x00\x01\x00'
    assert write_compact_size(0xffffffff) == b'\xfe\xff\xff\xff\xff'
    assert write_compact_size(0x100000000) == b'\xff' + (0x100000000).to_bytes(8, "little")


@pytest.mark.parametrize("encoded", [
    b'\xfd\xfc\x00',  # 0xfc fits in one byte
    b'\xfe\xff\xff\x00\x00',  # 0xffff fits in 0xfd form
    b'\xff\xff\xff\xff\xff\x00\x00\x00\x00',  # 0xffffffff fits in 0xfe form
])
def test_non_canonical_compactsize(encoded):
    """
    A value encoded in a wider form than necessary is rejected
    """
    with pytest.raises(InvalidVariableSizeInteger):
        read_compact_size(encoded)


def test_compactsize_errors():
    with pytest.raises(WriteError):
        write_compact_size(-1)
    with pytest.raises(ReadError):
        read_compact_size(b'\xfd\x01')


def test_witness_vector():
    """
    We verify a witness stack is written as item count plus length-prefixed items and read back
    """
    items = [b'\x01' * 72, b'', b'\x02' * 33]
    encoded = write_vector(items)

    assert encoded[:1] == b'\x03', "Item count not written first"
    assert write_vector([]) == b'\x00', "Empty stack must be a single zero byte"

    count, recovered = read_witness_vector(encoded)
    assert count == 3
    assert recovered == items, "Failed to recover witness items"


def test_read_vector():
    encoded = b'\x02' + b'\xaa\xbb' + b'\xcc\xdd'
    values = read_vector(encoded, lambda stream: stream.read(2))
    assert values == [b'\xaa\xbb', b'\xcc\xdd']
