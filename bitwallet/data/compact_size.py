"""
Methods for writing and reading compact size data
"""
from typing import Callable, TypeVar

from bitwallet.core import (get_stream, read_little_int, read_stream, SERIALIZED, InvalidVariableSizeInteger,
                            WriteError, DATA)

__all__ = ["read_compact_size", "write_compact_size", "read_vector", "read_witness_vector", "write_vector"]

T = TypeVar("T")


def read_compact_size(byte_stream: SERIALIZED) -> int:
    """
    Read a CompactSize integer. Non-minimal encodings are rejected.
    """
    stream = get_stream(byte_stream)

    prefix = read_little_int(stream, 1, "Compact Size Prefix")

    # One byte compact size number
    if prefix <= 0xfc:
        return prefix

    match prefix:
        case 0xfd:
            num, minimum = read_little_int(stream, 2, "Compact Size: 0xfd"), 0xfd
        case 0xfe:
            num, minimum = read_little_int(stream, 4, "Compact Size: 0xfe"), 0x10000
        case _:
            num, minimum = read_little_int(stream, 8, "Compact Size: 0xff"), 0x100000000

    if num < minimum:
        raise InvalidVariableSizeInteger(f"Non-canonical CompactSize encoding: {hex(num)} with prefix {hex(prefix)}")
    return num


def write_compact_size(num: int) -> bytes:
    """
    Given an integer we return its CompactSize encoding
    """
    if num < 0 or num > DATA.MAX_COMPACTSIZE:
        raise WriteError("Given number out of bounds for CompactSize encoding")

    if num <= 0xfc:  # One byte
        return num.to_bytes(1, "little")
    elif num <= 0xffff:  # Two bytes
        return b'\xfd' + num.to_bytes(2, "little")
    elif num <= 0xffffffff:  # Four bytes
        return b'\xfe' + num.to_bytes(4, "little")
    else:  # Eight bytes
        return b'\xff' + num.to_bytes(8, "little")


def read_vector(byte_stream: SERIALIZED, reader: Callable[[SERIALIZED], T]) -> list[T]:
    """
    Read a CompactSize count followed by that many elements, each read with the given reader
    """
    stream = get_stream(byte_stream)
    count = read_compact_size(stream)
    return [reader(stream) for _ in range(count)]


def write_vector(items: list[bytes]) -> bytes:
    """
    Serialize a list of byte strings as a CompactSize count followed by length-prefixed items
    """
    parts = [write_compact_size(len(items))]
    for item in items:
        parts.append(write_compact_size(len(item)))
        parts.append(item)
    return b''.join(parts)


def read_witness_vector(byte_stream: SERIALIZED) -> tuple[int, list[bytes]]:
    """
    Read a witness stack: item count, then each item as CompactSize length || bytes.
    Returns the count along with the items.
    """
    stream = get_stream(byte_stream)
    count = read_compact_size(stream)
    items = []
    for _ in range(count):
        item_len = read_compact_size(stream)
        items.append(read_stream(stream, item_len, "witness item"))
    return count, items
