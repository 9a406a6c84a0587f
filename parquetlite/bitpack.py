"""Unsigned varints and bit-packed integer runs."""

from __future__ import annotations

from typing import BinaryIO, Sequence

__all__ = [
    "to_int64",
    "read_unsigned_varint",
    "write_unsigned_varint",
    "read_bit_packed",
    "write_bit_packed",
    "write_bit_packed_deprecated",
]

_MASK64 = (1 << 64) - 1


def _to_signed64(value: int) -> int:
    value &= _MASK64
    return value - (1 << 64) if value >= 1 << 63 else value


def to_int64(values: Sequence) -> list[int]:
    """Convert booleans or integers to integers; booleans become 1 and 0."""
    if not values:
        return []
    if isinstance(values[0], bool):
        return [1 if value else 0 for value in values]
    return [int(value) for value in values]


def read_unsigned_varint(stream: BinaryIO) -> int:
    """Read a ULEB128 integer; a truncated varint yields the bits read so far."""
    result = 0
    shift = 0
    while True:
        byte = stream.read(1)
        if not byte:
            break
        b = byte[0]
        result |= (b & 0x7F) << shift
        if not b & 0x80:
            break
        shift += 7
    return result & _MASK64


def write_unsigned_varint(num: int) -> bytes:
    """Encode ``num`` (taken modulo 2**64) as a ULEB128 integer."""
    num &= _MASK64
    out = bytearray()
    while True:
        low = num & 0x7F
        num >>= 7
        if num:
            out.append(low | 0x80)
        else:
            out.append(low)
            return bytes(out)


def read_bit_packed(stream: BinaryIO, header: int, bit_width: int) -> list[int]:
    """Read a bit-packed run of ``(header >> 1) * 8`` values, least significant bit first."""
    count = (header >> 1) * 8
    if count == 0:
        return []
    if bit_width == 0:
        return [0] * count
    byte_count = count * bit_width // 8
    data = stream.read(byte_count)
    if byte_count and not data:
        raise EOFError("no data for bit-packed run")
    packed = int.from_bytes(data.ljust(byte_count, b"\x00"), "little")
    mask = (1 << bit_width) - 1
    return [
        _to_signed64((packed >> (i * bit_width)) & mask) for i in range(count)
    ]


def write_bit_packed(values: Sequence, bit_width: int, with_header: bool) -> bytes:
    """Pack values least significant bit first; only whole bytes are emitted."""
    if not values:
        return b""
    ints = to_int64(values)
    mask = (1 << bit_width) - 1
    packed = 0
    for i, value in enumerate(ints):
        packed |= (value & mask) << (i * bit_width)
    nbytes = len(ints) * bit_width // 8
    body = (packed & ((1 << (nbytes * 8)) - 1)).to_bytes(nbytes, "little")
    if not with_header:
        return body
    header = ((len(ints) // 8) << 1) | 1
    return write_unsigned_varint(header) + body


def write_bit_packed_deprecated(values: Sequence, bit_width: int) -> bytes:
    """Pack values most significant bit first; only whole bytes are emitted."""
    if not values:
        return b""
    mask = (1 << bit_width) - 1
    packed = 0
    for value in values:
        packed = (packed << bit_width) | (int(value) & mask)
    total = len(values) * bit_width
    nbytes = total // 8
    packed >>= total - nbytes * 8
    return packed.to_bytes(nbytes, "big")