"""Run-length and RLE/bit-packed hybrid encodings."""

from __future__ import annotations

import io
from itertools import groupby
from typing import BinaryIO, Sequence

from parquetlite.bitpack import (
    read_bit_packed,
    read_unsigned_varint,
    write_unsigned_varint,
)
from parquetlite.format import Type
from parquetlite.plain import read_plain_int32, write_plain, write_plain_int32

__all__ = [
    "read_rle",
    "read_rle_bit_packed_hybrid",
    "write_rle",
    "write_rle_bit_packed_hybrid",
    "write_rle_int32",
    "write_rle_bit_packed_hybrid_int32",
]


def read_rle(stream: BinaryIO, header: int, bit_width: int) -> list[int]:
    """Read one RLE run: ``header >> 1`` copies of a value stored in ``ceil(bit_width / 8)`` bytes."""
    count = header >> 1
    width = (bit_width + 7) // 8
    data = b""
    if width > 0:
        data = stream.read(width)
        if not data:
            raise EOFError("no data for RLE run value")
    value = int.from_bytes(data.ljust(4, b"\x00")[:4], "little")
    return [value] * count


def read_rle_bit_packed_hybrid(
    stream: BinaryIO, bit_width: int, length: int
) -> list[int]:
    """Read an RLE/bit-packed hybrid block of ``length`` bytes.

    When ``length`` is not positive it is read from the stream as a 4-byte prefix.
    """
    if length <= 0:
        length = read_plain_int32(stream, 1)[0]
        if length < 0:
            raise ValueError(f"negative RLE block length: {length}")
    if length == 0:
        return []
    data = stream.read(length)
    if not data:
        raise EOFError("no data for RLE block")
    block = data.ljust(length, b"\x00")
    sub = io.BytesIO(block)
    result: list[int] = []
    while sub.tell() < length:
        header = read_unsigned_varint(sub)
        if header & 1 == 0:
            result.extend(read_rle(sub, header, bit_width))
        else:
            result.extend(read_bit_packed(sub, header, bit_width))
    return result


def _runs(values: Sequence) -> list[tuple[object, int]]:
    return [(value, sum(1 for _ in run)) for value, run in groupby(values)]


def write_rle(values: Sequence, bit_width: int, data_type: Type) -> bytes:
    """Encode runs of equal values; each value is the PLAIN bytes of ``data_type`` cut to ``ceil(bit_width / 8)``."""
    byte_num = (bit_width + 7) // 8
    out = bytearray()
    for value, count in _runs(values):
        out += write_unsigned_varint(count << 1)
        out += write_plain([value], data_type)[:byte_num]
    return bytes(out)


def write_rle_bit_packed_hybrid(
    values: Sequence, bit_width: int, data_type: Type
) -> bytes:
    """Encode ``values`` as RLE runs preceded by a 4-byte block length."""
    body = write_rle(values, bit_width, data_type)
    return write_plain_int32([len(body)]) + body


def write_rle_int32(values: Sequence[int], bit_width: int) -> bytes:
    """Encode runs of equal 32-bit integers."""
    byte_num = (bit_width + 7) // 8
    if byte_num > 4:
        raise ValueError(f"bit width {bit_width} is too wide for 32-bit values")
    out = bytearray()
    for value, count in _runs(values):
        out += write_unsigned_varint(count << 1)
        out += (value & 0xFFFFFFFF).to_bytes(4, "little")[:byte_num]
    return bytes(out)


def write_rle_bit_packed_hybrid_int32(values: Sequence[int], bit_width: int) -> bytes:
    """Encode 32-bit integers as RLE runs preceded by a 4-byte block length."""
    body = write_rle_int32(values, bit_width)
    return write_plain_int32([len(body)]) + body