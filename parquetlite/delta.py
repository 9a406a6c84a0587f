"""Delta and byte-stream-split encodings."""

from __future__ import annotations

import struct
from typing import BinaryIO, Callable, Sequence

from parquetlite.bitpack import (
    read_bit_packed,
    read_unsigned_varint,
    write_bit_packed,
    write_unsigned_varint,
)
from parquetlite.plain import read_plain_fixed_len_byte_array

__all__ = [
    "read_delta_binary_packed_int32",
    "read_delta_binary_packed_int64",
    "read_delta_length_byte_array",
    "read_delta_byte_array",
    "read_byte_stream_split_float32",
    "read_byte_stream_split_float64",
    "write_delta",
    "write_delta_int32",
    "write_delta_int64",
    "write_delta_length_byte_array",
    "write_delta_byte_array",
    "write_byte_stream_split",
    "write_byte_stream_split_float32",
    "write_byte_stream_split_float64",
]

_BLOCK_SIZE = 128
_MINI_BLOCKS = 4
_VALUES_PER_MINI_BLOCK = _BLOCK_SIZE // _MINI_BLOCKS

_MASK32 = 0xFFFFFFFF
_MASK64 = (1 << 64) - 1
_INT32_MIN = -(1 << 31)
_INT32_MAX = (1 << 31) - 1


def _wrap32(value: int) -> int:
    value &= _MASK32
    return value - (1 << 32) if value >= 1 << 31 else value


def _wrap64(value: int) -> int:
    value &= _MASK64
    return value - (1 << 64) if value >= 1 << 63 else value


def _zigzag32(value: int) -> int:
    # The 32-bit result is sign-extended to 64 bits before it becomes a varint.
    return _wrap32((value >> 31) ^ (value << 1)) & _MASK64


def _zigzag64(value: int) -> int:
    return ((value >> 63) ^ (value << 1)) & _MASK64


def _unzigzag32(encoded: int) -> int:
    low = encoded & _MASK32
    return _wrap32((low >> 1) ^ -(low & 1))


def _unzigzag64(encoded: int) -> int:
    encoded &= _MASK64
    return _wrap64((encoded >> 1) ^ -(encoded & 1))


def _as_bytes(value: bytes | bytearray | memoryview | str) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


# ---------------------------------------------------------------- delta binary packed


def _read_delta(
    stream: BinaryIO,
    wrap: Callable[[int], int],
    unzigzag: Callable[[int], int],
    stop_inside_mini_block: bool,
) -> list[int]:
    block_size = read_unsigned_varint(stream)
    mini_blocks = read_unsigned_varint(stream)
    num_values = read_unsigned_varint(stream)
    first = unzigzag(read_unsigned_varint(stream))
    if mini_blocks == 0:
        raise ValueError("delta header declares zero mini blocks")
    per_mini_block = block_size // mini_blocks

    result = [first]
    while len(result) < num_values:
        min_delta = unzigzag(read_unsigned_varint(stream))
        widths = stream.read(mini_blocks)
        if len(widths) < mini_blocks:
            raise EOFError("delta block is missing its bit widths")
        for width in widths:
            if len(result) >= num_values:
                break
            packed = read_bit_packed(stream, (per_mini_block // 8) << 1, width)
            for delta in packed:
                if stop_inside_mini_block and len(result) >= num_values:
                    break
                result.append(wrap(result[-1] + delta + min_delta))
    return result[:num_values]


def read_delta_binary_packed_int32(stream: BinaryIO) -> list[int]:
    """Read DELTA_BINARY_PACKED 32-bit integers."""
    return _read_delta(stream, _wrap32, _unzigzag32, True)


def read_delta_binary_packed_int64(stream: BinaryIO) -> list[int]:
    """Read DELTA_BINARY_PACKED 64-bit integers."""
    return _read_delta(stream, _wrap64, _unzigzag64, False)


def _write_delta(
    values: Sequence[int],
    wrap: Callable[[int], int],
    zigzag: Callable[[int], int],
) -> bytes:
    if not values:
        raise ValueError("delta encoding needs at least one value")
    nums = [wrap(int(value)) for value in values]

    out = bytearray()
    for field in (_BLOCK_SIZE, _MINI_BLOCKS, len(nums), zigzag(nums[0])):
        out += write_unsigned_varint(field)

    deltas = [wrap(current - previous) for previous, current in zip(nums, nums[1:])]
    for start in range(0, len(deltas), _BLOCK_SIZE):
        block = deltas[start : start + _BLOCK_SIZE]
        min_delta = min(block)
        block += [min_delta] * (_BLOCK_SIZE - len(block))
        adjusted = [wrap(delta - min_delta) for delta in block]
        minis = [
            adjusted[k * _VALUES_PER_MINI_BLOCK : (k + 1) * _VALUES_PER_MINI_BLOCK]
            for k in range(_MINI_BLOCKS)
        ]
        widths = [max(max(mini), 0).bit_length() for mini in minis]
        out += write_unsigned_varint(zigzag(min_delta))
        out += bytes(widths)
        for mini, width in zip(minis, widths):
            out += write_bit_packed(mini, width, False)
    return bytes(out)


def write_delta_int32(values: Sequence[int]) -> bytes:
    """Encode 32-bit integers as DELTA_BINARY_PACKED; raise ValueError when empty."""
    return _write_delta(values, _wrap32, _zigzag32)


def write_delta_int64(values: Sequence[int]) -> bytes:
    """Encode 64-bit integers as DELTA_BINARY_PACKED; raise ValueError when empty."""
    return _write_delta(values, _wrap64, _zigzag64)


def write_delta(values: Sequence) -> bytes:
    """Delta-encode integers, as 32-bit when all fit and as 64-bit otherwise.

    Empty input or values that are not integers give empty bytes.
    """
    if not values:
        return b""
    if not all(isinstance(v, int) and not isinstance(v, bool) for v in values):
        return b""
    if all(_INT32_MIN <= v <= _INT32_MAX for v in values):
        return write_delta_int32(values)
    return write_delta_int64(values)


# ---------------------------------------------------------------- byte arrays


def read_delta_length_byte_array(stream: BinaryIO) -> list[bytes]:
    """Read DELTA_LENGTH_BYTE_ARRAY values: delta-packed lengths, then the data."""
    lengths = read_delta_binary_packed_int64(stream)
    result = []
    for length in lengths:
        if length < 0:
            raise ValueError(f"negative byte array length: {length}")
        if length == 0:
            result.append(b"")
        else:
            result.append(read_plain_fixed_len_byte_array(stream, 1, length)[0])
    return result


def read_delta_byte_array(stream: BinaryIO) -> list[bytes]:
    """Read DELTA_BYTE_ARRAY values: prefix lengths, then suffixes."""
    prefix_lengths = read_delta_binary_packed_int64(stream)
    suffixes = read_delta_length_byte_array(stream)
    if not prefix_lengths:
        return []
    if len(suffixes) < len(prefix_lengths):
        raise ValueError("fewer suffixes than prefix lengths")
    result = [suffixes[0]]
    for prefix_length, suffix in zip(prefix_lengths[1:], suffixes[1:]):
        previous = result[-1]
        if prefix_length < 0 or prefix_length > len(previous):
            raise ValueError(f"prefix length {prefix_length} out of range")
        result.append(previous[:prefix_length] + suffix)
    return result


def write_delta_length_byte_array(values: Sequence[bytes | str]) -> bytes:
    """Encode byte arrays as delta-packed lengths followed by the concatenated data."""
    items = [_as_bytes(value) for value in values]
    out = write_delta_int32([len(item) for item in items])
    return out + b"".join(items)


def write_delta_byte_array(values: Sequence[bytes | str]) -> bytes:
    """Encode byte arrays as shared-prefix lengths and the remaining suffixes."""
    if not values:
        return b""
    items = [_as_bytes(value) for value in values]
    prefix_lengths = [0]
    suffixes = [items[0]]
    for previous, current in zip(items, items[1:]):
        shared = 0
        for a, b in zip(previous, current):
            if a != b:
                break
            shared += 1
        prefix_lengths.append(shared)
        suffixes.append(current[shared:])
    return write_delta_int32(prefix_lengths) + write_delta_length_byte_array(suffixes)


# ---------------------------------------------------------------- byte stream split


def _read_split(stream: BinaryIO, count: int, width: int, code: str) -> list[float]:
    size = count * width
    data = stream.read(size) if size else b""
    if len(data) != size:
        raise EOFError(f"expected {size} bytes, got {len(data)}")
    streams = [data[k * count : (k + 1) * count] for k in range(width)]
    interleaved = bytes(b for group in zip(*streams) for b in group)
    return list(struct.unpack(f"<{count}{code}", interleaved))


def read_byte_stream_split_float32(stream: BinaryIO, count: int) -> list[float]:
    """Read ``count`` single-precision floats stored as BYTE_STREAM_SPLIT."""
    return _read_split(stream, count, 4, "f")


def read_byte_stream_split_float64(stream: BinaryIO, count: int) -> list[float]:
    """Read ``count`` double-precision floats stored as BYTE_STREAM_SPLIT."""
    return _read_split(stream, count, 8, "d")


def _write_split(values: Sequence[float], width: int, code: str) -> bytes:
    if not values:
        return b""
    packed = struct.pack(f"<{len(values)}{code}", *values)
    return b"".join(packed[k::width] for k in range(width))


def write_byte_stream_split_float32(values: Sequence[float]) -> bytes:
    """Encode numbers as single-precision floats split into four byte streams."""
    return _write_split(values, 4, "f")


def write_byte_stream_split_float64(values: Sequence[float]) -> bytes:
    """Encode numbers as double-precision floats split into eight byte streams."""
    return _write_split(values, 8, "d")


def write_byte_stream_split(values: Sequence) -> bytes:
    """Encode floats as 64-bit BYTE_STREAM_SPLIT; other inputs give empty bytes."""
    if not values or not isinstance(values[0], float):
        return b""
    return write_byte_stream_split_float64(values)