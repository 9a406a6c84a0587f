"""PLAIN encoding of Parquet values."""

from __future__ import annotations

from typing import BinaryIO, Callable, Sequence

from parquetlite import binary
from parquetlite.bitpack import read_bit_packed
from parquetlite.format import Type

__all__ = [
    "read_plain",
    "read_plain_boolean",
    "read_plain_int32",
    "read_plain_int64",
    "read_plain_int96",
    "read_plain_float",
    "read_plain_double",
    "read_plain_byte_array",
    "read_plain_fixed_len_byte_array",
    "write_plain",
    "write_plain_boolean",
    "write_plain_int32",
    "write_plain_int64",
    "write_plain_int96",
    "write_plain_float",
    "write_plain_double",
    "write_plain_byte_array",
    "write_plain_fixed_len_byte_array",
]

_INT96_SIZE = 12


def _as_bytes(value: bytes | bytearray | memoryview | str) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def _read_padded(stream: BinaryIO, size: int) -> bytes:
    """Read up to ``size`` bytes, zero-padding a short read; fail only when nothing is left."""
    if size == 0:
        return b""
    data = stream.read(size)
    if not data:
        raise EOFError(f"expected {size} bytes, stream is exhausted")
    return data.ljust(size, b"\x00")


def _resolve_type(data_type: Type | int) -> Type:
    try:
        return Type(data_type)
    except ValueError:
        raise ValueError(f"unknown parquet type: {data_type!r}") from None


def read_plain(
    stream: BinaryIO, data_type: Type, count: int, bit_width: int
) -> list:
    """Read ``count`` PLAIN values of ``data_type``; ``bit_width`` is the fixed length for FIXED_LEN_BYTE_ARRAY."""
    kind = _resolve_type(data_type)
    if kind is Type.FIXED_LEN_BYTE_ARRAY:
        return read_plain_fixed_len_byte_array(stream, count, bit_width)
    return _READERS[kind](stream, count)


def read_plain_boolean(stream: BinaryIO, count: int) -> list[bool]:
    """Read ``count`` booleans packed one bit each."""
    bits = read_bit_packed(stream, count << 1, 1)
    return [bit > 0 for bit in bits[:count]]


def read_plain_int32(stream: BinaryIO, count: int) -> list[int]:
    """Read ``count`` little-endian signed 32-bit integers."""
    return binary.read_int32(stream, count)


def read_plain_int64(stream: BinaryIO, count: int) -> list[int]:
    """Read ``count`` little-endian signed 64-bit integers."""
    return binary.read_int64(stream, count)


def read_plain_int96(stream: BinaryIO, count: int) -> list[bytes]:
    """Read ``count`` 12-byte INT96 values as raw bytes."""
    return [_read_padded(stream, _INT96_SIZE) for _ in range(count)]


def read_plain_float(stream: BinaryIO, count: int) -> list[float]:
    """Read ``count`` single-precision floats."""
    return binary.read_float32(stream, count)


def read_plain_double(stream: BinaryIO, count: int) -> list[float]:
    """Read ``count`` double-precision floats."""
    return binary.read_float64(stream, count)


def read_plain_byte_array(stream: BinaryIO, count: int) -> list[bytes]:
    """Read ``count`` byte arrays, each preceded by a 4-byte little-endian length."""
    result = []
    for _ in range(count):
        length = int.from_bytes(_read_padded(stream, 4), "little")
        data = stream.read(length)
        result.append(data.ljust(length, b"\x00"))
    return result


def read_plain_fixed_len_byte_array(
    stream: BinaryIO, count: int, fixed_length: int
) -> list[bytes]:
    """Read ``count`` byte arrays of ``fixed_length`` bytes each."""
    return [_read_padded(stream, fixed_length) for _ in range(count)]


_READERS: dict[Type, Callable[[BinaryIO, int], list]] = {
    Type.BOOLEAN: read_plain_boolean,
    Type.INT32: read_plain_int32,
    Type.INT64: read_plain_int64,
    Type.INT96: read_plain_int96,
    Type.FLOAT: read_plain_float,
    Type.DOUBLE: read_plain_double,
    Type.BYTE_ARRAY: read_plain_byte_array,
}


def write_plain(values: Sequence, data_type: Type) -> bytes:
    """Encode ``values`` as PLAIN ``data_type``; an unknown type or no values give empty bytes."""
    if not values:
        return b""
    try:
        kind = Type(data_type)
    except ValueError:
        return b""
    return _WRITERS[kind](values)


def write_plain_boolean(values: Sequence[bool]) -> bytes:
    """Pack booleans one bit each, least significant bit first."""
    out = bytearray((len(values) + 7) // 8)
    for i, value in enumerate(values):
        if value:
            out[i // 8] |= 1 << (i % 8)
    return bytes(out)


def write_plain_int32(values: Sequence[int]) -> bytes:
    """Encode integers as little-endian 32-bit values."""
    return binary.write_int32(values)


def write_plain_int64(values: Sequence[int]) -> bytes:
    """Encode integers as little-endian 64-bit values."""
    return binary.write_int64(values)


def write_plain_int96(values: Sequence[bytes]) -> bytes:
    """Concatenate raw 12-byte INT96 values."""
    return b"".join(_as_bytes(value) for value in values)


def write_plain_float(values: Sequence[float]) -> bytes:
    """Encode numbers as single-precision floats."""
    return binary.write_float32(values)


def write_plain_double(values: Sequence[float]) -> bytes:
    """Encode numbers as double-precision floats."""
    return binary.write_float64(values)


def write_plain_byte_array(values: Sequence[bytes | str]) -> bytes:
    """Encode byte arrays, each preceded by its 4-byte little-endian length."""
    out = bytearray()
    for value in values:
        data = _as_bytes(value)
        out += len(data).to_bytes(4, "little")
        out += data
    return bytes(out)


def write_plain_fixed_len_byte_array(values: Sequence[bytes | str]) -> bytes:
    """Concatenate fixed-length byte arrays."""
    return b"".join(_as_bytes(value) for value in values)


_WRITERS: dict[Type, Callable[[Sequence], bytes]] = {
    Type.BOOLEAN: write_plain_boolean,
    Type.INT32: write_plain_int32,
    Type.INT64: write_plain_int64,
    Type.INT96: write_plain_int96,
    Type.FLOAT: write_plain_float,
    Type.DOUBLE: write_plain_double,
    Type.BYTE_ARRAY: write_plain_byte_array,
    Type.FIXED_LEN_BYTE_ARRAY: write_plain_fixed_len_byte_array,
}