"""Little-endian packing of fixed-width numbers."""

from __future__ import annotations

import struct
from typing import BinaryIO, Iterable

__all__ = [
    "read_int32",
    "read_int64",
    "read_float32",
    "read_float64",
    "write_int32",
    "write_int64",
    "write_float32",
    "write_float64",
]

_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    if size == 0:
        return b""
    data = stream.read(size)
    if len(data) != size:
        raise EOFError(f"expected {size} bytes, got {len(data)}")
    return data


def _read(stream: BinaryIO, count: int, code: str, width: int) -> list:
    data = _read_exact(stream, count * width)
    return list(struct.unpack(f"<{count}{code}", data))


def read_int32(stream: BinaryIO, count: int) -> list[int]:
    """Read ``count`` signed 32-bit integers; raise EOFError on short input."""
    return _read(stream, count, "i", 4)


def read_int64(stream: BinaryIO, count: int) -> list[int]:
    """Read ``count`` signed 64-bit integers; raise EOFError on short input."""
    return _read(stream, count, "q", 8)


def read_float32(stream: BinaryIO, count: int) -> list[float]:
    """Read ``count`` IEEE single-precision floats; raise EOFError on short input."""
    return _read(stream, count, "f", 4)


def read_float64(stream: BinaryIO, count: int) -> list[float]:
    """Read ``count`` IEEE double-precision floats; raise EOFError on short input."""
    return _read(stream, count, "d", 8)


def write_int32(values: Iterable[int]) -> bytes:
    """Pack integers as 32-bit two's complement values, wrapping out-of-range ones."""
    items = [value & _MASK32 for value in values]
    return struct.pack(f"<{len(items)}I", *items)


def write_int64(values: Iterable[int]) -> bytes:
    """Pack integers as 64-bit two's complement values, wrapping out-of-range ones."""
    items = [value & _MASK64 for value in values]
    return struct.pack(f"<{len(items)}Q", *items)


def write_float32(values: Iterable[float]) -> bytes:
    """Pack numbers as IEEE single-precision floats."""
    items = list(values)
    return struct.pack(f"<{len(items)}f", *items)


def write_float64(values: Iterable[float]) -> bytes:
    """Pack numbers as IEEE double-precision floats."""
    items = list(values)
    return struct.pack(f"<{len(items)}d", *items)