"""Page compression codecs and a registry to look them up by codec id."""

from __future__ import annotations

import gzip
import io
from dataclasses import dataclass
from typing import Callable

import lz4.block
import lz4.frame
import zstandard

from parquetlite.format import CompressionCodec

__all__ = [
    "Compressor",
    "UnsupportedCodecError",
    "compress",
    "uncompress",
    "snappy_encode",
    "snappy_decode",
]


class UnsupportedCodecError(ValueError):
    """Raised when no compressor is registered for a codec."""


@dataclass(frozen=True)
class Compressor:
    """A pair of functions that compress and uncompress a byte string."""

    compress: Callable[[bytes], bytes]
    uncompress: Callable[[bytes], bytes]


# ---------------------------------------------------------------- snappy


def _varint(value: int) -> bytes:
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def _emit_literal(out: bytearray, literal: bytes) -> None:
    if not literal:
        return
    n = len(literal) - 1
    if n < 60:
        out.append(n << 2)
    elif n < 1 << 8:
        out.append(60 << 2)
        out.append(n)
    elif n < 1 << 16:
        out.append(61 << 2)
        out += n.to_bytes(2, "little")
    elif n < 1 << 24:
        out.append(62 << 2)
        out += n.to_bytes(3, "little")
    else:
        out.append(63 << 2)
        out += n.to_bytes(4, "little")
    out += literal


def _emit_copy2(out: bytearray, offset: int, length: int) -> None:
    out.append(2 | ((length - 1) << 2))
    out += offset.to_bytes(2, "little")


def _emit_copy(out: bytearray, offset: int, length: int) -> None:
    while length >= 68:
        _emit_copy2(out, offset, 64)
        length -= 64
    if length > 64:
        _emit_copy2(out, offset, 60)
        length -= 60
    if 4 <= length <= 11 and offset < 2048:
        out.append(1 | ((length - 4) << 2) | ((offset >> 8) << 5))
        out.append(offset & 0xFF)
    else:
        _emit_copy2(out, offset, length)


def snappy_encode(data: bytes) -> bytes:
    """Compress ``data`` into the raw (unframed) Snappy block format."""
    data = bytes(data)
    n = len(data)
    out = bytearray(_varint(n))
    table: dict[bytes, int] = {}
    literal_start = 0
    i = 0
    while i + 4 <= n:
        key = data[i : i + 4]
        candidate = table.get(key)
        table[key] = i
        if candidate is not None and i - candidate <= 0xFFFF:
            length = 4
            while i + length < n and data[candidate + length] == data[i + length]:
                length += 1
            _emit_literal(out, data[literal_start:i])
            _emit_copy(out, i - candidate, length)
            i += length
            literal_start = i
        else:
            i += 1
    _emit_literal(out, data[literal_start:])
    return bytes(out)


def _read_uvarint(data: bytes, pos: int) -> tuple[int, int]:
    result = 0
    shift = 0
    while True:
        if pos >= len(data):
            raise ValueError("snappy: corrupt input")
        byte = data[pos]
        pos += 1
        result |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return result, pos
        shift += 7
        if shift > 63:
            raise ValueError("snappy: corrupt input")


def snappy_decode(data: bytes) -> bytes:
    """Decompress a raw Snappy block; raise ValueError on corrupt input."""
    data = bytes(data)
    expected, pos = _read_uvarint(data, 0)
    out = bytearray()
    end = len(data)
    while pos < end:
        tag = data[pos]
        pos += 1
        kind = tag & 3
        if kind == 0:
            length = tag >> 2
            if length >= 60:
                extra = length - 59
                if pos + extra > end:
                    raise ValueError("snappy: corrupt input")
                length = int.from_bytes(data[pos : pos + extra], "little")
                pos += extra
            length += 1
            if pos + length > end:
                raise ValueError("snappy: corrupt input")
            out += data[pos : pos + length]
            pos += length
            continue
        if kind == 1:
            if pos + 1 > end:
                raise ValueError("snappy: corrupt input")
            length = 4 + ((tag >> 2) & 7)
            offset = ((tag >> 5) << 8) | data[pos]
            pos += 1
        else:
            width = 2 if kind == 2 else 4
            if pos + width > end:
                raise ValueError("snappy: corrupt input")
            length = (tag >> 2) + 1
            offset = int.from_bytes(data[pos : pos + width], "little")
            pos += width
        if offset == 0 or offset > len(out):
            raise ValueError("snappy: corrupt input")
        start = len(out) - offset
        while length > 0:
            chunk = out[start : start + min(offset, length)]
            out += chunk
            start += len(chunk)
            length -= len(chunk)
        if len(out) > expected:
            raise ValueError("snappy: corrupt input")
    if len(out) != expected:
        raise ValueError("snappy: corrupt input")
    return bytes(out)


# ---------------------------------------------------------------- other codecs


def _as_bytes(data: bytes) -> bytes:
    """Return ``data`` as an immutable ``bytes`` object, stored uncompressed."""
    if isinstance(data, bytes):
        return data
    return bytes(data)


def _gzip_compress(data: bytes) -> bytes:
    return gzip.compress(bytes(data), mtime=0)


def _gzip_uncompress(data: bytes) -> bytes:
    return gzip.decompress(bytes(data))


def _lz4_raw_compress(data: bytes) -> bytes:
    return lz4.block.compress(
        bytes(data), mode="high_compression", compression=9, store_size=False
    )


def _lz4_raw_uncompress(data: bytes) -> bytes:
    data = bytes(data)
    try:
        return lz4.block.decompress(data, uncompressed_size=255 * len(data))
    except lz4.block.LZ4BlockError as exc:
        raise ValueError(f"lz4 raw: {exc}") from exc


_zstd_compressor = zstandard.ZstdCompressor()
_zstd_decompressor = zstandard.ZstdDecompressor()


def _zstd_compress(data: bytes) -> bytes:
    return _zstd_compressor.compress(bytes(data))


def _zstd_uncompress(data: bytes) -> bytes:
    with _zstd_decompressor.stream_reader(
        io.BytesIO(bytes(data)), read_across_frames=True
    ) as reader:
        return reader.read()


_COMPRESSORS: dict[CompressionCodec, Compressor] = {
    CompressionCodec.UNCOMPRESSED: Compressor(_as_bytes, _as_bytes),
    CompressionCodec.GZIP: Compressor(_gzip_compress, _gzip_uncompress),
    CompressionCodec.LZ4: Compressor(
        lambda data: lz4.frame.compress(bytes(data)),
        lambda data: lz4.frame.decompress(bytes(data)),
    ),
    CompressionCodec.LZ4_RAW: Compressor(_lz4_raw_compress, _lz4_raw_uncompress),
    CompressionCodec.SNAPPY: Compressor(snappy_encode, snappy_decode),
    CompressionCodec.ZSTD: Compressor(_zstd_compress, _zstd_uncompress),
}


def _lookup(codec: CompressionCodec) -> Compressor:
    try:
        return _COMPRESSORS[codec]
    except KeyError:
        raise UnsupportedCodecError(f"unsupported compress method: {codec!r}") from None


def compress(data: bytes, codec: CompressionCodec) -> bytes:
    """Compress ``data`` with ``codec``."""
    return _lookup(codec).compress(data)


def uncompress(data: bytes, codec: CompressionCodec) -> bytes:
    """Uncompress ``data`` that was compressed with ``codec``."""
    return _lookup(codec).uncompress(data)