"""Parquet value encodings, compression codecs, schema tags, column statistics and path helpers."""

__version__ = "0.1.0"

__all__ = [
    "binary",
    "bitpack",
    "compression",
    "delta",
    "format",
    "paths",
    "plain",
    "rle",
    "stats",
    "tag",
]