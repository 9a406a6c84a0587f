"""Core Parquet enumerations and schema element types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum

__all__ = [
    "Type",
    "ConvertedType",
    "FieldRepetitionType",
    "Encoding",
    "CompressionCodec",
    "TimeUnit",
    "LogicalType",
    "SchemaElement",
    "parse_type",
    "parse_converted_type",
]


class Type(IntEnum):
    """Physical storage types."""

    BOOLEAN = 0
    INT32 = 1
    INT64 = 2
    INT96 = 3
    FLOAT = 4
    DOUBLE = 5
    BYTE_ARRAY = 6
    FIXED_LEN_BYTE_ARRAY = 7


class ConvertedType(IntEnum):
    """Legacy annotations describing how to interpret a physical type."""

    UTF8 = 0
    MAP = 1
    MAP_KEY_VALUE = 2
    LIST = 3
    ENUM = 4
    DECIMAL = 5
    DATE = 6
    TIME_MILLIS = 7
    TIME_MICROS = 8
    TIMESTAMP_MILLIS = 9
    TIMESTAMP_MICROS = 10
    UINT_8 = 11
    UINT_16 = 12
    UINT_32 = 13
    UINT_64 = 14
    INT_8 = 15
    INT_16 = 16
    INT_32 = 17
    INT_64 = 18
    JSON = 19
    BSON = 20
    INTERVAL = 21


class FieldRepetitionType(IntEnum):
    """How often a field may occur."""

    REQUIRED = 0
    OPTIONAL = 1
    REPEATED = 2


class Encoding(IntEnum):
    """Value encodings used in data pages."""

    PLAIN = 0
    PLAIN_DICTIONARY = 2
    RLE = 3
    BIT_PACKED = 4
    DELTA_BINARY_PACKED = 5
    DELTA_LENGTH_BYTE_ARRAY = 6
    DELTA_BYTE_ARRAY = 7
    RLE_DICTIONARY = 8
    BYTE_STREAM_SPLIT = 9


class CompressionCodec(IntEnum):
    """Page compression codecs."""

    UNCOMPRESSED = 0
    SNAPPY = 1
    GZIP = 2
    LZO = 3
    BROTLI = 4
    LZ4 = 5
    ZSTD = 6
    LZ4_RAW = 7


class TimeUnit(Enum):
    """Resolution of TIME and TIMESTAMP logical types."""

    MILLIS = "MILLIS"
    MICROS = "MICROS"
    NANOS = "NANOS"


_LOGICAL_TYPE_NAMES = frozenset(
    {
        "STRING",
        "MAP",
        "LIST",
        "ENUM",
        "DECIMAL",
        "DATE",
        "TIME",
        "TIMESTAMP",
        "INTEGER",
        "JSON",
        "BSON",
        "UUID",
    }
)


@dataclass(frozen=True)
class LogicalType:
    """A logical type annotation; only the fields relevant to ``name`` are set."""

    name: str
    precision: int | None = None
    scale: int | None = None
    is_adjusted_to_utc: bool | None = None
    unit: TimeUnit | None = None
    bit_width: int | None = None
    is_signed: bool | None = None

    def __post_init__(self) -> None:
        if self.name not in _LOGICAL_TYPE_NAMES:
            raise ValueError(f"unknown logical type: {self.name!r}")


@dataclass
class SchemaElement:
    """One node of a Parquet schema tree."""

    name: str = ""
    type: Type | None = None
    type_length: int | None = None
    repetition_type: FieldRepetitionType | None = None
    num_children: int | None = None
    converted_type: ConvertedType | None = None
    scale: int | None = None
    precision: int | None = None
    field_id: int | None = None
    logical_type: LogicalType | None = None


def parse_type(name: str) -> Type:
    """Return the physical type called ``name``; raise ValueError if there is none."""
    try:
        return Type[name]
    except KeyError:
        raise ValueError(f"not a valid Type string: {name!r}") from None


def parse_converted_type(name: str) -> ConvertedType:
    """Return the converted type called ``name``; raise ValueError if there is none."""
    try:
        return ConvertedType[name]
    except KeyError:
        raise ValueError(f"not a valid ConvertedType string: {name!r}") from None