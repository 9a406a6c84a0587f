"""Ordering and size rules for column statistics, chosen by column type."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from parquetlite.format import ConvertedType, LogicalType, Type

__all__ = [
    "FuncTable",
    "cmp_int_binary",
    "find_func_table",
    "min_value",
    "max_value",
]

_MASK32 = 0xFFFFFFFF
_MASK64 = (1 << 64) - 1


@dataclass(frozen=True)
class FuncTable:
    """How values of one column type are ordered and how large each one is."""

    name: str
    less: Callable[[Any, Any], bool]
    size: Callable[[Any], int]

    def less_than(self, a: Any, b: Any) -> bool:
        """Return True when ``a`` sorts before ``b``."""
        return self.less(a, b)

    def min_max_size(
        self, min_value: Any, max_value: Any, value: Any
    ) -> tuple[Any, Any, int]:
        """Fold ``value`` into a running minimum and maximum and report its size."""
        return (
            globals_min(self, min_value, value),
            globals_max(self, max_value, value),
            self.size(value),
        )


def min_value(table: FuncTable, a: Any, b: Any) -> Any:
    """Return the smaller of ``a`` and ``b``; None counts as absent."""
    if a is None:
        return b
    if b is None:
        return a
    return a if table.less_than(a, b) else b


def max_value(table: FuncTable, a: Any, b: Any) -> Any:
    """Return the larger of ``a`` and ``b``; None counts as absent."""
    if a is None:
        return b
    if b is None:
        return a
    return b if table.less_than(a, b) else a


# Aliases used inside FuncTable, whose parameters shadow the public names.
globals_min = min_value
globals_max = max_value


def cmp_int_binary(a: bytes, b: bytes, order: str, signed: bool) -> bool:
    """Return True when the integer stored in ``a`` is less than the one in ``b``.

    ``order`` is "LittleEndian" or, for anything else, big-endian byte order.
    Shorter inputs are zero- or sign-extended as ``signed`` requires.
    """
    byteorder = "little" if order == "LittleEndian" else "big"
    left = int.from_bytes(bytes(a), byteorder, signed=signed)
    right = int.from_bytes(bytes(b), byteorder, signed=signed)
    return left < right


def _as_bytes(value: Any) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def _bool_less(a: bool, b: bool) -> bool:
    return not a and b


def _uint32_less(a: int, b: int) -> bool:
    return (a & _MASK32) < (b & _MASK32)


def _uint64_less(a: int, b: int) -> bool:
    return (a & _MASK64) < (b & _MASK64)


def _int96_less(a: Any, b: Any) -> bool:
    left, right = _as_bytes(a), _as_bytes(b)
    sign_a, sign_b = left[11] >> 7, right[11] >> 7
    if sign_a != sign_b:
        return sign_a > sign_b
    return left[11::-1] < right[11::-1]


def _interval_less(a: Any, b: Any) -> bool:
    left, right = _as_bytes(a), _as_bytes(b)
    return left[11::-1] < right[11::-1]


def _decimal_less(a: Any, b: Any) -> bool:
    return cmp_int_binary(_as_bytes(a), _as_bytes(b), "BigEndian", True)


def _plain_less(a: Any, b: Any) -> bool:
    return a < b


def _fixed(width: int) -> Callable[[Any], int]:
    return lambda _value: width


def _length(value: Any) -> int:
    return len(value)


_BOOL = FuncTable("bool", _bool_less, _fixed(1))
_INT32 = FuncTable("int32", _plain_less, _fixed(4))
_UINT32 = FuncTable("uint32", _uint32_less, _fixed(4))
_INT64 = FuncTable("int64", _plain_less, _fixed(8))
_UINT64 = FuncTable("uint64", _uint64_less, _fixed(8))
_INT96 = FuncTable("int96", _int96_less, _length)
_FLOAT32 = FuncTable("float32", _plain_less, _fixed(4))
_FLOAT64 = FuncTable("float64", _plain_less, _fixed(8))
_STRING = FuncTable("string", _plain_less, _length)
_INTERVAL = FuncTable("interval", _interval_less, _length)
_DECIMAL_STRING = FuncTable("decimal_string", _decimal_less, _length)

_BY_PHYSICAL = {
    Type.BOOLEAN: _BOOL,
    Type.INT32: _INT32,
    Type.INT64: _INT64,
    Type.INT96: _INT96,
    Type.FLOAT: _FLOAT32,
    Type.DOUBLE: _FLOAT64,
    Type.BYTE_ARRAY: _STRING,
    Type.FIXED_LEN_BYTE_ARRAY: _STRING,
}

_BY_CONVERTED = {
    ConvertedType.UTF8: _STRING,
    ConvertedType.BSON: _STRING,
    ConvertedType.JSON: _STRING,
    ConvertedType.ENUM: _STRING,
    ConvertedType.INT_8: _INT32,
    ConvertedType.INT_16: _INT32,
    ConvertedType.INT_32: _INT32,
    ConvertedType.DATE: _INT32,
    ConvertedType.TIME_MILLIS: _INT32,
    ConvertedType.UINT_8: _UINT32,
    ConvertedType.UINT_16: _UINT32,
    ConvertedType.UINT_32: _UINT32,
    ConvertedType.INT_64: _INT64,
    ConvertedType.TIME_MICROS: _INT64,
    ConvertedType.TIMESTAMP_MILLIS: _INT64,
    ConvertedType.TIMESTAMP_MICROS: _INT64,
    ConvertedType.UINT_64: _UINT64,
    ConvertedType.INTERVAL: _INTERVAL,
}

_DECIMAL_BY_PHYSICAL = {
    Type.BYTE_ARRAY: _DECIMAL_STRING,
    Type.FIXED_LEN_BYTE_ARRAY: _DECIMAL_STRING,
    Type.INT32: _INT32,
    Type.INT64: _INT64,
}

_UNSIGNED_BY_PHYSICAL = {
    Type.INT32: _UINT32,
    Type.INT64: _UINT64,
}

_STRING_LOGICAL = frozenset({"BSON", "JSON", "STRING", "UUID"})


def _physical_table(physical_type: Type | None) -> FuncTable | None:
    if physical_type is None:
        return None
    return _BY_PHYSICAL.get(physical_type)


def find_func_table(
    physical_type: Type | None,
    converted_type: ConvertedType | None,
    logical_type: LogicalType | None,
) -> FuncTable:
    """Choose the ordering rules for a column; raise ValueError if none applies."""
    if converted_type is None and logical_type is None:
        table = _physical_table(physical_type)
        if table is not None:
            return table

    if converted_type is not None:
        if converted_type in _BY_CONVERTED:
            return _BY_CONVERTED[converted_type]
        if converted_type is ConvertedType.DECIMAL and physical_type in _DECIMAL_BY_PHYSICAL:
            return _DECIMAL_BY_PHYSICAL[physical_type]

    if logical_type is not None:
        name = logical_type.name
        if name in ("TIME", "TIMESTAMP"):
            return find_func_table(physical_type, None, None)
        if name == "DATE":
            return _INT32
        if name == "INTEGER":
            if logical_type.is_signed:
                return find_func_table(physical_type, None, None)
            if physical_type in _UNSIGNED_BY_PHYSICAL:
                return _UNSIGNED_BY_PHYSICAL[physical_type]
        elif name == "DECIMAL":
            if physical_type in _DECIMAL_BY_PHYSICAL:
                return _DECIMAL_BY_PHYSICAL[physical_type]
        elif name in _STRING_LOGICAL:
            return _STRING

    raise ValueError(
        "no known func table for "
        f"type={physical_type!r}, converted={converted_type!r}, logical={logical_type!r}"
    )