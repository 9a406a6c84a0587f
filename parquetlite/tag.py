"""Field tags that describe how a value maps onto a Parquet schema element."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from parquetlite.format import (
    ConvertedType,
    Encoding,
    FieldRepetitionType,
    LogicalType,
    SchemaElement,
    TimeUnit,
    parse_converted_type,
    parse_type,
)

__all__ = [
    "Tag",
    "string_to_tag",
    "new_schema_element_from_tag",
    "new_logical_type_from_fields_map",
    "new_logical_type_from_converted_type",
    "get_key_tag",
    "get_value_tag",
    "string_to_variable_name",
    "head_to_upper",
    "str_to_int32",
    "str_to_bool",
]


@dataclass
class Tag:
    """Settings for one field, with separate settings for map keys and values."""

    in_name: str = ""
    ex_name: str = ""

    type: str = ""
    key_type: str = ""
    value_type: str = ""

    converted_type: str = ""
    key_converted_type: str = ""
    value_converted_type: str = ""

    length: int = 0
    key_length: int = 0
    value_length: int = 0

    scale: int = 0
    key_scale: int = 0
    value_scale: int = 0

    precision: int = 0
    key_precision: int = 0
    value_precision: int = 0

    is_adjusted_to_utc: bool = False
    key_is_adjusted_to_utc: bool = False
    value_is_adjusted_to_utc: bool = False

    field_id: int = 0
    key_field_id: int = 0
    value_field_id: int = 0

    encoding: Encoding = Encoding.PLAIN
    key_encoding: Encoding = Encoding.PLAIN
    value_encoding: Encoding = Encoding.PLAIN

    omit_stats: bool = False
    key_omit_stats: bool = False
    value_omit_stats: bool = False

    repetition_type: FieldRepetitionType = FieldRepetitionType.REQUIRED
    key_repetition_type: FieldRepetitionType = FieldRepetitionType.REQUIRED
    value_repetition_type: FieldRepetitionType = FieldRepetitionType.REQUIRED

    logical_type_fields: dict[str, str] = field(default_factory=dict)
    key_logical_type_fields: dict[str, str] = field(default_factory=dict)
    value_logical_type_fields: dict[str, str] = field(default_factory=dict)


_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1

_TRUE_WORDS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_WORDS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def str_to_int32(text: str) -> int:
    """Parse a decimal integer and wrap it to a signed 32-bit value."""
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"invalid syntax: {text!r}")
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"value out of range: {text!r}")
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value >= 1 << 31 else value


def str_to_bool(text: str) -> bool:
    """Parse 1/t/T/TRUE/true/True or 0/f/F/FALSE/false/False."""
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    raise ValueError(f"invalid syntax: {text!r}")


_STRING_KEYS = {
    "type": "type",
    "keytype": "key_type",
    "valuetype": "value_type",
    "convertedtype": "converted_type",
    "keyconvertedtype": "key_converted_type",
    "valueconvertedtype": "value_converted_type",
    "inname": "in_name",
}

_INT_KEYS = {
    "length": "length",
    "keylength": "key_length",
    "valuelength": "value_length",
    "scale": "scale",
    "keyscale": "key_scale",
    "valuescale": "value_scale",
    "precision": "precision",
    "keyprecision": "key_precision",
    "valueprecision": "value_precision",
    "fieldid": "field_id",
    "keyfieldid": "key_field_id",
    "valuefieldid": "value_field_id",
}

_BOOL_KEYS = {
    "isadjustedtoutc": "is_adjusted_to_utc",
    "keyisadjustedtoutc": "key_is_adjusted_to_utc",
    "valueisadjustedtoutc": "value_is_adjusted_to_utc",
    "omitstats": "omit_stats",
    "keyomitstats": "key_omit_stats",
    "valueomitstats": "value_omit_stats",
}

_REPETITION_KEYS = {
    "repetitiontype": "repetition_type",
    "keyrepetitiontype": "key_repetition_type",
    "valuerepetitiontype": "value_repetition_type",
}

_REPETITIONS = {
    "repeated": FieldRepetitionType.REPEATED,
    "required": FieldRepetitionType.REQUIRED,
    "optional": FieldRepetitionType.OPTIONAL,
}

_ENCODINGS = {
    "plain": Encoding.PLAIN,
    "rle": Encoding.RLE,
    "delta_binary_packed": Encoding.DELTA_BINARY_PACKED,
    "delta_length_byte_array": Encoding.DELTA_LENGTH_BYTE_ARRAY,
    "delta_byte_array": Encoding.DELTA_BYTE_ARRAY,
    "plain_dictionary": Encoding.PLAIN_DICTIONARY,
    "rle_dictionary": Encoding.RLE_DICTIONARY,
    "byte_stream_split": Encoding.BYTE_STREAM_SPLIT,
}

# Map keys and values accept neither PLAIN nor RLE_DICTIONARY.
_KEY_VALUE_ENCODINGS = {
    name: enc
    for name, enc in _ENCODINGS.items()
    if name not in ("plain", "rle_dictionary")
}

_ENCODING_KEYS = {
    "encoding": ("encoding", _ENCODINGS, "encoding"),
    "keyencoding": ("key_encoding", _KEY_VALUE_ENCODINGS, "keyencoding"),
    "valueencoding": ("value_encoding", _KEY_VALUE_ENCODINGS, "valueencoding"),
}


def string_to_tag(text: str) -> Tag:
    """Parse a comma separated ``key=value`` list into a Tag."""
    tag = Tag()
    for item in text.replace("\t", "").split(","):
        item = item.strip()
        key, sep, val = item.partition("=")
        if not sep:
            raise ValueError(f"expect 'key=value' but got '{item}'")
        key = key.lower().strip()
        val = val.strip()

        if key in _STRING_KEYS:
            setattr(tag, _STRING_KEYS[key], val)
        elif key in _INT_KEYS:
            try:
                setattr(tag, _INT_KEYS[key], str_to_int32(val))
            except ValueError as exc:
                raise ValueError(f"failed to parse {key}: {exc}") from exc
        elif key in _BOOL_KEYS:
            try:
                setattr(tag, _BOOL_KEYS[key], str_to_bool(val))
            except ValueError as exc:
                raise ValueError(f"failed to parse {key}: {exc}") from exc
        elif key == "name":
            if not tag.in_name:
                tag.in_name = string_to_variable_name(val)
            tag.ex_name = val
        elif key in _REPETITION_KEYS:
            try:
                repetition = _REPETITIONS[val.lower()]
            except KeyError:
                raise ValueError(f"unknown {key}: '{val}'") from None
            setattr(tag, _REPETITION_KEYS[key], repetition)
        elif key in _ENCODING_KEYS:
            attr, table, label = _ENCODING_KEYS[key]
            try:
                encoding = table[val.lower()]
            except KeyError:
                raise ValueError(f"unknown {label} type: '{val}'") from None
            setattr(tag, attr, encoding)
        elif key.startswith("logicaltype"):
            tag.logical_type_fields[key] = val
        elif key.startswith("keylogicaltype"):
            tag.key_logical_type_fields[key[3:]] = val
        elif key.startswith("valuelogicaltype"):
            tag.value_logical_type_fields[key[5:]] = val
        else:
            raise ValueError(f"unrecognized tag '{key}'")
    return tag


def new_schema_element_from_tag(tag: Tag) -> SchemaElement:
    """Build a schema element from a tag; raise ValueError on an unknown type."""
    try:
        physical = parse_type(tag.type)
    except ValueError as exc:
        raise ValueError(f"type {tag.type}: {exc}") from exc

    element = SchemaElement(
        name=tag.in_name,
        type=physical,
        type_length=tag.length,
        repetition_type=tag.repetition_type,
        num_children=None,
        scale=tag.scale,
        precision=tag.precision,
        field_id=tag.field_id,
    )
    try:
        element.converted_type = parse_converted_type(tag.converted_type)
    except ValueError:
        pass

    if tag.logical_type_fields:
        try:
            element.logical_type = new_logical_type_from_fields_map(
                tag.logical_type_fields
            )
        except ValueError as exc:
            raise ValueError(
                f"failed to create logicaltype from field map: {exc}"
            ) from exc
    else:
        element.logical_type = new_logical_type_from_converted_type(element, tag)
    return element


def _parse_unit(fields: dict[str, str]) -> TimeUnit:
    unit = fields.get("logicaltype.unit", "")
    try:
        return TimeUnit(unit)
    except ValueError:
        raise ValueError(f"logicaltype time error, unknown unit: {unit}") from None


def _parse_utc(fields: dict[str, str]) -> bool:
    try:
        return str_to_bool(fields.get("logicaltype.isadjustedtoutc", ""))
    except ValueError as exc:
        raise ValueError(
            f"cannot parse logicaltype.isadjustedtoutc as boolean: {exc}"
        ) from exc


def _field_int32(fields: dict[str, str], key: str) -> int:
    try:
        return str_to_int32(fields.get(key, ""))
    except ValueError as exc:
        raise ValueError(f"cannot parse {key} as int32: {exc}") from exc


_SIMPLE_LOGICAL = frozenset(
    {"STRING", "MAP", "LIST", "ENUM", "DATE", "JSON", "BSON", "UUID"}
)


def new_logical_type_from_fields_map(fields: dict[str, str]) -> LogicalType:
    """Build a logical type from ``logicaltype`` and ``logicaltype.*`` entries."""
    if "logicaltype" not in fields:
        raise ValueError("does not have logicaltype")
    name = fields["logicaltype"]

    if name in _SIMPLE_LOGICAL:
        return LogicalType(name)
    if name == "DECIMAL":
        return LogicalType(
            name,
            precision=_field_int32(fields, "logicaltype.precision"),
            scale=_field_int32(fields, "logicaltype.scale"),
        )
    if name in ("TIME", "TIMESTAMP"):
        utc = _parse_utc(fields)
        return LogicalType(name, is_adjusted_to_utc=utc, unit=_parse_unit(fields))
    if name == "INTEGER":
        width = _field_int32(fields, "logicaltype.bitwidth") & 0xFF
        if width >= 0x80:
            width -= 0x100
        try:
            signed = str_to_bool(fields.get("logicaltype.issigned", ""))
        except ValueError as exc:
            raise ValueError(
                f"cannot parse logicaltype.issigned as boolean: {exc}"
            ) from exc
        return LogicalType(name, bit_width=width, is_signed=signed)
    raise ValueError(f"unknown logicaltype: {name}")


_INTEGER_CONVERTED = {
    ConvertedType.INT_8: (8, True),
    ConvertedType.INT_16: (16, True),
    ConvertedType.INT_32: (32, True),
    ConvertedType.INT_64: (64, True),
    ConvertedType.UINT_8: (8, False),
    ConvertedType.UINT_16: (16, False),
    ConvertedType.UINT_32: (32, False),
    ConvertedType.UINT_64: (64, False),
}

_TIME_CONVERTED = {
    ConvertedType.TIME_MICROS: ("TIME", TimeUnit.MICROS),
    ConvertedType.TIME_MILLIS: ("TIME", TimeUnit.MILLIS),
    ConvertedType.TIMESTAMP_MICROS: ("TIMESTAMP", TimeUnit.MICROS),
    ConvertedType.TIMESTAMP_MILLIS: ("TIMESTAMP", TimeUnit.MILLIS),
}

_NAMED_CONVERTED = {
    ConvertedType.DATE: "DATE",
    ConvertedType.BSON: "BSON",
    ConvertedType.ENUM: "ENUM",
    ConvertedType.JSON: "JSON",
    ConvertedType.LIST: "LIST",
    ConvertedType.MAP: "MAP",
    ConvertedType.UTF8: "STRING",
}


def new_logical_type_from_converted_type(
    element: SchemaElement, tag: Tag
) -> LogicalType | None:
    """Derive the logical type matching an element's converted type, if any."""
    converted = element.converted_type
    if converted is None:
        return None
    if converted in _INTEGER_CONVERTED:
        width, signed = _INTEGER_CONVERTED[converted]
        return LogicalType("INTEGER", bit_width=width, is_signed=signed)
    if converted is ConvertedType.DECIMAL:
        return LogicalType("DECIMAL", precision=tag.precision, scale=tag.scale)
    if converted in _TIME_CONVERTED:
        name, unit = _TIME_CONVERTED[converted]
        return LogicalType(name, is_adjusted_to_utc=tag.is_adjusted_to_utc, unit=unit)
    if converted in _NAMED_CONVERTED:
        return LogicalType(_NAMED_CONVERTED[converted])
    return None


def get_key_tag(src: Tag) -> Tag:
    """Return the tag describing the keys of a map field."""
    return Tag(
        in_name="Key",
        ex_name="key",
        type=src.key_type,
        converted_type=src.key_converted_type,
        is_adjusted_to_utc=src.key_is_adjusted_to_utc,
        length=src.key_length,
        scale=src.key_scale,
        precision=src.key_precision,
        field_id=src.key_field_id,
        encoding=src.key_encoding,
        omit_stats=src.key_omit_stats,
        repetition_type=FieldRepetitionType.REQUIRED,
    )


def get_value_tag(src: Tag) -> Tag:
    """Return the tag describing the values of a map field."""
    return Tag(
        in_name="Value",
        ex_name="value",
        type=src.value_type,
        converted_type=src.value_converted_type,
        is_adjusted_to_utc=src.value_is_adjusted_to_utc,
        length=src.value_length,
        scale=src.value_scale,
        precision=src.value_precision,
        field_id=src.value_field_id,
        encoding=src.value_encoding,
        omit_stats=src.value_omit_stats,
        repetition_type=src.value_repetition_type,
    )


def _is_ascii_letter(char: str) -> bool:
    return ("a" <= char <= "z") or ("A" <= char <= "Z")


def string_to_variable_name(text: str) -> str:
    """Turn a column name into an identifier; other bytes become their decimal code."""
    if not text:
        return text
    parts = []
    for byte in text.encode("utf-8"):
        char = chr(byte)
        if byte < 0x80 and (char.isalnum() or char == "_"):
            parts.append(char)
        else:
            parts.append(str(byte))
    return head_to_upper("".join(parts))


def head_to_upper(text: str) -> str:
    """Upper-case the first letter; prefix names that do not start with a letter."""
    if not text:
        return text
    if _is_ascii_letter(text[0]):
        return text[0].upper() + text[1:]
    return "PARGO_PREFIX_" + text