import pytest

from parquetlite.format import (
    ConvertedType,
    Encoding,
    FieldRepetitionType,
    LogicalType,
    SchemaElement,
    TimeUnit,
    Type,
)
from parquetlite.tag import (
    Tag,
    get_key_tag,
    get_value_tag,
    head_to_upper,
    new_logical_type_from_converted_type,
    new_logical_type_from_fields_map,
    new_schema_element_from_tag,
    str_to_bool,
    str_to_int32,
    string_to_tag,
    string_to_variable_name,
)


@pytest.mark.parametrize(
    "text, expected",
    [("", ""), ("hello", "Hello"), ("HeHH", "HeHH"), ("a", "A")],
)
def test_head_to_upper(text, expected):
    assert head_to_upper(text) == expected


def test_head_to_upper_non_letter_prefix():
    assert head_to_upper("_x") == "PARGO_PREFIX__x"
    assert head_to_upper("1abc") == "PARGO_PREFIX_1abc"


def test_string_to_variable_name():
    assert string_to_variable_name("my-name") == "My45name"
    assert string_to_variable_name("b.c") == "B46c"
    assert string_to_variable_name("") == ""


def test_str_to_int32():
    assert str_to_int32("12") == 12
    assert str_to_int32("-7") == -7
    assert str_to_int32("+3") == 3
    assert str_to_int32("2147483648") == -2147483648


@pytest.mark.parametrize("text", ["", "1.5", " 1", "abc", "1_000"])
def test_str_to_int32_rejects(text):
    with pytest.raises(ValueError):
        str_to_int32(text)


def test_str_to_bool():
    assert str_to_bool("true") is True
    assert str_to_bool("T") is True
    assert str_to_bool("0") is False
    assert str_to_bool("False") is False
    with pytest.raises(ValueError):
        str_to_bool("yes")


def test_string_to_tag_basic():
    tag = string_to_tag(
        "name=name, type=BYTE_ARRAY, convertedtype=UTF8, encoding=PLAIN_DICTIONARY"
    )
    assert tag.in_name == "Name"
    assert tag.ex_name == "name"
    assert tag.type == "BYTE_ARRAY"
    assert tag.converted_type == "UTF8"
    assert tag.encoding is Encoding.PLAIN_DICTIONARY


def test_string_to_tag_numbers_and_flags():
    tag = string_to_tag(
        "name=d, type=FIXED_LEN_BYTE_ARRAY, length=12, scale=2, precision=10,"
        "\tfieldid=5, omitstats=true, repetitiontype=OPTIONAL"
    )
    assert (tag.length, tag.scale, tag.precision, tag.field_id) == (12, 2, 10, 5)
    assert tag.omit_stats is True
    assert tag.repetition_type is FieldRepetitionType.OPTIONAL


def test_string_to_tag_inname_wins():
    tag = string_to_tag("inname=Foo, name=bar")
    assert tag.in_name == "Foo"
    assert tag.ex_name == "bar"


def test_string_to_tag_map_fields():
    tag = string_to_tag(
        "name=score, type=MAP, keytype=BYTE_ARRAY, keyconvertedtype=UTF8,"
        " valuetype=INT32, valuerepetitiontype=optional, keyencoding=rle"
    )
    assert tag.key_type == "BYTE_ARRAY"
    assert tag.key_converted_type == "UTF8"
    assert tag.value_type == "INT32"
    assert tag.value_repetition_type is FieldRepetitionType.OPTIONAL
    assert tag.key_encoding is Encoding.RLE


def test_string_to_tag_logical_fields():
    tag = string_to_tag(
        "name=t, type=INT32, logicaltype=TIME, logicaltype.unit=MILLIS,"
        " keylogicaltype=STRING, valuelogicaltype.unit=MICROS"
    )
    assert tag.logical_type_fields == {
        "logicaltype": "TIME",
        "logicaltype.unit": "MILLIS",
    }
    assert tag.key_logical_type_fields == {"logicaltype": "STRING"}
    assert tag.value_logical_type_fields == {"logicaltype.unit": "MICROS"}


@pytest.mark.parametrize(
    "text",
    [
        "name",
        "name=a, bogus=1",
        "name=a, length=x",
        "name=a, repetitiontype=sometimes",
        "name=a, encoding=zip",
        "name=a, keyencoding=plain",
        "name=a, valueencoding=rle_dictionary",
        "name=a, omitstats=maybe",
    ],
)
def test_string_to_tag_errors(text):
    with pytest.raises(ValueError):
        string_to_tag(text)


def test_schema_element_decimal_from_converted_type():
    tag = string_to_tag(
        "name=decimal1, type=INT32, convertedtype=DECIMAL, scale=2, precision=9"
    )
    element = new_schema_element_from_tag(tag)
    assert element.name == "Decimal1"
    assert element.type is Type.INT32
    assert element.converted_type is ConvertedType.DECIMAL
    assert element.scale == 2
    assert element.precision == 9
    assert element.num_children is None
    assert element.repetition_type is FieldRepetitionType.REQUIRED
    assert element.logical_type == LogicalType("DECIMAL", precision=9, scale=2)


def test_schema_element_logical_type_fields():
    tag = string_to_tag(
        "name=t, type=INT32, logicaltype=TIME,"
        " logicaltype.isadjustedtoutc=true, logicaltype.unit=MILLIS"
    )
    element = new_schema_element_from_tag(tag)
    assert element.converted_type is None
    assert element.logical_type == LogicalType(
        "TIME", is_adjusted_to_utc=True, unit=TimeUnit.MILLIS
    )


def test_schema_element_unknown_converted_type_is_ignored():
    element = new_schema_element_from_tag(string_to_tag("name=a, type=INT64"))
    assert element.converted_type is None
    assert element.logical_type is None


def test_schema_element_bad_type():
    with pytest.raises(ValueError):
        new_schema_element_from_tag(string_to_tag("name=a, type=MAP"))


def test_schema_element_bad_logical_fields():
    tag = string_to_tag("name=a, type=INT32, logicaltype=TIME, logicaltype.unit=DAYS,"
                        " logicaltype.isadjustedtoutc=false")
    with pytest.raises(ValueError):
        new_schema_element_from_tag(tag)


def test_logical_type_from_fields_map_variants():
    assert new_logical_type_from_fields_map({"logicaltype": "UUID"}) == LogicalType("UUID")
    assert new_logical_type_from_fields_map(
        {
            "logicaltype": "INTEGER",
            "logicaltype.bitwidth": "16",
            "logicaltype.issigned": "false",
        }
    ) == LogicalType("INTEGER", bit_width=16, is_signed=False)
    assert new_logical_type_from_fields_map(
        {
            "logicaltype": "TIMESTAMP",
            "logicaltype.isadjustedtoutc": "false",
            "logicaltype.unit": "NANOS",
        }
    ) == LogicalType("TIMESTAMP", is_adjusted_to_utc=False, unit=TimeUnit.NANOS)


@pytest.mark.parametrize(
    "fields",
    [
        {},
        {"logicaltype": "NOPE"},
        {"logicaltype": "DECIMAL", "logicaltype.scale": "2"},
        {"logicaltype": "TIME", "logicaltype.unit": "MILLIS"},
        {"logicaltype": "INTEGER", "logicaltype.bitwidth": "8"},
    ],
)
def test_logical_type_from_fields_map_errors(fields):
    with pytest.raises(ValueError):
        new_logical_type_from_fields_map(fields)


@pytest.mark.parametrize(
    "converted, expected",
    [
        (ConvertedType.INT_8, LogicalType("INTEGER", bit_width=8, is_signed=True)),
        (ConvertedType.UINT_64, LogicalType("INTEGER", bit_width=64, is_signed=False)),
        (ConvertedType.UTF8, LogicalType("STRING")),
        (ConvertedType.DATE, LogicalType("DATE")),
        (
            ConvertedType.TIMESTAMP_MICROS,
            LogicalType("TIMESTAMP", is_adjusted_to_utc=True, unit=TimeUnit.MICROS),
        ),
        (ConvertedType.INTERVAL, None),
        (ConvertedType.MAP_KEY_VALUE, None),
    ],
)
def test_logical_type_from_converted_type(converted, expected):
    element = SchemaElement(name="x", type=Type.INT64, converted_type=converted)
    tag = Tag(is_adjusted_to_utc=True)
    assert new_logical_type_from_converted_type(element, tag) == expected


def test_logical_type_from_missing_converted_type():
    element = SchemaElement(name="x", type=Type.INT32)
    assert new_logical_type_from_converted_type(element, Tag()) is None


def test_get_key_and_value_tags():
    tag = string_to_tag(
        "name=m, type=MAP, keytype=BYTE_ARRAY, keyconvertedtype=UTF8, keylength=3,"
        " valuetype=INT32, valuescale=4, valuerepetitiontype=OPTIONAL,"
        " keyrepetitiontype=OPTIONAL, valueomitstats=true"
    )
    key = get_key_tag(tag)
    assert (key.in_name, key.ex_name) == ("Key", "key")
    assert key.type == "BYTE_ARRAY"
    assert key.converted_type == "UTF8"
    assert key.length == 3
    assert key.repetition_type is FieldRepetitionType.REQUIRED

    value = get_value_tag(tag)
    assert (value.in_name, value.ex_name) == ("Value", "value")
    assert value.type == "INT32"
    assert value.scale == 4
    assert value.omit_stats is True
    assert value.repetition_type is FieldRepetitionType.OPTIONAL