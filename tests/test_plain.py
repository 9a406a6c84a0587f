import io

import pytest

from parquetlite.format import Type
from parquetlite.plain import (
    read_plain,
    read_plain_boolean,
    read_plain_byte_array,
    read_plain_double,
    read_plain_fixed_len_byte_array,
    read_plain_float,
    read_plain_int32,
    read_plain_int64,
    read_plain_int96,
    write_plain,
    write_plain_boolean,
    write_plain_byte_array,
    write_plain_double,
    write_plain_fixed_len_byte_array,
    write_plain_float,
    write_plain_int32,
    write_plain_int64,
    write_plain_int96,
)


@pytest.mark.parametrize(
    "data",
    [[True], [False], [False, False], [False, True]],
)
def test_read_plain_boolean_round_trip(data):
    encoded = write_plain_boolean(data)
    assert read_plain_boolean(io.BytesIO(encoded), len(data)) == data


def test_read_plain_boolean_decodes_bits():
    assert read_plain_boolean(io.BytesIO(b"\x09"), 5) == [True, False, False, True, False]


@pytest.mark.parametrize(
    "expected, raw",
    [
        ([], b""),
        ([0], bytes([0, 0, 0, 0])),
        ([0, 1, 2], bytes([0, 0, 0, 0, 1, 0, 0, 0, 2, 0, 0, 0])),
    ],
)
def test_read_plain_int32(expected, raw):
    assert read_plain_int32(io.BytesIO(raw), len(expected)) == expected


@pytest.mark.parametrize(
    "expected, raw",
    [
        ([], b""),
        ([0], bytes(8)),
        ([0, 1, 2], bytes([0] * 8 + [1] + [0] * 7 + [2] + [0] * 7)),
    ],
)
def test_read_plain_int64(expected, raw):
    assert read_plain_int64(io.BytesIO(raw), len(expected)) == expected


def test_read_plain_int32_short_input_raises():
    with pytest.raises(EOFError):
        read_plain_int32(io.BytesIO(b"\x01\x00"), 1)


@pytest.mark.parametrize(
    "data",
    [[b"hello", b"world"], [b"good", b"", b"a", b"b"]],
)
def test_read_plain_byte_array_round_trip(data):
    encoded = write_plain_byte_array(data)
    assert read_plain_byte_array(io.BytesIO(encoded), len(data)) == data


@pytest.mark.parametrize(
    "data",
    [[b"hello", b"world"], [b"a", b"b", b"c", b"d"]],
)
def test_read_plain_fixed_len_byte_array_round_trip(data):
    encoded = write_plain_fixed_len_byte_array(data)
    result = read_plain_fixed_len_byte_array(io.BytesIO(encoded), len(data), len(data[0]))
    assert result == data


def test_read_plain_fixed_len_byte_array_exhausted_raises():
    with pytest.raises(EOFError):
        read_plain_fixed_len_byte_array(io.BytesIO(b"ab"), 2, 2)


@pytest.mark.parametrize("data", [[0.0, 1.0, 2.0], [0.0, 0.1, 0.2]])
def test_read_plain_float_round_trip(data):
    result = read_plain_float(io.BytesIO(write_plain_float(data)), len(data))
    assert result == pytest.approx(data, rel=1e-6)


@pytest.mark.parametrize("data", [[0.0, 1.0, 2.0], [0.0, 0.0, 0.0]])
def test_read_plain_double_round_trip(data):
    result = read_plain_double(io.BytesIO(write_plain_double(data)), len(data))
    assert result == data


def test_read_plain_int96_round_trip():
    values = [bytes(12), bytes([1] + [0] * 11), bytes(range(12))]
    assert read_plain_int96(io.BytesIO(write_plain_int96(values)), 3) == values


def test_read_plain_dispatches_by_type():
    raw = write_plain_int32([5, -7])
    assert read_plain(io.BytesIO(raw), Type.INT32, 2, 0) == [5, -7]
    fixed = read_plain(io.BytesIO(b"abcdef"), Type.FIXED_LEN_BYTE_ARRAY, 2, 3)
    assert fixed == [b"abc", b"def"]


def test_read_plain_unknown_type_raises():
    with pytest.raises(ValueError):
        read_plain(io.BytesIO(b""), 99, 1, 0)


@pytest.mark.parametrize(
    "values, expected",
    [
        ([], b""),
        ([True], bytes([1])),
        ([True, False], bytes([1])),
        ([True, False, False, True, False], bytes([9])),
    ],
)
def test_write_plain_boolean(values, expected):
    assert write_plain_boolean(values) == expected


@pytest.mark.parametrize(
    "values, expected",
    [
        ([], b""),
        ([0], bytes([0, 0, 0, 0])),
        ([0, 1, 2], bytes([0, 0, 0, 0, 1, 0, 0, 0, 2, 0, 0, 0])),
    ],
)
def test_write_plain_int32(values, expected):
    assert write_plain_int32(values) == expected


@pytest.mark.parametrize(
    "values, expected",
    [
        ([], b""),
        ([0], bytes(8)),
        ([0, 1, 2], bytes([0] * 8 + [1] + [0] * 7 + [2] + [0] * 7)),
    ],
)
def test_write_plain_int64(values, expected):
    assert write_plain_int64(values) == expected


@pytest.mark.parametrize(
    "values, expected",
    [
        ([], b""),
        ([bytes(12)], bytes(12)),
        (
            [bytes(12), bytes([1] + [0] * 11), bytes([2] + [0] * 11)],
            bytes(12) + bytes([1] + [0] * 11) + bytes([2] + [0] * 11),
        ),
    ],
)
def test_write_plain_int96(values, expected):
    assert write_plain_int96(values) == expected


@pytest.mark.parametrize(
    "values, expected",
    [
        ([], b""),
        (["a", "abc"], bytes([1, 0, 0, 0, 97, 3, 0, 0, 0, 97, 98, 99])),
    ],
)
def test_write_plain_byte_array(values, expected):
    assert write_plain_byte_array(values) == expected


@pytest.mark.parametrize(
    "values, expected",
    [
        ([], b""),
        (["bca", "abc"], bytes([98, 99, 97, 97, 98, 99])),
    ],
)
def test_write_plain_fixed_len_byte_array(values, expected):
    assert write_plain_fixed_len_byte_array(values) == expected


def test_write_plain_dispatch_and_empty():
    assert write_plain([], Type.INT32) == b""
    assert write_plain([1], Type.INT32) == bytes([1, 0, 0, 0])
    assert write_plain([True, True], Type.BOOLEAN) == bytes([3])
    assert write_plain([1], 99) == b""