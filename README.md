# parquetlite

Low-level building blocks for Apache Parquet data in pure Python. The
package has these modules:

- `parquetlite.format`: the enumerations `Type`, `ConvertedType`,
  `FieldRepetitionType`, `Encoding`, `CompressionCodec` and `TimeUnit`, the
  dataclasses `LogicalType` and `SchemaElement`, and `parse_type` /
  `parse_converted_type`, which look up a member by name and raise
  `ValueError` for an unknown name.
- `parquetlite.binary`: little-endian packing and unpacking of 32- and
  64-bit integers and floats (`read_int32`, `write_int64`, ...).
- `parquetlite.bitpack`: unsigned varints and bit-packed runs.
- `parquetlite.plain`: the PLAIN encoding for every physical type.
- `parquetlite.rle`: RLE runs and the RLE / bit-packed hybrid encoding.
- `parquetlite.delta`: DELTA_BINARY_PACKED, DELTA_LENGTH_BYTE_ARRAY,
  DELTA_BYTE_ARRAY and BYTE_STREAM_SPLIT.
- `parquetlite.compression`: the codecs UNCOMPRESSED, GZIP, SNAPPY, LZ4,
  LZ4_RAW and ZSTD behind `compress` and `uncompress`. Snappy is written
  in pure Python and is also available as `snappy_encode` / `snappy_decode`.
- `parquetlite.tag`: parses field tags such as
  `"name=age, type=INT32, convertedtype=INT_8"` into `Tag` objects and turns
  them into `SchemaElement`s.
- `parquetlite.stats`: a `FuncTable` for each column type, which orders
  values and reports their size, for tracking minimum and maximum statistics.
- `parquetlite.paths`: helpers for path strings whose parts are joined with
  `PATH_DELIMITER` (`"\x01"`), and for building and transposing row tables.

Byte-array values are read back as `bytes`. Writers accept `bytes` or `str`;
a `str` is encoded as UTF-8.

## Installation

```
pip install parquetlite
```

To run the tests, install the `test` extra and run pytest:

```
pip install "parquetlite[test]"
pytest
```

## Examples

### Encodings

```python
import io

from parquetlite.format import Type
from parquetlite.plain import write_plain, read_plain
from parquetlite.delta import write_delta_int64, read_delta_binary_packed_int64
from parquetlite.bitpack import write_unsigned_varint, read_unsigned_varint

data = write_plain([1, 2, 3], Type.INT32)
values = read_plain(io.BytesIO(data), Type.INT32, 3, 0)       # [1, 2, 3]

packed = write_delta_int64([7, 5, 3, 1, 2, 3, 4, 5])
read_delta_binary_packed_int64(io.BytesIO(packed))            # [7, 5, 3, 1, 2, 3, 4, 5]

read_unsigned_varint(io.BytesIO(write_unsigned_varint(300)))  # 300
```

Readers that run out of input raise `EOFError`.

### Compression

```python
from parquetlite.compression import compress, uncompress
from parquetlite.format import CompressionCodec

blob = compress(b"test data", CompressionCodec.GZIP)
assert uncompress(blob, CompressionCodec.GZIP) == b"test data"
```

A codec with no implementation (LZO, BROTLI) raises `UnsupportedCodecError`,
a subclass of `ValueError`.

### Schema tags

```python
from parquetlite.tag import string_to_tag, new_schema_element_from_tag

tag = string_to_tag("name=day, type=INT32, convertedtype=DATE")
element = new_schema_element_from_tag(tag)
element.name               # "Day"
element.logical_type.name  # "DATE"
```

A malformed tag (an item without `=`, an unknown key, or a value that does
not parse) raises `ValueError`. `get_key_tag` and `get_value_tag` derive the
tags for the keys and values of a map field.

### Statistics

```python
from parquetlite.format import Type, ConvertedType
from parquetlite.stats import find_func_table, min_value, max_value

table = find_func_table(Type.INT32, ConvertedType.UINT_32, None)
table.less_than(1, -2)                             # True: compared as unsigned
lo, hi, size = table.min_max_size(None, None, 5)   # (5, 5, 4)
min_value(table, None, 3)                          # 3
```

`find_func_table` raises `ValueError` when no table applies to the type.

### Paths

```python
from parquetlite.paths import reform_path_str, str_to_path, is_child_path

path = reform_path_str("parquet_go_root.scores")
str_to_path(path)                                   # ["parquet_go_root", "scores"]
is_child_path(path, path + "\x01key_value")         # True
```

## What this package does not do

It does not read or write Parquet files. There is no file reader or writer,
no Thrift footer or page-header handling, no row-group, column-chunk or
dictionary-page assembly, and no record shredding. The modules here encode,
compress and describe values; putting them together into a file is left to
the caller.