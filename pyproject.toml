[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "parquetlite"
version = "0.1.0"
description = "Parquet building blocks: value encodings, compression codecs, schema tags and column statistics"
requires-python = ">=3.10"
keywords = ["parquet", "encoding", "rle", "bit-packing", "delta", "compression", "columnar"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: File Formats",
]
dependencies = [
    "lz4",
    "zstandard",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["parquetlite"]

[tool.pytest.ini_options]
addopts = "-ra"
