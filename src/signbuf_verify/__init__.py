"""signbuf verify - Frame decoder and scanner."""
from .decoder import FrameDecoder, decode
from .errors import (
    EmptyPayloadSize,
    InvalidBufferSize,
    InvalidChecksumStruct,
    InvalidHash,
    InvalidHeader,
    InvalidPayloadSize,
    InvalidTrailer,
    MissingData,
    RetrievalError,
    TooMuchData,
    UnsupportedVersion,
)
from .index import read_region_index, write_region_index
from .scanner import RecordScanner, decode_all, iter_regions

__all__ = [
    "FrameDecoder",
    "decode",
    "RecordScanner",
    "decode_all",
    "iter_regions",
    "read_region_index",
    "write_region_index",
    "RetrievalError",
    "InvalidHeader",
    "InvalidChecksumStruct",
    "UnsupportedVersion",
    "EmptyPayloadSize",
    "InvalidPayloadSize",
    "InvalidHash",
    "InvalidBufferSize",
    "InvalidTrailer",
    "MissingData",
    "TooMuchData",
]
