"""Signed buffer protocol constants.

Single source of truth for the wire layout of a frame.
Keep this file stable. Signer and decoder must remain synchronized.
"""

# Format version written by the signer and the highest one the decoder accepts
VERSION = 1

# Checksum record: [Ver(1) | Size(4) | Checksum(8)] = 13 bytes, big-endian
CHECKSUM_RECORD_FMT = ">BIQ"
CHECKSUM_RECORD_LEN = 13

# Size field is a u32
MAX_PAYLOAD_SIZE = 0xFFFFFFFF

# Default magics
DEFAULT_HEADER_MAGIC = b"\x1f\x3f\x7f"
DEFAULT_TRAILER_MAGIC = b"\x7f\x3f\x1f"

# Default safety bounds
DEFAULT_MAX_PAYLOAD_SIZE = 8192
DEFAULT_MAX_GARBAGE_BYTES = 256 * 1024  # 256 KiB tolerated between records before warning
