"""Fixed-layout checksum record carried between header magic and payload."""
from __future__ import annotations

import struct
from dataclasses import dataclass

from signbuf_core.protocol import CHECKSUM_RECORD_FMT, CHECKSUM_RECORD_LEN

_RECORD = struct.Struct(CHECKSUM_RECORD_FMT)
assert _RECORD.size == CHECKSUM_RECORD_LEN


@dataclass(frozen=True)
class ChecksumRecord:
    version: int
    size: int
    checksum: int

    @staticmethod
    def packed_bytes() -> int:
        return CHECKSUM_RECORD_LEN

    def pack(self) -> bytes:
        """Pack into the 13-byte wire layout.

        Raises struct.error when a field does not fit its width.
        """
        return _RECORD.pack(self.version, self.size, self.checksum)

    @classmethod
    def unpack(cls, data: bytes) -> "ChecksumRecord":
        """Unpack a 13-byte record. Raises struct.error on a wrong length."""
        version, size, checksum = _RECORD.unpack(bytes(data))
        return cls(version=int(version), size=int(size), checksum=int(checksum))
