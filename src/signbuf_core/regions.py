"""Frame geometry and decoded regions."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from signbuf_core.protocol import CHECKSUM_RECORD_LEN


def frame_length(header_len: int, payload_size: int, trailer_len: int) -> int:
    return header_len + CHECKSUM_RECORD_LEN + payload_size + trailer_len


def shift_range(r: range, offset: int) -> range:
    return range(r.start + offset, r.stop + offset)


@dataclass(frozen=True)
class DecodedRegion:
    """Location of one decoded frame.

    Both ranges are half-open and absolute to the buffer that was decoded.
    The region is a view: ``source`` optionally references that buffer, and
    ``payload()`` / ``frame()`` return memoryview slices of it, never copies.
    """

    payload_range: range
    frame_range: range
    source: Any = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        p, f = self.payload_range, self.frame_range
        if not (f.start <= p.start <= p.stop <= f.stop):
            raise ValueError(f"Payload range {p} is not nested in frame range {f}")

    def _view(self, r: range, buffer) -> memoryview:
        buf = self.source if buffer is None else buffer
        if buf is None:
            raise ValueError("Region has no source buffer; pass one explicitly")
        if r.stop > len(buf):
            raise ValueError(f"Range {r} exceeds buffer of {len(buf)} bytes")
        return memoryview(buf)[r.start:r.stop]

    def payload(self, buffer=None) -> memoryview:
        return self._view(self.payload_range, buffer)

    def frame(self, buffer=None) -> memoryview:
        return self._view(self.frame_range, buffer)

    def shifted(self, offset: int, source=None) -> "DecodedRegion":
        """Translate into the coordinates of an enclosing buffer."""
        return DecodedRegion(
            payload_range=shift_range(self.payload_range, offset),
            frame_range=shift_range(self.frame_range, offset),
            source=source,
        )
