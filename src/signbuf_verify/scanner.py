from __future__ import annotations

from typing import Iterator
from warnings import warn

from signbuf_core.config import FramingConfig
from signbuf_core.protocol import DEFAULT_MAX_GARBAGE_BYTES
from signbuf_core.regions import DecodedRegion

from .decoder import FrameDecoder
from .errors import InvalidHeader, RetrievalError


def _prefix_function(magic: bytes) -> list[int]:
    """pi[i]: length of the longest proper border of magic[:i + 1]."""
    pi = [0] * len(magic)
    k = 0
    for i in range(1, len(magic)):
        while k > 0 and magic[i] != magic[k]:
            k = pi[k - 1]
        if magic[i] == magic[k]:
            k += 1
        pi[i] = k
    return pi


class RecordScanner:
    """Find every valid frame in a byte stream.

    Bytes are fed one at a time. A failed attempt is discarded and a fresh
    decoder starts right after the byte that broke it; the failing byte is
    not retried. With ``overlap_headers`` a header mismatch instead falls
    back through the header magic's borders, so a frame whose header overlaps
    a rejected partial header is still found.
    """

    def __init__(
        self,
        config: FramingConfig,
        overlap_headers: bool = False,
        max_garbage_bytes: int = DEFAULT_MAX_GARBAGE_BYTES,
        source=None,
    ):
        self.config = config
        self.overlap_headers = overlap_headers
        self.max_garbage_bytes = max_garbage_bytes
        self.source = source
        self.cursor = 0
        self.decoder = FrameDecoder(config, 0)
        self._prefix = _prefix_function(config.header_magic) if overlap_headers else None
        self._last_end = 0
        self._framed_bytes = 0
        self.scan_stats = {
            "records": 0,
            "corrupt_records": 0,
        }

    def push(self, byte: int) -> DecodedRegion | None:
        """Feed one byte; returns a region when it completes a frame."""
        decoder = self.decoder
        self.cursor += 1

        try:
            decoder.push(byte)
        except InvalidHeader:
            self.decoder = self._after_header_mismatch(decoder, byte)
            return None
        except RetrievalError as e:
            self.scan_stats["corrupt_records"] += 1
            warn(f"Corrupt record at offset {decoder.start}: {e.code}. Resyncing at {self.cursor}.")
            self.decoder = FrameDecoder(self.config, self.cursor)
            return None

        if not decoder.finished:
            return None

        found = decoder.region()
        # Same bounds as found.frame_range, derived from the record's size.
        frame_len = self.config.frame_length(len(found.payload_range))
        region = DecodedRegion(
            payload_range=found.payload_range,
            frame_range=range(self.cursor - frame_len, self.cursor),
            source=self.source,
        )

        gap = region.frame_range.start - self._last_end
        if gap > self.max_garbage_bytes:
            warn(f"Large garbage span before record at offset {region.frame_range.start}: {gap} bytes")

        self._last_end = self.cursor
        self._framed_bytes += frame_len
        self.scan_stats["records"] += 1
        self.decoder = FrameDecoder(self.config, self.cursor)
        return region

    def _after_header_mismatch(self, decoder: FrameDecoder, byte: int) -> FrameDecoder:
        if self._prefix is None:
            return FrameDecoder(self.config, self.cursor)

        magic = self.config.header_magic
        k = decoder.position - decoder.start
        while k > 0 and magic[k] != byte:
            k = self._prefix[k - 1]
        if magic[k] == byte:
            k += 1
        return FrameDecoder(self.config, self.cursor - k, matched=k)

    def feed(self, data) -> list[DecodedRegion]:
        """Feed a chunk; chunks of one stream may be fed in sequence."""
        found = []
        for b in memoryview(data).cast("B"):
            region = self.push(b)
            if region is not None:
                found.append(region)
        return found

    def get_scan_stats(self) -> dict:
        stats = dict(self.scan_stats)
        stats["bytes_scanned"] = self.cursor
        stats["garbage_bytes"] = self.cursor - self._framed_bytes
        return stats


def iter_regions(config: FramingConfig, buffer, **kwargs) -> Iterator[DecodedRegion]:
    """Lazily yield every frame in ``buffer``, left to right."""
    scanner = RecordScanner(config, source=buffer, **kwargs)
    for b in memoryview(buffer).cast("B"):
        region = scanner.push(b)
        if region is not None:
            yield region


def decode_all(config: FramingConfig, buffer, **kwargs) -> list[DecodedRegion]:
    return list(iter_regions(config, buffer, **kwargs))
