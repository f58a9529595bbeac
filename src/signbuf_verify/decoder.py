"""Single-frame decoder.

The decoder consumes one byte per transition and never looks ahead. It holds
a 13-byte collector for the checksum record, a few counters and the running
hash, whatever the payload size.
"""
from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Any, Union

from signbuf_core.checksum import ChecksumRecord
from signbuf_core.config import FramingConfig
from signbuf_core.protocol import CHECKSUM_RECORD_LEN
from signbuf_core.regions import DecodedRegion

from .errors import (
    EmptyPayloadSize,
    InvalidBufferSize,
    InvalidChecksumStruct,
    InvalidHash,
    InvalidHeader,
    InvalidPayloadSize,
    InvalidTrailer,
    MissingData,
    TooMuchData,
    UnsupportedVersion,
)


@dataclass(frozen=True, slots=True)
class HeaderState:
    remaining: int


@dataclass(frozen=True, slots=True)
class ChecksumState:
    collected: bytes
    remaining: int


@dataclass(frozen=True, slots=True)
class PayloadState:
    checksum: ChecksumRecord
    start_offset: int
    remaining: int


@dataclass(frozen=True, slots=True)
class TrailerState:
    checksum: ChecksumRecord
    payload_offset: int
    remaining: int


@dataclass(frozen=True, slots=True)
class FinishedState:
    checksum: ChecksumRecord
    payload_range: range


State = Union[HeaderState, ChecksumState, PayloadState, TrailerState, FinishedState]


class FrameDecoder:
    """Validate one frame whose first byte is at absolute offset ``start``.

    Single use: once finished, any further byte raises TooMuchData. A failed
    decoder must be discarded.
    """

    def __init__(self, config: FramingConfig, start: int = 0, matched: int = 0):
        # ``matched`` header bytes from ``start`` on are already known good.
        if not 0 <= matched < len(config.header_magic):
            raise ValueError(f"Cannot resume after {matched} header bytes")
        self.config = config
        self.start = start
        self.position = start + matched
        self.state: State = HeaderState(remaining=len(config.header_magic) - matched)
        self._hasher: Any = None

    @property
    def finished(self) -> bool:
        return isinstance(self.state, FinishedState)

    def region(self) -> DecodedRegion | None:
        """Region of the decoded frame, once finished."""
        state = self.state
        if not isinstance(state, FinishedState):
            return None
        return DecodedRegion(
            payload_range=state.payload_range,
            frame_range=range(self.start, self.position),
        )

    def push(self, byte: int) -> None:
        """Feed one byte. Raises RetrievalError on the first invalid byte."""
        self.state = self._process(byte)
        self.position += 1

    def _process(self, byte: int) -> State:
        state = self.state
        config = self.config

        if isinstance(state, HeaderState):
            magic = config.header_magic
            if byte != magic[len(magic) - state.remaining]:
                raise InvalidHeader(f"offset {self.position}")
            if state.remaining == 1:
                return ChecksumState(collected=b"", remaining=CHECKSUM_RECORD_LEN)
            return HeaderState(remaining=state.remaining - 1)

        if isinstance(state, ChecksumState):
            collected = state.collected + bytes((byte,))
            if state.remaining > 1:
                return ChecksumState(collected=collected, remaining=state.remaining - 1)
            return self._open_payload(collected)

        if isinstance(state, PayloadState):
            self._hasher = config.algorithm.update(self._hasher, bytes((byte,)))
            if state.remaining == 1:
                return TrailerState(
                    checksum=state.checksum,
                    payload_offset=state.start_offset,
                    remaining=len(config.trailer_magic),
                )
            return PayloadState(
                checksum=state.checksum,
                start_offset=state.start_offset,
                remaining=state.remaining - 1,
            )

        if isinstance(state, TrailerState):
            magic = config.trailer_magic
            if byte != magic[len(magic) - state.remaining]:
                raise InvalidTrailer(f"offset {self.position}")
            if state.remaining > 1:
                return TrailerState(
                    checksum=state.checksum,
                    payload_offset=state.payload_offset,
                    remaining=state.remaining - 1,
                )
            return self._close(state)

        if isinstance(state, FinishedState):
            raise TooMuchData(f"offset {self.position}")

        raise AssertionError(f"Unknown decoder state {state!r}")

    def _open_payload(self, collected: bytes) -> State:
        try:
            checksum = ChecksumRecord.unpack(collected)
        except struct.error as e:
            raise InvalidChecksumStruct(str(e)) from e

        if checksum.version > self.config.version:
            raise UnsupportedVersion(checksum.version)
        if checksum.size == 0:
            raise EmptyPayloadSize()
        if not self.config.permits(checksum.size):
            raise InvalidPayloadSize(checksum.size)

        algorithm = self.config.algorithm
        hasher = algorithm.init()
        hasher = algorithm.update(hasher, bytes((checksum.version,)))
        self._hasher = algorithm.update(hasher, checksum.size.to_bytes(4, "big"))

        return PayloadState(
            checksum=checksum,
            start_offset=self.position + 1,
            remaining=checksum.size,
        )

    def _close(self, state: TrailerState) -> State:
        checksum = state.checksum
        payload = range(state.payload_offset, state.payload_offset + checksum.size)

        computed = self.config.algorithm.finish(self._hasher)
        if computed != checksum.checksum:
            raise InvalidHash(f"expected {checksum.checksum:016x}, computed {computed:016x}")
        # Unreachable while the counters above are consistent.
        if len(payload) != checksum.size:
            raise InvalidBufferSize(f"expected {checksum.size}, got {len(payload)}")

        return FinishedState(checksum=checksum, payload_range=payload)


def decode(config: FramingConfig, buffer) -> tuple[int, DecodedRegion]:
    """Decode the frame starting at the first byte of ``buffer``.

    Returns the number of bytes consumed and the region, referencing
    ``buffer``. There is no resync: the first invalid byte raises.
    """
    decoder = FrameDecoder(config, 0)
    for b in memoryview(buffer).cast("B"):
        decoder.push(b)
        if decoder.finished:
            region = decoder.region()
            consumed = decoder.position
            return consumed, DecodedRegion(region.payload_range, region.frame_range, source=buffer)

    raise MissingData(f"consumed {decoder.position} bytes")
