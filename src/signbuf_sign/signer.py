"""Frame producer: checksum a payload and lay out its frame."""
from __future__ import annotations

from signbuf_core.checksum import ChecksumRecord
from signbuf_core.config import DynamicSize, FixedSize, FramingConfig
from signbuf_core.hashing import hash_frame_fields
from signbuf_core.protocol import MAX_PAYLOAD_SIZE

from .errors import InvalidBufferSize, PayloadEmpty, PayloadTooLarge


class SignResult:
    """The four segments of one frame.

    ``payload`` is a view of the caller's buffer; nothing is copied until
    ``assemble()``.
    """

    def __init__(self, checksum: ChecksumRecord, header: bytes, payload: memoryview, trailer: bytes):
        self.checksum = checksum
        self.header = header
        self.payload = payload
        self.trailer = trailer

    @property
    def packed_checksum(self) -> bytes:
        return self.checksum.pack()

    def segments(self) -> tuple[bytes, bytes, memoryview, bytes]:
        return self.header, self.packed_checksum, self.payload, self.trailer

    def __len__(self) -> int:
        return len(self.header) + len(self.packed_checksum) + len(self.payload) + len(self.trailer)

    def assemble(self) -> bytes:
        return b"".join(self.segments())

    def __repr__(self) -> str:
        return f"SignResult(checksum={self.checksum!r}, frame_len={len(self)})"


def _check_policy(config: FramingConfig, size: int) -> None:
    if not config.enforce_size:
        return
    policy = config.size
    if isinstance(policy, FixedSize) and size != policy.bytes:
        raise InvalidBufferSize(expected=policy.bytes, actual=size)
    if isinstance(policy, DynamicSize) and size > policy.max_bytes:
        raise PayloadTooLarge(size, policy.max_bytes)


def sign(config: FramingConfig, payload) -> SignResult:
    """Checksum ``payload`` and return the segments of its frame."""
    view = memoryview(payload).cast("B")
    size = len(view)

    if size == 0:
        raise PayloadEmpty()
    if size > MAX_PAYLOAD_SIZE:
        raise PayloadTooLarge(size, MAX_PAYLOAD_SIZE)
    _check_policy(config, size)

    version = config.version
    checksum = hash_frame_fields(config.algorithm, version, size, view)

    return SignResult(
        checksum=ChecksumRecord(version=version, size=size, checksum=checksum),
        header=config.header_magic,
        payload=view,
        trailer=config.trailer_magic,
    )
