"""Per-channel framing configuration."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from signbuf_core.errors import FramingConfigError
from signbuf_core.hashing import Blake2b64, HashAlgorithm
from signbuf_core.protocol import (
    CHECKSUM_RECORD_LEN,
    DEFAULT_HEADER_MAGIC,
    DEFAULT_MAX_PAYLOAD_SIZE,
    DEFAULT_TRAILER_MAGIC,
    MAX_PAYLOAD_SIZE,
    VERSION,
)
from signbuf_core.regions import frame_length


def _check_bound(name: str, value: int) -> None:
    if not 0 < value <= MAX_PAYLOAD_SIZE:
        raise FramingConfigError(f"{name} must be in 1..{MAX_PAYLOAD_SIZE}, got {value}")


@dataclass(frozen=True)
class FixedSize:
    bytes: int

    def __post_init__(self) -> None:
        _check_bound("Fixed size", self.bytes)

    def permits(self, size: int) -> bool:
        return size == self.bytes


@dataclass(frozen=True)
class DynamicSize:
    max_bytes: int

    def __post_init__(self) -> None:
        _check_bound("Dynamic max size", self.max_bytes)

    def permits(self, size: int) -> bool:
        return size <= self.max_bytes


SizePolicy = Union[FixedSize, DynamicSize]


@dataclass(frozen=True)
class FramingConfig:
    """Everything two endpoints must agree on to exchange frames.

    ``enforce_size`` makes the signer reject payloads outside the size policy
    and the decoder reject records announcing such a size. Turning it off
    leaves the policy purely advisory.
    """

    size: SizePolicy = field(default_factory=lambda: DynamicSize(DEFAULT_MAX_PAYLOAD_SIZE))
    header_magic: bytes = DEFAULT_HEADER_MAGIC
    trailer_magic: bytes = DEFAULT_TRAILER_MAGIC
    algorithm: HashAlgorithm = field(default_factory=Blake2b64)
    enforce_size: bool = True

    def __post_init__(self) -> None:
        # Accept any bytes-like magic (lists of ints included) but store bytes.
        object.__setattr__(self, "header_magic", bytes(self.header_magic))
        object.__setattr__(self, "trailer_magic", bytes(self.trailer_magic))
        if not self.header_magic:
            raise FramingConfigError("Header magic must not be empty")
        if not self.trailer_magic:
            raise FramingConfigError("Trailer magic must not be empty")
        if not isinstance(self.size, (FixedSize, DynamicSize)):
            raise FramingConfigError(f"Unsupported size policy {self.size!r}")

    @property
    def version(self) -> int:
        return VERSION

    @property
    def overhead(self) -> int:
        return len(self.header_magic) + CHECKSUM_RECORD_LEN + len(self.trailer_magic)

    def frame_length(self, payload_size: int) -> int:
        return frame_length(len(self.header_magic), payload_size, len(self.trailer_magic))

    def permits(self, payload_size: int) -> bool:
        """Whether the size policy allows a payload of this length."""
        return not self.enforce_size or self.size.permits(payload_size)
