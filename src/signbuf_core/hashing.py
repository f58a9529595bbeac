"""Pluggable 64-bit hash algorithms.

An algorithm is anything offering ``init() -> state``,
``update(state, data) -> state`` and ``finish(state) -> int``. The signer and
the decoder only ever talk to that capability, so frames can be protected
with any incremental hash that folds to 64 bits.
"""
from __future__ import annotations

import hashlib
from typing import Any, Protocol

from signbuf_core.errors import FramingConfigError


class HashAlgorithm(Protocol):
    name: str

    def init(self) -> Any: ...

    def update(self, state: Any, data: bytes) -> Any: ...

    def finish(self, state: Any) -> int: ...


class Blake2b64:
    """Keyed BLAKE2b with an 8-byte digest, read as a big-endian u64."""

    name = "blake2b-64"

    def __init__(self, key: bytes = b""):
        key = bytes(key)
        if len(key) > hashlib.blake2b.MAX_KEY_SIZE:
            raise FramingConfigError(
                f"BLAKE2b key is {len(key)} bytes, limit is {hashlib.blake2b.MAX_KEY_SIZE}"
            )
        self.key = key

    def init(self):
        return hashlib.blake2b(digest_size=8, key=self.key)

    def update(self, state, data: bytes):
        state.update(data)
        return state

    def finish(self, state) -> int:
        return int.from_bytes(state.digest(), "big")

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Blake2b64) and other.key == self.key

    def __hash__(self) -> int:
        return hash((self.name, self.key))

    def __repr__(self) -> str:
        return f"Blake2b64(keyed={bool(self.key)})"


class HashlibAlgorithm:
    """Any hashlib digest, truncated to its first 8 bytes (big-endian)."""

    def __init__(self, hash_name: str = "sha256"):
        try:
            digest_size = hashlib.new(hash_name).digest_size
        except ValueError as e:
            raise FramingConfigError(f"Unknown hashlib algorithm {hash_name!r}") from e
        if digest_size < 8:
            raise FramingConfigError(f"{hash_name} digest is shorter than 64 bits")
        self.hash_name = hash_name
        self.name = f"{hash_name}-64"

    def init(self):
        return hashlib.new(self.hash_name)

    def update(self, state, data: bytes):
        state.update(data)
        return state

    def finish(self, state) -> int:
        return int.from_bytes(state.digest()[:8], "big")

    def __eq__(self, other: object) -> bool:
        return isinstance(other, HashlibAlgorithm) and other.hash_name == self.hash_name

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self) -> str:
        return f"HashlibAlgorithm({self.hash_name!r})"


ALGORITHMS = ("blake2b-64", "sha256-64")


def get_algorithm(name: str, key: bytes = b"") -> HashAlgorithm:
    """Resolve an algorithm by its wire name."""
    if name == "blake2b-64":
        return Blake2b64(key)
    if key:
        raise FramingConfigError(f"Algorithm {name} does not take a key")
    if name == "sha256-64":
        return HashlibAlgorithm("sha256")
    raise FramingConfigError(f"Unknown hash algorithm {name!r}")


def hash_frame_fields(algorithm: HashAlgorithm, version: int, size: int, payload: bytes) -> int:
    """Hash ``version ++ size(BE u32) ++ payload`` in wire order."""
    state = algorithm.init()
    state = algorithm.update(state, bytes((version,)))
    state = algorithm.update(state, size.to_bytes(4, "big"))
    state = algorithm.update(state, payload)
    return algorithm.finish(state)
