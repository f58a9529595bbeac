"""Click options shared by the signbuf command line tools."""
from __future__ import annotations

import functools

import click

from signbuf_core.config import DynamicSize, FixedSize, FramingConfig
from signbuf_core.errors import FramingConfigError
from signbuf_core.hashing import ALGORITHMS, get_algorithm
from signbuf_core.protocol import (
    DEFAULT_HEADER_MAGIC,
    DEFAULT_MAX_PAYLOAD_SIZE,
    DEFAULT_TRAILER_MAGIC,
)


def _hex(value: str, what: str) -> bytes:
    try:
        return bytes.fromhex(value)
    except ValueError as e:
        raise FramingConfigError(f"{what} is not valid hex: {value!r}") from e


def build_config(
    header: str,
    trailer: str,
    hash_name: str,
    key: str,
    max_bytes: int,
    fixed: int | None,
    enforce_size: bool,
) -> FramingConfig:
    size = FixedSize(fixed) if fixed is not None else DynamicSize(max_bytes)
    return FramingConfig(
        size=size,
        header_magic=_hex(header, "Header magic"),
        trailer_magic=_hex(trailer, "Trailer magic"),
        algorithm=get_algorithm(hash_name, _hex(key, "Hash key")),
        enforce_size=enforce_size,
    )


def framing_options(func):
    """Add framing options and pass the resulting FramingConfig as ``config``."""

    @click.option("--header", default=DEFAULT_HEADER_MAGIC.hex(), show_default=True, help="Header magic (hex)")
    @click.option("--trailer", default=DEFAULT_TRAILER_MAGIC.hex(), show_default=True, help="Trailer magic (hex)")
    @click.option("--hash", "hash_name", type=click.Choice(ALGORITHMS), default="blake2b-64", show_default=True)
    @click.option("--key", default="", help="Hash key (hex), blake2b-64 only")
    @click.option("--max-bytes", type=int, default=DEFAULT_MAX_PAYLOAD_SIZE, show_default=True,
                  help="Dynamic size policy upper bound")
    @click.option("--fixed", type=int, default=None, help="Fixed size policy: exact payload length")
    @click.option("--no-enforce-size", is_flag=True, help="Treat the size policy as advisory")
    @functools.wraps(func)
    def wrapper(header, trailer, hash_name, key, max_bytes, fixed, no_enforce_size, **kwargs):
        try:
            config = build_config(header, trailer, hash_name, key, max_bytes, fixed, not no_enforce_size)
        except FramingConfigError as e:
            raise click.BadParameter(str(e)) from e
        return func(config=config, **kwargs)

    return wrapper
