"""signbuf - Payload to Frame Signer."""
from __future__ import annotations

from pathlib import Path

import click

from signbuf_core.config import FramingConfig
from signbuf_core.options import framing_options
from signbuf_sign.signer import sign


def sign_file(config: FramingConfig, payload_path: Path, out_path: Path, append: bool = False) -> int:
    """Frame the contents of ``payload_path`` into ``out_path``.

    Returns the absolute offset of the new frame inside ``out_path``.
    """
    payload = Path(payload_path).read_bytes()
    frame = sign(config, payload).assemble()

    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "ab" if append else "wb") as f:
        offset = f.tell()
        f.write(frame)

    print(f"PASS: Framed {payload_path} at {out_path}")
    print(f"  Offset: {offset}")
    print(f"  Payload: {len(payload)} bytes")
    print(f"  Frame: {len(frame)} bytes")
    return offset


@click.command()
@click.argument("payload", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("out", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--append", is_flag=True, help="Append the frame instead of overwriting OUT")
@framing_options
def main(payload: Path, out: Path, append: bool, config: FramingConfig) -> None:
    """Frame PAYLOAD into OUT."""
    try:
        sign_file(config, payload, out, append=append)
    except Exception as e:
        # Fail closed with a single-line reason.
        print(f"FATAL: {e}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
