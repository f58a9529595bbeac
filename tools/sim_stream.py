import json, random, uuid, sys
from datetime import datetime, timezone
from pathlib import Path

from signbuf_core.config import FramingConfig
from signbuf_core.protocol import CHECKSUM_RECORD_LEN, DEFAULT_HEADER_MAGIC
from signbuf_sign.signer import sign

# --- CONFIGURATION ---
MAX_PAYLOAD = 512
MAX_GARBAGE = 96


def make_garbage(rng, header):
    """Filler that never contains the full header magic.

    Half the time it ends with a partial header followed by a breaking byte,
    so scanners have to abandon a promising start.
    """
    first = header[0]
    allowed = [b for b in range(256) if b != first]
    body = bytes(rng.choice(allowed) for _ in range(rng.randint(0, MAX_GARBAGE)))
    if len(header) > 1 and rng.random() < 0.5:
        prefix = header[: rng.randint(1, len(header) - 1)]
        breaker = header[len(prefix)] ^ 0xFF
        if breaker == first:
            breaker ^= 0x01
        body += prefix + bytes((breaker,))
    return body


def generate_stream(out_dir, frames=8, corrupt=False, seed=None):
    rng = random.Random(seed)
    stream_id = str(uuid.UUID(int=rng.getrandbits(128)))
    path = Path(out_dir) / f"stream-{stream_id[:8]}"
    path.mkdir(parents=True, exist_ok=True)

    config = FramingConfig()
    victim = frames // 2 if corrupt else None

    print(f"Generating: {stream_id} (Frames={frames}, Corrupt={corrupt})")

    buf = bytearray()
    events = []
    for record in range(frames):
        buf += make_garbage(rng, DEFAULT_HEADER_MAGIC)

        payload = rng.randbytes(rng.randint(1, MAX_PAYLOAD))
        frame_offset = len(buf)  # Capture BEFORE write
        frame = bytearray(sign(config, payload).assemble())
        payload_offset = frame_offset + len(config.header_magic) + CHECKSUM_RECORD_LEN

        if record == victim:
            # Flip the first payload byte: structure intact, hash broken.
            frame[payload_offset - frame_offset] ^= 0x01
        buf += frame

        events.append({
            "record": record,
            "corrupted": record == victim,
            "stream_refs": {
                "frame": {"offset": frame_offset, "length": len(frame)},
                "payload": {"offset": payload_offset, "length": len(payload)},
            },
        })

    buf += make_garbage(rng, DEFAULT_HEADER_MAGIC)
    (path / "stream.bin").write_bytes(bytes(buf))

    with open(path / "events.jsonl", "wb") as f:
        for evt in events:
            line = json.dumps(evt, sort_keys=True, separators=(',', ':'), ensure_ascii=False)
            f.write(line.encode("utf-8") + b"\n")

    (path / "meta.json").write_text(json.dumps({
        "stream_id": stream_id,
        "frames": frames,
        "seed": seed,
        "header_magic": config.header_magic.hex(),
        "trailer_magic": config.trailer_magic.hex(),
        "hash": config.algorithm.name,
        "created_at": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    }, indent=2) + "\n", encoding="utf-8")

    print(f"GENERATED: {path}")
    return path


if __name__ == "__main__":
    # Usage:
    #   python tools/sim_stream.py OUT_DIR [--frames N] [--seed S] [--corrupt]

    args = [a for a in sys.argv[1:] if a]

    def pop_flag(arg_list, flag):
        """Remove a boolean flag from an argv-style list."""
        if flag in arg_list:
            return True, [a for a in arg_list if a != flag]
        return False, arg_list

    def pop_value(arg_list, flag, default):
        if flag not in arg_list:
            return default, arg_list
        i = arg_list.index(flag)
        if i + 1 >= len(arg_list):
            raise SystemExit(f"{flag} requires a value")
        return int(arg_list[i + 1]), arg_list[:i] + arg_list[i + 2:]

    corrupt, args = pop_flag(args, "--corrupt")
    frames, args = pop_value(args, "--frames", 8)
    seed, args = pop_value(args, "--seed", None)

    out = args[0] if len(args) > 0 else "streams"
    generate_stream(out, frames=frames, corrupt=corrupt, seed=seed)
