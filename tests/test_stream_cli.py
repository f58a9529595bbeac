import json
import os
import subprocess
import sys
from pathlib import Path

from signbuf_verify.index import read_region_index

REPO = Path(__file__).resolve().parents[1]


def run(args):
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(REPO / "src"), env.get("PYTHONPATH")]))
    return subprocess.run([sys.executable, *args], cwd=REPO, env=env, check=False, capture_output=True, text=True)


def load_events(stream_dir):
    return [json.loads(line) for line in (stream_dir / "events.jsonl").read_text().splitlines()]


def test_scan_decode_and_tamper(tmp_path):
    r = run(["tools/sim_stream.py", str(tmp_path / "streams"), "--frames", "6", "--seed", "7"])
    assert r.returncode == 0, r.stderr + r.stdout

    stream_dir = next((tmp_path / "streams").glob("stream-*"))
    stream = stream_dir / "stream.bin"
    events = load_events(stream_dir)
    assert len(events) == 6

    # Scan finds every frame and indexes it
    index_dir = tmp_path / "index_out"
    r = run(["-m", "signbuf_verify.cli", "scan", str(stream), "--index", str(index_dir)])
    assert r.returncode == 0, r.stderr + r.stdout
    result = json.loads(r.stdout)
    assert result["records"] == 6
    expected = [[e["stream_refs"]["frame"]["offset"],
                 e["stream_refs"]["frame"]["offset"] + e["stream_refs"]["frame"]["length"]] for e in events]
    assert [reg["frame"] for reg in result["regions"]] == expected

    indexed = read_region_index(index_dir)
    assert [[r.frame_range.start, r.frame_range.stop] for r in indexed] == expected

    # Strict decode at a known offset
    ref = events[2]["stream_refs"]
    r = run(["-m", "signbuf_verify.cli", "decode", str(stream), "--offset", str(ref["frame"]["offset"])])
    assert r.returncode == 0, r.stderr + r.stdout
    result = json.loads(r.stdout)
    assert result["status"] == "PASS"
    assert result["bytes_consumed"] == ref["frame"]["length"]
    assert result["payload"] == [ref["payload"]["offset"], ref["payload"]["offset"] + ref["payload"]["length"]]

    # Corrupt and ensure failure
    r = run(["scripts/corrupt_one_byte.py", str(stream), str(ref["payload"]["offset"])])
    assert r.returncode == 0, r.stderr + r.stdout

    r = run(["-m", "signbuf_verify.cli", "decode", str(stream), "--offset", str(ref["frame"]["offset"])])
    assert r.returncode != 0
    result = json.loads(r.stdout)
    assert result["status"] == "FAIL"
    assert result["errors"][0]["code"] == "E_INVALID_HASH"

    r = run(["-m", "signbuf_verify.cli", "scan", str(stream)])
    assert r.returncode == 0, r.stderr + r.stdout
    result = json.loads(r.stdout)
    assert result["records"] == 5
    assert result["scan_stats"]["corrupt_records"] == 1


def test_generated_corrupt_stream(tmp_path):
    r = run(["tools/sim_stream.py", str(tmp_path), "--frames", "4", "--seed", "3", "--corrupt"])
    assert r.returncode == 0, r.stderr + r.stdout

    stream_dir = next(tmp_path.glob("stream-*"))
    events = load_events(stream_dir)
    assert [e["corrupted"] for e in events] == [False, False, True, False]

    r = run(["-m", "signbuf_verify.cli", "scan", str(stream_dir / "stream.bin")])
    assert r.returncode == 0, r.stderr + r.stdout
    starts = [reg["frame"][0] for reg in json.loads(r.stdout)["regions"]]
    assert starts == [e["stream_refs"]["frame"]["offset"] for e in events if not e["corrupted"]]


def test_sign_cli_appends_frames(tmp_path):
    payload = tmp_path / "payload.bin"
    payload.write_bytes(b"Hello world!")
    out = tmp_path / "out" / "frames.bin"

    for _ in range(2):
        r = run(["-m", "signbuf_sign.cli", str(payload), str(out), "--append"])
        assert r.returncode == 0, r.stderr + r.stdout
        assert r.stdout.startswith("PASS")
    assert out.stat().st_size == 62

    r = run(["-m", "signbuf_verify.cli", "scan", str(out)])
    result = json.loads(r.stdout)
    assert [reg["frame"] for reg in result["regions"]] == [[0, 31], [31, 62]]

    # Framing options must match on both ends
    r = run(["-m", "signbuf_verify.cli", "scan", str(out), "--key", "00ff"])
    assert json.loads(r.stdout)["records"] == 0


def test_sign_cli_fails_closed(tmp_path):
    empty = tmp_path / "empty.bin"
    empty.write_bytes(b"")
    r = run(["-m", "signbuf_sign.cli", str(empty), str(tmp_path / "out.bin")])
    assert r.returncode == 1
    assert r.stdout.startswith("FATAL: Payload is empty")

    big = tmp_path / "big.bin"
    big.write_bytes(b"x" * 20)
    r = run(["-m", "signbuf_sign.cli", str(big), str(tmp_path / "out.bin"), "--fixed", "16"])
    assert r.returncode == 1
    assert "exactly 16 bytes" in r.stdout
