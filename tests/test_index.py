import hashlib

import pyarrow.parquet as pq

from signbuf_sign.signer import sign
from signbuf_verify.index import INDEX_FILE, read_region_index, write_region_index
from signbuf_verify.scanner import decode_all


def test_index_round_trip(tmp_path, config):
    a = sign(config, b"alpha").assemble()
    b = sign(config, b"bravo bravo").assemble()
    buffer = b"\x00" * 9 + a + b"\xff" * 4 + b
    regions = decode_all(config, buffer)

    target = write_region_index(regions, buffer, "stream.bin", tmp_path)
    assert target == tmp_path / INDEX_FILE

    table = pq.read_table(target)
    assert table.num_rows == 2
    rows = table.to_pylist()
    assert rows[0]["frame_start"] == 9
    assert rows[1]["payload_length"] == len(b"bravo bravo")
    assert rows[1]["content_hash"] == hashlib.sha256(b"bravo bravo").hexdigest()
    assert {r["status"] for r in rows} == {"VERIFIED"}
    assert {r["file"] for r in rows} == {"stream.bin"}

    loaded = read_region_index(tmp_path, source=buffer)
    assert loaded == regions
    assert [bytes(r.payload()) for r in loaded] == [b"alpha", b"bravo bravo"]


def test_empty_index(tmp_path, config):
    target = write_region_index([], bytes(64), "empty.bin", tmp_path)
    assert pq.read_table(target).num_rows == 0
    assert read_region_index(target) == []
