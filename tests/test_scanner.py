import warnings

import pytest

from signbuf_core.config import DynamicSize, FramingConfig
from signbuf_core.regions import DecodedRegion
from signbuf_sign.signer import sign
from signbuf_verify.decoder import decode
from signbuf_verify.scanner import RecordScanner, decode_all, iter_regions

from conftest import PAYLOAD, TRAILER


def test_two_frames_in_zero_buffer(config):
    frame = sign(config, PAYLOAD).assemble()
    buffer = bytearray(128)
    buffer[0:31] = frame
    buffer[64:95] = frame
    assert buffer[0] == 31 and buffer[64] == 31

    with warnings.catch_warnings():
        warnings.simplefilter("error")
        detected = decode_all(config, buffer)

    assert [d.frame_range for d in detected] == [range(0, 31), range(64, 95)]
    for d in detected:
        assert bytes(d.payload()) == PAYLOAD
        assert bytes(d.payload(buffer)) == PAYLOAD


def test_filler_with_header_prefixes(config):
    a = sign(config, b"first payload").assemble()
    b = sign(config, b"second").assemble()
    lead = b"\x1f\x3f\x00\x1f\x00junk"
    middle = b"\x1f\x00\x1f\x3f\x00\xff"
    buffer = lead + a + middle + b + b"\x1f\x3f"

    detected = decode_all(config, buffer)
    assert len(detected) == 2

    start_a = len(lead)
    start_b = start_a + len(a) + len(middle)
    assert detected[0].frame_range == range(start_a, start_a + len(a))
    assert detected[1].frame_range == range(start_b, start_b + len(b))
    assert bytes(detected[0].payload()) == b"first payload"
    assert bytes(detected[1].payload()) == b"second"


def test_adjacent_frames(config):
    frame = sign(config, PAYLOAD).assemble()
    detected = decode_all(config, frame * 3)
    assert [d.frame_range for d in detected] == [range(0, 31), range(31, 62), range(62, 93)]


def test_failing_byte_is_not_retried(config):
    frame = sign(config, PAYLOAD).assemble()
    buffer = b"\x1f\x3f" + frame

    assert decode_all(config, buffer) == []

    detected = decode_all(config, buffer, overlap_headers=True)
    assert [d.frame_range for d in detected] == [range(2, 33)]
    assert bytes(detected[0].payload()) == PAYLOAD


def test_overlap_with_self_similar_magic():
    config = FramingConfig(DynamicSize(64), b"AAB", TRAILER)
    frame = sign(config, PAYLOAD).assemble()
    buffer = b"xA" + frame

    assert decode_all(config, buffer) == []
    detected = decode_all(config, buffer, overlap_headers=True)
    assert [d.frame_range for d in detected] == [range(2, 2 + len(frame))]


def test_corrupt_record_warns_and_resyncs(config):
    frame = sign(config, PAYLOAD).assemble()
    bad = bytearray(frame)
    bad[20] ^= 0x01
    buffer = bytes(bad) + frame

    scanner = RecordScanner(config, source=buffer)
    with pytest.warns(UserWarning, match="Corrupt record at offset 0: E_INVALID_HASH"):
        detected = scanner.feed(buffer)

    assert [d.frame_range for d in detected] == [range(31, 62)]
    assert scanner.get_scan_stats() == {
        "records": 1,
        "corrupt_records": 1,
        "bytes_scanned": 62,
        "garbage_bytes": 31,
    }


def test_large_garbage_span_warns(config):
    frame = sign(config, PAYLOAD).assemble()
    with pytest.warns(UserWarning, match="Large garbage span before record at offset 40: 40 bytes"):
        detected = decode_all(config, bytes(40) + frame, max_garbage_bytes=16)
    assert len(detected) == 1


def test_chunked_feed_matches_batch(config):
    frame = sign(config, PAYLOAD).assemble()
    buffer = bytes(7) + frame + bytes(5) + frame + bytes(3)

    scanner = RecordScanner(config)
    found = []
    for i in range(0, len(buffer), 10):
        found.extend(scanner.feed(buffer[i:i + 10]))

    assert found == decode_all(config, buffer)
    assert scanner.get_scan_stats()["bytes_scanned"] == len(buffer)


def test_iter_regions_is_lazy(config):
    frame = sign(config, PAYLOAD).assemble()
    it = iter_regions(config, frame + frame)
    first = next(it)
    assert first.frame_range == range(0, 31)
    assert next(it).frame_range == range(31, 62)
    assert next(it, None) is None


def test_sub_slice_regions_translate(config):
    frame = sign(config, PAYLOAD).assemble()
    buffer = bytearray(128)
    buffer[64:95] = frame

    _, local = decode(config, bytes(buffer[64:]))
    shifted = local.shifted(64, source=buffer)
    assert shifted == decode_all(config, buffer)[0]
    assert bytes(shifted.payload()) == PAYLOAD


def test_region_invariant():
    with pytest.raises(ValueError):
        DecodedRegion(payload_range=range(0, 40), frame_range=range(0, 31))
    with pytest.raises(ValueError):
        DecodedRegion(payload_range=range(16, 28), frame_range=range(0, 31)).payload()
