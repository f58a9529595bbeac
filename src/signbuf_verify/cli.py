import json
from pathlib import Path
import click
from signbuf_core.config import FramingConfig
from signbuf_core.options import framing_options
from .decoder import decode
from .errors import RetrievalError
from .index import write_region_index
from .scanner import RecordScanner

CANONICAL_JSON_KW = {"sort_keys": True, "separators": (",", ":"), "ensure_ascii": False}

def _echo(result: dict):
    click.echo(json.dumps(result, **CANONICAL_JSON_KW))

def _region_dict(region) -> dict:
    return {
        "frame": [region.frame_range.start, region.frame_range.stop],
        "payload": [region.payload_range.start, region.payload_range.stop],
    }

def decode_at(config: FramingConfig, buffer: bytes, offset: int = 0) -> dict:
    try:
        consumed, region = decode(config, memoryview(buffer)[offset:])
    except RetrievalError as e:
        return {"status":"FAIL","offset":offset,"error_count":1,"errors":[e.as_dict()]}
    region = region.shifted(offset)
    return {"status":"PASS","offset":offset,"bytes_consumed":consumed,"error_count":0,"errors":[],**_region_dict(region)}

@click.group()
def main():
    pass

@main.command("decode")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--offset", type=click.IntRange(min=0), default=0, show_default=True, help="Offset of the frame's first byte")
@framing_options
def decode_cmd(path: Path, offset: int, config: FramingConfig):
    result = decode_at(config, path.read_bytes(), offset)
    _echo(result)
    if result["status"] != "PASS":
        raise SystemExit(1)

@main.command("scan")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--index", "index_dir", type=click.Path(file_okay=False, path_type=Path), default=None, help="Write index/regions.parquet under this directory")
@click.option("--overlap-headers", is_flag=True, help="Retry header mismatches against the magic's own prefixes")
@framing_options
def scan_cmd(path: Path, index_dir: Path | None, overlap_headers: bool, config: FramingConfig):
    buffer = path.read_bytes()
    scanner = RecordScanner(config, overlap_headers=overlap_headers, source=buffer)
    regions = scanner.feed(buffer)
    if index_dir is not None:
        write_region_index(regions, buffer, path.name, index_dir)
    _echo({
        "status":"PASS",
        "records":len(regions),
        "regions":[_region_dict(r) for r in regions],
        "scan_stats":scanner.get_scan_stats(),
    })

if __name__ == "__main__":
    main()
