import pytest

from signbuf_core.config import DynamicSize, FramingConfig

HEADER = bytes([31, 63, 127])
TRAILER = bytes([127, 63, 31])
PAYLOAD = b"Hello world!"


@pytest.fixture
def config():
    return FramingConfig(DynamicSize(8192), HEADER, TRAILER)
