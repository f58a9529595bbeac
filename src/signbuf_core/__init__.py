"""signbuf core - shared framing configuration, record codec and geometry."""
from .checksum import ChecksumRecord
from .config import DynamicSize, FixedSize, FramingConfig, SizePolicy
from .errors import FramingConfigError
from .hashing import Blake2b64, HashAlgorithm, HashlibAlgorithm, get_algorithm
from .protocol import VERSION
from .regions import DecodedRegion, frame_length, shift_range

__all__ = [
    "ChecksumRecord",
    "DynamicSize",
    "FixedSize",
    "FramingConfig",
    "SizePolicy",
    "FramingConfigError",
    "Blake2b64",
    "HashAlgorithm",
    "HashlibAlgorithm",
    "get_algorithm",
    "VERSION",
    "DecodedRegion",
    "frame_length",
    "shift_range",
]
