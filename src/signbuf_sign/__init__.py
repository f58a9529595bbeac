"""signbuf sign - Frame producer."""
from .errors import InvalidBufferSize, PayloadEmpty, PayloadTooLarge, SigningError
from .signer import SignResult, sign

__all__ = [
    "InvalidBufferSize",
    "PayloadEmpty",
    "PayloadTooLarge",
    "SigningError",
    "SignResult",
    "sign",
]
