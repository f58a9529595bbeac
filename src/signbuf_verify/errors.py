from .const import ERRORS


class RetrievalError(ValueError):
    """A frame could not be decoded."""

    code = ""

    def __init__(self, detail: str | None = None):
        self.detail = detail
        message = ERRORS[self.code]
        super().__init__(f"{message}: {detail}" if detail else message)

    def as_dict(self) -> dict:
        d = {"code": self.code, "message": ERRORS[self.code]}
        if self.detail:
            d["detail"] = self.detail
        return d


class InvalidHeader(RetrievalError):
    code = "E_INVALID_HEADER"


class InvalidChecksumStruct(RetrievalError):
    code = "E_CHECKSUM_STRUCT"


class UnsupportedVersion(RetrievalError):
    code = "E_UNSUPPORTED_VERSION"

    def __init__(self, received_version: int):
        self.received_version = received_version
        super().__init__(f"received version {received_version}")

    def as_dict(self) -> dict:
        return {**super().as_dict(), "received_version": self.received_version}


class EmptyPayloadSize(RetrievalError):
    code = "E_EMPTY_PAYLOAD"


class InvalidPayloadSize(RetrievalError):
    code = "E_PAYLOAD_SIZE"

    def __init__(self, received_size: int):
        self.received_size = received_size
        super().__init__(f"received size {received_size}")

    def as_dict(self) -> dict:
        return {**super().as_dict(), "received_size": self.received_size}


class InvalidHash(RetrievalError):
    code = "E_INVALID_HASH"


class InvalidBufferSize(RetrievalError):
    code = "E_BUFFER_SIZE"


class InvalidTrailer(RetrievalError):
    code = "E_INVALID_TRAILER"


class MissingData(RetrievalError):
    code = "E_MISSING_DATA"


class TooMuchData(RetrievalError):
    code = "E_TOO_MUCH_DATA"
