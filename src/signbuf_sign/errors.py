class SigningError(ValueError):
    """A payload could not be framed."""


class PayloadEmpty(SigningError):
    def __init__(self):
        super().__init__("Payload is empty")


class PayloadTooLarge(SigningError):
    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"Payload of {size} bytes exceeds limit {limit}")


class InvalidBufferSize(SigningError):
    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Payload must be exactly {expected} bytes, got {actual}")
