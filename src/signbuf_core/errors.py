class FramingConfigError(ValueError):
    """Framing configuration cannot describe a valid frame."""
