ERRORS = {
  "E_INVALID_HEADER": "Header magic mismatch",
  "E_CHECKSUM_STRUCT": "Checksum record could not be unpacked",
  "E_UNSUPPORTED_VERSION": "Checksum record version is newer than supported",
  "E_EMPTY_PAYLOAD": "Checksum record announces an empty payload",
  "E_PAYLOAD_SIZE": "Checksum record size violates the size policy",
  "E_INVALID_HASH": "Payload hash does not match checksum record",
  "E_BUFFER_SIZE": "Decoded payload length does not match checksum record",
  "E_INVALID_TRAILER": "Trailer magic mismatch",
  "E_MISSING_DATA": "Buffer ended before the frame was complete",
  "E_TOO_MUCH_DATA": "Byte fed to a decoder that already finished",
}
