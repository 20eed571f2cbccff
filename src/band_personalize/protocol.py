from __future__ import annotations

import struct
from dataclasses import dataclass

from .adapter import NativeColor, NativeImage, NativeTheme
from .const import (
    MESSAGE_HEADER,
    OPCODE_ERROR,
    OPCODE_GET_IMAGE,
    OPCODE_GET_THEME,
    OPCODE_HARDWARE_VERSION,
    OPCODE_SET_IMAGE,
    OPCODE_SET_THEME,
    RESPONSE_FLAG,
)
from .exceptions import DeviceOperationError

# header, opcode, 32-bit payload length
_PREFIX = struct.Struct(">BBI")
_IMAGE_SIZE = struct.Struct(">HH")

THEME_PAYLOAD_LENGTH = 18


@dataclass(frozen=True)
class Response:

    opcode: int  # request opcode, without the response flag
    payload: bytes


class BandProtocol:
    """Message framing for the personalization GATT service.

    Every message is header, opcode, big endian payload length, payload
    and a checksum byte. Responses echo the request opcode with the high
    bit set.

    This framing is defined by this package, not by the band firmware. No
    shipping band speaks it; the device side has to implement it before
    BleakBandAdapter can talk to real hardware.
    """

    def construct_hardware_version_query(self) -> bytearray:
        return self.construct_message(OPCODE_HARDWARE_VERSION, b"")

    def construct_theme_query(self) -> bytearray:
        return self.construct_message(OPCODE_GET_THEME, b"")

    def construct_theme_change(self, theme: NativeTheme) -> bytearray:
        payload = bytearray()
        for color in (
            theme.base,
            theme.high_contrast,
            theme.lowlight,
            theme.highlight,
            theme.muted,
            theme.secondary_text,
        ):
            payload.extend((color.r, color.g, color.b))
        return self.construct_message(OPCODE_SET_THEME, payload)

    def construct_image_query(self) -> bytearray:
        return self.construct_message(OPCODE_GET_IMAGE, b"")

    def construct_image_change(self, image: NativeImage) -> bytearray:
        payload = _IMAGE_SIZE.pack(image.width, image.height) + image.pixels
        return self.construct_message(OPCODE_SET_IMAGE, payload)

    def construct_message(self, opcode: int, payload: bytes) -> bytearray:
        """Frame a payload and append the checksum."""
        if len(payload) > 0xFFFFFFFF:
            raise ValueError(f"Payload of {len(payload)} bytes is too large")
        raw_bytes = bytearray(_PREFIX.pack(MESSAGE_HEADER, opcode, len(payload)))
        raw_bytes.extend(payload)
        raw_bytes.append(checksum(raw_bytes))
        return raw_bytes

    def chunk(self, message: bytes, chunk_size: int) -> list[bytes]:
        """Split a message into writes of at most chunk_size bytes."""
        if chunk_size < 1:
            raise ValueError("chunk_size must be positive")
        return [
            bytes(message[i : i + chunk_size])
            for i in range(0, len(message), chunk_size)
        ]

    def parse_hardware_version(self, payload: bytes) -> str:
        return payload.decode("ascii", errors="replace").strip("\x00 ")

    def parse_theme(self, payload: bytes) -> NativeTheme:
        if len(payload) != THEME_PAYLOAD_LENGTH:
            raise DeviceOperationError(
                f"Theme payload must be {THEME_PAYLOAD_LENGTH} bytes,"
                f" got {len(payload)}"
            )
        colors = [NativeColor(*payload[i : i + 3]) for i in range(0, 18, 3)]
        return NativeTheme(*colors)

    def parse_image(self, payload: bytes) -> NativeImage:
        if len(payload) < _IMAGE_SIZE.size:
            raise DeviceOperationError("Image payload is missing its size")
        width, height = _IMAGE_SIZE.unpack_from(payload)
        pixels = bytes(payload[_IMAGE_SIZE.size :])
        if len(pixels) != width * height * 2:
            raise DeviceOperationError(
                f"{width}x{height} image payload has {len(pixels)} pixel bytes"
            )
        return NativeImage(width, height, pixels)


def checksum(raw_bytes: bytes) -> int:
    return sum(raw_bytes) & 0xFF


class ResponseAssembler:
    """Reassembles responses split across notifications."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    def reset(self) -> None:
        self._buffer.clear()

    def feed(self, data: bytes) -> Response | None:
        """Add notification data, returning a response once one is complete.

        Raises DeviceOperationError for a corrupt message or when the
        device answers with an error.
        """
        self._buffer.extend(data)
        if len(self._buffer) < _PREFIX.size:
            return None
        header, opcode, length = _PREFIX.unpack_from(self._buffer)
        if header != MESSAGE_HEADER:
            self.reset()
            raise DeviceOperationError(f"Unexpected message header: {header:#04x}")
        end = _PREFIX.size + length
        if len(self._buffer) < end + 1:
            return None
        message = bytes(self._buffer[:end])
        received_checksum = self._buffer[end]
        del self._buffer[: end + 1]
        if checksum(message) != received_checksum:
            raise DeviceOperationError(f"Checksum mismatch: {message.hex()}")
        payload = message[_PREFIX.size :]
        if opcode == (OPCODE_ERROR | RESPONSE_FLAG):
            raise DeviceOperationError(
                f"Device reported error: {payload.hex() or 'no detail'}"
            )
        return Response(opcode & ~RESPONSE_FLAG, payload)
