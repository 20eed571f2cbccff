"""Interfaces for the device transport and the device-native value types."""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Protocol

from .cancellation import CancellationToken
from .models import ConnectionType


class BandConnectionType(IntEnum):
    """Connection kinds reported by device transports."""

    BLUETOOTH = 0
    USB = 1


CONNECTION_TYPE_MAP: dict[BandConnectionType, ConnectionType] = {
    BandConnectionType.BLUETOOTH: ConnectionType.BLUETOOTH,
    BandConnectionType.USB: ConnectionType.USB,
}


def to_connection_type(connection_type: Any) -> ConnectionType:
    """Map a transport connection kind, anything unrecognised is UNKNOWN."""
    try:
        return CONNECTION_TYPE_MAP.get(connection_type, ConnectionType.UNKNOWN)
    except TypeError:
        # unhashable
        return ConnectionType.UNKNOWN


@dataclass(frozen=True)
class NativeColor:

    r: int
    g: int
    b: int


@dataclass(frozen=True)
class NativeTheme:

    base: NativeColor
    high_contrast: NativeColor
    lowlight: NativeColor
    highlight: NativeColor
    muted: NativeColor
    secondary_text: NativeColor


@dataclass(frozen=True)
class NativeImage:

    width: int
    height: int
    pixels: bytes  # RGB565, little endian, row major


@dataclass(frozen=True)
class DeviceInfo:
    """A device as listed by an adapter."""

    name: str
    connection_type: Any = None
    handle: Any = None  # adapter specific, e.g. a BLEDevice


class DeviceSession(Protocol):
    """An open connection to one device, valid until release()."""

    async def get_hardware_version(self, token: CancellationToken) -> str:
        ...

    async def get_theme(self, token: CancellationToken) -> NativeTheme:
        ...

    async def set_theme(self, theme: NativeTheme, token: CancellationToken) -> None:
        ...

    async def get_image(self, token: CancellationToken) -> NativeImage:
        ...

    async def set_image(self, image: NativeImage, token: CancellationToken) -> None:
        ...

    async def release(self) -> None:
        ...


class DeviceAdapter(Protocol):
    """Discovers devices and opens sessions with them."""

    async def get_devices(self) -> Sequence[DeviceInfo]:
        ...

    async def connect(self, info: DeviceInfo) -> DeviceSession:
        ...
