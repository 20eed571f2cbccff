from __future__ import annotations

from dataclasses import dataclass

from .adapter import DeviceInfo, to_connection_type
from .hardware_db import to_hardware_revision
from .models import ConnectionType, HardwareRevision


@dataclass(frozen=True)
class Band:
    """A paired band and what is known about its hardware."""

    info: DeviceInfo
    is_connected: bool = False
    hardware_version: int | None = None

    @property
    def name(self) -> str:
        return self.info.name

    @property
    def connection_type(self) -> ConnectionType:
        return to_connection_type(self.info.connection_type)

    @property
    def hardware_revision(self) -> HardwareRevision:
        return to_hardware_revision(self.hardware_version)
