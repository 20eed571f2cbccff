from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Dimension2D:
    """Width and height in pixels.

    Values are not range checked: zero and negative sizes are valid and
    compare and hash like any other.
    """

    width: int
    height: int


class HardwareRevision(Enum):

    UNKNOWN = "unknown"
    BAND = "band"
    BAND2 = "band2"


class ConnectionType(Enum):

    UNKNOWN = "unknown"
    USB = "usb"
    BLUETOOTH = "bluetooth"
