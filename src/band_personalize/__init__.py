from __future__ import annotations

__version__ = "0.1.0"


from .band import Band
from .ble import BleakBandAdapter
from .cancellation import CancellationToken
from .color import ArgbColor, HsvColor, RgbColor, parse, to_hsv, to_rgb
from .exceptions import (
    BandPersonalizeError,
    CharacteristicMissingError,
    DeviceOperationError,
    InvalidFormatError,
    MissingArgumentError,
    OperationCanceledError,
    UnsupportedValueError,
)
from .fake import FakeBand, FakeBandAdapter
from .hardware_db import (
    get_allowed_me_tile_dimensions,
    get_default_me_tile_dimensions,
    to_hardware_revision,
)
from .models import ConnectionType, Dimension2D, HardwareRevision
from .personalizer import BandPersonalizer
from .repository import BandRepository, MemoryThemeRepository
from .theme import RgbColorTheme, TitledRgbColorTheme
from .theme_db import get_default_themes

__all__ = [
    "ArgbColor",
    "Band",
    "BandPersonalizeError",
    "BandPersonalizer",
    "BandRepository",
    "BleakBandAdapter",
    "CancellationToken",
    "CharacteristicMissingError",
    "ConnectionType",
    "DeviceOperationError",
    "Dimension2D",
    "FakeBand",
    "FakeBandAdapter",
    "HardwareRevision",
    "HsvColor",
    "InvalidFormatError",
    "MemoryThemeRepository",
    "MissingArgumentError",
    "OperationCanceledError",
    "RgbColor",
    "RgbColorTheme",
    "TitledRgbColorTheme",
    "UnsupportedValueError",
    "get_allowed_me_tile_dimensions",
    "get_default_me_tile_dimensions",
    "get_default_themes",
    "parse",
    "to_hardware_revision",
    "to_hsv",
    "to_rgb",
]
