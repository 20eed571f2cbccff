from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from .const import (
    HARDWARE_VERSION_BAND2,
    ME_TILE_HEIGHT_BAND,
    ME_TILE_HEIGHT_BAND2,
    ME_TILE_WIDTH,
)
from .exceptions import UnsupportedValueError
from .models import Dimension2D, HardwareRevision

# Ordered smallest to largest, the last entry is the preferred size
ME_TILE_DIMENSIONS: Mapping[HardwareRevision, tuple[Dimension2D, ...]] = (
    MappingProxyType(
        {
            HardwareRevision.UNKNOWN: (),
            HardwareRevision.BAND: (Dimension2D(ME_TILE_WIDTH, ME_TILE_HEIGHT_BAND),),
            HardwareRevision.BAND2: (
                Dimension2D(ME_TILE_WIDTH, ME_TILE_HEIGHT_BAND),
                Dimension2D(ME_TILE_WIDTH, ME_TILE_HEIGHT_BAND2),
            ),
        }
    )
)


def to_hardware_revision(version: int | None) -> HardwareRevision:
    """Return the HardwareRevision for a hardware version number."""
    if version is None:
        return HardwareRevision.UNKNOWN
    if version < HARDWARE_VERSION_BAND2:
        return HardwareRevision.BAND
    return HardwareRevision.BAND2


def get_allowed_me_tile_dimensions(
    revision: HardwareRevision,
) -> tuple[Dimension2D, ...]:
    """Return the Me Tile sizes the revision accepts."""
    try:
        return ME_TILE_DIMENSIONS[revision]
    except KeyError:
        raise UnsupportedValueError(
            f"Unhandled {HardwareRevision.__name__}: {revision!r}"
        ) from None


def get_default_me_tile_dimensions(revision: HardwareRevision) -> Dimension2D | None:
    """Return the preferred Me Tile size, or None when there is none."""
    allowed = get_allowed_me_tile_dimensions(revision)
    return allowed[-1] if allowed else None


def is_allowed_me_tile_dimensions(
    revision: HardwareRevision, dimensions: Dimension2D
) -> bool:
    """Return true if the revision accepts a Me Tile of this size."""
    return dimensions in get_allowed_me_tile_dimensions(revision)
