"""In-memory device adapter for tests, demos and running without hardware."""
from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass

from .adapter import (
    BandConnectionType,
    DeviceInfo,
    NativeImage,
    NativeTheme,
)
from .cancellation import CancellationToken
from .const import (
    HARDWARE_VERSION_BAND2,
    ME_TILE_HEIGHT_BAND,
    ME_TILE_HEIGHT_BAND2,
    ME_TILE_WIDTH,
)
from .convert import to_native_theme
from .exceptions import DeviceOperationError
from .theme_db import BAND2_THEMES, BAND_THEMES

_LOGGER = logging.getLogger(__name__)


@dataclass(eq=False)
class FakeBand:
    """State of a simulated band.

    Set is_connected to False to make connecting fail, or error to make
    the next device operation raise it.
    """

    name: str
    connection_type: BandConnectionType = BandConnectionType.BLUETOOTH
    hardware_version: str = str(HARDWARE_VERSION_BAND2 + 6)
    is_connected: bool = True
    theme: NativeTheme | None = None
    me_tile: NativeImage | None = None
    error: Exception | None = None

    @property
    def info(self) -> DeviceInfo:
        return DeviceInfo(self.name, self.connection_type, self)

    @property
    def is_original_band(self) -> bool:
        try:
            return int(self.hardware_version) < HARDWARE_VERSION_BAND2
        except ValueError:
            return False


class FakeBandAdapter:
    """DeviceAdapter over FakeBand instances."""

    def __init__(
        self,
        *bands: FakeBand,
        delay: float = 0.0,
        rng: random.Random | None = None,
    ) -> None:
        self.bands = list(bands)
        self.delay = max(delay, 0.0)
        self.connects = 0
        self.releases = 0
        self.rng = rng or random.Random()

    async def get_devices(self) -> Sequence[DeviceInfo]:
        await asyncio.sleep(self.delay)
        return [band.info for band in self.bands]

    async def connect(self, info: DeviceInfo) -> FakeBandSession:
        await asyncio.sleep(self.delay)
        band = info.handle
        if band not in self.bands:
            raise DeviceOperationError(f"{info.name}: unknown device")
        if not band.is_connected:
            raise DeviceOperationError(f"{info.name}: device is not connected")
        self.connects += 1
        _LOGGER.debug("%s: Fake session opened", band.name)
        return FakeBandSession(self, band)

    @property
    def open_sessions(self) -> int:
        return self.connects - self.releases


class FakeBandSession:
    """DeviceSession over one FakeBand."""

    def __init__(self, adapter: FakeBandAdapter, band: FakeBand) -> None:
        self._adapter = adapter
        self._band = band
        self._released = False

    async def get_hardware_version(self, token: CancellationToken) -> str:
        await self._simulate(token)
        return self._band.hardware_version

    async def get_theme(self, token: CancellationToken) -> NativeTheme:
        await self._simulate(token)
        if self._band.theme is None:
            defaults = BAND_THEMES if self._band.is_original_band else BAND2_THEMES
            theme = self._adapter.rng.choice(list(defaults.values()))
            self._band.theme = to_native_theme(theme)
        return self._band.theme

    async def set_theme(self, theme: NativeTheme, token: CancellationToken) -> None:
        await self._simulate(token)
        self._band.theme = theme

    async def get_image(self, token: CancellationToken) -> NativeImage:
        await self._simulate(token)
        if self._band.me_tile is None:
            height = (
                ME_TILE_HEIGHT_BAND
                if self._band.is_original_band
                else ME_TILE_HEIGHT_BAND2
            )
            pixels = bytes(ME_TILE_WIDTH * height * 2)
            self._band.me_tile = NativeImage(ME_TILE_WIDTH, height, pixels)
        return self._band.me_tile

    async def set_image(self, image: NativeImage, token: CancellationToken) -> None:
        await self._simulate(token)
        self._band.me_tile = image

    async def release(self) -> None:
        if self._released:
            return
        self._released = True
        self._adapter.releases += 1
        _LOGGER.debug("%s: Fake session released", self._band.name)

    async def _simulate(self, token: CancellationToken) -> None:
        if self._released:
            raise DeviceOperationError(f"{self._band.name}: session was released")
        await token.sleep(self._adapter.delay)
        if not self._band.is_connected:
            raise DeviceOperationError(f"{self._band.name}: device disconnected")
        if self._band.error is not None:
            error, self._band.error = self._band.error, None
            raise error
