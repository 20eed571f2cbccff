from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Mapping
from typing import Any, Protocol

from bleak.exc import BleakError

from .adapter import DeviceAdapter, DeviceInfo
from .band import Band
from .cancellation import CancellationToken
from .exceptions import DeviceOperationError
from .personalizer import connected_session
from .theme import TitledRgbColorTheme, from_record, to_record
from .util import require_argument

_LOGGER = logging.getLogger(__name__)

DEVICE_EXCEPTIONS = (DeviceOperationError, BleakError, asyncio.TimeoutError)


class BandRepository:
    """Lists the bands an adapter knows about, with their hardware versions."""

    def __init__(self, adapter: DeviceAdapter) -> None:
        self._adapter = require_argument(adapter, "adapter")

    async def get_paired_bands(
        self, token: CancellationToken | None = None
    ) -> list[Band]:
        """Return every paired band.

        Each band is connected to once to read its hardware version. A band
        that cannot be reached is returned as disconnected with no version.
        Cancelling the token raises OperationCanceledError, even between
        bands; no partial list is returned.
        """
        if token is None:
            token = CancellationToken()
        bands: list[Band] = []
        for info in await self._adapter.get_devices():
            token.raise_if_cancelled()
            bands.append(await self._get_band(info, token))
        return bands

    async def get_paired_band(
        self, name: str, token: CancellationToken | None = None
    ) -> Band | None:
        """Return the paired band with this name, ignoring case."""
        require_argument(name, "name")
        for band in await self.get_paired_bands(token):
            if band.name.casefold() == name.casefold():
                return band
        return None

    async def _get_band(self, info: DeviceInfo, token: CancellationToken) -> Band:
        band = Band(info)
        try:
            async with connected_session(self._adapter, band, token) as session:
                version = await session.get_hardware_version(token)
        except DEVICE_EXCEPTIONS:
            _LOGGER.error(
                "%s: failed to read hardware version", info.name, exc_info=True
            )
            return band
        _LOGGER.debug("%s: Hardware version: %s", info.name, version)
        return Band(info, True, _parse_version(version))


def _parse_version(version: str | None) -> int | None:
    try:
        return int(version)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


class CustomThemeRepository(Protocol):
    """Storage for user themes, keyed by a generated id."""

    async def persist_theme(
        self, theme: TitledRgbColorTheme, theme_id: uuid.UUID | None = None
    ) -> uuid.UUID:
        ...

    async def get_themes(self) -> Mapping[uuid.UUID, TitledRgbColorTheme]:
        ...

    async def delete_theme(self, theme_id: uuid.UUID) -> None:
        ...


class MemoryThemeRepository:
    """CustomThemeRepository holding persisted theme records in memory."""

    def __init__(self) -> None:
        self._records: dict[uuid.UUID, dict[str, Any]] = {}

    async def persist_theme(
        self, theme: TitledRgbColorTheme, theme_id: uuid.UUID | None = None
    ) -> uuid.UUID:
        """Store a theme, replacing any theme with the same id."""
        require_argument(theme, "theme")
        if theme_id is None:
            theme_id = uuid.uuid4()
        self._records[theme_id] = to_record(theme_id, theme)
        return theme_id

    async def get_themes(self) -> Mapping[uuid.UUID, TitledRgbColorTheme]:
        return dict(from_record(record) for record in self._records.values())

    async def delete_theme(self, theme_id: uuid.UUID) -> None:
        self._records.pop(theme_id, None)

    @property
    def records(self) -> list[dict[str, Any]]:
        """The persisted shape of every stored theme."""
        return [dict(record) for record in self._records.values()]
