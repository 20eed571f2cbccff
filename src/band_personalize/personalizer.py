from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from PIL import Image

from .adapter import DeviceAdapter, DeviceSession
from .band import Band
from .cancellation import CancellationToken
from .convert import (
    decode_image,
    encode_image,
    fit_image,
    to_native_theme,
    to_rgb_color_theme,
)
from .exceptions import UnsupportedValueError
from .hardware_db import (
    get_default_me_tile_dimensions,
    is_allowed_me_tile_dimensions,
)
from .models import Dimension2D
from .theme import RgbColorTheme
from .util import require_argument

_LOGGER = logging.getLogger(__name__)


@asynccontextmanager
async def connected_session(
    adapter: DeviceAdapter, band: Band, token: CancellationToken
) -> AsyncIterator[DeviceSession]:
    """Connect to a band for the duration of the block.

    The token is checked before connecting and again once connected. The
    session is released on every exit from the block, including errors
    and cancellation; a failed connect has nothing to release. When the
    block raises, a release failure is logged and the original error
    propagates.
    """
    token.raise_if_cancelled()
    _LOGGER.debug("%s: Connecting", band.name)
    session = await adapter.connect(band.info)
    _LOGGER.debug("%s: Connected", band.name)
    try:
        token.raise_if_cancelled()
        yield session
    except BaseException:
        _LOGGER.debug("%s: Releasing session after error", band.name)
        try:
            await session.release()
        except Exception as ex:
            _LOGGER.warning("%s: Error releasing session: %s", band.name, ex)
        raise
    else:
        _LOGGER.debug("%s: Releasing session", band.name)
        await session.release()


class BandPersonalizer:
    """Reads and writes a band's theme and Me Tile image.

    Every call validates its arguments, converts them to the device-native
    form, then opens a session, performs exactly one device operation and
    releases the session. Device errors are not wrapped or retried.
    """

    def __init__(self, adapter: DeviceAdapter) -> None:
        self._adapter = require_argument(adapter, "adapter")

    async def set_theme(
        self,
        band: Band,
        theme: RgbColorTheme,
        token: CancellationToken | None = None,
    ) -> None:
        """Set the theme."""
        require_argument(band, "band")
        require_argument(theme, "theme")
        token = _token_or_new(token)
        native_theme = to_native_theme(theme)
        _LOGGER.debug("%s: Set theme: %s", band.name, theme)
        async with connected_session(self._adapter, band, token) as session:
            await session.set_theme(native_theme, token)

    async def get_theme(
        self, band: Band, token: CancellationToken | None = None
    ) -> RgbColorTheme:
        """Get the theme."""
        require_argument(band, "band")
        token = _token_or_new(token)
        async with connected_session(self._adapter, band, token) as session:
            native_theme = await session.get_theme(token)
        _LOGGER.debug("%s: Got theme: %s", band.name, native_theme)
        return to_rgb_color_theme(native_theme)

    async def set_me_tile_image(
        self,
        band: Band,
        image: Image.Image,
        token: CancellationToken | None = None,
        dimensions: Dimension2D | None = None,
    ) -> None:
        """Resize an image to a size the band accepts and set it as the Me Tile.

        Without explicit dimensions the preferred size for the band's
        hardware revision is used.
        """
        require_argument(band, "band")
        require_argument(image, "image")
        token = _token_or_new(token)
        target = self._me_tile_dimensions(band, dimensions)
        native_image = encode_image(fit_image(image, target))
        _LOGGER.debug(
            "%s: Set Me Tile image: %sx%s", band.name, target.width, target.height
        )
        async with connected_session(self._adapter, band, token) as session:
            await session.set_image(native_image, token)

    async def get_me_tile_image(
        self, band: Band, token: CancellationToken | None = None
    ) -> Image.Image:
        """Get the Me Tile image."""
        require_argument(band, "band")
        token = _token_or_new(token)
        async with connected_session(self._adapter, band, token) as session:
            native_image = await session.get_image(token)
        return decode_image(native_image)

    def _me_tile_dimensions(
        self, band: Band, dimensions: Dimension2D | None
    ) -> Dimension2D:
        revision = band.hardware_revision
        if dimensions is None:
            default = get_default_me_tile_dimensions(revision)
            if default is None:
                raise UnsupportedValueError(
                    f"{band.name}: no Me Tile size is known for {revision}"
                )
            return default
        if not is_allowed_me_tile_dimensions(revision, dimensions):
            raise UnsupportedValueError(
                f"{band.name}: {dimensions} is not a Me Tile size for {revision}"
            )
        return dimensions


def _token_or_new(token: CancellationToken | None) -> CancellationToken:
    return token if token is not None else CancellationToken()
