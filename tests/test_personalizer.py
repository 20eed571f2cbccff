"""Tests for the BandPersonalizer facade against the fake adapter."""

from __future__ import annotations

import asyncio

import pytest
from bleak.exc import BleakError
from PIL import Image

from band_personalize.cancellation import CancellationToken
from band_personalize.color import RgbColor
from band_personalize.convert import to_native_theme
from band_personalize.exceptions import (
    DeviceOperationError,
    MissingArgumentError,
    OperationCanceledError,
    UnsupportedValueError,
)
from band_personalize.fake import FakeBand, FakeBandAdapter, FakeBandSession
from band_personalize.models import Dimension2D
from band_personalize.personalizer import BandPersonalizer
from band_personalize.theme import RgbColorTheme
from band_personalize.theme_db import BAND2_THEMES, BAND_THEMES
from tests.conftest import make_band


def distinct_theme() -> RgbColorTheme:
    return RgbColorTheme(
        base=RgbColor.parse("#010203"),
        high_contrast=RgbColor.parse("#111213"),
        lowlight=RgbColor.parse("#212223"),
        highlight=RgbColor.parse("#313233"),
        muted=RgbColor.parse("#414243"),
        secondary_text=RgbColor.parse("#515253"),
    )


class TestValidation:
    def test_requires_adapter(self) -> None:
        with pytest.raises(MissingArgumentError) as excinfo:
            BandPersonalizer(None)  # type: ignore[arg-type]
        assert excinfo.value.name == "adapter"

    async def test_set_theme_requires_band(
        self, personalizer: BandPersonalizer, adapter: FakeBandAdapter
    ) -> None:
        with pytest.raises(MissingArgumentError) as excinfo:
            await personalizer.set_theme(None, distinct_theme())  # type: ignore[arg-type]
        assert excinfo.value.name == "band"
        assert adapter.connects == 0

    async def test_set_theme_requires_theme(
        self,
        personalizer: BandPersonalizer,
        adapter: FakeBandAdapter,
        band2_device: FakeBand,
    ) -> None:
        with pytest.raises(MissingArgumentError) as excinfo:
            await personalizer.set_theme(make_band(band2_device), None)  # type: ignore[arg-type]
        assert excinfo.value.name == "theme"
        assert adapter.connects == 0

    async def test_get_theme_requires_band(
        self, personalizer: BandPersonalizer, adapter: FakeBandAdapter
    ) -> None:
        with pytest.raises(MissingArgumentError) as excinfo:
            await personalizer.get_theme(None)  # type: ignore[arg-type]
        assert excinfo.value.name == "band"
        assert adapter.connects == 0

    async def test_set_me_tile_image_requires_image(
        self,
        personalizer: BandPersonalizer,
        adapter: FakeBandAdapter,
        band2_device: FakeBand,
    ) -> None:
        with pytest.raises(MissingArgumentError) as excinfo:
            await personalizer.set_me_tile_image(make_band(band2_device), None)  # type: ignore[arg-type]
        assert excinfo.value.name == "image"
        assert adapter.connects == 0

    async def test_set_me_tile_image_requires_band(
        self, personalizer: BandPersonalizer, adapter: FakeBandAdapter
    ) -> None:
        with pytest.raises(MissingArgumentError) as excinfo:
            await personalizer.set_me_tile_image(None, Image.new("RGB", (1, 1)))  # type: ignore[arg-type]
        assert excinfo.value.name == "band"
        assert adapter.connects == 0

    async def test_get_me_tile_image_requires_band(
        self, personalizer: BandPersonalizer, adapter: FakeBandAdapter
    ) -> None:
        with pytest.raises(MissingArgumentError) as excinfo:
            await personalizer.get_me_tile_image(None)  # type: ignore[arg-type]
        assert excinfo.value.name == "band"
        assert adapter.connects == 0


class TestTheme:
    async def test_set_theme_sends_each_slot(
        self,
        personalizer: BandPersonalizer,
        adapter: FakeBandAdapter,
        band2_device: FakeBand,
    ) -> None:
        await personalizer.set_theme(make_band(band2_device), distinct_theme())
        native = band2_device.theme
        assert native == to_native_theme(distinct_theme())
        slots = [
            native.base,
            native.high_contrast,
            native.lowlight,
            native.highlight,
            native.muted,
            native.secondary_text,
        ]
        assert len(set(slots)) == 6
        assert adapter.connects == 1
        assert adapter.open_sessions == 0

    async def test_get_theme_returns_what_was_set(
        self, personalizer: BandPersonalizer, band2_device: FakeBand
    ) -> None:
        band = make_band(band2_device)
        await personalizer.set_theme(band, distinct_theme())
        assert await personalizer.get_theme(band) == distinct_theme()

    async def test_get_default_theme(
        self,
        personalizer: BandPersonalizer,
        band2_device: FakeBand,
        band_device: FakeBand,
    ) -> None:
        band2_theme = await personalizer.get_theme(make_band(band2_device))
        band_theme = await personalizer.get_theme(make_band(band_device, 13))
        assert band2_theme in BAND2_THEMES.values()
        assert band_theme in BAND_THEMES.values()


class TestMeTile:
    async def test_default_size_band2(
        self, personalizer: BandPersonalizer, band2_device: FakeBand
    ) -> None:
        image = Image.new("RGB", (100, 100), (255, 0, 0))
        await personalizer.set_me_tile_image(make_band(band2_device), image)
        assert (band2_device.me_tile.width, band2_device.me_tile.height) == (310, 128)

    async def test_default_size_band(
        self, personalizer: BandPersonalizer, band_device: FakeBand
    ) -> None:
        image = Image.new("RGB", (100, 100), (255, 0, 0))
        await personalizer.set_me_tile_image(make_band(band_device, 13), image)
        assert (band_device.me_tile.width, band_device.me_tile.height) == (310, 102)

    async def test_explicit_size(
        self, personalizer: BandPersonalizer, band2_device: FakeBand
    ) -> None:
        image = Image.new("RGB", (310, 128))
        await personalizer.set_me_tile_image(
            make_band(band2_device), image, dimensions=Dimension2D(310, 102)
        )
        assert (band2_device.me_tile.width, band2_device.me_tile.height) == (310, 102)

    async def test_disallowed_size(
        self,
        personalizer: BandPersonalizer,
        adapter: FakeBandAdapter,
        band_device: FakeBand,
    ) -> None:
        with pytest.raises(UnsupportedValueError):
            await personalizer.set_me_tile_image(
                make_band(band_device, 13),
                Image.new("RGB", (310, 128)),
                dimensions=Dimension2D(310, 128),
            )
        assert adapter.connects == 0

    async def test_unknown_revision(
        self,
        personalizer: BandPersonalizer,
        adapter: FakeBandAdapter,
        band2_device: FakeBand,
    ) -> None:
        with pytest.raises(UnsupportedValueError):
            await personalizer.set_me_tile_image(
                make_band(band2_device, None), Image.new("RGB", (310, 128))
            )
        assert adapter.connects == 0

    async def test_get_image(
        self, personalizer: BandPersonalizer, band2_device: FakeBand
    ) -> None:
        band = make_band(band2_device)
        blank = await personalizer.get_me_tile_image(band)
        assert blank.size == (310, 128)
        await personalizer.set_me_tile_image(
            band, Image.new("RGB", (620, 256), (0, 0, 255))
        )
        image = await personalizer.get_me_tile_image(band)
        assert image.size == (310, 128)
        assert image.getpixel((155, 64)) == (0, 0, 255)


class TestSessionLifecycle:
    async def test_device_error_propagates_and_releases(
        self,
        personalizer: BandPersonalizer,
        adapter: FakeBandAdapter,
        band2_device: FakeBand,
    ) -> None:
        error = DeviceOperationError("write failed")
        band2_device.error = error
        with pytest.raises(DeviceOperationError) as excinfo:
            await personalizer.set_theme(make_band(band2_device), distinct_theme())
        assert excinfo.value is error
        assert adapter.connects == 1
        assert adapter.releases == 1

    async def test_release_error_does_not_replace_device_error(
        self,
        personalizer: BandPersonalizer,
        band2_device: FakeBand,
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        async def release(session: FakeBandSession) -> None:
            raise BleakError("release failed")

        monkeypatch.setattr(FakeBandSession, "release", release)
        error = DeviceOperationError("set failed")
        band2_device.error = error
        with pytest.raises(DeviceOperationError) as excinfo:
            await personalizer.set_theme(make_band(band2_device), distinct_theme())
        assert excinfo.value is error
        assert "Error releasing session: release failed" in caplog.text

    async def test_release_error_after_success_propagates(
        self,
        personalizer: BandPersonalizer,
        band2_device: FakeBand,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        async def release(session: FakeBandSession) -> None:
            raise BleakError("release failed")

        monkeypatch.setattr(FakeBandSession, "release", release)
        with pytest.raises(BleakError):
            await personalizer.get_theme(make_band(band2_device))

    async def test_bleak_error_is_not_wrapped(
        self,
        personalizer: BandPersonalizer,
        adapter: FakeBandAdapter,
        band2_device: FakeBand,
    ) -> None:
        band2_device.error = BleakError("gone")
        with pytest.raises(BleakError):
            await personalizer.get_theme(make_band(band2_device))
        assert adapter.open_sessions == 0

    async def test_connect_failure_has_nothing_to_release(
        self,
        personalizer: BandPersonalizer,
        adapter: FakeBandAdapter,
        band2_device: FakeBand,
    ) -> None:
        band2_device.is_connected = False
        with pytest.raises(DeviceOperationError):
            await personalizer.get_theme(make_band(band2_device))
        assert adapter.connects == 0
        assert adapter.releases == 0

    async def test_cancelled_before_connect(
        self,
        personalizer: BandPersonalizer,
        adapter: FakeBandAdapter,
        band2_device: FakeBand,
    ) -> None:
        token = CancellationToken()
        token.cancel()
        with pytest.raises(OperationCanceledError):
            await personalizer.set_theme(
                make_band(band2_device), distinct_theme(), token
            )
        assert adapter.connects == 0
        assert band2_device.theme is None

    async def test_cancelled_while_operating(
        self, band2_device: FakeBand, band_device: FakeBand
    ) -> None:
        adapter = FakeBandAdapter(band2_device, band_device, delay=0.05)
        personalizer = BandPersonalizer(adapter)
        token = CancellationToken()
        asyncio.get_running_loop().call_later(0.01, token.cancel)
        with pytest.raises(OperationCanceledError):
            await personalizer.set_theme(
                make_band(band2_device), distinct_theme(), token
            )
        assert adapter.connects == 1
        assert adapter.releases == 1
        assert band2_device.theme is None

    async def test_task_cancellation_releases(
        self, band2_device: FakeBand, band_device: FakeBand
    ) -> None:
        adapter = FakeBandAdapter(band2_device, band_device, delay=0.05)
        personalizer = BandPersonalizer(adapter)
        task = asyncio.ensure_future(personalizer.get_theme(make_band(band2_device)))
        await asyncio.sleep(0.07)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert adapter.open_sessions == 0

    async def test_one_session_per_call(
        self,
        personalizer: BandPersonalizer,
        adapter: FakeBandAdapter,
        band2_device: FakeBand,
    ) -> None:
        band = make_band(band2_device)
        await personalizer.set_theme(band, distinct_theme())
        await personalizer.get_theme(band)
        await personalizer.get_me_tile_image(band)
        assert adapter.connects == 3
        assert adapter.releases == 3
