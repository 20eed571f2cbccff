"""Shared pytest fixtures for band_personalize tests."""

from __future__ import annotations

import random

import pytest

from band_personalize.band import Band
from band_personalize.fake import FakeBand, FakeBandAdapter
from band_personalize.personalizer import BandPersonalizer
from band_personalize.repository import BandRepository


def make_band(fake: FakeBand, hardware_version: int | None = 26) -> Band:
    """A connected Band descriptor for a fake device."""
    return Band(fake.info, True, hardware_version)


@pytest.fixture
def band2_device() -> FakeBand:
    return FakeBand("Band 2 7c:3e", hardware_version="26")


@pytest.fixture
def band_device() -> FakeBand:
    return FakeBand("Band 1a:2b", hardware_version="13")


@pytest.fixture
def adapter(band2_device: FakeBand, band_device: FakeBand) -> FakeBandAdapter:
    """Fake adapter with one Band 2 and one original Band paired."""
    return FakeBandAdapter(band2_device, band_device, rng=random.Random(1))


@pytest.fixture
def personalizer(adapter: FakeBandAdapter) -> BandPersonalizer:
    return BandPersonalizer(adapter)


@pytest.fixture
def repository(adapter: FakeBandAdapter) -> BandRepository:
    return BandRepository(adapter)
