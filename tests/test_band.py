"""Tests for the Band descriptor and connection type mapping."""

from __future__ import annotations

import pytest

from band_personalize.adapter import BandConnectionType, DeviceInfo, to_connection_type
from band_personalize.band import Band
from band_personalize.models import ConnectionType, HardwareRevision


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (BandConnectionType.BLUETOOTH, ConnectionType.BLUETOOTH),
        (BandConnectionType.USB, ConnectionType.USB),
        (None, ConnectionType.UNKNOWN),
        (7, ConnectionType.UNKNOWN),
        ("usb", ConnectionType.UNKNOWN),
        ([], ConnectionType.UNKNOWN),
    ],
)
def test_to_connection_type(value, expected) -> None:
    assert to_connection_type(value) is expected


def test_band_defaults() -> None:
    band = Band(DeviceInfo("Band 1a:2b"))
    assert band.name == "Band 1a:2b"
    assert not band.is_connected
    assert band.hardware_version is None
    assert band.hardware_revision is HardwareRevision.UNKNOWN
    assert band.connection_type is ConnectionType.UNKNOWN


def test_band_revision() -> None:
    info = DeviceInfo("Band 2 7c:3e", BandConnectionType.USB)
    assert Band(info, True, 26).hardware_revision is HardwareRevision.BAND2
    assert Band(info, True, 13).hardware_revision is HardwareRevision.BAND
    assert Band(info, True, 26).connection_type is ConnectionType.USB
