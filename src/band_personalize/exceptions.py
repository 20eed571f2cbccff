from __future__ import annotations


class BandPersonalizeError(Exception):
    """Base exception for all band_personalize errors."""


class MissingArgumentError(BandPersonalizeError, ValueError):
    """Raised when a required argument is None."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"The {name} argument is required")


class InvalidFormatError(BandPersonalizeError, ValueError):
    """Raised when text is not a hexadecimal color string."""


class UnsupportedValueError(BandPersonalizeError):
    """Raised when an enumeration value has no table entry."""


class DeviceOperationError(BandPersonalizeError):
    """Raised by device adapters when the device rejects or fails an operation."""


class CharacteristicMissingError(DeviceOperationError):
    """Raised when a characteristic is missing."""


class OperationCanceledError(BandPersonalizeError):
    """Raised when a cancellation token is observed as cancelled."""
