from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import NamedTuple

from .const import ARGB_COLOR_PATTERN, BYTE_MAX, HEXADECIMAL_COLOR_PATTERN
from .exceptions import InvalidFormatError
from .util import (
    hsv_to_rgb,
    luminance,
    percentage_of_maximum_saturation,
    require_argument,
    rgb_to_hsv,
)


class HsvColor(NamedTuple):

    hue: float  # degrees, 0 <= hue < 360
    saturation: float  # 0.0 - 1.0
    value: float  # 0.0 - 1.0


def _validate_channels(**channels: int) -> None:
    for name, channel in channels.items():
        if not 0 <= channel <= BYTE_MAX:
            raise ValueError(
                f"{name} value {channel} is outside the valid range of 0-255"
            )


@dataclass(frozen=True)
class RgbColor:
    """An immutable 24-bit color."""

    red: int
    green: int
    blue: int

    def __post_init__(self) -> None:
        _validate_channels(red=self.red, green=self.green, blue=self.blue)

    def __str__(self) -> str:
        return f"#{self.red:02X}{self.green:02X}{self.blue:02X}"

    @classmethod
    def parse(cls, text: str | None) -> RgbColor:
        """Parse a hexadecimal color string.

        Accepts 3 or 6 hexadecimal digits, optionally preceded by "#" and
        surrounded by whitespace. The 3 digit form duplicates each digit,
        so "a1b" is "aa11bb".
        """
        require_argument(text, "text")
        color = cls.try_parse(text)
        if color is None:
            raise InvalidFormatError(
                "the text parameter must be a hexadecimal color string: either"
                f" 3 or 6 hexadecimal digits, optionally preceded by #: {text!r}"
            )
        return color

    @classmethod
    def try_parse(cls, text: str | None) -> RgbColor | None:
        """Parse a hexadecimal color string, returning None when it is invalid."""
        if text is None:
            return None
        match = HEXADECIMAL_COLOR_PATTERN.fullmatch(text)
        if not match:
            return None
        digits = match.group(1)
        if len(digits) == 3:
            digits = "".join(digit * 2 for digit in digits)
        return cls(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))

    @classmethod
    def from_hsv(cls, hue: float, saturation: float, value: float) -> RgbColor:
        """Create a color from hue (degrees), saturation and value."""
        if not 0 <= saturation <= 1:
            raise ValueError(f"saturation {saturation} must be between 0 and 1")
        if not 0 <= value <= 1:
            raise ValueError(f"value {value} must be between 0 and 1")
        return cls(*hsv_to_rgb(hue % 360, saturation, value))

    @classmethod
    def from_int(cls, packed: int) -> RgbColor:
        """Unpack a 0xRRGGBB integer."""
        if not 0 <= packed <= 0xFFFFFF:
            raise ValueError(f"packed color {packed} is outside the 24-bit range")
        return cls((packed >> 16) & 0xFF, (packed >> 8) & 0xFF, packed & 0xFF)

    def to_int(self) -> int:
        """Pack into a 0xRRGGBB integer."""
        return (self.red << 16) | (self.green << 8) | self.blue

    @property
    def red_saturation(self) -> float:
        return percentage_of_maximum_saturation(self.red)

    @property
    def green_saturation(self) -> float:
        return percentage_of_maximum_saturation(self.green)

    @property
    def blue_saturation(self) -> float:
        return percentage_of_maximum_saturation(self.blue)

    @property
    def hsv(self) -> HsvColor:
        return HsvColor(*rgb_to_hsv(self.red, self.green, self.blue))

    @property
    def hue(self) -> float:
        return self.hsv.hue

    @property
    def saturation(self) -> float:
        return self.hsv.saturation

    @property
    def value(self) -> float:
        return self.hsv.value

    def luminance(self, percentage: float | Decimal) -> RgbColor:
        """Return a lighter (positive) or darker (negative) copy."""
        return RgbColor(
            luminance(self.red, percentage),
            luminance(self.green, percentage),
            luminance(self.blue, percentage),
        )


@dataclass(frozen=True)
class ArgbColor:
    """A color with an alpha channel, used only at device and storage edges."""

    alpha: int
    red: int
    green: int
    blue: int

    def __post_init__(self) -> None:
        _validate_channels(
            alpha=self.alpha, red=self.red, green=self.green, blue=self.blue
        )

    def __str__(self) -> str:
        return f"#{self.alpha:02X}{self.red:02X}{self.green:02X}{self.blue:02X}"

    @classmethod
    def parse(cls, text: str | None) -> ArgbColor:
        """Parse 8 hexadecimal digits, optionally preceded by "#"."""
        require_argument(text, "text")
        match = ARGB_COLOR_PATTERN.fullmatch(text)
        if not match:
            raise InvalidFormatError(
                "the text parameter must be a hexadecimal ARGB color string:"
                f" 8 hexadecimal digits, optionally preceded by #: {text!r}"
            )
        digits = match.group(1)
        return cls(*(int(digits[i : i + 2], 16) for i in range(0, 8, 2)))

    @classmethod
    def from_rgb(cls, color: RgbColor, alpha: int = BYTE_MAX) -> ArgbColor:
        require_argument(color, "color")
        return cls(alpha, color.red, color.green, color.blue)

    @property
    def alpha_saturation(self) -> float:
        return percentage_of_maximum_saturation(self.alpha)

    @property
    def rgb(self) -> RgbColor:
        """Drop the alpha channel."""
        return RgbColor(self.red, self.green, self.blue)


def parse(text: str | None) -> RgbColor:
    """Parse a hexadecimal color string, see RgbColor.parse."""
    return RgbColor.parse(text)


def to_hsv(color: RgbColor) -> HsvColor:
    """Convert a color to hue, saturation and value."""
    return require_argument(color, "color").hsv


def to_rgb(hue: float, saturation: float, value: float) -> RgbColor:
    """Convert hue, saturation and value to a color."""
    return RgbColor.from_hsv(hue, saturation, value)
