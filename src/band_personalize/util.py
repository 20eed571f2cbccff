from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import TypeVar

from .const import BYTE_MAX
from .exceptions import MissingArgumentError

_T = TypeVar("_T")


def require_argument(value: _T | None, name: str) -> _T:
    """Return value, or raise MissingArgumentError naming the argument."""
    if value is None:
        raise MissingArgumentError(name)
    return value


def round_half_away_from_zero(number: float | Decimal) -> int:
    """Round to the nearest integer, midpoints away from zero.

    Floats are converted exactly, so a result just below a midpoint in
    binary rounds down.
    """
    if not isinstance(number, Decimal):
        number = Decimal(number)
    return int(number.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def percentage_of_maximum_saturation(channel: int) -> float:
    """Return how saturated a color channel is, 0.0 to 1.0."""
    return channel / BYTE_MAX


def luminance(channel: int, percentage: float | Decimal) -> int:
    """Lighten (positive) or darken (negative) a channel by a percentage.

    A percentage of 1 moves the channel by 256 steps; the result is rounded
    half away from zero and clamped to a byte.
    """
    chunk = (BYTE_MAX + 1) * Decimal(str(percentage))
    adjusted = round_half_away_from_zero(Decimal(channel) + chunk)
    return max(min(adjusted, BYTE_MAX), 0)


def rgb_to_hsv(red: int, green: int, blue: int) -> tuple[float, float, float]:
    """Convert byte channels to hue in whole degrees, saturation and value.

    Hue comes from the six sector formula for whichever channel is largest,
    rounded half away from zero and folded into [0, 360).
    """
    red_prime = red / BYTE_MAX
    green_prime = green / BYTE_MAX
    blue_prime = blue / BYTE_MAX

    chroma_max = max(max(red_prime, green_prime), blue_prime)
    chroma_min = min(min(red_prime, green_prime), blue_prime)
    delta = chroma_max - chroma_min

    if delta == 0:
        hue_prime = 0.0
    elif chroma_max == red_prime:
        hue_prime = math.fmod((green_prime - blue_prime) / delta, 6)
    elif chroma_max == green_prime:
        hue_prime = ((blue_prime - red_prime) / delta) + 2
    else:
        hue_prime = ((red_prime - green_prime) / delta) + 4

    hue = hue_prime * 60
    if hue < 0:
        hue += 360

    saturation = delta / chroma_max if chroma_max != 0 else 0.0
    return float(round_half_away_from_zero(hue) % 360), saturation, chroma_max


def hsv_to_rgb(hue: float, saturation: float, value: float) -> tuple[int, int, int]:
    """Convert hue in degrees, saturation and value to byte channels.

    Channels are quantized to bytes, so some colors do not survive an
    rgb -> hsv -> rgb round trip exactly (0.75 value gray is 0xBF, not 0xC0).
    """
    chroma = value * saturation
    hue_prime = (hue % 360) / 60
    x = chroma * (1 - abs((hue_prime % 2) - 1))
    m = value - chroma

    if hue_prime < 1:
        red_prime, green_prime, blue_prime = chroma, x, 0.0
    elif hue_prime < 2:
        red_prime, green_prime, blue_prime = x, chroma, 0.0
    elif hue_prime < 3:
        red_prime, green_prime, blue_prime = 0.0, chroma, x
    elif hue_prime < 4:
        red_prime, green_prime, blue_prime = 0.0, x, chroma
    elif hue_prime < 5:
        red_prime, green_prime, blue_prime = x, 0.0, chroma
    else:
        red_prime, green_prime, blue_prime = chroma, 0.0, x

    return (
        _unprime(red_prime, m),
        _unprime(green_prime, m),
        _unprime(blue_prime, m),
    )


def _unprime(prime: float, m: float) -> int:
    return min(round_half_away_from_zero((prime + m) * BYTE_MAX), BYTE_MAX)
