"""Conversions between domain values and the device-native representation."""
from __future__ import annotations

from PIL import Image

from .adapter import NativeColor, NativeImage, NativeTheme
from .color import ArgbColor, RgbColor
from .const import BYTE_MAX
from .models import Dimension2D
from .theme import RgbColorTheme
from .util import require_argument


def to_native_color(color: RgbColor) -> NativeColor:
    require_argument(color, "color")
    return NativeColor(color.red, color.green, color.blue)


def to_rgb_color(color: NativeColor) -> RgbColor:
    require_argument(color, "color")
    return RgbColor(color.r, color.g, color.b)


def to_argb_color(color: NativeColor) -> ArgbColor:
    """Device colors are always opaque."""
    require_argument(color, "color")
    return ArgbColor(BYTE_MAX, color.r, color.g, color.b)


def to_native_theme(theme: RgbColorTheme) -> NativeTheme:
    require_argument(theme, "theme")
    return NativeTheme(
        base=to_native_color(theme.base),
        high_contrast=to_native_color(theme.high_contrast),
        lowlight=to_native_color(theme.lowlight),
        highlight=to_native_color(theme.highlight),
        muted=to_native_color(theme.muted),
        secondary_text=to_native_color(theme.secondary_text),
    )


def to_rgb_color_theme(theme: NativeTheme) -> RgbColorTheme:
    require_argument(theme, "theme")
    return RgbColorTheme(
        base=to_rgb_color(theme.base),
        high_contrast=to_rgb_color(theme.high_contrast),
        lowlight=to_rgb_color(theme.lowlight),
        highlight=to_rgb_color(theme.highlight),
        muted=to_rgb_color(theme.muted),
        secondary_text=to_rgb_color(theme.secondary_text),
    )


def fit_image(image: Image.Image, dimensions: Dimension2D) -> Image.Image:
    """Return an RGB copy of image at exactly the given size."""
    require_argument(image, "image")
    fitted = image.convert("RGB")
    size = (dimensions.width, dimensions.height)
    if fitted.size != size:
        fitted = fitted.resize(size, Image.LANCZOS)
    return fitted


def encode_image(image: Image.Image) -> NativeImage:
    """Pack an image into RGB565 pixels."""
    require_argument(image, "image")
    rgb = image.convert("RGB").tobytes()
    pixels = bytearray(len(rgb) // 3 * 2)
    for index in range(len(rgb) // 3):
        r, g, b = rgb[index * 3 : index * 3 + 3]
        packed = ((r >> 3) << 11) | ((g >> 2) << 5) | (b >> 3)
        pixels[index * 2] = packed & 0xFF
        pixels[index * 2 + 1] = packed >> 8
    width, height = image.size
    return NativeImage(width, height, bytes(pixels))


def decode_image(image: NativeImage) -> Image.Image:
    """Expand RGB565 pixels into an RGB image."""
    require_argument(image, "image")
    expected = image.width * image.height * 2
    if len(image.pixels) != expected:
        raise ValueError(
            f"{image.width}x{image.height} image needs {expected} bytes,"
            f" got {len(image.pixels)}"
        )
    rgb = bytearray(image.width * image.height * 3)
    for index in range(image.width * image.height):
        packed = image.pixels[index * 2] | (image.pixels[index * 2 + 1] << 8)
        r5 = packed >> 11
        g6 = (packed >> 5) & 0x3F
        b5 = packed & 0x1F
        rgb[index * 3] = (r5 << 3) | (r5 >> 2)
        rgb[index * 3 + 1] = (g6 << 2) | (g6 >> 4)
        rgb[index * 3 + 2] = (b5 << 3) | (b5 >> 2)
    return Image.frombytes("RGB", (image.width, image.height), bytes(rgb))
