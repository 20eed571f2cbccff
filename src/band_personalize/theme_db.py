from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from .color import RgbColor
from .exceptions import UnsupportedValueError
from .models import HardwareRevision
from .theme import RgbColorTheme, TitledRgbColorTheme


def _theme(
    *,
    high_contrast: int,
    base: int,
    lowlight: int,
    secondary_text: int,
    highlight: int,
    muted: int,
) -> RgbColorTheme:
    return RgbColorTheme(
        base=RgbColor.from_int(base),
        high_contrast=RgbColor.from_int(high_contrast),
        lowlight=RgbColor.from_int(lowlight),
        highlight=RgbColor.from_int(highlight),
        muted=RgbColor.from_int(muted),
        secondary_text=RgbColor.from_int(secondary_text),
    )


BAND_THEMES: Mapping[str, RgbColorTheme] = MappingProxyType(
    {
        "Blue": _theme(
            high_contrast=0x3A78DD,
            base=0x3366CC,
            lowlight=0x3165BA,
            secondary_text=0x8997AB,
            highlight=0x3A78DD,
            muted=0x2B5AA5,
        ),
        "Purple": _theme(
            high_contrast=0x885AF9,
            base=0x7842CF,
            lowlight=0x693FBC,
            secondary_text=0x9794AB,
            highlight=0x8B61F2,
            muted=0x5E38A8,
        ),
        "Pink": _theme(
            high_contrast=0xBF455F,
            base=0xD94C66,
            lowlight=0xC64763,
            secondary_text=0xA3919C,
            highlight=0x41CE7A,
            muted=0x993344,
        ),
        "Green": _theme(
            high_contrast=0x33A361,
            base=0x39BF6F,
            lowlight=0x35AA65,
            secondary_text=0x939982,
            highlight=0x41CE7A,
            muted=0x2C8454,
        ),
        "Yellow": _theme(
            high_contrast=0xFFA500,
            base=0xFFAF00,
            lowlight=0xF99A03,
            secondary_text=0x9E9678,
            highlight=0xFFAF00,
            muted=0xBC8B00,
        ),
        "LightPurple": _theme(
            high_contrast=0xB7A5D3,
            base=0x9787AF,
            lowlight=0x7E768E,
            secondary_text=0x95959E,
            highlight=0xAC9FC1,
            muted=0x686172,
        ),
        "ActiveBlue": _theme(
            high_contrast=0x0DD1FF,
            base=0x00B9F2,
            lowlight=0x00B2DB,
            secondary_text=0x869A9C,
            highlight=0x5AE0FF,
            muted=0x0086A5,
        ),
        "ActiveOrange": _theme(
            high_contrast=0xFF6F48,
            base=0xF0530E,
            lowlight=0xDD440E,
            secondary_text=0xA3919C,
            highlight=0xFC663D,
            muted=0xC93D0D,
        ),
        "ActiveFuschia": _theme(
            high_contrast=0xF04BF9,
            base=0xD936D9,
            lowlight=0xC234C6,
            secondary_text=0xA3919C,
            highlight=0xF42EFF,
            muted=0xAF2FB2,
        ),
        "ActiveLime": _theme(
            high_contrast=0x97DB40,
            base=0x99C814,
            lowlight=0x79A82F,
            secondary_text=0x939982,
            highlight=0xB1DB16,
            muted=0x618E13,
        ),
        "DiscreetBlue": _theme(
            high_contrast=0x303030,
            base=0x151515,
            lowlight=0x111111,
            secondary_text=0x797E7F,
            highlight=0x3BDAFF,
            muted=0x0086A5,
        ),
        "DiscreetGrey": _theme(
            high_contrast=0x303030,
            base=0x151515,
            lowlight=0x111111,
            secondary_text=0x797E7F,
            highlight=0xB7B7B7,
            muted=0x454545,
        ),
        "DiscreetYellow": _theme(
            high_contrast=0x303030,
            base=0x151515,
            lowlight=0x111111,
            secondary_text=0x797E7F,
            highlight=0xFFAF00,
            muted=0xBC8B00,
        ),
    }
)

BAND2_THEMES: Mapping[str, RgbColorTheme] = MappingProxyType(
    {
        "Electric": _theme(
            high_contrast=0x0DD1FF,
            base=0x00B9F2,
            lowlight=0x009DCE,
            secondary_text=0x969696,
            highlight=0x5AE0FF,
            muted=0x004A64,
        ),
    }
)

DEFAULT_THEMES: Mapping[HardwareRevision, Mapping[str, RgbColorTheme]] = (
    MappingProxyType(
        {
            HardwareRevision.UNKNOWN: MappingProxyType({}),
            HardwareRevision.BAND: BAND_THEMES,
            HardwareRevision.BAND2: BAND2_THEMES,
        }
    )
)


def get_default_themes(revision: HardwareRevision) -> Mapping[str, RgbColorTheme]:
    """Return the factory themes for a hardware revision, keyed by name."""
    try:
        return DEFAULT_THEMES[revision]
    except KeyError:
        raise UnsupportedValueError(
            f"Unhandled {HardwareRevision.__name__}: {revision!r}"
        ) from None


def get_titled_default_themes(
    revision: HardwareRevision,
) -> list[TitledRgbColorTheme]:
    """Return the factory themes for a hardware revision, titled by name."""
    return [
        TitledRgbColorTheme.from_theme(theme, title)
        for title, theme in get_default_themes(revision).items()
    ]
