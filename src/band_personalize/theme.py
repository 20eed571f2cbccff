from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

from .color import RgbColor
from .util import require_argument


@dataclass(frozen=True)
class RgbColorTheme:
    """The six colors a band uses to draw its tiles and text.

    Any combination of colors is valid. Use dataclasses.replace to derive
    a theme with a different slot.
    """

    base: RgbColor
    high_contrast: RgbColor
    lowlight: RgbColor
    highlight: RgbColor
    muted: RgbColor
    secondary_text: RgbColor

    def __post_init__(self) -> None:
        for slot in THEME_SLOTS:
            require_argument(getattr(self, slot), slot)

    def colors(self) -> dict[str, RgbColor]:
        """Return the slot name to color mapping."""
        return {slot: getattr(self, slot) for slot in THEME_SLOTS}


@dataclass(frozen=True)
class TitledRgbColorTheme(RgbColorTheme):

    title: str = ""

    @classmethod
    def from_theme(cls, theme: RgbColorTheme, title: str) -> TitledRgbColorTheme:
        return cls(**require_argument(theme, "theme").colors(), title=title)


THEME_SLOTS: tuple[str, ...] = tuple(
    field.name for field in fields(RgbColorTheme)
)


def to_record(theme_id: uuid.UUID, theme: TitledRgbColorTheme) -> dict[str, Any]:
    """Return the persisted shape of a theme: id, title and 24-bit colors."""
    require_argument(theme_id, "theme_id")
    require_argument(theme, "theme")
    record: dict[str, Any] = {"id": str(theme_id), "title": theme.title}
    for slot, color in theme.colors().items():
        record[slot] = color.to_int()
    return record


def from_record(record: Mapping[str, Any]) -> tuple[uuid.UUID, TitledRgbColorTheme]:
    """Rebuild an id and theme from their persisted shape."""
    require_argument(record, "record")
    colors = {slot: RgbColor.from_int(record[slot]) for slot in THEME_SLOTS}
    theme = TitledRgbColorTheme(**colors, title=record.get("title", ""))
    return uuid.UUID(str(record["id"])), theme
