import asyncio
import logging

from PIL import Image

from band_personalize import (
    BandPersonalizer,
    BandRepository,
    FakeBand,
    FakeBandAdapter,
    RgbColor,
    TitledRgbColorTheme,
    get_default_themes,
)
from band_personalize.repository import MemoryThemeRepository

_LOGGER = logging.getLogger(__name__)

NAME = "Band 2 7c:3e"


async def run() -> None:
    adapter = FakeBandAdapter(
        FakeBand(NAME, hardware_version="26"),
        FakeBand("Band 1a:2b", hardware_version="13", is_connected=False),
        delay=0.1,
    )
    repository = BandRepository(adapter)
    personalizer = BandPersonalizer(adapter)
    themes = MemoryThemeRepository()

    for band in await repository.get_paired_bands():
        _LOGGER.info(
            "Detected: %s (%s, connected: %s)",
            band.name,
            band.hardware_revision,
            band.is_connected,
        )

    band = await repository.get_paired_band(NAME)
    if band is None:
        _LOGGER.error("%s is not paired", NAME)
        return

    _LOGGER.info("get_theme...")
    theme = await personalizer.get_theme(band)
    _LOGGER.info("Current base color: %s", theme.base)

    _LOGGER.info("set_theme(lighter)...")
    for title, default in get_default_themes(band.hardware_revision).items():
        lighter = TitledRgbColorTheme(
            **{slot: color.luminance(0.1) for slot, color in default.colors().items()},
            title=f"Light {title}",
        )
        theme_id = await themes.persist_theme(lighter)
        _LOGGER.info("Saved %s as %s", lighter.title, theme_id)
        await personalizer.set_theme(band, lighter)

    _LOGGER.info("set_me_tile_image(red)...")
    red = RgbColor.parse("#C00")
    await personalizer.set_me_tile_image(
        band, Image.new("RGB", (640, 480), (red.red, red.green, red.blue))
    )
    image = await personalizer.get_me_tile_image(band)
    _LOGGER.info("Me Tile is now %sx%s", *image.size)
    _LOGGER.info("done")


logging.basicConfig(level=logging.INFO)
logging.getLogger("band_personalize").setLevel(logging.DEBUG)
asyncio.run(run())
