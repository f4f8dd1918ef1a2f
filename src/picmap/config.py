"""Runtime settings from the environment, and logging setup for entry points."""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from picmap.linking import DEFAULT_OFFSET_RADIUS
from picmap.models import ImageDimensions, PackingStrategy
from picmap.page import DEFAULT_DPI, validate_dpi

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class Settings:
    """Knobs that are not part of a project's own configuration."""

    dpi: int = DEFAULT_DPI
    packing_strategy: PackingStrategy = PackingStrategy.EXACT
    link_offset_radius: float = DEFAULT_OFFSET_RADIUS
    default_image_width: float = 800
    default_image_height: float = 600
    log_level: str = "INFO"

    @property
    def default_image_dimensions(self) -> ImageDimensions:
        return ImageDimensions(self.default_image_width, self.default_image_height)


def load_settings() -> Settings:
    """Read PICMAP_* variables (after loading a .env file, if any).

    Recognised: PICMAP_DPI, PICMAP_PACKING_STRATEGY ("exact" or "adaptive"),
    PICMAP_LINK_OFFSET_RADIUS, PICMAP_LOG_LEVEL. Unset variables keep the
    defaults; a malformed value raises ValueError.
    """
    load_dotenv()
    defaults = Settings()

    dpi = defaults.dpi
    if raw := os.environ.get("PICMAP_DPI"):
        dpi = validate_dpi(float(raw))

    strategy = defaults.packing_strategy
    if raw := os.environ.get("PICMAP_PACKING_STRATEGY"):
        strategy = PackingStrategy(raw.strip().lower())

    radius = defaults.link_offset_radius
    if raw := os.environ.get("PICMAP_LINK_OFFSET_RADIUS"):
        radius = float(raw)

    return Settings(
        dpi=dpi,
        packing_strategy=strategy,
        link_offset_radius=radius,
        log_level=os.environ.get("PICMAP_LOG_LEVEL", defaults.log_level).upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    """Install a root handler. Library modules never call this themselves."""
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
