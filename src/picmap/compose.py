"""Composition pipeline: configuration in, page geometry out.

Data flow:
    layout areas -> (auto zoom/center) -> border packing -> picture fitting
    -> picture positions -> link resolution -> link routing -> map plan
"""

import logging
from dataclasses import dataclass, replace

from picmap.config import Settings
from picmap.fitting import position_pictures_in_slots
from picmap.linking import (
    normalize_link_style,
    picture_positions,
    resolve_links,
    route_links,
    validate_links,
)
from picmap.mapview import MapPlan, markers_from_links, plan_map
from picmap.models import (
    BorderLayout,
    LinkStyle,
    MapStyle,
    MapViewport,
    PicMapConfig,
    PositionedPicture,
    Rectangle,
    RenderedLinks,
)
from picmap.packing import pack_border
from picmap.page import calculate_layout_areas, validate_dpi
from picmap.projection import calculate_center, calculate_zoom_to_fit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Composition:
    """Everything a renderer needs for one page. Fully computed state."""

    title: str
    dpi: int
    layout: BorderLayout
    map_style: MapStyle  # zoom and center always set
    map_plan: MapPlan
    pictures: tuple[PositionedPicture, ...]
    links: RenderedLinks
    link_style: LinkStyle  # Colors already sanitized
    diagnostics: tuple[str, ...]  # Links that could not be matched to a picture

    @property
    def map_area(self) -> Rectangle:
        return self.layout.inner_area


def fit_map_style(style: MapStyle, config: PicMapConfig, width: float, height: float) -> MapStyle:
    """Fill in a missing zoom or center from the linked locations."""
    if style.zoom is not None and style.center is not None:
        return style
    locations = [link.location for link in config.links]
    center = style.center if style.center is not None else calculate_center(locations)
    zoom = (
        style.zoom
        if style.zoom is not None
        else calculate_zoom_to_fit(locations, width, height)
    )
    logger.debug("auto-fit map: zoom %s, center (%.5f, %.5f)", zoom, center.latitude, center.longitude)
    return replace(style, zoom=zoom, center=center)


def compose(config: PicMapConfig, settings: Settings | None = None) -> Composition:
    """Top-level entry point: lay out a complete page for `config`.

    Args:
        config: Validated project configuration.
        settings: DPI, packing strategy and other knobs. Defaults if None.

    Returns:
        Fully computed Composition.
    """
    settings = settings or Settings()
    dpi = validate_dpi(settings.dpi)

    # The map area is known before packing, so zoom/center can be fitted first
    areas = calculate_layout_areas(config.layout, dpi)
    map_area = areas.map_area
    map_style = fit_map_style(config.map, config, map_area.width, map_area.height)

    layout = pack_border(
        config.layout, len(config.images), dpi=dpi, strategy=settings.packing_strategy
    )
    pictures = position_pictures_in_slots(
        config.images,
        layout.slots,
        config.links,
        default_dimensions=settings.default_image_dimensions,
    )
    positions = picture_positions(pictures)
    diagnostics = validate_links(config.links, positions)

    viewport = MapViewport(
        width=map_area.width,
        height=map_area.height,
        offset_x=map_area.x,
        offset_y=map_area.y,
    )
    resolved = resolve_links(config.links, positions, map_style, viewport)
    link_style = normalize_link_style(config.link_style)
    links = route_links(resolved, link_style, radius=settings.link_offset_radius)

    plan = plan_map(
        map_style, map_area.width, map_area.height, markers_from_links(resolved)
    )

    logger.info(
        "composed %r: %dx%d px, %d pictures, %d links, %d warnings",
        config.title,
        layout.page_width,
        layout.page_height,
        len(pictures),
        len(resolved),
        len(links.warnings),
    )
    return Composition(
        title=config.title,
        dpi=dpi,
        layout=layout,
        map_style=map_style,
        map_plan=plan,
        pictures=tuple(pictures),
        links=links,
        link_style=link_style,
        diagnostics=tuple(diagnostics),
    )
