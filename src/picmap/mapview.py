"""Procedural map surface: bounds, tile grid, markers, scale bar, attribution.

No tiles are fetched. The plan describes a placeholder surface a renderer can
draw; all positions are relative to the map viewport's top-left corner.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from picmap.colors import sanitize_color
from picmap.models import (
    BoundingBox,
    GeoLocation,
    MapMarker,
    MapProvider,
    MapStyle,
    MarkerShape,
    MarkerStyle,
    PixelCoordinate,
    ResolvedLink,
)
from picmap.projection import (
    TILE_SIZE,
    calculate_bounds,
    geo_to_viewport_pixel,
    meters_per_pixel,
)

DEFAULT_MARKER_COLOR = "#e74c3c"
SCALE_BAR_PIXELS = 100
_ATTRIBUTION = {
    MapProvider.OPENSTREETMAP: "© OpenStreetMap contributors",
    MapProvider.CUSTOM: "Custom Map",
}


@dataclass(frozen=True)
class GridLine:
    start: PixelCoordinate
    end: PixelCoordinate


@dataclass(frozen=True)
class PlacedMarker:
    position: PixelCoordinate
    color: str
    size: float
    shape: MarkerShape
    label: str | None
    label_offset_y: float  # Pins carry their label above the head


@dataclass(frozen=True)
class ScaleBar:
    origin: PixelCoordinate  # Left end of the bar
    length: float
    text: str
    meters: float


@dataclass(frozen=True)
class MapPlan:
    width: float
    height: float
    bounds: BoundingBox
    grid_lines: tuple[GridLine, ...]
    markers: tuple[PlacedMarker, ...]
    scale_bar: ScaleBar | None
    attribution: str | None


def grid_lines(width: float, height: float) -> list[GridLine]:
    """Tile-boundary lines every TILE_SIZE pixels, vertical first."""
    lines: list[GridLine] = []
    x = 0
    while x <= width:
        lines.append(GridLine(PixelCoordinate(x, 0), PixelCoordinate(x, height)))
        x += TILE_SIZE
    y = 0
    while y <= height:
        lines.append(GridLine(PixelCoordinate(0, y), PixelCoordinate(width, y)))
        y += TILE_SIZE
    return lines


def scale_label(meters: float) -> str:
    if meters >= 1000:
        return f"{meters / 1000:.1f} km"
    return f"{round(meters)} m"


def scale_bar(center: GeoLocation, zoom: float, height: float) -> ScaleBar:
    """A fixed-length bar in the lower-left corner labelled with its ground length."""
    meters = SCALE_BAR_PIXELS * meters_per_pixel(center.latitude, zoom)
    return ScaleBar(
        origin=PixelCoordinate(20, height - 20),
        length=SCALE_BAR_PIXELS,
        text=scale_label(meters),
        meters=meters,
    )


def place_marker(
    marker: MapMarker, center: GeoLocation, zoom: float, width: float, height: float
) -> PlacedMarker:
    position = geo_to_viewport_pixel(marker.location, center, zoom, width, height)
    size = marker.style.size or MarkerStyle().size
    shape = marker.style.shape
    return PlacedMarker(
        position=position,
        color=sanitize_color(marker.style.color, DEFAULT_MARKER_COLOR),
        size=size,
        shape=shape,
        label=marker.label,
        label_offset_y=-size - 5 if shape is MarkerShape.PIN else 0,
    )


def markers_from_links(resolved: Sequence[ResolvedLink]) -> list[MapMarker]:
    """Default red pin for every resolved link, carrying the link's final label."""
    return [MapMarker(location=r.link.location, label=r.label) for r in resolved]


def plan_map(
    style: MapStyle,
    width: float,
    height: float,
    markers: Sequence[MapMarker] = (),
) -> MapPlan:
    """Lay out the placeholder map surface for a viewport.

    Raises:
        ValueError: When the style has no center or zoom yet.
    """
    if style.center is None or style.zoom is None:
        raise ValueError("map style needs a center and zoom to plan a map")

    return MapPlan(
        width=width,
        height=height,
        bounds=calculate_bounds(style.center, style.zoom, width, height),
        grid_lines=tuple(grid_lines(width, height)),
        markers=tuple(
            place_marker(m, style.center, style.zoom, width, height) for m in markers
        ),
        scale_bar=scale_bar(style.center, style.zoom, height) if style.show_scale else None,
        attribution=_ATTRIBUTION[style.provider] if style.show_attribution else None,
    )
