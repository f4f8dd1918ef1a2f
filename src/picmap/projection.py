"""Web Mercator projection: geographic <-> pixel conversion and auto-fit heuristics.

Pixel coordinates live in a square world of ``2**zoom * TILE_SIZE`` pixels with
(0, 0) at the north-west corner. Latitudes near ±90° diverge; callers are
expected to stay inside the usual web-map range.
"""

import math

import numpy as np

from picmap.models import BoundingBox, GeoLocation, PixelCoordinate

TILE_SIZE = 256
DEFAULT_ZOOM = 10  # No locations to fit
SINGLE_LOCATION_ZOOM = 15  # Close-up on a single location
MIN_ZOOM = 0
MAX_ZOOM = 20

_EQUATOR_METERS_PER_PIXEL = 156543.03392


def _latitude_to_y(lat: float) -> float:
    lat_rad = math.radians(lat)
    return math.log(math.tan(math.pi / 4 + lat_rad / 2))


def _y_to_latitude(y: float) -> float:
    return math.degrees(2 * math.atan(math.exp(y)) - math.pi / 2)


def geo_to_pixel(location: GeoLocation, zoom: float) -> PixelCoordinate:
    """Project a location to world pixels at `zoom`."""
    scale = 2**zoom * TILE_SIZE
    world_x = (location.longitude + 180) / 360
    world_y = (1 - _latitude_to_y(location.latitude) / math.pi) / 2
    return PixelCoordinate(x=world_x * scale, y=world_y * scale)


def pixel_to_geo(pixel: PixelCoordinate, zoom: float) -> GeoLocation:
    """Inverse of geo_to_pixel."""
    scale = 2**zoom * TILE_SIZE
    world_x = pixel.x / scale
    world_y = pixel.y / scale
    return GeoLocation(
        latitude=_y_to_latitude((1 - 2 * world_y) * math.pi),
        longitude=world_x * 360 - 180,
    )


def calculate_bounds(
    center: GeoLocation, zoom: float, width: float, height: float
) -> BoundingBox:
    """Geographic bounds of a width x height viewport centred on `center`."""
    c = geo_to_pixel(center, zoom)
    north_west = pixel_to_geo(PixelCoordinate(c.x - width / 2, c.y - height / 2), zoom)
    south_east = pixel_to_geo(PixelCoordinate(c.x + width / 2, c.y + height / 2), zoom)
    return BoundingBox(
        north=north_west.latitude,
        south=south_east.latitude,
        east=south_east.longitude,
        west=north_west.longitude,
    )


def geo_to_viewport_pixel(
    location: GeoLocation,
    center: GeoLocation,
    zoom: float,
    width: float,
    height: float,
) -> PixelCoordinate:
    """Position of `location` relative to the viewport's top-left corner."""
    p = geo_to_pixel(location, zoom)
    c = geo_to_pixel(center, zoom)
    return PixelCoordinate(x=p.x - c.x + width / 2, y=p.y - c.y + height / 2)


def calculate_zoom_to_fit(
    locations: list[GeoLocation] | tuple[GeoLocation, ...],
    width: float,
    height: float,
    padding: float = 0.1,
) -> int:
    """Largest integer zoom at which every location fits in the viewport.

    Args:
        locations: Points that must be visible.
        width: Viewport width in pixels.
        height: Viewport height in pixels.
        padding: Fraction added to the lat/lng span before fitting.

    Returns:
        10 for no locations, 15 for one, otherwise the floor of the smaller
        per-axis zoom, clamped to [0, 20]. Coincident locations have zero span
        and clamp to 20.
    """
    if len(locations) == 0:
        return DEFAULT_ZOOM
    if len(locations) == 1:
        return SINGLE_LOCATION_ZOOM

    lats = np.array([loc.latitude for loc in locations], dtype=float)
    lngs = np.array([loc.longitude for loc in locations], dtype=float)

    lat_range = (lats.max() - lats.min()) * (1 + padding)
    lng_range = (lngs.max() - lngs.min()) * (1 + padding)

    # Zero span divides to +inf; the clamp below handles it
    with np.errstate(divide="ignore", invalid="ignore"):
        lat_zoom = np.log2(np.float64(height * 180) / (lat_range * TILE_SIZE))
        lng_zoom = np.log2(np.float64(width * 360) / (lng_range * TILE_SIZE))

    zoom = np.floor(np.fmin(lat_zoom, lng_zoom))
    if np.isnan(zoom):
        return MIN_ZOOM
    return int(np.clip(zoom, MIN_ZOOM, MAX_ZOOM))


def calculate_center(
    locations: list[GeoLocation] | tuple[GeoLocation, ...],
) -> GeoLocation:
    """Arithmetic mean of latitudes and longitudes.

    Plain averaging is wrong for sets straddling the antimeridian (170° and
    -170° average to 0°, not 180°). Acceptable for continental extents.
    """
    if len(locations) == 0:
        return GeoLocation(latitude=0.0, longitude=0.0)
    n = len(locations)
    return GeoLocation(
        latitude=sum(loc.latitude for loc in locations) / n,
        longitude=sum(loc.longitude for loc in locations) / n,
    )


def meters_per_pixel(latitude: float, zoom: float) -> float:
    """Ground resolution at `latitude` for the given zoom."""
    return _EQUATOR_METERS_PER_PIXEL * math.cos(math.radians(latitude)) / 2**zoom
