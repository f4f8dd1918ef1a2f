"""Page geometry: size presets, mm <-> pixel conversion, and the border/map areas."""

import math
from dataclasses import dataclass

from picmap.models import (
    BorderEdge,
    ImageDimensions,
    LayoutOptions,
    Margin,
    Orientation,
    PageSize,
    Rectangle,
)

DEFAULT_DPI = 300  # Print quality
MIN_DPI = 72
MAX_DPI = 600
MM_PER_INCH = 25.4

# Portrait dimensions in millimetres
PAGE_SIZES: dict[PageSize, ImageDimensions] = {
    PageSize.A4: ImageDimensions(width=210, height=297),
    PageSize.A3: ImageDimensions(width=297, height=420),
    PageSize.LETTER: ImageDimensions(width=215.9, height=279.4),
}


class LayoutError(ValueError):
    """Layout options that cannot describe a page."""


@dataclass(frozen=True)
class LayoutAreas:
    """Pixel geometry of a page before any picture is placed."""

    page_width: int
    page_height: int
    margin: Margin
    border_width: int
    spacing: int
    content_area: Rectangle  # Page minus margins
    map_area: Rectangle  # Content minus the border ring
    border_areas: dict[BorderEdge, Rectangle]  # Left/right exclude the corners


def round_half_up(value: float) -> int:
    """Round .5 away from zero on the positive side, like print layout tools do."""
    return math.floor(value + 0.5)


def mm_to_pixels(mm: float, dpi: float = DEFAULT_DPI) -> int:
    return round_half_up(mm / MM_PER_INCH * dpi)


def pixels_to_mm(pixels: float, dpi: float = DEFAULT_DPI) -> float:
    """Inverse of mm_to_pixels, exact up to the ±1 px lost to rounding."""
    return pixels * MM_PER_INCH / dpi


def validate_dpi(dpi: float) -> int:
    """Clamp a DPI into [72, 600]; non-finite or non-positive values give 300."""
    if not math.isfinite(dpi) or dpi <= 0:
        return DEFAULT_DPI
    return max(MIN_DPI, min(MAX_DPI, round_half_up(dpi)))


def page_dimensions_mm(
    page_size: PageSize,
    orientation: Orientation,
    custom: ImageDimensions | None = None,
) -> ImageDimensions:
    """Page size in millimetres with orientation applied.

    Raises:
        LayoutError: When page_size is CUSTOM and no custom dimensions are given.
    """
    if page_size is PageSize.CUSTOM:
        if custom is None:
            raise LayoutError('Custom dimensions required when page size is "custom"')
        base = custom
    else:
        base = PAGE_SIZES[page_size]

    long_side = max(base.width, base.height)
    short_side = min(base.width, base.height)
    if orientation is Orientation.LANDSCAPE:
        return ImageDimensions(width=long_side, height=short_side)
    return ImageDimensions(width=short_side, height=long_side)


def page_dimensions_pixels(
    options: LayoutOptions, dpi: float = DEFAULT_DPI
) -> tuple[int, int]:
    mm = page_dimensions_mm(
        options.page_size, options.orientation, options.custom_dimensions
    )
    return mm_to_pixels(mm.width, dpi), mm_to_pixels(mm.height, dpi)


def margin_to_pixels(margin: Margin, dpi: float = DEFAULT_DPI) -> Margin:
    return Margin(
        top=mm_to_pixels(margin.top, dpi),
        right=mm_to_pixels(margin.right, dpi),
        bottom=mm_to_pixels(margin.bottom, dpi),
        left=mm_to_pixels(margin.left, dpi),
    )


def calculate_layout_areas(
    options: LayoutOptions, dpi: float = DEFAULT_DPI
) -> LayoutAreas:
    """Convert layout options to pixel rectangles for the border ring and the map.

    The top and bottom border areas own the corners; the left and right areas
    run between them.
    """
    page_width, page_height = page_dimensions_pixels(options, dpi)
    margin = margin_to_pixels(options.margin, dpi)
    border = mm_to_pixels(options.border_width, dpi)
    spacing = mm_to_pixels(options.picture_spacing, dpi)

    content = Rectangle(
        x=margin.left,
        y=margin.top,
        width=page_width - margin.left - margin.right,
        height=page_height - margin.top - margin.bottom,
    )
    side_height = content.height - 2 * border
    border_areas = {
        BorderEdge.TOP: Rectangle(content.x, content.y, content.width, border),
        BorderEdge.RIGHT: Rectangle(
            content.x + content.width - border, content.y + border, border, side_height
        ),
        BorderEdge.BOTTOM: Rectangle(
            content.x, content.y + content.height - border, content.width, border
        ),
        BorderEdge.LEFT: Rectangle(content.x, content.y + border, border, side_height),
    }
    map_area = Rectangle(
        x=content.x + border,
        y=content.y + border,
        width=content.width - 2 * border,
        height=side_height,
    )
    return LayoutAreas(
        page_width=page_width,
        page_height=page_height,
        margin=margin,
        border_width=border,
        spacing=spacing,
        content_area=content,
        map_area=map_area,
        border_areas=border_areas,
    )
