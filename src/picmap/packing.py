"""Border packing: spread N pictures across the four page-border edges.

Two strategies share one contract (`pack_border` -> `BorderLayout`):

EXACT
    Every edge takes its evenly distributed share of the pictures and the slots
    stretch to fill the edge. Cross-axis extent is always the border thickness.

ADAPTIVE
    Square pictures sized from the thinnest border, filled clockwise up to
    each edge's capacity. When the border is too small for every picture, the
    size shrinks by sqrt(capacity / demand): shrinking the side of a square
    frees room along the edge and across it, so a linear factor would shrink
    too far.

The two can produce different geometry for the same input; which one a page
uses is a configuration decision.
"""

import logging
import math
from typing import assert_never

from picmap.models import (
    BorderEdge,
    BorderLayout,
    LayoutOptions,
    PackingStrategy,
    PictureSlot,
    Rectangle,
)
from picmap.page import DEFAULT_DPI, LayoutAreas, calculate_layout_areas

logger = logging.getLogger(__name__)

_MAX_SHRINK_PASSES = 32


def distribute_pictures_across_edges(picture_count: int) -> dict[BorderEdge, int]:
    """Split a picture count as evenly as possible over the four edges.

    The remainder goes one each to top, right, bottom, left in that order, so
    the counts sum to `picture_count` and never differ by more than one.
    """
    base, remainder = divmod(max(0, picture_count), 4)
    counts = {edge: base for edge in BorderEdge.clockwise()}
    for edge in BorderEdge.clockwise()[:remainder]:
        counts[edge] += 1
    return counts


def _edge_length(area: Rectangle, edge: BorderEdge) -> float:
    return area.width if edge.is_horizontal else area.height


def _edge_thickness(area: Rectangle, edge: BorderEdge) -> float:
    return area.height if edge.is_horizontal else area.width


def _slot_rect(
    edge: BorderEdge,
    area: Rectangle,
    offset: float,
    along: float,
    across: float,
    inset: float = 0,
) -> Rectangle:
    if edge.is_horizontal:
        return Rectangle(area.x + offset, area.y + inset, along, across)
    return Rectangle(area.x + inset, area.y + offset, across, along)


def _make_slot(index: int, edge: BorderEdge, edge_index: int, rect: Rectangle) -> PictureSlot:
    return PictureSlot(
        id=f"slot-{index}",
        edge=edge,
        x=rect.x,
        y=rect.y,
        width=rect.width,
        height=rect.height,
        edge_index=edge_index,
    )


# --- EXACT ---


def exact_slot_size(edge_length: float, count: int, spacing: float) -> int:
    """Slot length when `count` slots share an edge with spacing on both ends."""
    if count <= 0:
        return 0
    total_gaps = (count + 1) * spacing
    return max(0, math.floor((edge_length - total_gaps) / count))


def pack_exact(areas: LayoutAreas, picture_count: int) -> list[PictureSlot]:
    counts = distribute_pictures_across_edges(picture_count)
    spacing = areas.spacing
    slots: list[PictureSlot] = []

    for edge in BorderEdge.clockwise():
        count = counts[edge]
        if count == 0:
            continue
        area = areas.border_areas[edge]
        slot_size = exact_slot_size(_edge_length(area, edge), count, spacing)
        thickness = _edge_thickness(area, edge)
        for i in range(count):
            offset = spacing + i * (slot_size + spacing)
            rect = _slot_rect(edge, area, offset, slot_size, thickness)
            slots.append(_make_slot(len(slots), edge, i, rect))

    logger.debug(
        "exact packing: %s", {edge.value: n for edge, n in counts.items()}
    )
    return slots


# --- ADAPTIVE ---


def edge_capacity(edge_length: float, spacing: float, picture_size: float) -> int:
    """How many pictures of `picture_size` fit along an edge."""
    if picture_size <= 0:
        return 0
    return max(0, math.floor((edge_length - spacing) / (picture_size + spacing)))


def optimal_picture_size(edge_length: float, spacing: float, count: int) -> float:
    """Picture length that fills an edge exactly with `count` pictures."""
    if count <= 0:
        return 0.0
    return max(0.0, (edge_length - (count + 1) * spacing) / count)


def adaptive_edge_counts(
    areas: LayoutAreas, picture_count: int
) -> dict[BorderEdge, int]:
    """Pictures per edge for the adaptive strategy.

    Every picture gets a place: if shrinking cannot make room, the leftover
    pictures are added one per edge clockwise and the edges squeeze to fit.
    """
    edges = BorderEdge.clockwise()
    spacing = areas.spacing
    lengths = {e: _edge_length(areas.border_areas[e], e) for e in edges}
    thinnest = min(_edge_thickness(areas.border_areas[e], e) for e in edges)

    size = max(thinnest - 2 * spacing, spacing)
    capacities = {e: edge_capacity(lengths[e], spacing, size) for e in edges}

    passes = 0
    while sum(capacities.values()) < picture_count and passes < _MAX_SHRINK_PASSES:
        total = sum(capacities.values())
        factor = math.sqrt(total / picture_count) if total > 0 else 0.5
        size *= factor
        if size < 1:
            break
        capacities = {e: edge_capacity(lengths[e], spacing, size) for e in edges}
        passes += 1
        logger.debug(
            "adaptive packing: shrink pass %d, size %.1f px, capacity %d for %d",
            passes,
            size,
            sum(capacities.values()),
            picture_count,
        )

    counts: dict[BorderEdge, int] = {}
    remaining = picture_count
    for edge in edges:
        counts[edge] = min(capacities[edge], remaining)
        remaining -= counts[edge]

    if remaining > 0:
        logger.debug("adaptive packing: %d pictures over capacity", remaining)
        for i in range(remaining):
            counts[edges[i % 4]] += 1

    return counts


def pack_adaptive(areas: LayoutAreas, picture_count: int) -> list[PictureSlot]:
    if picture_count <= 0:
        return []

    spacing = areas.spacing
    counts = adaptive_edge_counts(areas, picture_count)
    slots: list[PictureSlot] = []

    for edge in BorderEdge.clockwise():
        count = counts[edge]
        if count == 0:
            continue
        area = areas.border_areas[edge]
        size = optimal_picture_size(_edge_length(area, edge), spacing, count)
        across = max(0.0, min(size, _edge_thickness(area, edge) - 2 * spacing))
        for i in range(count):
            offset = spacing + i * (size + spacing)
            rect = _slot_rect(edge, area, offset, size, across, inset=spacing)
            slots.append(_make_slot(len(slots), edge, i, rect))

    return slots


def pack_border(
    options: LayoutOptions,
    picture_count: int,
    dpi: float = DEFAULT_DPI,
    strategy: PackingStrategy = PackingStrategy.EXACT,
) -> BorderLayout:
    """Compute the full border layout for `picture_count` pictures.

    Args:
        options: Page layout in millimetres.
        picture_count: Number of pictures to place. Zero gives no slots.
        dpi: Pixels per inch for the mm -> px conversion.
        strategy: Which packing algorithm to run.

    Returns:
        BorderLayout with slots ordered clockwise from the top edge.
    """
    areas = calculate_layout_areas(options, dpi)

    if strategy is PackingStrategy.EXACT:
        slots = pack_exact(areas, picture_count)
    elif strategy is PackingStrategy.ADAPTIVE:
        slots = pack_adaptive(areas, picture_count)
    else:
        assert_never(strategy)

    return BorderLayout(
        page_width=areas.page_width,
        page_height=areas.page_height,
        border_width=areas.border_width,
        inner_area=areas.map_area,
        slots=tuple(slots),
        margin=areas.margin,
        picture_spacing=areas.spacing,
        strategy=strategy,
    )
