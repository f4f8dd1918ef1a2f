"""Link resolution and routing between border pictures and map markers.

Coordinates produced here are absolute page pixels: marker positions are the
viewport-relative projection plus the map viewport's offset on the page.
"""

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import assert_never

from picmap.colors import sanitize_color
from picmap.models import (
    BorderEdge,
    Connector,
    GeoLocation,
    ImageLocationLink,
    LabelKind,
    LabelPlacement,
    LabelStyle,
    LinkStyle,
    LinkStyleType,
    LocationGroup,
    MapStyle,
    MapViewport,
    PicturePosition,
    PictureSlot,
    PixelCoordinate,
    PositionedPicture,
    RenderedLinks,
    ResolvedLink,
)
from picmap.projection import geo_to_viewport_pixel

logger = logging.getLogger(__name__)

DEFAULT_OFFSET_RADIUS = 5.0  # px between coincident connector endpoints
MARKER_LABEL_GAP = 10  # px between a marker and the label above it
DEFAULT_LINE_COLOR = "#000000"
DEFAULT_LABEL_COLOR = "#000000"


def generate_label(index: int) -> str:
    """Auto-label for the index-th resolved link: A..Z, then AA, AB, ..., AZ, BA, ..."""
    if index < 26:
        return chr(ord("A") + index)
    first = chr(ord("A") + index // 26 - 1)
    second = chr(ord("A") + index % 26)
    return first + second


def anchor_point(slot: PictureSlot) -> PixelCoordinate:
    """Midpoint of the slot side that faces the map."""
    center_x = slot.x + slot.width / 2
    center_y = slot.y + slot.height / 2
    if slot.edge is BorderEdge.TOP:
        return PixelCoordinate(center_x, slot.y + slot.height)
    if slot.edge is BorderEdge.BOTTOM:
        return PixelCoordinate(center_x, slot.y)
    if slot.edge is BorderEdge.LEFT:
        return PixelCoordinate(slot.x + slot.width, center_y)
    if slot.edge is BorderEdge.RIGHT:
        return PixelCoordinate(slot.x, center_y)
    assert_never(slot.edge)


def picture_positions(pictures: Sequence[PositionedPicture]) -> list[PicturePosition]:
    """Link-side view of positioned pictures."""
    return [
        PicturePosition(
            image_id=p.image_id,
            center=PixelCoordinate(p.center_x, p.center_y),
            connection_point=anchor_point(p.slot),
            label=p.label,
        )
        for p in pictures
    ]


@dataclass(frozen=True)
class PerimeterConfig:
    """A plain rectangular border ring with the map inside it."""

    total_width: float
    total_height: float
    border_width: float
    map_offset_x: float
    map_offset_y: float
    map_width: float
    map_height: float


def create_picture_positions(
    picture_count: int, perimeter: PerimeterConfig
) -> list[PicturePosition]:
    """Spread `picture_count` positions evenly around a border ring.

    Walks the inner perimeter clockwise from the top-left corner, one position
    at the middle of each equal share. Ids are "0", "1", ... and every
    position gets an auto-label. Connection points sit 0.4 border widths from
    each centre, towards the centre of the map.
    """
    if picture_count <= 0:
        return []

    bw = perimeter.border_width
    inner_width = perimeter.total_width - 2 * bw
    inner_height = perimeter.total_height - 2 * bw
    step = (2 * inner_width + 2 * inner_height) / picture_count

    map_cx = perimeter.map_offset_x + perimeter.map_width / 2
    map_cy = perimeter.map_offset_y + perimeter.map_height / 2

    positions: list[PicturePosition] = []
    for index in range(picture_count):
        distance = index * step + step / 2
        if distance < inner_width:
            x, y = bw + distance, bw / 2
            connection = PixelCoordinate(x, bw)
        elif distance < inner_width + inner_height:
            x = perimeter.total_width - bw / 2
            y = bw + (distance - inner_width)
            connection = PixelCoordinate(perimeter.total_width - bw, y)
        elif distance < 2 * inner_width + inner_height:
            x = perimeter.total_width - bw - (distance - inner_width - inner_height)
            y = perimeter.total_height - bw / 2
            connection = PixelCoordinate(x, perimeter.total_height - bw)
        else:
            x = bw / 2
            y = perimeter.total_height - bw - (distance - 2 * inner_width - inner_height)
            connection = PixelCoordinate(bw, y)

        dx, dy = map_cx - x, map_cy - y
        magnitude = math.hypot(dx, dy)
        if magnitude > 0:
            scale = bw * 0.4 / magnitude
            connection = PixelCoordinate(x + dx * scale, y + dy * scale)

        positions.append(
            PicturePosition(
                image_id=str(index),
                center=PixelCoordinate(x, y),
                connection_point=connection,
                label=generate_label(index),
            )
        )
    return positions


def resolve_links(
    links: Sequence[ImageLocationLink],
    positions: Sequence[PicturePosition],
    map_style: MapStyle,
    viewport: MapViewport,
) -> list[ResolvedLink]:
    """Match links to picture positions and place their markers on the page.

    Links whose image has no position are skipped without error; use
    validate_links beforehand for a diagnostic. The auto-label counter only
    advances on links that resolve, so auto-labels stay dense.

    Label precedence: link.label, then the picture's label, then auto-label.

    Args:
        links: Declared picture -> location links.
        positions: Picture positions keyed by image_id.
        map_style: Must carry a concrete zoom and center.
        viewport: Map size and its offset on the page.

    Returns:
        Resolved links in input order.
    """
    if map_style.center is None or map_style.zoom is None:
        raise ValueError("map_style needs a center and zoom to resolve links")

    by_id = {p.image_id: p for p in positions}
    resolved: list[ResolvedLink] = []

    for link in links:
        position = by_id.get(link.image_id)
        if position is None:
            logger.debug("dropping link to unknown image %r", link.image_id)
            continue

        local = geo_to_viewport_pixel(
            link.location,
            map_style.center,
            map_style.zoom,
            viewport.width,
            viewport.height,
        )
        marker = PixelCoordinate(
            x=local.x + viewport.offset_x, y=local.y + viewport.offset_y
        )

        if link.label is not None:
            label = link.label
        elif position.label is not None:
            label = position.label
        else:
            label = generate_label(len(resolved))

        resolved.append(
            ResolvedLink(
                link=link, picture_position=position, marker_position=marker, label=label
            )
        )

    return resolved


def group_links_by_location(resolved: Sequence[ResolvedLink]) -> list[LocationGroup]:
    """Group by exact (latitude, longitude) equality, in first-seen order."""
    groups: dict[tuple[float, float], tuple[GeoLocation, list[ResolvedLink]]] = {}
    for r in resolved:
        loc = r.link.location
        key = (float(loc.latitude), float(loc.longitude))
        if key not in groups:
            groups[key] = (loc, [])
        groups[key][1].append(r)
    return [
        LocationGroup(location=loc, links=tuple(members))
        for loc, members in groups.values()
    ]


def multi_link_offset(
    index: int, total: int, radius: float = DEFAULT_OFFSET_RADIUS
) -> PixelCoordinate:
    """Endpoint nudge for the index-th of `total` connectors sharing one marker."""
    if total <= 1:
        return PixelCoordinate(0.0, 0.0)
    angle = 2 * math.pi / total * index
    return PixelCoordinate(math.cos(angle) * radius, math.sin(angle) * radius)


def _connector(resolved: ResolvedLink, offset: PixelCoordinate) -> Connector:
    return Connector(
        start=resolved.picture_position.connection_point,
        end=PixelCoordinate(
            resolved.marker_position.x + offset.x,
            resolved.marker_position.y + offset.y,
        ),
        label=resolved.label,
        image_id=resolved.link.image_id,
    )


def route_connectors(
    resolved: Sequence[ResolvedLink], radius: float = DEFAULT_OFFSET_RADIUS
) -> tuple[list[Connector], list[str]]:
    """One connector per resolved link, spread apart where markers coincide.

    Returns:
        (connectors grouped by location, one warning per shared location)
    """
    connectors: list[Connector] = []
    warnings: list[str] = []
    for group in group_links_by_location(resolved):
        total = len(group.links)
        for i, r in enumerate(group.links):
            connectors.append(_connector(r, multi_link_offset(i, total, radius)))
        if total > 1:
            name = group.location.name if group.location.name is not None else "unnamed"
            warnings.append(f'Location "{name}" has {total} pictures linked to it')
    return connectors, warnings


def place_labels(
    resolved: Sequence[ResolvedLink], label_style: LabelStyle
) -> list[LabelPlacement]:
    """A label next to each picture and one raised above each marker."""
    raise_by = label_style.font_size * 0.7 + MARKER_LABEL_GAP
    placements: list[LabelPlacement] = []
    for r in resolved:
        placements.append(
            LabelPlacement(r.picture_position.connection_point, r.label, LabelKind.PICTURE)
        )
        marker = PixelCoordinate(r.marker_position.x, r.marker_position.y - raise_by)
        placements.append(LabelPlacement(marker, r.label, LabelKind.MARKER))
    return placements


def normalize_link_style(style: LinkStyle) -> LinkStyle:
    """Replace invalid colors with the defaults."""
    return LinkStyle(
        type=style.type,
        line_color=sanitize_color(style.line_color, DEFAULT_LINE_COLOR),
        line_width=style.line_width,
        line_style=style.line_style,
        label_style=LabelStyle(
            font_family=style.label_style.font_family,
            font_size=style.label_style.font_size,
            color=sanitize_color(style.label_style.color, DEFAULT_LABEL_COLOR),
        ),
    )


def route_links(
    resolved: Sequence[ResolvedLink],
    style: LinkStyle | None = None,
    radius: float = DEFAULT_OFFSET_RADIUS,
) -> RenderedLinks:
    """Turn resolved links into the geometry a renderer draws.

    The style type decides what is produced: LINE gives connectors, LABEL
    gives label placements, BOTH gives both, NONE gives nothing. Shared-location
    warnings come from connector routing and so only appear when lines are drawn.
    """
    style = normalize_link_style(style or LinkStyle())
    if style.type is LinkStyleType.NONE or not resolved:
        return RenderedLinks(
            resolved=tuple(resolved), connectors=(), labels=(), warnings=(), link_count=0
        )

    connectors: list[Connector] = []
    warnings: list[str] = []
    labels: list[LabelPlacement] = []
    if style.type.draws_lines:
        connectors, warnings = route_connectors(resolved, radius)
    if style.type.draws_labels:
        labels = place_labels(resolved, style.label_style)

    return RenderedLinks(
        resolved=tuple(resolved),
        connectors=tuple(connectors),
        labels=tuple(labels),
        warnings=tuple(warnings),
        link_count=len(resolved),
    )


def validate_links(
    links: Sequence[ImageLocationLink], positions: Sequence[PicturePosition]
) -> list[str]:
    """One message per link whose image has no position."""
    known = {p.image_id for p in positions}
    return [
        f'Link references image ID "{link.image_id}" which has no position'
        for link in links
        if link.image_id not in known
    ]
