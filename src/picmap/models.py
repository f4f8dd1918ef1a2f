"""Data model definitions: explicit boundaries between config, layout, and link layers."""

from dataclasses import dataclass, field
from enum import Enum


class BorderEdge(Enum):
    """One of the four page-border segments that hold picture slots."""

    TOP = "top"
    RIGHT = "right"
    BOTTOM = "bottom"
    LEFT = "left"

    @classmethod
    def clockwise(cls) -> tuple["BorderEdge", ...]:
        """Edges in clockwise order starting at the top."""
        return (cls.TOP, cls.RIGHT, cls.BOTTOM, cls.LEFT)

    @property
    def is_horizontal(self) -> bool:
        return self in (BorderEdge.TOP, BorderEdge.BOTTOM)


class PageSize(Enum):
    A4 = "A4"
    A3 = "A3"
    LETTER = "Letter"
    CUSTOM = "custom"


class Orientation(Enum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class MapProvider(Enum):
    OPENSTREETMAP = "openstreetmap"
    CUSTOM = "custom"


class MarkerShape(Enum):
    CIRCLE = "circle"
    PIN = "pin"
    SQUARE = "square"


class LinkStyleType(Enum):
    """Which link indicators get drawn."""

    LINE = "line"
    LABEL = "label"
    BOTH = "both"
    NONE = "none"

    @property
    def draws_lines(self) -> bool:
        return self in (LinkStyleType.LINE, LinkStyleType.BOTH)

    @property
    def draws_labels(self) -> bool:
        return self in (LinkStyleType.LABEL, LinkStyleType.BOTH)


class LineStyle(Enum):
    SOLID = "solid"
    DASHED = "dashed"
    DOTTED = "dotted"


class LabelKind(Enum):
    """Where a link label sits: next to the picture or next to the marker."""

    PICTURE = "picture"
    MARKER = "marker"


class PackingStrategy(Enum):
    """Border packing algorithm.

    EXACT gives every edge its evenly distributed share and sizes slots to fill
    the edge. ADAPTIVE packs square pictures up to each edge's capacity and
    shrinks them when the border cannot hold every picture.
    """

    EXACT = "exact"
    ADAPTIVE = "adaptive"


# --- Geometry values ---


@dataclass(frozen=True)
class GeoLocation:
    """A point on the globe. Assumed already range-checked upstream."""

    latitude: float  # Decimal degrees, [-90, 90]
    longitude: float  # Decimal degrees, [-180, 180]
    name: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class PixelCoordinate:
    """A device-pixel position. Absolute vs viewport-relative is up to the producer."""

    x: float
    y: float


@dataclass(frozen=True)
class BoundingBox:
    north: float
    south: float
    east: float
    west: float


@dataclass(frozen=True)
class Rectangle:
    x: float
    y: float
    width: float
    height: float

    @property
    def center(self) -> PixelCoordinate:
        return PixelCoordinate(self.x + self.width / 2, self.y + self.height / 2)


@dataclass(frozen=True)
class Margin:
    top: float = 0
    right: float = 0
    bottom: float = 0
    left: float = 0


@dataclass(frozen=True)
class ImageDimensions:
    width: float
    height: float


# --- Input data ---


@dataclass(frozen=True)
class ImageMetadata:
    """A picture to place in the border. Only `dimensions` affects geometry."""

    file_path: str  # Opaque identifier, never opened by the core
    dimensions: ImageDimensions | None = None
    caption: str | None = None
    alt_text: str | None = None
    credit: str | None = None
    image_id: str | None = None  # Falls back to the list index when None


@dataclass(frozen=True)
class ImageLocationLink:
    """A declared association between one picture and one geographic point."""

    image_id: str
    location: GeoLocation
    label: str | None = None


# --- Configuration (already validated by the caller) ---


@dataclass(frozen=True)
class LayoutOptions:
    """Page layout in millimetres."""

    page_size: PageSize = PageSize.A4
    orientation: Orientation = Orientation.PORTRAIT
    border_width: float = 40  # mm
    picture_spacing: float = 5  # mm
    margin: Margin = field(default_factory=lambda: Margin(10, 10, 10, 10))
    custom_dimensions: ImageDimensions | None = None  # mm, only for PageSize.CUSTOM


@dataclass(frozen=True)
class MapStyle:
    """Map viewport settings. None zoom/center means fit to the linked locations."""

    provider: MapProvider = MapProvider.OPENSTREETMAP
    zoom: float | None = None
    center: GeoLocation | None = None
    show_scale: bool = False
    show_attribution: bool = False


@dataclass(frozen=True)
class PictureBorderStyle:
    background_color: str = "#ffffff"
    border_color: str = "#333333"
    border_thickness: float = 2
    corner_radius: float = 0


@dataclass(frozen=True)
class LabelStyle:
    font_family: str = "Arial"
    font_size: float = 12
    color: str = "#000000"


@dataclass(frozen=True)
class LinkStyle:
    type: LinkStyleType = LinkStyleType.LABEL
    line_color: str = "#000000"
    line_width: float = 1
    line_style: LineStyle = LineStyle.SOLID
    label_style: LabelStyle = field(default_factory=LabelStyle)


@dataclass(frozen=True)
class MarkerStyle:
    color: str = "#e74c3c"
    size: float = 20
    shape: MarkerShape = MarkerShape.PIN


@dataclass(frozen=True)
class MapMarker:
    location: GeoLocation
    label: str | None = None
    style: MarkerStyle = field(default_factory=MarkerStyle)


@dataclass(frozen=True)
class PicMapConfig:
    """Complete project configuration."""

    title: str
    layout: LayoutOptions
    map: MapStyle
    images: tuple[ImageMetadata, ...]
    links: tuple[ImageLocationLink, ...]
    description: str | None = None
    picture_border: PictureBorderStyle = field(default_factory=PictureBorderStyle)
    link_style: LinkStyle = field(default_factory=LinkStyle)


# --- Layout output ---


@dataclass(frozen=True)
class PictureSlot:
    """A reserved rectangle on a border edge. Coordinates are absolute page pixels."""

    id: str  # "slot-<n>", numbered clockwise across the page
    edge: BorderEdge
    x: float
    y: float
    width: float
    height: float
    edge_index: int  # 0-based position along its edge

    @property
    def rect(self) -> Rectangle:
        return Rectangle(self.x, self.y, self.width, self.height)


@dataclass(frozen=True)
class BorderLayout:
    """Packed border. All values in pixels."""

    page_width: int
    page_height: int
    border_width: int
    inner_area: Rectangle  # Where the map goes
    slots: tuple[PictureSlot, ...]
    margin: Margin
    picture_spacing: int
    strategy: PackingStrategy


@dataclass(frozen=True)
class PositionedPicture:
    """A picture fitted into its slot, aspect ratio preserved."""

    image: ImageMetadata
    slot: PictureSlot
    render_width: float
    render_height: float
    offset_x: float  # Centering offset within the slot
    offset_y: float
    center_x: float  # Absolute centre of the rendered picture
    center_y: float
    image_id: str
    label: str | None = None


# --- Link output ---


@dataclass(frozen=True)
class PicturePosition:
    """Where a picture sits, as seen by the link router. Absolute page pixels."""

    image_id: str
    center: PixelCoordinate
    connection_point: PixelCoordinate  # Picture-side connector endpoint
    label: str | None = None


@dataclass(frozen=True)
class MapViewport:
    """Map rectangle size and its offset within the page composition."""

    width: float
    height: float
    offset_x: float = 0
    offset_y: float = 0


@dataclass(frozen=True)
class ResolvedLink:
    link: ImageLocationLink
    picture_position: PicturePosition
    marker_position: PixelCoordinate  # Absolute page pixels
    label: str


@dataclass(frozen=True)
class LocationGroup:
    """Resolved links whose coordinates are exactly identical."""

    location: GeoLocation
    links: tuple[ResolvedLink, ...]


@dataclass(frozen=True)
class Connector:
    """One routed line from a picture's anchor to (near) its marker."""

    start: PixelCoordinate
    end: PixelCoordinate
    label: str
    image_id: str


@dataclass(frozen=True)
class LabelPlacement:
    position: PixelCoordinate
    label: str
    kind: LabelKind


@dataclass(frozen=True)
class RenderedLinks:
    """Routing result. The sole link input to renderers."""

    resolved: tuple[ResolvedLink, ...]
    connectors: tuple[Connector, ...]
    labels: tuple[LabelPlacement, ...]
    warnings: tuple[str, ...]
    link_count: int  # 0 when the style draws nothing
