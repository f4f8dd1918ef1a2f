"""Matplotlib static PNG preview of a composition."""

from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure
from matplotlib.patches import Circle, Rectangle as RectPatch

from picmap.colors import Color
from picmap.compose import Composition
from picmap.models import LabelKind, LineStyle

_ROOT = Path(__file__).parent.parent.parent.parent

_PAGE_COLOR = "#ffffff"
_BORDER_COLOR = "#f5f5f5"
_MAP_COLOR = "#e8e8e8"
_GRID_COLOR = "#999999"
_SLOT_COLOR = "#cccccc"
_PICTURE_COLOR = "#e0e0e0"

_DASHES = {
    LineStyle.SOLID: "-",
    LineStyle.DASHED: "--",
    LineStyle.DOTTED: ":",
}


def _mpl_color(text: str) -> str | tuple[float, float, float, float]:
    """Hand matplotlib something it understands: a name, or RGBA channels."""
    color = Color.parse(text)
    rgba = color.rgba()
    return rgba if rgba is not None else color.value.strip().lower()


def render_static_preview(composition: Composition, chart_width: float = 8) -> Figure:
    """Render a Composition as a static matplotlib figure.

    Axes use page pixels with y pointing down, so every coordinate in the
    composition is drawn as-is.

    Args:
        composition: Fully computed page geometry.
        chart_width: Output image width in inches; height follows the page.

    Returns:
        matplotlib Figure object.
    """
    layout = composition.layout
    aspect = layout.page_height / layout.page_width if layout.page_width else 1
    fig, ax = plt.subplots(figsize=(chart_width, chart_width * aspect))
    fig.patch.set_facecolor(_PAGE_COLOR)

    ax.add_patch(
        RectPatch((0, 0), layout.page_width, layout.page_height, color=_PAGE_COLOR)
    )
    m = layout.margin
    ax.add_patch(
        RectPatch(
            (m.left, m.top),
            layout.page_width - m.left - m.right,
            layout.page_height - m.top - m.bottom,
            color=_BORDER_COLOR,
        )
    )

    # Map surface
    area = composition.map_area
    ax.add_patch(
        RectPatch((area.x, area.y), area.width, area.height, color=_MAP_COLOR, zorder=1)
    )
    for line in composition.map_plan.grid_lines:
        ax.plot(
            [area.x + line.start.x, area.x + line.end.x],
            [area.y + line.start.y, area.y + line.end.y],
            color=_GRID_COLOR,
            linewidth=0.3,
            alpha=0.3,
            zorder=2,
        )

    # Slots and fitted pictures
    for pic in composition.pictures:
        s = pic.slot
        ax.add_patch(
            RectPatch((s.x, s.y), s.width, s.height, fill=False, edgecolor=_SLOT_COLOR, linewidth=0.5, zorder=3)
        )
        ax.add_patch(
            RectPatch(
                (s.x + pic.offset_x, s.y + pic.offset_y),
                pic.render_width,
                pic.render_height,
                facecolor=_PICTURE_COLOR,
                edgecolor="#333333",
                linewidth=0.8,
                zorder=4,
            )
        )

    # Connectors
    links = composition.links
    link_style = composition.link_style
    for c in links.connectors:
        ax.plot(
            [c.start.x, c.end.x],
            [c.start.y, c.end.y],
            _DASHES[link_style.line_style],
            color=_mpl_color(link_style.line_color),
            linewidth=0.6 * link_style.line_width,
            zorder=5,
        )

    # Markers
    markers = composition.map_plan.markers
    if markers:
        xy = np.array([(mk.position.x, mk.position.y) for mk in markers], dtype=float)
        xy += (area.x, area.y)
        ax.scatter(
            xy[:, 0], xy[:, 1], s=20, c=[_mpl_color(mk.color) for mk in markers], zorder=6
        )

    for placement in links.labels:
        p = placement.position
        radius = 0.006 * layout.page_width
        face = "#ffffff" if placement.kind is LabelKind.MARKER else "#f0f0f0"
        ax.add_patch(
            Circle((p.x, p.y), radius, facecolor=face, edgecolor="#000000", linewidth=0.5, zorder=7)
        )
        ax.text(p.x, p.y, placement.label, ha="center", va="center", fontsize=5, zorder=8)

    ax.set_xlim(0, layout.page_width)
    ax.set_ylim(layout.page_height, 0)
    ax.set_aspect("equal")
    ax.axis("off")

    return fig


def save_static_preview(composition: Composition, output_path: Path | None = None) -> Path:
    """Save a Composition preview as a PNG file.

    Args:
        composition: Fully computed page geometry.
        output_path: Destination path. Auto-generated under results/ if None.

    Returns:
        Path to the saved file.
    """
    if output_path is None:
        filename = f"{composition.title}__preview.png".replace(" ", "_")
        output_path = _ROOT / "results" / filename

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig = render_static_preview(composition)
    fig.savefig(output_path, facecolor=_PAGE_COLOR)
    plt.close(fig)
    return output_path
