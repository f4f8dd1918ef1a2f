"""End-to-end tests for the composition pipeline."""

import logging
from dataclasses import replace

import pytest

from picmap.compose import compose, fit_map_style
from picmap.config import Settings
from picmap.models import (
    GeoLocation,
    ImageLocationLink,
    ImageMetadata,
    LayoutOptions,
    LinkStyle,
    LinkStyleType,
    MapStyle,
    PackingStrategy,
    PicMapConfig,
)


@pytest.fixture
def config(a4_options: LayoutOptions, images, links) -> PicMapConfig:
    return PicMapConfig(
        title="Iberia trip",
        layout=a4_options,
        map=MapStyle(),
        images=tuple(images),
        links=tuple(links),
    )


def test_compose_defaults(config: PicMapConfig) -> None:
    comp = compose(config)

    assert comp.title == "Iberia trip"
    assert comp.dpi == 300
    assert comp.layout.strategy is PackingStrategy.EXACT
    assert len(comp.pictures) == 7
    assert comp.map_style.zoom is not None
    assert comp.map_style.center is not None
    assert comp.diagnostics == ()

    # Default link style draws labels only
    assert comp.links.link_count == 3
    assert comp.links.connectors == ()
    assert len(comp.links.labels) == 6
    assert len(comp.map_plan.markers) == 3


def test_markers_land_inside_map_area(config: PicMapConfig) -> None:
    comp = compose(config)
    area = comp.map_area
    for r in comp.links.resolved:
        assert area.x <= r.marker_position.x <= area.x + area.width
        assert area.y <= r.marker_position.y <= area.y + area.height


def test_line_style_reports_shared_location(config: PicMapConfig) -> None:
    comp = compose(replace(config, link_style=LinkStyle(type=LinkStyleType.BOTH)))
    assert len(comp.links.connectors) == 3
    assert comp.links.warnings == ('Location "Plaza" has 2 pictures linked to it',)


def test_connectors_start_at_pictures(config: PicMapConfig) -> None:
    comp = compose(replace(config, link_style=LinkStyle(type=LinkStyleType.LINE)))
    by_id = {p.image_id: p for p in comp.pictures}
    for c in comp.links.connectors:
        slot = by_id[c.image_id].slot
        assert slot.x <= c.start.x <= slot.x + slot.width
        assert slot.y <= c.start.y <= slot.y + slot.height


def test_unknown_links_are_diagnosed(config: PicMapConfig, plaza: GeoLocation) -> None:
    extra = config.links + (ImageLocationLink(image_id="99", location=plaza),)
    comp = compose(replace(config, links=extra))
    assert comp.diagnostics == ('Link references image ID "99" which has no position',)
    assert comp.links.link_count == 3


def test_markers_follow_resolved_links(config: PicMapConfig, plaza: GeoLocation) -> None:
    extra = config.links + (ImageLocationLink(image_id="99", location=plaza, label="X"),)
    comp = compose(replace(config, links=extra))
    # The unmatched link gets no marker; the rest carry their auto-labels
    assert [m.label for m in comp.map_plan.markers] == ["A", "B", "C"]
    assert [m.label for m in comp.map_plan.markers] == [r.label for r in comp.links.resolved]


def test_explicit_image_ids(a4_options: LayoutOptions, plaza: GeoLocation) -> None:
    config = PicMapConfig(
        title="ids",
        layout=a4_options,
        map=MapStyle(),
        images=(ImageMetadata(file_path="a.jpg", image_id="hero"),),
        links=(ImageLocationLink(image_id="hero", location=plaza),),
    )
    comp = compose(config)
    assert comp.pictures[0].image_id == "hero"
    assert comp.links.resolved[0].label == "A"


def test_explicit_map_view_is_kept(config: PicMapConfig) -> None:
    center = GeoLocation(41.0, 2.0)
    comp = compose(replace(config, map=MapStyle(zoom=6, center=center)))
    assert comp.map_style.zoom == 6
    assert comp.map_style.center == center


def test_settings_are_applied(config: PicMapConfig) -> None:
    comp = compose(config, Settings(dpi=5, packing_strategy=PackingStrategy.ADAPTIVE))
    assert comp.dpi == 72
    assert comp.layout.strategy is PackingStrategy.ADAPTIVE
    assert len(comp.layout.slots) == 7


def test_no_images_no_links(a4_options: LayoutOptions) -> None:
    comp = compose(PicMapConfig(title="empty", layout=a4_options, map=MapStyle(), images=(), links=()))
    assert comp.pictures == ()
    assert comp.links.link_count == 0
    assert comp.map_style.zoom == 10
    assert comp.map_style.center == GeoLocation(0, 0)


def test_compose_logs_summary(config: PicMapConfig, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="picmap.compose")
    compose(config)
    assert "composed 'Iberia trip'" in caplog.text


def test_fit_map_style_fills_only_missing(config: PicMapConfig) -> None:
    style = fit_map_style(MapStyle(zoom=4), config, 800, 600)
    assert style.zoom == 4
    assert style.center is not None
    assert style.center.latitude == pytest.approx((40.4168 * 2 + 43.2965) / 3)
