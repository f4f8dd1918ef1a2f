"""Shared pytest fixtures for picmap tests.

Fixture Organization
--------------------
- **a4_options**: default A4 portrait layout (10 mm margins, 40 mm border, 5 mm spacing)
- **metric_options**: 100 x 100 mm custom page; at 254 dpi one millimetre is ten pixels
- **images**: picture lists with and without native dimensions
- **plaza / harbour**: named locations, used for shared-location links
"""

import matplotlib

matplotlib.use("Agg")

import pytest  # noqa: E402

from picmap.models import (  # noqa: E402
    GeoLocation,
    ImageDimensions,
    ImageLocationLink,
    ImageMetadata,
    LayoutOptions,
    Margin,
    PageSize,
)

METRIC_DPI = 254  # 1 mm == 10 px


@pytest.fixture
def a4_options() -> LayoutOptions:
    return LayoutOptions()


@pytest.fixture
def metric_options() -> LayoutOptions:
    return LayoutOptions(
        page_size=PageSize.CUSTOM,
        custom_dimensions=ImageDimensions(width=100, height=100),
        border_width=20,
        picture_spacing=2,
        margin=Margin(0, 0, 0, 0),
    )


def make_images(count: int, dimensions: ImageDimensions | None = None) -> list[ImageMetadata]:
    return [
        ImageMetadata(file_path=f"photos/{i:03d}.jpg", dimensions=dimensions)
        for i in range(count)
    ]


@pytest.fixture
def images() -> list[ImageMetadata]:
    return make_images(7, ImageDimensions(1920, 1080))


@pytest.fixture
def plaza() -> GeoLocation:
    return GeoLocation(latitude=40.4168, longitude=-3.7038, name="Plaza")


@pytest.fixture
def harbour() -> GeoLocation:
    return GeoLocation(latitude=43.2965, longitude=5.3698, name="Harbour")


@pytest.fixture
def links(plaza: GeoLocation, harbour: GeoLocation) -> list[ImageLocationLink]:
    return [
        ImageLocationLink(image_id="0", location=plaza),
        ImageLocationLink(image_id="1", location=harbour),
        ImageLocationLink(image_id="2", location=plaza),
    ]
