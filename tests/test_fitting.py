"""Tests for aspect-ratio fitting and slot assignment."""

import pytest
from conftest import make_images

from picmap.fitting import (
    DEFAULT_IMAGE_DIMENSIONS,
    calculate_fit_dimensions,
    fit_picture,
    picture_id,
    position_pictures_in_slots,
)
from picmap.models import (
    BorderEdge,
    ImageDimensions,
    ImageLocationLink,
    ImageMetadata,
    LayoutOptions,
    PackingStrategy,
    PictureSlot,
)
from picmap.packing import pack_border

TOP_SLOT = PictureSlot(id="slot-0", edge=BorderEdge.TOP, x=177, y=118, width=1033, height=472, edge_index=0)


class TestCalculateFitDimensions:
    """Tests for calculate_fit_dimensions."""

    def test_height_constrained(self) -> None:
        fit = calculate_fit_dimensions(1920, 1080, 200, 100)
        assert (fit.width, fit.height) == (178, 100)

    def test_width_constrained(self) -> None:
        fit = calculate_fit_dimensions(1000, 100, 200, 100)
        assert (fit.width, fit.height) == (200, 20)

    def test_same_aspect_fills_box(self) -> None:
        fit = calculate_fit_dimensions(400, 300, 800, 600)
        assert (fit.width, fit.height) == (800, 600)

    @pytest.mark.parametrize("w,h", [(0, 600), (800, 0), (-1, -1)])
    def test_unknown_source_returns_box(self, w: float, h: float) -> None:
        fit = calculate_fit_dimensions(w, h, 300, 150)
        assert (fit.width, fit.height) == (300, 150)

    def test_zero_box(self) -> None:
        fit = calculate_fit_dimensions(800, 600, 0, 0)
        assert (fit.width, fit.height) == (0, 0)

    @pytest.mark.parametrize(
        "src", [(1920, 1080), (1080, 1920), (1, 1000), (1000, 1), (333, 777)]
    )
    def test_never_exceeds_box(self, src: tuple[int, int]) -> None:
        fit = calculate_fit_dimensions(*src, 1033, 472)
        assert fit.width <= 1033
        assert fit.height <= 472
        assert fit.width == 1033 or fit.height == 472

    @pytest.mark.parametrize("src", [(1000, 999), (999, 1000)])
    def test_rounding_stays_inside_fractional_box(self, src: tuple[int, int]) -> None:
        fit = calculate_fit_dimensions(*src, 100.7, 100.7)
        assert fit.width <= 100.7
        assert fit.height <= 100.7


class TestFitPicture:
    """Tests for fit_picture."""

    def test_unknown_dimensions_use_four_by_three(self) -> None:
        pic = fit_picture(ImageMetadata(file_path="a.jpg"), TOP_SLOT, "0")
        assert (pic.render_width, pic.render_height) == (629, 472)
        assert (pic.offset_x, pic.offset_y) == (202, 0)
        assert pic.center_x == pytest.approx(693.5)
        assert pic.center_y == pytest.approx(354)

    def test_default_dimensions_are_overridable(self) -> None:
        pic = fit_picture(
            ImageMetadata(file_path="a.jpg"),
            TOP_SLOT,
            "0",
            default_dimensions=ImageDimensions(1, 1),
        )
        assert (pic.render_width, pic.render_height) == (472, 472)

    def test_keeps_label_and_id(self) -> None:
        pic = fit_picture(ImageMetadata(file_path="a.jpg"), TOP_SLOT, "hero", label="H")
        assert pic.image_id == "hero"
        assert pic.label == "H"


def test_picture_id_prefers_explicit_id() -> None:
    assert picture_id(ImageMetadata(file_path="a.jpg", image_id="x"), 3) == "x"
    assert picture_id(ImageMetadata(file_path="a.jpg"), 3) == "3"


def test_default_is_four_by_three() -> None:
    assert DEFAULT_IMAGE_DIMENSIONS.width * 3 == DEFAULT_IMAGE_DIMENSIONS.height * 4


class TestPositionPicturesInSlots:
    """Tests for position_pictures_in_slots."""

    def test_pairs_in_order(self, a4_options: LayoutOptions, images: list[ImageMetadata]) -> None:
        slots = pack_border(a4_options, len(images)).slots
        placed = position_pictures_in_slots(images, slots)

        assert [p.image_id for p in placed] == [str(i) for i in range(7)]
        assert [p.slot for p in placed] == list(slots)
        first = placed[0]
        assert (first.render_width, first.render_height) == (839, 472)

    def test_pictures_stay_inside_slots(self, a4_options: LayoutOptions) -> None:
        images = make_images(12, ImageDimensions(3000, 1000)) + make_images(5)
        slots = pack_border(a4_options, len(images)).slots
        for p in position_pictures_in_slots(images, slots):
            assert p.offset_x >= 0 and p.offset_y >= 0
            assert p.offset_x + p.render_width <= p.slot.width
            assert p.offset_y + p.render_height <= p.slot.height

    @pytest.mark.parametrize("n", [1, 7, 20, 35, 79])
    def test_near_square_pictures_stay_inside_adaptive_slots(
        self, a4_options: LayoutOptions, n: int
    ) -> None:
        images = make_images(n, ImageDimensions(1000, 999))
        slots = pack_border(a4_options, n, strategy=PackingStrategy.ADAPTIVE).slots
        for p in position_pictures_in_slots(images, slots):
            assert p.render_width <= p.slot.width
            assert p.render_height <= p.slot.height
            assert p.offset_x + p.render_width <= p.slot.width
            assert p.offset_y + p.render_height <= p.slot.height

    def test_last_labelled_link_wins(self, a4_options: LayoutOptions, images, plaza) -> None:
        links = [
            ImageLocationLink(image_id="1", location=plaza),
            ImageLocationLink(image_id="1", location=plaza, label="First"),
            ImageLocationLink(image_id="1", location=plaza, label="Second"),
        ]
        slots = pack_border(a4_options, len(images)).slots
        placed = position_pictures_in_slots(images, slots, links)
        assert placed[1].label == "Second"
        assert placed[0].label is None

    def test_surplus_images_are_left_out(self, a4_options: LayoutOptions, images) -> None:
        slots = pack_border(a4_options, 3).slots
        assert len(position_pictures_in_slots(images, slots)) == 3

    def test_empty(self) -> None:
        assert position_pictures_in_slots([], []) == []
