"""Fit pictures into their border slots, preserving aspect ratio."""

import logging
from collections.abc import Sequence

from picmap.models import (
    ImageDimensions,
    ImageLocationLink,
    ImageMetadata,
    PictureSlot,
    PositionedPicture,
)
from picmap.page import round_half_up

logger = logging.getLogger(__name__)

# 4:3, used when an image's native size is unknown
DEFAULT_IMAGE_DIMENSIONS = ImageDimensions(width=800, height=600)


def picture_id(image: ImageMetadata, index: int) -> str:
    """Identifier links use for a picture: its explicit id, else its list index."""
    return image.image_id if image.image_id is not None else str(index)


def calculate_fit_dimensions(
    source_width: float,
    source_height: float,
    max_width: float,
    max_height: float,
) -> ImageDimensions:
    """Largest rectangle with the source aspect ratio inside max_width x max_height.

    A non-positive source size means "unknown" and returns the maximum box
    unchanged. Aspect ratios are compared by cross-multiplying, so a zero-size
    box yields 0 x 0 rather than dividing by zero. The rounded side never
    exceeds its maximum, which may be fractional.
    """
    if source_width <= 0 or source_height <= 0:
        return ImageDimensions(width=max_width, height=max_height)

    if source_width * max_height > max_width * source_height:
        # Wider than the box: width-constrained
        return ImageDimensions(
            width=max_width,
            height=min(max_height, round_half_up(max_width * source_height / source_width)),
        )
    return ImageDimensions(
        width=min(max_width, round_half_up(max_height * source_width / source_height)),
        height=max_height,
    )


def fit_picture(
    image: ImageMetadata,
    slot: PictureSlot,
    image_id: str,
    label: str | None = None,
    default_dimensions: ImageDimensions = DEFAULT_IMAGE_DIMENSIONS,
) -> PositionedPicture:
    """Fit one image into one slot and centre it."""
    native = image.dimensions or default_dimensions
    fit = calculate_fit_dimensions(native.width, native.height, slot.width, slot.height)
    offset_x = round_half_up((slot.width - fit.width) / 2)
    offset_y = round_half_up((slot.height - fit.height) / 2)
    return PositionedPicture(
        image=image,
        slot=slot,
        render_width=fit.width,
        render_height=fit.height,
        offset_x=offset_x,
        offset_y=offset_y,
        center_x=slot.x + offset_x + fit.width / 2,
        center_y=slot.y + offset_y + fit.height / 2,
        image_id=image_id,
        label=label,
    )


def position_pictures_in_slots(
    images: Sequence[ImageMetadata],
    slots: Sequence[PictureSlot],
    links: Sequence[ImageLocationLink] | None = None,
    default_dimensions: ImageDimensions = DEFAULT_IMAGE_DIMENSIONS,
) -> list[PositionedPicture]:
    """Pair images with slots in order and fit each one.

    Args:
        images: Pictures in placement order.
        slots: Slots from the border packer, clockwise from the top.
        links: Optional links; a labelled link supplies the label of the
            picture it names. When several do, the last one wins.
        default_dimensions: Native size assumed for images without one.

    Returns:
        One PositionedPicture per image that got a slot. Surplus images or
        slots are left unpaired.
    """
    labels: dict[str, str] = {}
    for link in links or ():
        if link.label:
            labels[link.image_id] = link.label

    if len(images) != len(slots):
        logger.debug("%d images for %d slots", len(images), len(slots))

    positioned: list[PositionedPicture] = []
    for index, (image, slot) in enumerate(zip(images, slots)):
        pid = picture_id(image, index)
        positioned.append(
            fit_picture(image, slot, pid, labels.get(pid), default_dimensions)
        )
    return positioned
