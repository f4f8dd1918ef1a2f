"""Tests for the color grammar."""

import pytest

from picmap.colors import Color, ColorError, ColorKind, is_valid_color, sanitize_color


@pytest.mark.parametrize(
    "text,kind",
    [
        ("#fff", ColorKind.HEX),
        ("#E74C3C", ColorKind.HEX),
        ("rgb(255, 0, 0)", ColorKind.RGB),
        ("rgba(0,0,0,0.5)", ColorKind.RGBA),
        ("hsl(120, 50%, 50%)", ColorKind.HSL),
        ("hsla(360, 100%, 0%, 1)", ColorKind.HSLA),
        ("rebeccapurple", ColorKind.NAMED),
        ("Transparent", ColorKind.NAMED),
    ],
)
def test_accepted(text: str, kind: ColorKind) -> None:
    color = Color.parse(text)
    assert color.kind is kind
    assert str(color) == text
    assert is_valid_color(text)


@pytest.mark.parametrize(
    "text",
    [
        "",
        "#ff",
        "#gggggg",
        "#ffff",
        "rgb(256, 0, 0)",
        "rgba(0, 0, 0, 1.5)",
        "hsl(361, 50%, 50%)",
        "hsl(120, 101%, 50%)",
        "notacolor",
        "red; background: url(x)",
        "expression(alert(1))",
        "rgb(1, 2, 3)\n",
        "rgba(1, 2, 3, 0.5)\n",
        "hsl(1, 2%, 3%)\n",
        "hsla(1, 2%, 3%, 1)\n",
    ],
)
def test_rejected(text: str) -> None:
    assert not is_valid_color(text)
    with pytest.raises(ColorError):
        Color.parse(text)


def test_none_is_invalid() -> None:
    assert not is_valid_color(None)


def test_color_error_is_value_error() -> None:
    with pytest.raises(ValueError):
        Color.parse("nope")


class TestRgba:
    """Tests for Color.rgba."""

    def test_short_hex(self) -> None:
        assert Color.parse("#f00").rgba() == (1.0, 0.0, 0.0, 1.0)

    def test_rgba(self) -> None:
        r, g, b, a = Color.parse("rgba(0, 255, 0, 0.25)").rgba()
        assert (r, g, b, a) == (0.0, 1.0, 0.0, 0.25)

    def test_hsl(self) -> None:
        r, g, b, a = Color.parse("hsl(240, 100%, 50%)").rgba()
        assert (r, g, b, a) == pytest.approx((0.0, 0.0, 1.0, 1.0))

    def test_named(self) -> None:
        assert Color.parse("navy").rgba() is None
        assert Color.parse("transparent").rgba() == (0.0, 0.0, 0.0, 0.0)


def test_sanitize_color() -> None:
    assert sanitize_color("#123456", "#000000") == "#123456"
    assert sanitize_color("javascript:1", "#000000") == "#000000"
    assert sanitize_color(None, "white") == "white"


def test_trailing_newline_never_survives_sanitizing() -> None:
    assert sanitize_color("rgb(1, 2, 3)\n", "#000000") == "#000000"
