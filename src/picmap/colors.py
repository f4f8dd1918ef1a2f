"""Color value type: the one accepted CSS color grammar for every style field."""

import colorsys
import re
from dataclasses import dataclass
from enum import Enum

_HEX = re.compile(r"^#([0-9a-f]{3}|[0-9a-f]{6})$", re.IGNORECASE)
_RGB = re.compile(r"^rgb\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*\)$")
_RGBA = re.compile(
    r"^rgba\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*([\d.]+)\s*\)$"
)
_HSL = re.compile(r"^hsl\(\s*(\d{1,3})\s*,\s*(\d{1,3})%\s*,\s*(\d{1,3})%\s*\)$")
_HSLA = re.compile(
    r"^hsla\(\s*(\d{1,3})\s*,\s*(\d{1,3})%\s*,\s*(\d{1,3})%\s*,\s*([\d.]+)\s*\)$"
)

# CSS named colors plus "transparent"
NAMED_COLORS: frozenset[str] = frozenset(
    {
        "aliceblue", "antiquewhite", "aqua", "aquamarine", "azure", "beige",
        "bisque", "black", "blanchedalmond", "blue", "blueviolet", "brown",
        "burlywood", "cadetblue", "chartreuse", "chocolate", "coral",
        "cornflowerblue", "cornsilk", "crimson", "cyan", "darkblue", "darkcyan",
        "darkgoldenrod", "darkgray", "darkgreen", "darkgrey", "darkkhaki",
        "darkmagenta", "darkolivegreen", "darkorange", "darkorchid", "darkred",
        "darksalmon", "darkseagreen", "darkslateblue", "darkslategray",
        "darkslategrey", "darkturquoise", "darkviolet", "deeppink",
        "deepskyblue", "dimgray", "dimgrey", "dodgerblue", "firebrick",
        "floralwhite", "forestgreen", "fuchsia", "gainsboro", "ghostwhite",
        "gold", "goldenrod", "gray", "green", "greenyellow", "grey", "honeydew",
        "hotpink", "indianred", "indigo", "ivory", "khaki", "lavender",
        "lavenderblush", "lawngreen", "lemonchiffon", "lightblue", "lightcoral",
        "lightcyan", "lightgoldenrodyellow", "lightgray", "lightgreen",
        "lightgrey", "lightpink", "lightsalmon", "lightseagreen", "lightskyblue",
        "lightslategray", "lightslategrey", "lightsteelblue", "lightyellow",
        "lime", "limegreen", "linen", "magenta", "maroon", "mediumaquamarine",
        "mediumblue", "mediumorchid", "mediumpurple", "mediumseagreen",
        "mediumslateblue", "mediumspringgreen", "mediumturquoise",
        "mediumvioletred", "midnightblue", "mintcream", "mistyrose", "moccasin",
        "navajowhite", "navy", "oldlace", "olive", "olivedrab", "orange",
        "orangered", "orchid", "palegoldenrod", "palegreen", "paleturquoise",
        "palevioletred", "papayawhip", "peachpuff", "peru", "pink", "plum",
        "powderblue", "purple", "rebeccapurple", "red", "rosybrown",
        "royalblue", "saddlebrown", "salmon", "sandybrown", "seagreen",
        "seashell", "sienna", "silver", "skyblue", "slateblue", "slategray",
        "slategrey", "snow", "springgreen", "steelblue", "tan", "teal",
        "thistle", "tomato", "transparent", "turquoise", "violet", "wheat",
        "white", "whitesmoke", "yellow", "yellowgreen",
    }
)  # fmt: skip


class ColorError(ValueError):
    """Color string outside the accepted grammar."""


class ColorKind(Enum):
    HEX = "hex"
    RGB = "rgb"
    RGBA = "rgba"
    HSL = "hsl"
    HSLA = "hsla"
    NAMED = "named"


def _alpha_ok(raw: str) -> bool:
    try:
        alpha = float(raw)
    except ValueError:
        return False
    return 0 <= alpha <= 1


def _classify(text: str) -> ColorKind | None:
    lowered = text.lower().strip()
    if _HEX.fullmatch(lowered):
        return ColorKind.HEX
    if m := _RGB.fullmatch(text):
        if all(int(c) <= 255 for c in m.groups()):
            return ColorKind.RGB
        return None
    if m := _RGBA.fullmatch(text):
        r, g, b, a = m.groups()
        if all(int(c) <= 255 for c in (r, g, b)) and _alpha_ok(a):
            return ColorKind.RGBA
        return None
    if m := _HSL.fullmatch(text):
        h, s, l = (int(c) for c in m.groups())  # noqa: E741
        if h <= 360 and s <= 100 and l <= 100:
            return ColorKind.HSL
        return None
    if m := _HSLA.fullmatch(text):
        h, s, l, a = m.groups()  # noqa: E741
        if int(h) <= 360 and int(s) <= 100 and int(l) <= 100 and _alpha_ok(a):
            return ColorKind.HSLA
        return None
    if lowered in NAMED_COLORS:
        return ColorKind.NAMED
    return None


@dataclass(frozen=True)
class Color:
    """A color string known to be safe for use in a style attribute.

    `value` keeps the caller's spelling; only the grammar check is
    case-insensitive for hex and named colors.
    """

    value: str
    kind: ColorKind

    @classmethod
    def parse(cls, text: str) -> "Color":
        """Validate `text` against the color grammar.

        Accepts #rgb / #rrggbb hex, rgb(), rgba(), hsl(), hsla() and the CSS
        named colors (plus "transparent").

        Raises:
            ColorError: When `text` is empty or not in the grammar.
        """
        if not isinstance(text, str) or not text:
            raise ColorError(f"Invalid color: {text!r}")
        kind = _classify(text)
        if kind is None:
            raise ColorError(f"Invalid color: {text!r}")
        return cls(value=text, kind=kind)

    def __str__(self) -> str:
        return self.value

    def rgba(self) -> tuple[float, float, float, float] | None:
        """Channels in [0, 1]. None for named colors other than "transparent"."""
        text = self.value.strip()
        if self.kind is ColorKind.HEX:
            digits = text[1:]
            if len(digits) == 3:
                digits = "".join(ch * 2 for ch in digits)
            r, g, b = (int(digits[i : i + 2], 16) / 255 for i in (0, 2, 4))
            return (r, g, b, 1.0)
        if self.kind is ColorKind.NAMED:
            return (0.0, 0.0, 0.0, 0.0) if text.lower() == "transparent" else None

        pattern = {
            ColorKind.RGB: _RGB,
            ColorKind.RGBA: _RGBA,
            ColorKind.HSL: _HSL,
            ColorKind.HSLA: _HSLA,
        }[self.kind]
        groups = pattern.fullmatch(text).groups()  # type: ignore[union-attr]
        alpha = float(groups[3]) if len(groups) == 4 else 1.0
        if self.kind in (ColorKind.RGB, ColorKind.RGBA):
            r, g, b = (int(c) / 255 for c in groups[:3])
            return (r, g, b, alpha)
        h, s, l = (int(c) for c in groups[:3])  # noqa: E741
        r, g, b = colorsys.hls_to_rgb((h % 360) / 360, l / 100, s / 100)
        return (r, g, b, alpha)


def is_valid_color(text: str | None) -> bool:
    if not isinstance(text, str) or not text:
        return False
    return _classify(text) is not None


def sanitize_color(text: str | None, default: str) -> str:
    """Return `text` when it is a valid color, otherwise `default`."""
    if text is not None and is_valid_color(text):
        return text
    return default
