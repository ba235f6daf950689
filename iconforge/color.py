"""Shading, blending and conversion of web color strings.

Colors are plain strings in one of the forms a stylesheet would accept:

    #rgb, #rgba, #rrggbb, #rrggbbaa, rgb(r, g, b), rgba(r, g, b, a)

`blend` shades a color toward black or white (or toward a second color)
and returns a string in the same family as the input, so the result can
be handed straight back to a drawing call. Invalid input yields None
instead of raising; callers skip whatever depended on the color.
"""

import math
import re
from typing import NamedTuple, Optional

from PIL import ImageColor

from .errors import InvalidColorInput

# Passing this as the second color keeps the black/white target but flips
# the output between hex and rgb notation.
FORMAT_TOGGLE = "c"
_FORMAT_TOGGLES = (FORMAT_TOGGLE, "use-contrast")

_RGB_RE = re.compile(
    r"^rgba?\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*"
    r"(?:,\s*(\d*\.?\d+)\s*)?\)$"
)
_HEX_RE = re.compile(r"^#([0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")

SHADOW_PERCENT = -0.4


class Rgba(NamedTuple):
    """Normalized color record. `a` is -1 when no alpha was given."""
    r: int
    g: int
    b: int
    a: float = -1


_BLACK = Rgba(0, 0, 0)
_WHITE = Rgba(255, 255, 255)


def _round(x):
    """Round half up, the way browsers do."""
    return int(math.floor(x + 0.5))


def _is_rgb_notation(color):
    return color.startswith("r")


def parse_color(color) -> Optional[Rgba]:
    """Parse a hex or rgb()/rgba() string into an Rgba record.

    Returns None for anything else, including CSS color names.
    """
    if not isinstance(color, str):
        return None
    color = color.strip()

    m = _RGB_RE.match(color)
    if m:
        if color.startswith("rgba") != (m.group(4) is not None):
            return None
        r, g, b = (int(v) for v in m.group(1, 2, 3))
        if max(r, g, b) > 255:
            return None
        a = float(m.group(4)) if m.group(4) is not None else -1
        if a > 1:
            return None
        return Rgba(r, g, b, a)

    m = _HEX_RE.match(color)
    if not m:
        return None
    digits = m.group(1)
    if len(digits) < 6:
        digits = "".join(ch * 2 for ch in digits)
    value = int(digits, 16)
    if len(digits) == 8:
        return Rgba((value >> 24) & 255, (value >> 16) & 255,
                    (value >> 8) & 255,
                    _round((value & 255) / 0.255) / 1000)
    return Rgba(value >> 16, (value >> 8) & 255, value & 255)


def blend(percent, color_a, color_b=None, linear=False) -> Optional[str]:
    """Shade or blend a color.

    Args:
        percent: Blend weight in [-1, 1]. Negative values move toward
            black, positive toward white (or toward color_b for both).
        color_a: Source color string (hex or rgb/rgba).
        color_b: Optional target color. FORMAT_TOGGLE keeps the
            black/white target and converts hex <-> rgb notation.
        linear: Interpolate channels linearly instead of the default
            quadratic (perceptual) blend.

    Returns:
        The blended color string, or None if any input is invalid.
    """
    if isinstance(percent, bool) or not isinstance(percent, (int, float)):
        return None
    if not -1 <= percent <= 1:
        return None
    if not isinstance(color_a, str) or color_a[:1] not in ("r", "#"):
        return None
    if color_b is not None and not isinstance(color_b, str):
        return None

    to_rgb = _is_rgb_notation(color_a)
    if color_b:
        if _is_rgb_notation(color_b):
            to_rgb = True
        elif color_b in _FORMAT_TOGGLES:
            to_rgb = not to_rgb
        else:
            to_rgb = False

    source = parse_color(color_a)
    if color_b and color_b not in _FORMAT_TOGGLES:
        target = parse_color(color_b)
    else:
        target = _BLACK if percent < 0 else _WHITE
    if source is None or target is None:
        return None

    p = abs(percent)
    q = 1 - p
    if linear:
        channels = [_round(q * s + p * t)
                    for s, t in zip(source[:3], target[:3])]
    else:
        channels = [_round((q * s ** 2 + p * t ** 2) ** 0.5)
                    for s, t in zip(source[:3], target[:3])]
    r, g, b = channels

    has_alpha = source.a >= 0 or target.a >= 0
    if not has_alpha:
        a = 0
    elif source.a < 0:
        a = target.a
    elif target.a < 0:
        a = source.a
    else:
        a = source.a * q + target.a * p

    if to_rgb:
        if has_alpha:
            return f"rgba({r},{g},{b},{_round(a * 1000) / 1000:g})"
        return f"rgb({r},{g},{b})"

    packed = 4294967296 + r * 16777216 + g * 65536 + b * 256
    if has_alpha:
        packed += _round(a * 255)
        return "#" + format(packed, "x")[1:]
    return "#" + format(packed, "x")[1:-2]


def shadow_tint(background) -> Optional[str]:
    """The hard-shadow color: the background darkened by 40%."""
    return blend(SHADOW_PERCENT, background)


def to_rgba(color):
    """Convert a color to an (r, g, b, a) tuple of ints in 0-255.

    Accepts the forms understood by `parse_color`, CSS color names, and
    3- or 4-tuples.

    Raises:
        InvalidColorInput: if the color cannot be interpreted.
    """
    if isinstance(color, tuple) and len(color) in (3, 4):
        return tuple(color) + (255,) * (4 - len(color))

    parsed = parse_color(color)
    if parsed is not None:
        alpha = 255 if parsed.a < 0 else _round(parsed.a * 255)
        return (parsed.r, parsed.g, parsed.b, alpha)

    if not isinstance(color, str):
        raise InvalidColorInput(color)
    try:
        rgb = ImageColor.getrgb(color)
    except ValueError as exc:
        raise InvalidColorInput(color) from exc
    return tuple(rgb) + (255,) * (4 - len(rgb))
