"""Icon font loading and glyph rasterization."""

import logging

import numpy as np
from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)


def load_icon_font(font_family, size, weight=None, font_path=None):
    """Load the font used to draw the icon glyph.

    Tries the explicit font file first, then the family name (which
    Pillow resolves against the system font directories), and finally
    falls back to Pillow's bundled default font.

    Args:
        font_family: Font family or file name.
        size: Font size in pixels.
        weight: Numeric CSS weight, applied when the font is variable.
        font_path: Optional path to a TrueType/OpenType file.

    Returns:
        A Pillow font object.
    """
    for candidate in (font_path, font_family):
        if not candidate:
            continue
        try:
            font = ImageFont.truetype(str(candidate), size)
        except OSError:
            logger.debug("Could not load font %r", candidate)
            continue
        if weight is not None:
            _apply_weight(font, weight)
        return font

    logger.debug("Falling back to the default font for %r", font_family)
    return ImageFont.load_default(size=size)


def _apply_weight(font, weight):
    """Set the weight axis of a variable font. Static fonts are left alone."""
    try:
        axes = font.get_variation_axes()
    except OSError:
        return
    values = []
    for axis in axes:
        name = axis.get("name", b"")
        if isinstance(name, bytes):
            name = name.decode("ascii", "ignore")
        if name.lower() in ("weight", "wght"):
            values.append(min(max(weight, axis["minimum"]), axis["maximum"]))
        else:
            values.append(axis["default"])
    font.set_variation_by_axes(values)


def rasterize_glyph(font, text, size, center=None):
    """Rasterize a glyph to a grayscale coverage mask.

    The glyph is centered on `center` both horizontally and vertically
    (defaults to the middle of the canvas).

    Args:
        font: Pillow font object.
        text: Character(s) to draw.
        size: (width, height) of the output mask.
        center: (x, y) anchor point.

    Returns:
        numpy array of shape (height, width), values 0-255.
    """
    w, h = size
    if center is None:
        center = (w / 2, h / 2)
    img = Image.new('L', (w, h), 0)
    draw = ImageDraw.Draw(img)
    draw.text(center, text, font=font, fill=255, anchor="mm")
    return np.array(img)
