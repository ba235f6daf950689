"""Hard drop shadows built from stacked, diagonally offset copies."""

import math

import numpy as np
from PIL import Image

from .color import to_rgba
from .font import rasterize_glyph

DEFAULT_STEP_PX = 2


def glyph_shadow_count(icon_width):
    """Number of glyph copies: the trail spans two thirds of the icon."""
    return math.ceil(icon_width * 2 / 3)


def image_shadow_count(silhouette_width):
    """Number of silhouette copies: half the silhouette's own width."""
    return math.ceil(silhouette_width / 2)


def tinted_layer(mask, color):
    """Turn a coverage mask (H, W) into an RGBA layer of a single color."""
    r, g, b, a = to_rgba(color)
    h, w = mask.shape
    rgba = np.zeros((h, w, 4), dtype=np.uint8)
    rgba[:, :, 0] = r
    rgba[:, :, 1] = g
    rgba[:, :, 2] = b
    alpha = mask.astype(np.float64) * (a / 255.0)
    rgba[:, :, 3] = np.clip(np.round(alpha), 0, 255).astype(np.uint8)
    return Image.fromarray(rgba)


def cast_hard_shadow(surface, layer, count, step_px=DEFAULT_STEP_PX):
    """Composite `layer` onto `surface` `count` times along a diagonal.

    Copy i is moved i * step_px / 2 pixels left and the same distance
    down, so the copies merge into a solid streak toward the lower-left.
    `layer` must have the surface's size. The surface is modified in
    place and returned.
    """
    w, h = surface.size
    for i in range(count):
        shift = int(round(i * step_px / 2))
        if shift >= w or shift >= h:
            break
        surface.alpha_composite(layer, dest=(0, shift), source=(shift, 0))
    return surface


def cast_glyph_shadow(surface, font, text, tint, count=None,
                      step_px=DEFAULT_STEP_PX):
    """Draw the hard shadow trail of the icon glyph."""
    if not text or text == "none" or tint is None:
        return surface
    if count is None:
        count = glyph_shadow_count(surface.width)
    layer = tinted_layer(rasterize_glyph(font, text, surface.size), tint)
    return cast_hard_shadow(surface, layer, count, step_px)


def cast_image_shadow(surface, silhouette, placement, count=None,
                      step_px=DEFAULT_STEP_PX):
    """Draw the hard shadow trail of the user image silhouette."""
    if silhouette is None:
        return surface
    if count is None:
        count = image_shadow_count(silhouette.width)
    layer = Image.new("RGBA", surface.size, (0, 0, 0, 0))
    layer.paste(silhouette, placement.origin)
    return cast_hard_shadow(surface, layer, count, step_px)
