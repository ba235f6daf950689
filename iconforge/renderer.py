"""Layer compositing for the icon.

Draws, in order: background shape, hard shadows, user image, glyph with
its soft shadow, inline bevel and gradient overlay. Each stage renders
into its own RGBA layer and composites it onto the surface, so no
drawing state carries over from one stage to the next.
"""

import logging

import numpy as np
from PIL import Image, ImageChops, ImageDraw

from .color import to_rgba
from .errors import InvalidColorInput, UnsupportedStyleVariant
from .font import rasterize_glyph
from .image import place_image
from .shadow import cast_glyph_shadow, cast_image_shadow, tinted_layer

logger = logging.getLogger(__name__)

# Geometry, as fractions of the icon width
CORNER_RADIUS = 0.047
INLINE_HEIGHT = 0.015
SOFT_SHADOW_OFFSET = 0.02

SOFT_SHADOW_COLOR = "rgba(0,0,0,0.4)"
INLINE_DARK = "#282F33"
INLINE_LIGHT = "#FFFFFF"
INLINE_OPACITY = 0.4
GRADIENT_OPACITY = 0.2

FALLBACK_FILL = (0, 0, 0, 255)

SUPERSAMPLE = 4


def compose(config, font, tint, image=None, silhouette=None, placement=None,
            issues=None):
    """Composite all icon layers.

    Args:
        config: IconConfig with defaults already resolved.
        font: Pillow font for the glyph.
        tint: Hard-shadow color string, or None to skip hard shadows.
        image: Decoded RGBA user image, or None.
        silhouette: Shadow silhouette of the placed user image, or None.
        placement: FittedImagePlacement for image and silhouette.
        issues: Optional list collecting non-fatal IconForgeErrors.

    Returns:
        PIL Image in RGBA mode, icon_width pixels square.
    """
    if issues is None:
        issues = []
    width = int(config.icon_width)
    variant = config.variant
    if variant is None:
        logger.warning("Unsupported style variant %r; drawing a plain "
                       "square background", config.style_variant)
        _record(issues, UnsupportedStyleVariant(config.style_variant))

    # --- Pipeline ---

    # 1. Background and clip shape
    surface, clip = _background(width, variant, config.icon_background, issues)

    # 2. Hard shadows (glyph, then image)
    if tint is None:
        logger.warning("No shadow tint for background %r; skipping hard "
                       "shadows", config.icon_background)
        _record(issues, InvalidColorInput(config.icon_background))
    else:
        cast_glyph_shadow(surface, font, config.icon_text, tint)
        if placement is not None:
            cast_image_shadow(surface, silhouette, placement)

    # 3. Main image
    if image is not None and placement is not None:
        _main_image(surface, image, placement)

    # 4. Glyph with soft shadow
    _glyph_with_shadow(surface, config, font, variant, issues)

    # 5. Inline bevel
    if variant is not None and not variant.is_oldest:
        _inline_shadow(surface)

    # 6. Gradient overlay
    if variant is not None and not variant.is_oldest:
        _gradient_overlay(surface)

    if clip is not None:
        surface.putalpha(ImageChops.multiply(surface.getchannel("A"), clip))
    return surface


# ---------------------------------------------------------------------------
# Internal stages
# ---------------------------------------------------------------------------

def _record(issues, exc):
    if not any(type(e) is type(exc) and str(e) == str(exc) for e in issues):
        issues.append(exc)


def _fill_color(color, issues):
    try:
        return to_rgba(color)
    except InvalidColorInput as exc:
        logger.warning("Invalid color %r, falling back to black", color)
        _record(issues, exc)
        return FALLBACK_FILL


def shape_mask(width, radius, offset=(0.0, 0.0)):
    """Anti-aliased mask of a width x width (rounded) square.

    `offset` moves the square; parts falling off the canvas are cut.
    """
    s = SUPERSAMPLE
    ox, oy = offset
    img = Image.new('L', (width * s, width * s), 0)
    draw = ImageDraw.Draw(img)
    box = [ox * s, oy * s, (ox + width) * s - 1, (oy + width) * s - 1]
    if radius > 0:
        draw.rounded_rectangle(box, radius=radius * s, fill=255)
    else:
        draw.rectangle(box, fill=255)
    return img.resize((width, width), Image.BOX)


def _background(width, variant, color, issues):
    """Fill the canvas and return (surface, clip mask).

    Unknown variants get a plain square, like the oldest style.
    """
    radius = 0 if variant is None or variant.is_oldest else width * CORNER_RADIUS
    clip = shape_mask(width, radius)
    surface = Image.new("RGBA", (width, width), _fill_color(color, issues))
    return surface, clip


def _main_image(surface, image, placement):
    layer = Image.new("RGBA", surface.size, (0, 0, 0, 0))
    layer.paste(place_image(image, placement), placement.origin)
    surface.alpha_composite(layer)


def _glyph_with_shadow(surface, config, font, variant, issues):
    """Draw the glyph at the center, with a soft shadow on newer styles."""
    if not config.has_glyph:
        return
    mask = rasterize_glyph(font, config.icon_text, surface.size)

    if variant is not None and not variant.is_oldest:
        offset = int(round(surface.width * SOFT_SHADOW_OFFSET))
        shadow = tinted_layer(mask, SOFT_SHADOW_COLOR)
        surface.alpha_composite(shadow, dest=(0, offset))

    color = _fill_color(config.font_color, issues)
    surface.alpha_composite(tinted_layer(mask, color))


def _inline_shadow(surface):
    """Fake an embossed bevel with thin bands along the top and bottom.

    Each band is the rounded outline minus the same outline shifted by
    the band height, so it follows the corner curves.
    """
    width = surface.width
    radius = width * CORNER_RADIUS
    height = width * INLINE_HEIGHT

    outline = shape_mask(width, radius)
    bottom = ImageChops.subtract(outline, shape_mask(width, radius, (0, -height)))
    top = ImageChops.subtract(outline, shape_mask(width, radius, (0, height)))

    for band, color in ((bottom, INLINE_DARK), (top, INLINE_LIGHT)):
        mask = np.array(band, dtype=np.float64) * INLINE_OPACITY
        surface.alpha_composite(tinted_layer(mask, color))


def _gradient_overlay(surface):
    """Diagonal white sheen, transparent at bottom-left, white at top-right."""
    w, h = surface.size
    ys, xs = np.mgrid[0:h, 0:w].astype(np.float64) + 0.5
    t = np.clip((xs + (h - ys)) / (w + h), 0, 1)

    rgba = np.full((h, w, 4), 255, dtype=np.uint8)
    rgba[:, :, 3] = np.round(t * 255 * GRADIENT_OPACITY).astype(np.uint8)
    surface.alpha_composite(Image.fromarray(rgba))
