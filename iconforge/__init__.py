"""IconForge - Render flat badge icons with long diagonal shadows."""

from .config import IconConfig, StyleVariant
from .glyphs import CssGlyphMap, GlyphInfo
from .pipeline import RasterSurface, RenderPipeline, render

__version__ = "0.1.0"
__all__ = ["generate", "render", "IconConfig", "StyleVariant", "CssGlyphMap",
           "GlyphInfo", "RasterSurface", "RenderPipeline"]


def generate(image_bytes=None, glyph_lookup=None, **kwargs):
    """Generate an icon image.

    Args:
        image_bytes: Optional encoded image to place on the icon.
        glyph_lookup: Optional callable resolving icon classes to glyphs
            (e.g. CssGlyphMap.from_file("all.css")).
        **kwargs: IconConfig parameters (icon_width, icon_background,
            icon_class, icon_text, style_variant, etc.).

    Returns:
        PIL Image in RGBA mode.
    """
    config = IconConfig(**kwargs)
    return render(config, image_bytes, glyph_lookup=glyph_lookup).image
