"""Top-level render entry points.

A render waits for two things before it draws: the icon font (and the
glyph lookup that resolves the icon class), and the decode of the user
image. Both run on worker threads; the compositing pass that follows is
a single synchronous burst.
"""

import asyncio
import io
import itertools
import logging
from dataclasses import dataclass, field

from .color import shadow_tint
from .errors import NotAnImageInput
from .font import load_icon_font
from .image import build_silhouette, decode_image, fit_placement
from .renderer import compose

logger = logging.getLogger(__name__)


@dataclass
class RasterSurface:
    """The finished icon, plus any non-fatal issues met while drawing."""

    image: object
    issues: list = field(default_factory=list)

    @property
    def size(self):
        return self.image.size

    def to_png_bytes(self):
        buf = io.BytesIO()
        self.image.save(buf, format="PNG")
        return buf.getvalue()

    def save(self, path):
        self.image.save(str(path), format="PNG")


@dataclass
class _PreparedImage:
    image: object = None
    silhouette: object = None
    placement: object = None


def _prepare_image(data, config, tint):
    """Decode the user image and build its shadow silhouette."""
    image = decode_image(data)
    placement = fit_placement(image.size, int(config.icon_width),
                              config.image_scale)
    silhouette = None
    if tint is not None:
        silhouette = build_silhouette(image, placement, tint)
    return _PreparedImage(image, silhouette, placement)


def _prepare_font(config, glyph_lookup):
    resolved = config.resolved(glyph_lookup)
    font = load_icon_font(resolved.font_family, resolved.font_size,
                          weight=resolved.font_weight,
                          font_path=resolved.font_path)
    return resolved, font


class RenderPipeline:
    """Renders icons from IconConfig snapshots.

    Each call gets its own generation number. If a newer render starts
    while an older one is still waiting for its image decode, the older
    one is dropped once the decode finishes and returns None.
    """

    def __init__(self, glyph_lookup=None):
        self.glyph_lookup = glyph_lookup
        self._generations = itertools.count(1)
        self._current = 0

    async def render_async(self, config, image_bytes=None):
        generation = next(self._generations)
        self._current = generation

        resolved, font = await asyncio.to_thread(
            _prepare_font, config, self.glyph_lookup)
        tint = shadow_tint(resolved.icon_background)

        issues = []
        prepared = _PreparedImage()
        if image_bytes:
            try:
                prepared = await asyncio.to_thread(
                    _prepare_image, image_bytes, resolved, tint)
            except NotAnImageInput as exc:
                logger.warning("Ignoring user image: %s", exc)
                issues.append(exc)

        if generation != self._current:
            logger.debug("Render %d superseded by %d; dropping it",
                         generation, self._current)
            return None

        image = compose(resolved, font, tint,
                        image=prepared.image,
                        silhouette=prepared.silhouette,
                        placement=prepared.placement,
                        issues=issues)
        return RasterSurface(image, issues)

    def render(self, config, image_bytes=None):
        """Synchronous wrapper around render_async."""
        return asyncio.run(self.render_async(config, image_bytes))


def render(config, image_bytes=None, glyph_lookup=None):
    """Render one icon.

    Args:
        config: IconConfig snapshot.
        image_bytes: Optional encoded user image.
        glyph_lookup: Callable mapping an icon class string to a
            GlyphInfo (or None), e.g. a CssGlyphMap.

    Returns:
        RasterSurface with the RGBA icon.
    """
    return RenderPipeline(glyph_lookup).render(config, image_bytes)
