"""Rendering tests for the full icon pipeline."""

import asyncio
import io

import numpy as np
import pytest
from PIL import Image

BACKGROUND = (155, 77, 202)   # #9b4dca
TINT = (120, 60, 156)         # #9b4dca darkened by 40%


def _png_bytes(img):
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def _render(image_bytes=None, **kwargs):
    from iconforge import IconConfig, render
    kwargs.setdefault("icon_text", "none")
    return render(IconConfig(**kwargs), image_bytes)


def _has_color(region, rgb):
    return bool(np.any(np.all(region[:, :, :3] == rgb, axis=-1)))


def test_plain_square_background():
    surface = _render(style_variant="11.0")
    arr = np.array(surface.image)
    assert surface.size == (300, 300)
    assert surface.image.mode == "RGBA"
    assert surface.issues == []
    assert np.all(arr[:, :, :3] == BACKGROUND)
    assert np.all(arr[:, :, 3] == 255)


@pytest.mark.parametrize("variant", ["12.0", "13.0", "14.0", "15.0"])
def test_rounded_variants_leave_corners_empty(variant):
    arr = np.array(_render(style_variant=variant, icon_width=200).image)
    for y, x in [(0, 0), (0, 199), (199, 0), (199, 199)]:
        assert arr[y, x, 3] == 0
    assert arr[100, 100, 3] == 255


def test_oldest_variant_fills_corners():
    arr = np.array(_render(style_variant="11.0", icon_width=200).image)
    for y, x in [(0, 0), (0, 199), (199, 0), (199, 199)]:
        assert arr[y, x, 3] == 255


def test_default_variant_without_glyph():
    """Rounded background with bevel and gradient, nothing else."""
    surface = _render()
    arr = np.array(surface.image).astype(int)
    assert surface.size == (300, 300)
    assert arr[0, 0, 3] == 0
    # The gradient only depends on the anti-diagonal position
    np.testing.assert_array_equal(arr[100, 100], arr[150, 150])
    np.testing.assert_array_equal(arr[150, 150], arr[200, 200])
    # Brighter toward the top-right corner
    assert arr[30, 270, :3].sum() > arr[270, 30, :3].sum()
    # Dark band along the bottom edge, light band along the top edge
    assert arr[298, 150, :3].sum() < arr[150, 150, :3].sum()
    assert arr[1, 150, :3].sum() > arr[150, 150, :3].sum()
    assert not _has_color(arr, TINT)


def test_glyph_casts_diagonal_hard_shadow():
    from iconforge.shadow import glyph_shadow_count
    assert glyph_shadow_count(300) == 200

    arr = np.array(_render(style_variant="11.0", icon_text="A",
                           font_color="#ffffff").image)
    # Glyph itself in the font color near the center
    assert _has_color(arr[100:200, 100:200], (255, 255, 255))
    # The trail runs toward the lower-left
    assert _has_color(arr[200:300, 0:100], TINT)
    # Nothing above and right of the glyph
    assert np.all(arr[0:60, 240:300, :3] == BACKGROUND)


def test_soft_shadow_only_on_newer_variants():
    from iconforge.font import load_icon_font, rasterize_glyph
    from iconforge.renderer import SOFT_SHADOW_OFFSET
    assert SOFT_SHADOW_OFFSET * 300 == pytest.approx(6)
    old = np.array(_render(style_variant="11.0", icon_text="A").image)
    assert not _has_color(old, (0, 0, 0))

    # Band just below the glyph's lower edge, where the offset shadow lands
    mask = rasterize_glyph(load_icon_font(None, 150.0), "A", (300, 300))
    bottom = np.nonzero(mask.any(axis=1))[0].max()
    cols = np.nonzero(mask[bottom] > 0)[0]
    new = np.array(_render(style_variant="13.0", icon_text="A").image)
    band_old = old[bottom + 1:bottom + 6, cols, :3].astype(int).sum(axis=-1)
    band_new = new[bottom + 1:bottom + 6, cols, :3].astype(int).sum(axis=-1)
    assert band_new.mean() < band_old.mean() - 30


def test_image_layer_and_its_shadow():
    src = Image.new("RGBA", (100, 100), (255, 0, 0, 255))
    surface = _render(_png_bytes(src), style_variant="11.0", image_scale=0.5)
    arr = np.array(surface.image)
    assert surface.issues == []
    # Main image covers the centered 150x150 square
    assert tuple(arr[150, 150, :3]) == (255, 0, 0)
    assert tuple(arr[80, 220, :3]) == (255, 0, 0)
    # Silhouette trail left of and below the image
    assert tuple(arr[240, 40, :3]) == TINT
    # Above the image is untouched
    assert tuple(arr[40, 150, :3]) == BACKGROUND


def test_render_is_idempotent():
    src = Image.new("RGBA", (60, 30), (0, 128, 255, 200))
    kwargs = dict(icon_text="A", icon_width=120, image_scale=0.7)
    first = _render(_png_bytes(src), **kwargs)
    second = _render(_png_bytes(src), **kwargs)
    np.testing.assert_array_equal(np.array(first.image), np.array(second.image))
    assert first.image is not second.image


def test_invalid_background_does_not_crash():
    from iconforge.errors import InvalidColorInput
    surface = _render(icon_background="notacolor", icon_text="A")
    assert any(isinstance(e, InvalidColorInput) for e in surface.issues)
    assert len(surface.issues) == 1

    plain = _render(icon_background="notacolor")
    arr = np.array(surface.image)
    # No hard-shadow trail: the lower-left region matches the glyph-less icon
    np.testing.assert_array_equal(arr[220:280, 20:80],
                                  np.array(plain.image)[220:280, 20:80])


def test_text_input_is_not_an_image():
    from iconforge.errors import NotAnImageInput
    surface = _render(b"just some text", icon_text="A")
    errors = [e for e in surface.issues if isinstance(e, NotAnImageInput)]
    assert len(errors) == 1
    assert errors[0].content_type == "text/plain"

    without_image = _render(icon_text="A")
    np.testing.assert_array_equal(np.array(surface.image),
                                  np.array(without_image.image))


def test_unsupported_variant_draws_plain_background():
    from iconforge.errors import UnsupportedStyleVariant
    surface = _render(style_variant="9.0", icon_text="A")
    assert any(isinstance(e, UnsupportedStyleVariant) for e in surface.issues)
    arr = np.array(surface.image)
    assert surface.size == (300, 300)
    # Plain filled square: every pixel opaque, corners in the background color
    assert np.all(arr[:, :, 3] == 255)
    for y, x in [(0, 0), (0, 299), (299, 0), (299, 299)]:
        assert tuple(arr[y, x, :3]) == BACKGROUND
    # No style effects, so it matches the flat oldest style
    flat = np.array(_render(style_variant="11.0", icon_text="A").image)
    np.testing.assert_array_equal(arr, flat)


def test_png_bytes():
    surface = _render(icon_width=48)
    data = surface.to_png_bytes()
    assert data.startswith(b"\x89PNG")
    assert Image.open(io.BytesIO(data)).size == (48, 48)


def test_superseded_render_is_dropped():
    from iconforge import IconConfig, RenderPipeline
    pipeline = RenderPipeline()
    config = IconConfig(icon_width=64, icon_text="none")
    png = _png_bytes(Image.new("RGBA", (10, 10), (0, 0, 0, 255)))

    async def run_both():
        return await asyncio.gather(pipeline.render_async(config, png),
                                    pipeline.render_async(config, png))

    stale, fresh = asyncio.run(run_both())
    assert stale is None
    assert fresh.size == (64, 64)


def test_generate_with_glyph_lookup():
    from iconforge import CssGlyphMap, generate
    glyphs = CssGlyphMap({"demo-a": "A"}, {"demo": 700})
    img = generate(glyph_lookup=glyphs, icon_class="demo demo-a",
                   icon_width=90, style_variant="11.0")
    arr = np.array(img)
    assert img.size == (90, 90)
    assert _has_color(arr, (255, 255, 255))
