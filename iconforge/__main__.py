"""CLI entry point for IconForge."""

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import IconConfig, StyleVariant
from .errors import NotAnImageInput
from .glyphs import CssGlyphMap
from .pipeline import render


def build_parser():
    parser = argparse.ArgumentParser(
        description="Render a flat badge icon with a long diagonal shadow"
    )
    parser.add_argument(
        "--config", "-c", default=None,
        help="JSON file with icon settings (flags below override it)"
    )
    parser.add_argument(
        "--width", "-W", type=int, default=None,
        help="Icon width and height in pixels (default: 300)"
    )
    parser.add_argument(
        "--background", "-b", default=None,
        help="Background color, hex or rgb() (default: #9b4dca)"
    )
    parser.add_argument(
        "--font-color", default=None,
        help="Glyph color (default: #ffffff)"
    )
    parser.add_argument(
        "--font-family", default=None,
        help="Icon font family or font file name"
    )
    parser.add_argument(
        "--font", "-f", default=None,
        help="Path to the icon font file (.ttf/.otf)"
    )
    parser.add_argument(
        "--font-size", type=float, default=None,
        help="Glyph size in pixels (default: half the icon width)"
    )
    parser.add_argument(
        "--font-weight", type=int, default=None,
        help="Glyph font weight (default: from the stylesheet, else 900)"
    )
    parser.add_argument(
        "--icon-class", "-i", default=None,
        help='Icon classes, e.g. "fas fa-carrot"'
    )
    parser.add_argument(
        "--text", "-t", default=None,
        help='Glyph text to draw instead of a class lookup ("none" for no glyph)'
    )
    parser.add_argument(
        "--css", default=None,
        help="Icon font stylesheet used to resolve --icon-class"
    )
    parser.add_argument(
        "--image", default=None,
        help="Image file to place on the icon"
    )
    parser.add_argument(
        "--image-scale", type=int, default=None,
        help="Image size in percent of the icon width, 1-100 (default: 100)"
    )
    parser.add_argument(
        "--variant", "-V", default=None,
        choices=[v.value for v in StyleVariant],
        help="Style variant (default: 13.0)"
    )
    parser.add_argument(
        "--output", "-o", default="icon.png",
        help="Output file path (default: icon.png)"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Log debug output"
    )
    return parser


def config_from_args(args):
    """Merge the JSON config file and command line flags into an IconConfig."""
    settings = {}
    if args.config:
        settings.update(json.loads(Path(args.config).read_text(encoding="utf-8")))

    overrides = {
        "icon_width": args.width,
        "icon_background": args.background,
        "font_color": args.font_color,
        "font_family": args.font_family,
        "font_path": args.font,
        "font_size": args.font_size,
        "font_weight": args.font_weight,
        "icon_class": args.icon_class,
        "icon_text": args.text,
        "style_variant": args.variant,
    }
    if args.image_scale is not None:
        overrides["image_scale"] = args.image_scale / 100.0
    settings.update({k: v for k, v in overrides.items() if v is not None})
    return IconConfig.from_dict(settings)


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = config_from_args(args)
    except ValueError as exc:
        parser.error(str(exc))

    glyph_lookup = CssGlyphMap.from_file(args.css) if args.css else None
    image_bytes = Path(args.image).read_bytes() if args.image else None

    surface = render(config, image_bytes, glyph_lookup=glyph_lookup)
    for issue in surface.issues:
        if isinstance(issue, NotAnImageInput):
            print(f"Warning: {args.image} is not an image, it was left out",
                  file=sys.stderr)

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    surface.save(output)
    print(f"Saved icon ({surface.size[0]}x{surface.size[1]}) to {output}")


if __name__ == "__main__":
    main()
