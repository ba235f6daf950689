"""Icon configuration and style variants."""

import dataclasses
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)

NO_GLYPH = "none"
DEFAULT_FONT_WEIGHT = 900


class StyleVariant(str, Enum):
    """Visual style generations of the icon.

    The oldest style is a flat square. Every newer style has rounded
    corners, an inline bevel, a soft glyph shadow and a gradient overlay.
    """

    V11 = "11.0"
    V12 = "12.0"
    V13 = "13.0"
    V14 = "14.0"
    V15 = "15.0"

    @classmethod
    def parse(cls, label):
        """Return the variant for `label`, or None if it is unknown."""
        if isinstance(label, cls):
            return label
        try:
            return cls(str(label))
        except ValueError:
            return None

    @property
    def is_oldest(self):
        return self is StyleVariant.V11


# camelCase names used by the web form settings
_ALIASES = {
    "fontColor": "font_color",
    "fontFamily": "font_family",
    "fontPath": "font_path",
    "fontSize": "font_size",
    "fontWeight": "font_weight",
    "iconBackground": "icon_background",
    "iconClass": "icon_class",
    "iconText": "icon_text",
    "iconWidth": "icon_width",
    "imageScale": "image_scale",
    "styleVariant": "style_variant",
}


@dataclass(frozen=True)
class IconConfig:
    """Configuration for a single icon render."""

    # Glyph
    font_color: str = "#ffffff"
    font_family: str = "Font Awesome 5 Free"
    font_path: Optional[str] = None
    font_size: Optional[float] = None
    font_weight: Optional[int] = None
    icon_class: str = "fas fa-address-card"
    icon_text: Optional[str] = None

    # Canvas
    icon_background: str = "#9b4dca"
    icon_width: int = 300
    style_variant: str = StyleVariant.V13.value

    # User image
    image_scale: float = 1.0

    def __post_init__(self):
        if self.icon_width <= 0:
            raise ValueError(f"icon_width must be positive, got {self.icon_width}")
        if not 0 < self.image_scale <= 1:
            raise ValueError(
                f"image_scale must be in (0, 1], got {self.image_scale}")
        if self.font_size is not None and self.font_size <= 0:
            raise ValueError(f"font_size must be positive, got {self.font_size}")

    @classmethod
    def from_dict(cls, values):
        """Build a config from a mapping of snake_case or camelCase keys."""
        fields = {f.name for f in dataclasses.fields(cls)}
        kwargs = {}
        for key, value in values.items():
            name = _ALIASES.get(key, key)
            if name not in fields:
                raise ValueError(f"Unknown icon setting: {key!r}")
            kwargs[name] = value
        return cls(**kwargs)

    @property
    def variant(self):
        """The parsed StyleVariant, or None for an unknown label."""
        return StyleVariant.parse(self.style_variant)

    def resolved(self, glyph_lookup=None):
        """Return a copy with the dependent defaults filled in.

        Explicit values always win. The font size follows the icon width,
        and the glyph text and weight come from `glyph_lookup` applied to
        `icon_class` when no text was given.
        """
        font_size = self.font_size
        if font_size is None:
            font_size = self.icon_width * 0.5

        icon_text = self.icon_text
        font_weight = self.font_weight
        if icon_text is None:
            info = glyph_lookup(self.icon_class) if glyph_lookup is not None else None
            if info is None:
                logger.debug("No glyph found for class %r", self.icon_class)
                icon_text = NO_GLYPH
            else:
                icon_text = info.codepoint
                if font_weight is None:
                    font_weight = info.font_weight
        if font_weight is None:
            font_weight = DEFAULT_FONT_WEIGHT

        return dataclasses.replace(
            self, font_size=font_size, icon_text=icon_text,
            font_weight=int(font_weight))

    @property
    def has_glyph(self):
        return bool(self.icon_text) and self.icon_text != NO_GLYPH
