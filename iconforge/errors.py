"""Exceptions reported by the icon rendering pipeline."""


class IconForgeError(Exception):
    """Base class for all IconForge errors."""


class InvalidColorInput(IconForgeError, ValueError):
    """A color string could not be parsed."""

    def __init__(self, color):
        super().__init__(f"Invalid color: {color!r}")
        self.color = color


class UnsupportedStyleVariant(IconForgeError, ValueError):
    """The style variant label is not one of the known versions."""

    def __init__(self, label):
        super().__init__(f"Unsupported style variant: {label!r}")
        self.label = label


class NotAnImageInput(IconForgeError):
    """The supplied image bytes are not a decodable raster image."""

    def __init__(self, content_type):
        super().__init__(f"Input is not an image (detected {content_type})")
        self.content_type = content_type
