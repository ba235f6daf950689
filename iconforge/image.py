"""User image decoding, placement and shadow silhouettes."""

import io
import logging
from dataclasses import dataclass

import numpy as np
from PIL import Image, UnidentifiedImageError

from .color import to_rgba
from .errors import NotAnImageInput

logger = logging.getLogger(__name__)

_SIGNATURES = (
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"II*\x00", "image/tiff"),
    (b"MM\x00*", "image/tiff"),
    (b"\x00\x00\x01\x00", "image/x-icon"),
    (b"BM", "image/bmp"),
)


def sniff_content_type(data):
    """Guess the MIME type of `data` from its leading bytes."""
    for magic, mime in _SIGNATURES:
        if data.startswith(magic):
            return mime
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"

    head = data[:1024]
    if b"\x00" in head:
        return "application/octet-stream"
    try:
        text = head.decode("utf-8")
    except UnicodeDecodeError:
        return "application/octet-stream"
    if "<svg" in text.lower():
        return "image/svg+xml"
    return "text/plain"


def decode_image(data):
    """Decode image bytes into an RGBA Pillow image.

    Raises:
        NotAnImageInput: if the bytes are not a raster image Pillow can
            read.
    """
    content_type = sniff_content_type(data)
    if not content_type.startswith("image/"):
        raise NotAnImageInput(content_type)
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError,
            ValueError, SyntaxError) as exc:
        raise NotAnImageInput(content_type) from exc
    logger.debug("Decoded %s image %dx%d", content_type, *img.size)
    return img.convert("RGBA")


@dataclass(frozen=True)
class FittedImagePlacement:
    """Where the user image lands on the icon canvas.

    The image keeps its aspect ratio, is centered, and its longer side
    spans the canvas times the image scale.
    """
    ratio: float
    width: float
    height: float
    x: float
    y: float

    @property
    def size(self):
        """Pixel size of the placed image."""
        return (max(1, int(round(self.width))), max(1, int(round(self.height))))

    @property
    def origin(self):
        """Top-left pixel of the placed image."""
        return (int(round(self.x)), int(round(self.y)))


def fit_placement(src_size, canvas_size, scale):
    """Compute the placement of an image of `src_size` on a square canvas."""
    src_w, src_h = src_size
    if src_w >= src_h:
        ratio = src_h / src_w
        width = canvas_size * scale
        height = canvas_size * ratio * scale
    else:
        ratio = src_w / src_h
        width = canvas_size * ratio * scale
        height = canvas_size * scale
    return FittedImagePlacement(
        ratio=ratio,
        width=width,
        height=height,
        x=canvas_size / 2 - width / 2,
        y=canvas_size / 2 - height / 2,
    )


def place_image(img, placement):
    """Scale the whole source image to the placement size (no cropping)."""
    if img.size == placement.size:
        return img.copy()
    return img.resize(placement.size, Image.LANCZOS)


def recolor_silhouette(img, tint):
    """Recolor every visible pixel of `img` to `tint`, keeping alpha.

    Fully transparent pixels are left untouched.
    """
    r, g, b, _ = to_rgba(tint)
    arr = np.array(img.convert("RGBA"))
    visible = arr[:, :, 3] != 0
    arr[visible, 0] = r
    arr[visible, 1] = g
    arr[visible, 2] = b
    return Image.fromarray(arr)


def build_silhouette(source, placement, tint):
    """Build the shadow silhouette for a user image.

    Args:
        source: Encoded image bytes or an already decoded Pillow image.
        placement: FittedImagePlacement for the current canvas.
        tint: Shadow color.

    Returns:
        RGBA image of the placement's pixel size.
    """
    if isinstance(source, (bytes, bytearray)):
        source = decode_image(bytes(source))
    silhouette = recolor_silhouette(place_image(source, placement), tint)

    # Round-trip through PNG so the silhouette is an independent raster
    buf = io.BytesIO()
    silhouette.save(buf, format="PNG")
    buf.seek(0)
    reloaded = Image.open(buf)
    reloaded.load()
    return reloaded.convert("RGBA")
