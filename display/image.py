"""Image rasterizer: crop any Pillow image onto the panel, threshold to 1-bit.

No scaling: target pixel (x, y) shows source pixel (x, y). A larger source
is cropped, a smaller one leaves the rest of the panel dark.
"""
import logging
from pathlib import Path
from typing import Union

from PIL import Image, UnidentifiedImageError

from constants import GRAY_THRESHOLD
from hw.target import Rect
from .errors import DecodeFailure

logger = logging.getLogger(__name__)

_ALPHA_MODES = ("RGBA", "LA", "PA", "RGBa", "La")


def to_gray(source: Image.Image) -> Image.Image:
    """8-bit grayscale; transparent areas count as black.

    Samples wider than 8 bits (16-bit PNGs open as "I;16" or "I") keep
    their high byte, so the threshold sits mid-range for them too.
    """
    if source.mode.startswith("I;16"):
        source = source.convert("I")
    if source.mode in ("I", "F"):
        return source.point(lambda v: v * (1 / 256)).convert("L")
    if source.mode in _ALPHA_MODES or (source.mode == "P" and "transparency" in source.info):
        rgba = source.convert("RGBA")
        black = Image.new("RGBA", rgba.size, (0, 0, 0, 255))
        source = Image.alpha_composite(black, rgba)
    return source.convert("L")


def render_image(source: Image.Image, bounds: Rect) -> Image.Image:
    img = Image.new("1", bounds.size, 0)

    # only the overlap of the source and the panel is ever sampled
    w = min(bounds.width, source.width)
    h = min(bounds.height, source.height)
    if w <= 0 or h <= 0:
        return img

    gray = to_gray(source.crop((0, 0, w, h)))
    mono = gray.point(lambda v: 255 if v > GRAY_THRESHOLD else 0, mode="1")
    img.paste(mono, (0, 0))
    return img


def open_image(path: Union[str, Path]) -> Image.Image:
    """Open and fully decode an image file."""
    try:
        with Image.open(path) as im:
            im.load()
            logger.debug("Decoded %s: %s %dx%d", path, im.mode, im.width, im.height)
            # first frame only for animated formats
            return im.copy()
    except FileNotFoundError as e:
        raise DecodeFailure("failed to open image file", "show_image", str(path)) from e
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        raise DecodeFailure("failed to decode image", "show_image", str(path)) from e
