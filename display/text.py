"""Text rasterizer: line buffer in, 1-bit frame out."""
from typing import Sequence

from PIL import Image, ImageDraw

from hw.target import Rect
from .fonts import FontSpec


def baseline(font: FontSpec, index: int) -> int:
    """Vertical pixel of the baseline of line `index` (0-based)."""
    return font.line_height * (index + 1) - font.descent


def render_text(lines: Sequence[str], font: FontSpec, bounds: Rect) -> Image.Image:
    img = Image.new("1", bounds.size, 0)
    draw = ImageDraw.Draw(img)
    for i, text in enumerate(lines):
        if not text:
            continue
        # Pillow places text by its top edge; shift up from the baseline.
        # Lines past the bottom edge are drawn anyway and simply fall off.
        draw.text((0, baseline(font, i) - font.ascent), text, font=font.face, fill=255)
    return img
