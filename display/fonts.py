"""Font selection and the vertical metrics the text rasterizer needs."""
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

from PIL import ImageFont

from constants import DEFAULT_FONT_SIZE
from .errors import FontFailure

# measured when a face has no ascent/descent metrics
_REFERENCE_TEXT = "Ag"


@dataclass(frozen=True)
class FontSpec:
    face: Any
    line_height: int
    ascent: int
    descent: int

    @classmethod
    def from_face(cls, face) -> "FontSpec":
        """Derive line height, ascent and descent from `face`.

        FreeType faces report ascent/descent directly. Bitmap faces only
        have a bounding box, so the descent is taken as zero.
        """
        if hasattr(face, "getmetrics"):
            ascent, descent = face.getmetrics()
            return cls(face, ascent + descent, ascent, descent)
        height = face.getbbox(_REFERENCE_TEXT)[3]
        return cls(face, height, height, 0)

    @classmethod
    def default(cls) -> "FontSpec":
        return cls.from_face(ImageFont.load_default())

    @classmethod
    def load(cls, path: Union[str, Path], size: float = DEFAULT_FONT_SIZE) -> "FontSpec":
        try:
            face = ImageFont.truetype(str(path), max(1, int(round(size))))
        except OSError as e:
            raise FontFailure("failed to load font", "load_font", str(path)) from e
        return cls.from_face(face)
