"""Tests for font metrics and the text rasterizer."""
import pytest
from PIL import ImageFont

from display import FontFailure, FontSpec, render_text
from display.text import baseline
from hw.target import Rect

BOUNDS = Rect.of_size(128, 64)


def test_default_font_metrics(font):
    assert font.line_height > 0
    assert font.descent >= 0
    assert font.ascent > 0


def test_freetype_metrics_come_from_face():
    face = ImageFont.load_default()
    spec = FontSpec.from_face(face)
    if hasattr(face, "getmetrics"):
        ascent, descent = face.getmetrics()
        assert (spec.line_height, spec.ascent, spec.descent) == (ascent + descent, ascent, descent)
    else:
        assert spec.descent == 0


class _BitmapFace:
    """Stand-in for a face that only knows its bounding boxes."""
    def getbbox(self, text):
        return (0, 0, 6 * len(text), 11)


def test_bitmap_face_has_no_descent():
    spec = FontSpec.from_face(_BitmapFace())
    assert spec.line_height == 11
    assert spec.descent == 0
    assert baseline(spec, 0) == 11
    assert baseline(spec, 2) == 33


def test_baselines_stack_by_line_height(font):
    for i in range(5):
        assert baseline(font, i) == font.line_height * (i + 1) - font.descent


def test_load_missing_font(tmp_path):
    with pytest.raises(FontFailure):
        FontSpec.load(tmp_path / "missing.ttf", 13)


def test_frame_matches_bounds(font):
    img = render_text(["Hello"], font, BOUNDS)
    assert img.mode == "1"
    assert img.size == (128, 64)


def test_blank_buffer_renders_dark(font):
    img = render_text([""] * 5, font, BOUNDS)
    assert img.getbbox() is None


def test_text_starts_at_left_edge(font):
    img = render_text(["HHHH"], font, BOUNDS)
    left, top, right, bottom = img.getbbox()
    assert left <= 2
    assert bottom <= font.line_height


@pytest.mark.parametrize("index", [1, 2, 3])
def test_line_lands_in_its_band(font, index):
    lines = [""] * 5
    lines[index] = "Hello"
    box = render_text(lines, font, BOUNDS).getbbox()
    assert box is not None
    assert box[1] >= font.line_height * index
    assert box[3] <= font.line_height * (index + 1)


def test_lines_past_bottom_are_not_an_error(font):
    lines = ["line %d" % i for i in range(12)]
    img = render_text(lines, font, BOUNDS)
    assert img.size == (128, 64)
    assert img.getbbox() is not None
