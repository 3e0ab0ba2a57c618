"""Render targets: the SSD1306 panel and its in-memory stand-in."""
from .target import Point, Rect, RenderTarget, blit
from .simulator import SimulatedTarget
from .oled import Ssd1306Target

__all__ = [
    'Point',
    'Rect',
    'RenderTarget',
    'blit',
    'SimulatedTarget',
    'Ssd1306Target',
]
