"""Line-buffered text and image rendering for a small monochrome OLED."""
from .buffer import LineBuffer
from .display import Display, DisplayConfig, DisplayState
from .errors import (
    DecodeFailure,
    DisplayError,
    DrawFailure,
    FontFailure,
    InitFailure,
    MissingPath,
    NotInitialized,
    OutOfRange,
    Overflow,
    PersistFailure,
)
from .fonts import FontSpec
from .image import open_image, render_image
from .persist import load_lines, save_lines
from .text import render_text

__version__ = "2.0.0"

__all__ = [
    'Display',
    'DisplayConfig',
    'DisplayState',
    'LineBuffer',
    'FontSpec',
    'render_text',
    'render_image',
    'open_image',
    'load_lines',
    'save_lines',
    'DisplayError',
    'NotInitialized',
    'OutOfRange',
    'Overflow',
    'InitFailure',
    'DrawFailure',
    'PersistFailure',
    'MissingPath',
    'DecodeFailure',
    'FontFailure',
]
