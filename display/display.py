"""Display: line buffer + font + render target, with optional buffer file.

Lifecycle is CONFIGURED -> INITIALIZED -> CLOSED. Nothing touches the
render target before initialize(), and every buffer or draw operation
raises NotInitialized until it has succeeded.

    cfg = DisplayConfig(target=SimulatedTarget(), buffer_file="/tmp/oled.txt")
    with Display(cfg) as d:
        d.set_lines(1, ["hello", "world"])
        d.commit()
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence, Union

from PIL import Image

from constants import DEFAULT_MAX_LINES, OLED_ADDR, OLED_DEVICE
from hw.target import Point, RenderTarget
from .buffer import LineBuffer
from .errors import DrawFailure, InitFailure, NotInitialized
from .fonts import FontSpec
from .image import open_image, render_image
from .persist import load_lines, save_lines
from .text import render_text

logger = logging.getLogger(__name__)


class DisplayState(Enum):
    CONFIGURED = "configured"
    INITIALIZED = "initialized"
    CLOSED = "closed"


@dataclass(frozen=True)
class DisplayConfig:
    target: Optional[RenderTarget] = None
    lines: int = DEFAULT_MAX_LINES
    font: Optional[FontSpec] = None
    buffer_file: Optional[Union[str, Path]] = None
    device: Optional[str] = OLED_DEVICE
    address: int = OLED_ADDR

    def finalize(self) -> "DisplayConfig":
        """Fill in the default font and the hardware target."""
        if self.lines < 1:
            raise ValueError(f"display needs at least one line, got {self.lines}")
        cfg = self
        if cfg.font is None:
            cfg = replace(cfg, font=FontSpec.default())
        if cfg.target is None:
            from hw.oled import Ssd1306Target
            cfg = replace(cfg, target=Ssd1306Target(cfg.device, cfg.address))
        return cfg


class Display:
    def __init__(self, config: Optional[DisplayConfig] = None):
        self.config = (config or DisplayConfig()).finalize()
        self.target: RenderTarget = self.config.target
        self.font: FontSpec = self.config.font
        self.buffer_file = self.config.buffer_file
        self.state = DisplayState.CONFIGURED
        self._buffer: Optional[LineBuffer] = None

    @property
    def line_count(self) -> int:
        return self.config.lines

    @property
    def initialized(self) -> bool:
        return self.state is DisplayState.INITIALIZED

    @property
    def lines(self) -> List[str]:
        self._require_init("lines")
        return self._buffer.snapshot()

    def _require_init(self, operation: str) -> None:
        if not self.initialized:
            raise NotInitialized(operation)

    # -- lifecycle ---------------------------------------------------------

    def initialize(self) -> "Display":
        if self.initialized:
            return self

        buffer = LineBuffer(self.line_count)
        if self.buffer_file:
            loaded = load_lines(self.buffer_file, self.line_count)
            if loaded is not None:
                buffer.load(loaded)

        try:
            self.target.open()
        except Exception as e:
            raise InitFailure("failed to initialize device", "initialize",
                              type(self.target).__name__) from e

        self._buffer = buffer
        self.state = DisplayState.INITIALIZED
        logger.debug("Display initialized with %d lines", self.line_count)
        return self

    def close(self) -> None:
        if not self.initialized:
            return
        self.state = DisplayState.CLOSED
        self.target.close()
        logger.debug("Display closed")

    def __enter__(self) -> "Display":
        return self.initialize()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -- line buffer -------------------------------------------------------

    def clear(self) -> None:
        self._require_init("clear")
        self._buffer.clear()

    def set_line(self, index: int, text: str) -> None:
        self._require_init("set_line")
        self._buffer.set_line(index, text)

    def set_lines(self, start: int, texts: Sequence[str]) -> None:
        self._require_init("set_lines")
        self._buffer.set_lines(start, texts)

    def set_font(self, font: FontSpec) -> None:
        self.font = font

    # -- persistence -------------------------------------------------------

    def load_from_file(self, path: Optional[Union[str, Path]] = None) -> None:
        self._require_init("load_from_file")
        loaded = load_lines(path or self.buffer_file, self.line_count)
        if loaded is not None:
            self._buffer.load(loaded)

    def save_to_file(self, path: Optional[Union[str, Path]] = None) -> None:
        self._require_init("save_to_file")
        save_lines(path or self.buffer_file, self._buffer.snapshot())

    # -- drawing -----------------------------------------------------------

    def _draw(self, frame: Image.Image, operation: str) -> None:
        bounds = self.target.bounds()
        try:
            self.target.draw(bounds, frame, Point(0, 0))
        except Exception as e:
            raise DrawFailure("failed to draw on display", operation,
                              type(self.target).__name__) from e

    def commit(self) -> None:
        """Save the buffer file (if any), then draw the buffer.

        A failed save raises before anything is drawn.
        """
        self._require_init("commit")
        if self.buffer_file:
            save_lines(self.buffer_file, self._buffer.snapshot())
        frame = render_text(self._buffer.snapshot(), self.font, self.target.bounds())
        self._draw(frame, "commit")

    def show_image(self, image: Image.Image) -> None:
        self._require_init("show_image")
        self._draw(render_image(image, self.target.bounds()), "show_image")

    def show_image_file(self, path: Union[str, Path]) -> None:
        self._require_init("show_image")
        self.show_image(open_image(path))

    def clear_screen(self) -> None:
        """Blank the panel without touching the line buffer."""
        self._require_init("clear_screen")
        bounds = self.target.bounds()
        self._draw(Image.new("1", bounds.size, 0), "clear_screen")
