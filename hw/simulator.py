"""In-memory SSD1306 stand-in for dry runs, previews and tests.

The frame is guarded by a lock so a viewer thread can copy it while a
commit is drawing.
"""
import io
import logging
import threading
from pathlib import Path
from typing import Optional, Tuple, Union

from PIL import Image

from constants import OLED_SIZE
from hw.target import Point, Rect, blit

logger = logging.getLogger(__name__)


class SimulatedTarget:
    def __init__(self, size: Tuple[int, int] = OLED_SIZE):
        self.width, self.height = size
        self._lock = threading.Lock()
        self._frame: Optional[Image.Image] = None
        self.draw_count = 0

    @property
    def is_open(self) -> bool:
        return self._frame is not None

    def open(self) -> None:
        with self._lock:
            # black, like an unlit panel
            self._frame = Image.new("1", (self.width, self.height), 0)
        logger.debug("Simulated display %dx%d opened", self.width, self.height)

    def close(self) -> None:
        with self._lock:
            self._frame = None
        logger.debug("Simulated display closed")

    def bounds(self) -> Rect:
        return Rect.of_size(self.width, self.height)

    def draw(self, region: Rect, frame: Image.Image, offset: Point = Point()) -> None:
        with self._lock:
            if self._frame is None:
                raise RuntimeError("simulated display has not been opened")
            blit(self._frame, region, frame, offset)
            self.draw_count += 1

    def frame(self) -> Image.Image:
        """Return a copy of the current screen contents."""
        with self._lock:
            if self._frame is None:
                raise RuntimeError("simulated display has not been opened")
            return self._frame.copy()

    def to_png(self) -> bytes:
        buf = io.BytesIO()
        self.frame().convert("RGB").save(buf, format="PNG")
        return buf.getvalue()

    def save(self, path: Union[str, Path]) -> None:
        Path(path).write_bytes(self.to_png())
        logger.info("Saved simulated display to %s", path)
