"""SSD1306 OLED render target.
Keeps a 1-bit mirror of the panel; every draw is blitted into the mirror
and the whole mirror is pushed to the display.
"""
import logging
import re
from typing import Optional, Tuple

from PIL import Image

from constants import OLED_ADDR, OLED_DEVICE, OLED_SIZE
from hw.target import Point, Rect, blit

logger = logging.getLogger(__name__)

_BUS_RE = re.compile(r"^/dev/i2c-(\d+)$")


def bus_number(device: Optional[str]) -> Optional[int]:
    """Return N for '/dev/i2c-N' (or a bare 'N'), None for the board default bus."""
    if not device:
        return None
    if device.isdigit():
        return int(device)
    m = _BUS_RE.match(device)
    if not m:
        raise ValueError(f"not an i2c bus device: {device}")
    return int(m.group(1))


class Ssd1306Target:
    def __init__(self, device: Optional[str] = OLED_DEVICE, addr: int = OLED_ADDR,
                 size: Tuple[int, int] = OLED_SIZE):
        self.device = device
        self.addr = addr
        self.width, self.height = size
        self._i2c = None
        self._oled = None
        self._mirror: Optional[Image.Image] = None

    def _open_bus(self):
        bus = bus_number(self.device)
        if bus is None:
            import board, busio
            return busio.I2C(board.SCL, board.SDA)
        from adafruit_extended_bus import ExtendedI2C
        return ExtendedI2C(bus)

    def open(self) -> None:
        import adafruit_ssd1306

        self._i2c = self._open_bus()
        try:
            self._oled = adafruit_ssd1306.SSD1306_I2C(self.width, self.height, self._i2c, addr=self.addr)
        except Exception:
            self._release_bus()
            raise
        self._mirror = Image.new("1", (self.width, self.height))
        logger.debug("Opened SSD1306 %dx%d at 0x%02X on %s",
                     self.width, self.height, self.addr, self.device or "default bus")

    def close(self) -> None:
        if self._oled is not None:
            self._oled.fill(0)
            self._oled.show()
            self._oled = None
        self._release_bus()
        self._mirror = None
        logger.debug("Closed SSD1306 on %s", self.device or "default bus")

    def _release_bus(self):
        if self._i2c is not None:
            self._i2c.deinit()
            self._i2c = None

    def bounds(self) -> Rect:
        return Rect.of_size(self.width, self.height)

    def draw(self, region: Rect, frame: Image.Image, offset: Point = Point()) -> None:
        if self._oled is None:
            raise RuntimeError("ssd1306 has not been opened")
        blit(self._mirror, region, frame, offset)
        self._oled.image(self._mirror)
        self._oled.show()
