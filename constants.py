"""
central hardware & app constants for display1306
edit here if wiring/addresses change
"""
import os
from pathlib import Path


#------------------------//
# OLED CONSTANTS
#----------------------//

OLED_DEVICE    = "/dev/i2c-1"   # default linux i2c bus
OLED_ADDR      = 0x3C           # i2c address (some panels strap 0x3D)
OLED_WIDTH     = 128
OLED_HEIGHT    = 64
OLED_SIZE      = (OLED_WIDTH, OLED_HEIGHT)


#------------------------//
# DISPLAY CONSTANTS
#----------------------//

DEFAULT_MAX_LINES = 5
DEFAULT_FONT_SIZE = 13.0        # points, only used with a truetype font

GRAY_THRESHOLD = 128            # gray level above this is a lit pixel


#------------------------//
# CLI CONSTANTS
#----------------------//

DEFAULT_IMAGE_INTERVAL = 0.03   # seconds between images

CONFIG_PATH = Path(
    os.environ.get("DISPLAY1306_CONFIG")
    or Path.home() / ".config" / "display1306" / "config.json"
)
