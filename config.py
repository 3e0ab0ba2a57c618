# config.py
from __future__ import annotations
import json, logging, os, tempfile
from pathlib import Path
from typing import Any, Dict

from constants import (
    CONFIG_PATH,
    DEFAULT_FONT_SIZE,
    DEFAULT_IMAGE_INTERVAL,
    DEFAULT_MAX_LINES,
    OLED_ADDR,
    OLED_DEVICE,
)

logger = logging.getLogger(__name__)

DEFAULTS: Dict[str, Any] = {
    # Hardware
    "device": OLED_DEVICE,         # linux i2c bus path
    "address": OLED_ADDR,          # ssd1306 i2c address

    # Buffer
    "lines": DEFAULT_MAX_LINES,
    "buffer_file": None,           # keep lines across runs when set

    # Text
    "font": None,                  # path to a .ttf; None uses the built-in face
    "font_size": DEFAULT_FONT_SIZE,

    # Image sequences
    "image_interval": DEFAULT_IMAGE_INTERVAL,
}

class Config:
    def __init__(self, path: Path | None = None):
        self.path = Path(path) if path else CONFIG_PATH
        self._data: Dict[str, Any] = dict(DEFAULTS)

    def load(self) -> "Config":
        try:
            if self.path.exists():
                on_disk = json.loads(self.path.read_text())
                if isinstance(on_disk, dict):
                    self._data.update(on_disk)
                else:
                    logger.warning("Ignoring config %s: not a JSON object", self.path)
        except (OSError, ValueError) as e:
            # Ignore corrupt JSON; keep defaults
            logger.warning("Ignoring unreadable config %s: %s", self.path, e)
        return self

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        if key not in DEFAULTS:
            raise KeyError(f"unknown setting '{key}'")
        self._data[key] = value

    def save(self) -> None:
        """Write the settings that differ from DEFAULTS, replacing the file in one step."""
        changed = {k: v for k, v in self._data.items() if DEFAULTS.get(k) != v}
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=".config-", suffix=".json", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(changed, f, indent=2, sort_keys=True)
                f.write("\n")
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self.path)
        except OSError:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise
        logger.info("Saved settings to %s", self.path)
