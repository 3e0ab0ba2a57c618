"""Buffer file: plain UTF-8 text, one display line per file line."""
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

from .errors import MissingPath, PersistFailure

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def load_lines(path: Optional[PathLike], capacity: int) -> Optional[List[str]]:
    """Read at most `capacity` lines from `path`.

    Returns None when the file does not exist; that is not an error.
    """
    if not path:
        raise MissingPath("buffer file path is undefined", "load")
    try:
        data = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("No buffer file at %s; starting blank", path)
        return None
    except (OSError, UnicodeDecodeError) as e:
        raise PersistFailure("failed to read buffer file", "load", str(path)) from e

    lines = data.split("\n")[:capacity]
    logger.debug("Loaded %d lines from %s", len(lines), path)
    return lines


def save_lines(path: Optional[PathLike], lines: Sequence[str]) -> None:
    if not path:
        raise MissingPath("buffer file path is undefined", "save")
    try:
        Path(path).write_text("\n".join(lines), encoding="utf-8")
    except OSError as e:
        raise PersistFailure("failed to write buffer file", "save", str(path)) from e
    logger.debug("Saved %d lines to %s", len(lines), path)
