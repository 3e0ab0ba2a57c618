"""Fixed-capacity line buffer holding the logical screen content."""
from typing import Iterable, List, Sequence

from .errors import OutOfRange, Overflow


def _check_text(text, operation: str) -> None:
    if not isinstance(text, str):
        raise TypeError(f"{operation}: line text must be str, not {type(text).__name__}")


class LineBuffer:
    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError(f"line buffer needs at least one line, got {capacity}")
        self._lines: List[str] = [""] * capacity

    @property
    def capacity(self) -> int:
        return len(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __getitem__(self, index: int) -> str:
        return self._lines[index]

    def __iter__(self):
        return iter(self._lines)

    def snapshot(self) -> List[str]:
        return list(self._lines)

    def clear(self) -> None:
        for i in range(len(self._lines)):
            self._lines[i] = ""

    def set_line(self, index: int, text: str) -> None:
        if index < 0 or index >= len(self._lines):
            raise OutOfRange(
                f"request to draw on line {index} but display only has {len(self._lines)} lines",
                "set_line")
        _check_text(text, "set_line")
        self._lines[index] = text

    def set_lines(self, start: int, texts: Sequence[str]) -> None:
        """Write `texts` from line `start` on; all of them or none."""
        if isinstance(texts, str):
            raise TypeError("set_lines: expected a sequence of lines, got a single str")
        texts = list(texts)
        for text in texts:
            _check_text(text, "set_lines")
        if start < 0:
            raise OutOfRange(f"start line {start} is negative", "set_lines")
        if start + len(texts) > len(self._lines):
            raise Overflow(
                f"{len(texts)} lines from line {start} need more than {len(self._lines)} lines",
                "set_lines")
        for i, text in enumerate(texts):
            self._lines[start + i] = text

    def load(self, lines: Iterable[str]) -> None:
        """Copy `lines` in from index 0, dropping whatever does not fit."""
        for i, text in zip(range(len(self._lines)), lines):
            self._lines[i] = text
