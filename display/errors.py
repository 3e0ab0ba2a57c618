"""
Display Error Hierarchy
=======================

DisplayError (base)
├── NotInitialized - operation needs a successful initialize()
├── OutOfRange     - single line index beyond the buffer
├── Overflow       - multi-line write would run past the buffer
├── InitFailure    - render target failed to open
├── DrawFailure    - render target rejected a draw
├── PersistFailure - buffer file could not be read or written
│   └── MissingPath - no buffer file path given
├── DecodeFailure  - image file could not be opened or decoded
└── FontFailure    - font file could not be loaded

Every error carries the operation that failed and, where there is one,
the resource involved (a file path, a device). The underlying exception
is chained as ``__cause__``.
"""
from typing import Optional


class DisplayError(Exception):
    def __init__(self, message: str, operation: Optional[str] = None,
                 resource: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.resource = resource

    def __str__(self) -> str:
        parts = []
        if self.operation:
            parts.append(f"{self.operation}: ")
        parts.append(self.message)
        if self.resource:
            parts.append(f" ({self.resource})")
        cause = self.__cause__
        if cause is not None:
            parts.append(f": {cause}")
        return "".join(parts)


class NotInitialized(DisplayError):
    def __init__(self, operation: Optional[str] = None):
        super().__init__("display has not been initialized", operation)


class OutOfRange(DisplayError, IndexError):
    pass


class Overflow(DisplayError):
    pass


class InitFailure(DisplayError):
    pass


class DrawFailure(DisplayError):
    pass


class PersistFailure(DisplayError):
    pass


class MissingPath(PersistFailure, ValueError):
    pass


class DecodeFailure(DisplayError):
    pass


class FontFailure(DisplayError):
    pass
