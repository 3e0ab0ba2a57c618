"""Render target contract shared by the hardware and simulated screens.

A render target exposes four operations: open, close, bounds and draw.
Frames are Pillow images in mode "1" (one bit per pixel).
"""
from typing import NamedTuple, Protocol, runtime_checkable

from PIL import Image


class Point(NamedTuple):
    x: int = 0
    y: int = 0


class Rect(NamedTuple):
    """Pixel rectangle, min corner inclusive and max corner exclusive.

    Field order matches Pillow's (left, upper, right, lower) box tuples.
    """
    x0: int
    y0: int
    x1: int
    y1: int

    @classmethod
    def of_size(cls, width: int, height: int) -> "Rect":
        return cls(0, 0, width, height)

    @property
    def width(self) -> int:
        return self.x1 - self.x0

    @property
    def height(self) -> int:
        return self.y1 - self.y0

    @property
    def size(self):
        return (self.width, self.height)

    @property
    def origin(self) -> Point:
        return Point(self.x0, self.y0)

    def intersect(self, other: "Rect") -> "Rect":
        r = Rect(max(self.x0, other.x0), max(self.y0, other.y0),
                 min(self.x1, other.x1), min(self.y1, other.y1))
        if r.x0 >= r.x1 or r.y0 >= r.y1:
            return Rect(r.x0, r.y0, r.x0, r.y0)
        return r

    def is_empty(self) -> bool:
        return self.x0 >= self.x1 or self.y0 >= self.y1


@runtime_checkable
class RenderTarget(Protocol):
    def open(self) -> None: ...
    def close(self) -> None: ...
    def bounds(self) -> Rect: ...
    def draw(self, region: Rect, frame: Image.Image, offset: Point) -> None: ...


def blit(dest: Image.Image, region: Rect, frame: Image.Image, offset: Point = Point()) -> None:
    """Copy `frame` into `region` of `dest`.

    Destination pixel (x, y) takes source pixel
    (offset.x + x - region.x0, offset.y + y - region.y0). Destination
    pixels whose source falls outside `frame` are left untouched.
    """
    region = region.intersect(Rect.of_size(*dest.size))
    if region.is_empty():
        return

    # source rectangle that region maps onto, clipped to the frame
    src = Rect(offset.x, offset.y, offset.x + region.width, offset.y + region.height)
    clipped = src.intersect(Rect.of_size(*frame.size))
    if clipped.is_empty():
        return

    patch = frame.crop(tuple(clipped))
    if patch.mode != dest.mode:
        patch = patch.convert(dest.mode)
    dest.paste(patch, (region.x0 + clipped.x0 - src.x0, region.y0 + clipped.y0 - src.y0))
