"""Axis-aligned rectangles and bounds clamping."""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned box in pixel coordinates. All-zero means "not found"."""
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0

    @classmethod
    def empty(cls) -> "Rect":
        return cls(0, 0, 0, 0)

    @property
    def is_empty(self) -> bool:
        return self.x == 0 and self.y == 0 and self.width == 0 and self.height == 0

    @property
    def found(self) -> bool:
        return self.width > 0 and self.height > 0

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def center(self) -> Tuple[int, int]:
        return self.x + self.width // 2, self.y + self.height // 2

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return self.x, self.y, self.width, self.height

    def unscaled(self, scale: float) -> "Rect":
        """Map a rect found in an image resized by scale back to full size."""
        return Rect(int(self.x / scale), int(self.y / scale),
                    int(self.width / scale), int(self.height / scale))

    def offset(self, dx: int, dy: int) -> "Rect":
        return Rect(self.x + dx, self.y + dy, self.width, self.height)


def image_size(image: np.ndarray) -> Tuple[int, int]:
    """Return (width, height) of an image array."""
    return int(image.shape[1]), int(image.shape[0])


def clamp_rect(rect: Rect, bounds: Tuple[int, int]) -> Rect:
    """Floor the origin at 0 and cap width/height so rect stays within bounds."""
    bound_w, bound_h = bounds
    x = max(rect.x, 0)
    y = max(rect.y, 0)
    width = min(rect.width, bound_w - x)
    height = min(rect.height, bound_h - y)
    return Rect(x, y, width, height)


def shift_into_bounds(rect: Rect, bounds: Tuple[int, int]) -> Rect:
    """
    Move rect back inside bounds, shrinking only if it is larger than bounds.

    Args:
        rect: Rectangle that may overflow any edge
        bounds: (width, height) of the enclosing area

    Returns:
        Rectangle lying fully inside bounds
    """
    bound_w, bound_h = bounds
    width = min(rect.width, bound_w)
    height = min(rect.height, bound_h)

    x = rect.x
    if x < 0:
        x = 0
    elif x + width > bound_w:
        x = bound_w - width

    y = rect.y
    if y < 0:
        y = 0
    elif y + height > bound_h:
        y = bound_h - height

    return Rect(x, y, width, height)


def contains(rect: Rect, bounds: Tuple[int, int]) -> bool:
    """True if rect is non-degenerate and fully inside bounds."""
    bound_w, bound_h = bounds
    return (rect.width > 0 and rect.height > 0 and
            rect.x >= 0 and rect.y >= 0 and
            rect.right <= bound_w and rect.bottom <= bound_h)


def get_region_of_interest(image: np.ndarray, rect: Rect) -> Optional[np.ndarray]:
    """Return the sub-image under rect, or None if rect is not inside image."""
    if not contains(rect, image_size(image)):
        logger.error("Invalid ROI %s for image of size %s", rect, image_size(image))
        return None
    return image[rect.y:rect.bottom, rect.x:rect.right]
