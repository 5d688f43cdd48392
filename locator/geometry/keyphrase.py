"""Region-of-interest derivation from directional keyphrases.

A keyphrase is a whitespace separated list of ``direction fraction`` pairs,
e.g. ``"left 1/2 bottom 1/3"``. Each pair narrows the rectangle produced by
the previous one. ``right``, ``bottom`` and ``center`` anchor against the full
image, not the current rectangle.
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple

from locator.geometry.rect import Rect, clamp_rect

logger = logging.getLogger(__name__)

DEFAULT_KEYPHRASE = "default"


def parse_fraction(token: str) -> Optional[float]:
    """Parse "a/b" or a decimal literal. Returns None if malformed."""
    try:
        if '/' in token:
            numerator, denominator = token.split('/', 1)
            return float(numerator) / float(denominator)
        return float(token)
    except (ValueError, ZeroDivisionError):
        return None


def _right(roi: Rect, size: Tuple[int, int], fraction: float) -> Rect:
    width = size[0]
    new_width = int(width * fraction)
    return Rect(width - new_width, roi.y, new_width, roi.height)


def _left(roi: Rect, size: Tuple[int, int], fraction: float) -> Rect:
    return Rect(roi.x, roi.y, int(size[0] * fraction), roi.height)


def _bottom(roi: Rect, size: Tuple[int, int], fraction: float) -> Rect:
    height = size[1]
    new_height = int(height * fraction)
    return Rect(roi.x, height - new_height, roi.width, new_height)


def _top(roi: Rect, size: Tuple[int, int], fraction: float) -> Rect:
    return Rect(roi.x, roi.y, roi.width, int(size[1] * fraction))


def _center(roi: Rect, size: Tuple[int, int], fraction: float) -> Rect:
    width, height = size
    new_width = int(width * fraction)
    new_height = int(height * fraction)
    return Rect((width - new_width) // 2, (height - new_height) // 2,
                new_width, new_height)


DIRECTIONS: Dict[str, Callable[[Rect, Tuple[int, int], float], Rect]] = {
    "right": _right,
    "left": _left,
    "bottom": _bottom,
    "top": _top,
    "center": _center,
}


class KeyphraseParser:
    """Turn keyphrases into rectangles relative to an image size."""

    def __init__(self, default_keyphrase: str = DEFAULT_KEYPHRASE):
        self.default_keyphrase = default_keyphrase

    def tokenize(self, keyphrase: str) -> List[Tuple[str, str]]:
        """Split into (direction, fraction) pairs; a trailing odd token is dropped."""
        tokens = keyphrase.split()
        return list(zip(tokens[0::2], tokens[1::2]))

    def parse(self, keyphrase: str, image_size: Tuple[int, int]) -> Rect:
        """
        Derive a rectangle from a keyphrase.

        Args:
            keyphrase: "default" or a sequence of direction/fraction pairs
            image_size: (width, height) of the target image

        Returns:
            Clamped rectangle; the full-image rectangle on any malformed token
        """
        width, height = image_size
        full = Rect(0, 0, width, height)

        if keyphrase.strip() == self.default_keyphrase:
            return full

        roi = full
        for direction, fraction_token in self.tokenize(keyphrase):
            apply = DIRECTIONS.get(direction)
            if apply is None:
                logger.warning("Invalid direction: %s", direction)
                return full

            fraction = parse_fraction(fraction_token)
            if fraction is None or not 0 < fraction <= 1:
                logger.warning("Invalid fraction %r for direction %s",
                               fraction_token, direction)
                return full

            roi = apply(roi, image_size, fraction)

        return clamp_rect(roi, image_size)


def roi_from_keyphrase(keyphrase: str, image_size: Tuple[int, int]) -> Rect:
    """Derive a rectangle from a keyphrase using the default parser."""
    return KeyphraseParser().parse(keyphrase, image_size)
