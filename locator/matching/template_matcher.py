"""Normalized cross-correlation template search."""

import logging
from typing import Tuple

import cv2
import numpy as np

from locator.geometry.rect import Rect, image_size, shift_into_bounds
from locator.geometry.transform import to_grayscale

logger = logging.getLogger(__name__)

# Methods whose best match is the minimum of the response map
_MIN_METHODS = ("TM_SQDIFF", "TM_SQDIFF_NORMED")


def validate_scale(scale: float) -> None:
    """Raise ValueError unless 0 < scale <= 1."""
    if not 0.0 < scale <= 1.0:
        raise ValueError("Scale must be between 0 and 1.")


def scaled_size(image: np.ndarray, scale: float) -> Tuple[int, int]:
    width, height = image_size(image)
    return int(round(width * scale)), int(round(height * scale))


def can_resize(haystack: np.ndarray, needle: np.ndarray, scale: float) -> bool:
    """False if either image would shrink to nothing at this scale."""
    if 0 in scaled_size(haystack, scale) or 0 in scaled_size(needle, scale):
        logger.warning("Image vanishes after scaling by %s", scale)
        return False
    return True


def resize_pair(haystack: np.ndarray, needle: np.ndarray,
                scale: float) -> Tuple[np.ndarray, np.ndarray]:
    """Downscale both images by scale. Inputs are never modified."""
    if scale == 1.0:
        return haystack, needle
    return (cv2.resize(haystack, scaled_size(haystack, scale), interpolation=cv2.INTER_LINEAR),
            cv2.resize(needle, scaled_size(needle, scale), interpolation=cv2.INTER_LINEAR))


def _match_channels(haystack: np.ndarray, needle: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Bring both images to the same channel layout."""
    h_channels = 1 if haystack.ndim == 2 else haystack.shape[2]
    n_channels = 1 if needle.ndim == 2 else needle.shape[2]
    if h_channels == n_channels:
        return haystack, needle
    if h_channels == 1 or n_channels == 1:
        return to_grayscale(haystack), to_grayscale(needle)
    # BGR against BGRA
    if h_channels == 4:
        haystack = cv2.cvtColor(haystack, cv2.COLOR_BGRA2BGR)
    if n_channels == 4:
        needle = cv2.cvtColor(needle, cv2.COLOR_BGRA2BGR)
    return haystack, needle


class CorrelationMatcher:
    """Find the single best translation-only match of a needle image."""

    def __init__(self, method: str = "TM_CCOEFF_NORMED"):
        """
        Initialize correlation matcher.

        Args:
            method: Name of an OpenCV template matching method, e.g. "TM_CCOEFF_NORMED"
        """
        if not method.startswith("TM_") or not hasattr(cv2, method):
            raise ValueError(f"Unknown correlation method: {method}")
        self.method = method
        self.method_code = getattr(cv2, method)

    def find(self, haystack: np.ndarray, needle: np.ndarray,
             scale: float = 1.0, grayscale: bool = False) -> Rect:
        """
        Locate needle inside haystack.

        Args:
            haystack: Image to search in
            needle: Image to search for
            scale: Downscale factor in (0, 1] applied to both images before searching
            grayscale: Compare intensity only

        Returns:
            Match rectangle in original haystack coordinates, or Rect.empty()

        Raises:
            ValueError: If scale is outside (0, 1]
        """
        validate_scale(scale)
        if not can_resize(haystack, needle, scale):
            return Rect.empty()

        large, small = resize_pair(haystack, needle, scale)

        if grayscale:
            large = to_grayscale(large)
            small = to_grayscale(small)
        else:
            large, small = _match_channels(large, small)

        small_w, small_h = image_size(small)
        large_w, large_h = image_size(large)
        if small_w > large_w or small_h > large_h:
            logger.warning("Needle %sx%s is larger than haystack %sx%s",
                           small_w, small_h, large_w, large_h)
            return Rect.empty()

        response = cv2.matchTemplate(large, small, self.method_code)
        min_val, max_val, min_loc, max_loc = cv2.minMaxLoc(response)
        if self.method in _MIN_METHODS:
            best_loc, best_val = min_loc, min_val
        else:
            best_loc, best_val = max_loc, max_val
        logger.debug("Best %s score %.4f at %s", self.method, best_val, best_loc)

        match = Rect(best_loc[0], best_loc[1], small_w, small_h).unscaled(scale)
        return shift_into_bounds(match, image_size(haystack))


def find_image_in_image(haystack: np.ndarray, needle: np.ndarray,
                        scale: float = 1.0, grayscale: bool = False) -> Rect:
    """Locate needle inside haystack with normalized cross-correlation."""
    return CorrelationMatcher().find(haystack, needle, scale, grayscale)
