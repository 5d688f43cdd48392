"""Visualization utilities for debugging and display."""

import logging
from typing import Dict, List, Tuple

import cv2
import numpy as np

from locator.geometry.rect import Rect

logger = logging.getLogger(__name__)


def draw_keypoints(image: np.ndarray, keypoints: List,
                   color: Tuple[int, int, int] = (0, 255, 0)) -> np.ndarray:
    """Draw keypoints on a copy of image."""
    return cv2.drawKeypoints(image, keypoints, None, color=color)


def draw_matches(needle: np.ndarray, needle_keypoints: List,
                 haystack: np.ndarray, haystack_keypoints: List,
                 matches: List[cv2.DMatch]) -> np.ndarray:
    """Draw needle-to-haystack matches side by side."""
    return cv2.drawMatches(needle, needle_keypoints, haystack, haystack_keypoints,
                           matches, None)


def draw_rect(image: np.ndarray, rect: Rect,
              color: Tuple[int, int, int] = (0, 0, 255),
              thickness: int = 2) -> np.ndarray:
    """Draw rect on a copy of image."""
    output = image.copy()
    cv2.rectangle(output, (rect.x, rect.y), (rect.right, rect.bottom), color, thickness)
    return output


def show_images(images: Dict[str, np.ndarray], wait: bool = True):
    """Display each image in its own window, then block until a key press."""
    for window_name, image in images.items():
        if image is None or image.size == 0:
            logger.error("Could not display empty image %r", window_name)
            continue
        cv2.namedWindow(window_name, cv2.WINDOW_AUTOSIZE)
        cv2.imshow(window_name, image)
    if wait:
        cv2.waitKey(0)
