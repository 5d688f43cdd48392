"""Image rotation, color conversion and shape checks."""

import logging

import cv2
import numpy as np

from locator.geometry.rect import Rect

logger = logging.getLogger(__name__)


def rotate_image(image: np.ndarray, direction: str, angle: float) -> np.ndarray:
    """
    Rotate image about its center, keeping the original canvas size.

    Args:
        image: Input image
        direction: "left" or "right"; "left" negates the angle
        angle: Rotation angle in degrees

    Returns:
        Rotated copy, or the input unchanged if direction is invalid
    """
    if direction == "left":
        angle = -angle
    elif direction != "right":
        logger.error("Invalid direction %r. Use 'left' or 'right'.", direction)
        return image

    height, width = image.shape[:2]
    center = (width / 2.0, height / 2.0)
    rotation_matrix = cv2.getRotationMatrix2D(center, angle, 1.0)
    return cv2.warpAffine(image, rotation_matrix, (width, height))


def is_aspect_ratio_close(rect: Rect, reference: np.ndarray,
                          tolerance: float = 0.1) -> bool:
    """
    Check rect's shape against a reference image.

    Either width/height or height/width of rect may match, so a match rotated
    by 90 degrees is still accepted.
    """
    if rect.width <= 0 or rect.height <= 0:
        return False
    ref_height, ref_width = reference.shape[:2]
    if ref_width == 0 or ref_height == 0:
        return False

    rect_ratio = rect.width / rect.height
    rotated_ratio = rect.height / rect.width
    reference_ratio = ref_width / ref_height

    return (abs(rect_ratio - reference_ratio) <= tolerance or
            abs(rotated_ratio - reference_ratio) <= tolerance)


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """Return a single-channel copy of image."""
    if image is None or image.size == 0:
        logger.error("Input image is empty.")
        return image

    if image.ndim == 2:
        return image.copy()
    channels = image.shape[2]
    if channels == 1:
        return image[:, :, 0].copy()
    if channels == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
    return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
