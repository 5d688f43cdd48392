"""Keypoint detection and binary descriptor extraction."""

from typing import List, Optional, Tuple

import cv2
import numpy as np

from locator.geometry.transform import to_grayscale

# ORB takes a C int
INT_MAX = 2 ** 31 - 1


class FeatureExtractor:
    """Extract ORB keypoints with a budget that grows with image area."""

    def __init__(self, min_keypoints: int = 500, keypoint_density: float = 0.005):
        """
        Initialize feature extractor.

        Args:
            min_keypoints: Lower bound on the keypoint budget
            keypoint_density: Keypoints requested per pixel of image area
        """
        self.min_keypoints = min_keypoints
        self.keypoint_density = keypoint_density

    def keypoint_limit(self, image: np.ndarray) -> int:
        """Keypoint budget for an image: density * area, at least min_keypoints."""
        height, width = image.shape[:2]
        limit = int(width * height * self.keypoint_density)
        return min(max(limit, self.min_keypoints), INT_MAX)

    def extract_keypoints(self, image: np.ndarray) -> Tuple[List[cv2.KeyPoint], Optional[np.ndarray]]:
        """
        Extract ORB keypoints and descriptors.

        Returns:
            (keypoints, descriptors); descriptors is None when nothing was found
        """
        orb = cv2.ORB_create(nfeatures=self.keypoint_limit(image))
        gray = to_grayscale(image)
        keypoints, descriptors = orb.detectAndCompute(gray, None)
        return list(keypoints), descriptors


def has_descriptors(descriptors: Optional[np.ndarray]) -> bool:
    """True if a descriptor array holds at least one row."""
    return descriptors is not None and len(descriptors) > 0


def compute_keypoints_and_descriptors(image: np.ndarray) -> Tuple[List[cv2.KeyPoint], Optional[np.ndarray]]:
    """Extract ORB keypoints and descriptors with the default budget."""
    return FeatureExtractor().extract_keypoints(image)
