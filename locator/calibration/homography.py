"""Robust homography estimation and corner projection."""

import logging
from typing import Optional, Tuple

import cv2
import numpy as np

from locator.geometry.rect import Rect

logger = logging.getLogger(__name__)

DEGENERATE_DET = 1e-9


class HomographyCalculator:
    """Estimate the projective transform between needle and haystack points."""

    def __init__(self, ransac_threshold: float = 3.0, max_iters: int = 2000,
                 random_seed: Optional[int] = None):
        self.ransac_threshold = ransac_threshold
        self.max_iters = max_iters
        self.random_seed = random_seed

    def calculate(self, src_points: np.ndarray,
                  dst_points: np.ndarray) -> Tuple[Optional[np.ndarray], np.ndarray]:
        """
        Calculate homography matrix using RANSAC.

        Args:
            src_points: Nx2 needle points
            dst_points: Nx2 haystack points

        Returns:
            Tuple of (homography matrix or None, boolean inlier mask)
        """
        if len(src_points) < 4 or len(dst_points) < 4:
            return None, np.zeros(len(src_points), dtype=bool)

        if self.random_seed is not None:
            cv2.setRNGSeed(self.random_seed)

        H, mask = cv2.findHomography(np.float32(src_points), np.float32(dst_points),
                                     cv2.RANSAC, self.ransac_threshold,
                                     maxIters=self.max_iters)
        if mask is None:
            return H, np.zeros(len(src_points), dtype=bool)
        return H, mask.ravel().astype(bool)

    @staticmethod
    def is_degenerate(H: Optional[np.ndarray]) -> bool:
        """True if H is missing, malformed or singular."""
        if H is None or H.shape != (3, 3):
            return True
        if not np.all(np.isfinite(H)):
            return True
        return abs(np.linalg.det(H)) < DEGENERATE_DET

    def transform_points(self, points: np.ndarray, H: np.ndarray) -> np.ndarray:
        """Transform points using homography matrix."""
        pts = np.float32(points).reshape(-1, 1, 2)
        return cv2.perspectiveTransform(pts, H).reshape(-1, 2)

    def project_corners(self, width: int, height: int, H: np.ndarray) -> np.ndarray:
        """Project the four corners of a width x height image through H."""
        corners = np.float32([
            [0, 0],
            [width, 0],
            [width, height],
            [0, height]
        ])
        return self.transform_points(corners, H)

    @staticmethod
    def bounding_rect(points: np.ndarray) -> Rect:
        """Axis-aligned bounding rectangle of a point set."""
        x, y, w, h = cv2.boundingRect(np.float32(points))
        return Rect(int(x), int(y), int(w), int(h))

    def calculate_reprojection_error(self, src_points: np.ndarray,
                                     dst_points: np.ndarray,
                                     H: Optional[np.ndarray]) -> float:
        """Average distance in pixels between projected src and dst points."""
        if H is None or len(src_points) == 0:
            return float('inf')
        transformed = self.transform_points(src_points, H)
        errors = np.linalg.norm(transformed - np.float32(dst_points), axis=1)
        return float(np.mean(errors))
