"""Feature-based localization: cross-checked ORB matches and a RANSAC homography."""

import logging
from typing import Callable, Dict, List, Optional

import cv2
import numpy as np

from locator.calibration.homography import HomographyCalculator
from locator.calibration.optimizer import HomographyOptimizer
from locator.detection.feature_extractor import FeatureExtractor, has_descriptors
from locator.geometry.rect import Rect, contains, image_size
from locator.geometry.transform import is_aspect_ratio_close
from locator.matching.template_matcher import can_resize, resize_pair, validate_scale
from locator.utils.visualization import draw_keypoints, draw_matches, show_images

logger = logging.getLogger(__name__)

MAX_MATCH_SCORE = 256


def clamp_match_score(min_match_score: float) -> float:
    return min(max(min_match_score, 0), MAX_MATCH_SCORE)


class FeatureMatcher:
    """Locate a needle that may be rotated, scaled or skewed in the haystack."""

    def __init__(self, extractor: Optional[FeatureExtractor] = None,
                 homography: Optional[HomographyCalculator] = None,
                 optimizer: Optional[HomographyOptimizer] = None,
                 min_good_matches: int = 4,
                 aspect_tolerance: float = 0.2,
                 viewer: Callable[[Dict[str, np.ndarray]], None] = show_images):
        """
        Initialize feature matcher.

        Args:
            extractor: Keypoint/descriptor extractor
            homography: Robust homography estimator
            optimizer: Optional refinement applied to the RANSAC inliers
            min_good_matches: Fewest filtered matches accepted for a fit
            aspect_tolerance: Allowed aspect ratio deviation of the result
            viewer: Receives debug images keyed by window name
        """
        self.extractor = extractor or FeatureExtractor()
        self.homography = homography or HomographyCalculator()
        self.optimizer = optimizer
        self.min_good_matches = max(min_good_matches, 4)
        self.aspect_tolerance = aspect_tolerance
        self.viewer = viewer
        self.bf = cv2.BFMatcher(cv2.NORM_HAMMING, crossCheck=True)

    def match_descriptors(self, needle_descriptors: np.ndarray,
                          haystack_descriptors: np.ndarray) -> List[cv2.DMatch]:
        """Mutual nearest neighbours under Hamming distance, needle as query."""
        return list(self.bf.match(needle_descriptors, haystack_descriptors))

    def filter_matches(self, matches: List[cv2.DMatch],
                       min_match_score: float) -> List[cv2.DMatch]:
        """
        Keep matches within min_match_score of the best distance.

        The band is additive in Hamming distance units, so min_match_score
        near 256 keeps practically every match.
        """
        if not matches:
            return []
        min_distance = min(m.distance for m in matches)
        max_acceptable = min_distance + min_match_score
        return [m for m in matches if m.distance <= max_acceptable]

    def locate(self, haystack: np.ndarray, needle: np.ndarray,
               min_match_score: float = 230, scale: float = 1.0,
               debug: bool = False) -> Rect:
        """
        Extract features from both images and locate needle in haystack.

        Args:
            haystack: Image to search in
            needle: Image to search for
            min_match_score: Hamming band above the best match, clamped to [0, 256]
            scale: Downscale factor in (0, 1] applied to both images first
            debug: Pass keypoint and match images to the viewer

        Returns:
            Bounding rectangle in original haystack coordinates, or Rect.empty()

        Raises:
            ValueError: If scale is outside (0, 1]
        """
        validate_scale(scale)
        min_match_score = clamp_match_score(min_match_score)
        if not can_resize(haystack, needle, scale):
            return Rect.empty()

        large, small = resize_pair(haystack, needle, scale)

        haystack_keypoints, haystack_descriptors = self.extractor.extract_keypoints(large)
        needle_keypoints, needle_descriptors = self.extractor.extract_keypoints(small)

        if not has_descriptors(haystack_descriptors) or not has_descriptors(needle_descriptors):
            logger.warning("One or both images failed to produce descriptors.")
            return Rect.empty()

        if debug:
            self.viewer({
                "Large Image Keypoints": draw_keypoints(large, haystack_keypoints),
                "Small Image Keypoints": draw_keypoints(small, needle_keypoints),
            })

        bounding = self._match_and_project(large, small,
                                           haystack_keypoints, haystack_descriptors,
                                           needle_keypoints, needle_descriptors,
                                           min_match_score, debug)
        if bounding is None:
            return Rect.empty()

        if not is_aspect_ratio_close(bounding, needle, self.aspect_tolerance):
            logger.warning("Match %s rejected: aspect ratio differs from needle", bounding)
            return Rect.empty()

        return bounding.unscaled(scale)

    def locate_with_features(self, haystack: np.ndarray, needle: np.ndarray,
                             haystack_keypoints: List[cv2.KeyPoint],
                             haystack_descriptors: Optional[np.ndarray],
                             needle_keypoints: List[cv2.KeyPoint],
                             needle_descriptors: Optional[np.ndarray],
                             min_match_score: float = 230,
                             debug: bool = False) -> Rect:
        """
        Locate needle using keypoints and descriptors computed beforehand.

        The result must lie fully inside the haystack.
        """
        min_match_score = clamp_match_score(min_match_score)

        if not has_descriptors(haystack_descriptors) or not has_descriptors(needle_descriptors):
            logger.warning("One or both sets of descriptors are empty.")
            return Rect.empty()

        bounding = self._match_and_project(haystack, needle,
                                           haystack_keypoints, haystack_descriptors,
                                           needle_keypoints, needle_descriptors,
                                           min_match_score, debug)
        if bounding is None:
            return Rect.empty()

        if not contains(bounding, image_size(haystack)):
            logger.warning("Match %s falls outside haystack bounds %s",
                           bounding, image_size(haystack))
            return Rect.empty()

        if not is_aspect_ratio_close(bounding, needle, self.aspect_tolerance):
            logger.warning("Match %s rejected: aspect ratio differs from needle", bounding)
            return Rect.empty()

        return bounding

    def _match_and_project(self, haystack: np.ndarray, needle: np.ndarray,
                           haystack_keypoints: List[cv2.KeyPoint],
                           haystack_descriptors: np.ndarray,
                           needle_keypoints: List[cv2.KeyPoint],
                           needle_descriptors: np.ndarray,
                           min_match_score: float, debug: bool) -> Optional[Rect]:
        matches = self.match_descriptors(needle_descriptors, haystack_descriptors)
        if not matches:
            logger.warning("No matches found between descriptors.")
            return None

        good_matches = self.filter_matches(matches, min_match_score)
        logger.debug("%d of %d cross-checked matches kept", len(good_matches), len(matches))

        if debug:
            self.viewer({
                "Matches": draw_matches(needle, needle_keypoints,
                                        haystack, haystack_keypoints, good_matches),
            })

        if len(good_matches) < self.min_good_matches:
            logger.warning("Not enough good matches (%d) to compute homography.",
                           len(good_matches))
            return None

        needle_points = np.float32([needle_keypoints[m.queryIdx].pt for m in good_matches])
        haystack_points = np.float32([haystack_keypoints[m.trainIdx].pt for m in good_matches])

        H, inliers = self.homography.calculate(needle_points, haystack_points)
        if self.homography.is_degenerate(H):
            logger.warning("Homography computation failed.")
            return None

        if self.optimizer is not None and np.count_nonzero(inliers) >= 4:
            refined = self.optimizer.optimize(H, needle_points[inliers], haystack_points[inliers])
            if not self.homography.is_degenerate(refined):
                H = refined

        needle_w, needle_h = image_size(needle)
        corners = self.homography.project_corners(needle_w, needle_h, H)
        return self.homography.bounding_rect(corners)
