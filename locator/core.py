"""
Locator Core
Main entry point for finding a needle image inside a haystack image
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

import cv2
import numpy as np

from locator.calibration.homography import HomographyCalculator
from locator.calibration.optimizer import HomographyOptimizer
from locator.capture.backend import CaptureBackend
from locator.config import load_config
from locator.detection.feature_extractor import FeatureExtractor
from locator.geometry.keyphrase import DEFAULT_KEYPHRASE, KeyphraseParser
from locator.geometry.rect import Rect, get_region_of_interest, image_size
from locator.geometry.transform import rotate_image
from locator.matching.feature_matcher import FeatureMatcher
from locator.matching.template_matcher import CorrelationMatcher
from locator.utils.logger import setup_logger
from locator.utils.metrics import PerformanceMetrics
from locator.utils.visualization import show_images

logger = logging.getLogger(__name__)

METHODS = ("template", "features")


class ImageLocator:
    """Stateless facade over the matchers, configured once at construction"""

    def __init__(self, config: Optional[Dict[str, Any]] = None,
                 backend: Optional[CaptureBackend] = None,
                 viewer=show_images):
        """
        Initialize locator

        Args:
            config: Section overrides merged over DEFAULT_CONFIG (optional)
            backend: Screen capture/click backend, needed only for on-screen calls
            viewer: Receives debug images when debug is requested
        """
        self.config = load_config(overrides=config)
        self.backend = backend

        logging_config = self.config["logging"]
        if logging_config["level"] is not None or logging_config["file"] is not None:
            setup_logger('locator', logging_config["level"] or logging.INFO,
                         logging_config["file"])

        correlation = self.config["correlation"]
        features = self.config["features"]
        matching = self.config["matching"]

        self.correlation_matcher = CorrelationMatcher(method=correlation["method"])
        self.extractor = FeatureExtractor(
            min_keypoints=features["min_keypoints"],
            keypoint_density=features["keypoint_density"]
        )
        self.feature_matcher = FeatureMatcher(
            extractor=self.extractor,
            homography=HomographyCalculator(
                ransac_threshold=matching["ransac_threshold"],
                max_iters=matching["ransac_max_iters"],
                random_seed=matching["random_seed"]
            ),
            optimizer=HomographyOptimizer() if matching["refine_homography"] else None,
            min_good_matches=matching["min_good_matches"],
            aspect_tolerance=matching["aspect_tolerance"],
            viewer=viewer
        )
        self.keyphrase_parser = KeyphraseParser()

    def find(self, haystack: np.ndarray, needle: np.ndarray,
             scale: Optional[float] = None, grayscale: Optional[bool] = None) -> Rect:
        """Correlation search; scale and grayscale default to the config."""
        correlation = self.config["correlation"]
        scale = correlation["scale"] if scale is None else scale
        grayscale = correlation["grayscale"] if grayscale is None else grayscale

        metrics = PerformanceMetrics()
        metrics.start_timer("find")
        rect = self.correlation_matcher.find(haystack, needle, scale, grayscale)
        logger.debug("find -> %s in %.1fms", rect, metrics.stop_timer("find"))
        return rect

    def locate(self, haystack: np.ndarray, needle: np.ndarray,
               min_match_score: Optional[float] = None, scale: Optional[float] = None,
               debug: bool = False) -> Rect:
        """Feature search; min_match_score and scale default to the config."""
        if min_match_score is None:
            min_match_score = self.config["matching"]["min_match_score"]
        scale = self.config["matching"]["scale"] if scale is None else scale

        metrics = PerformanceMetrics()
        metrics.start_timer("locate")
        rect = self.feature_matcher.locate(haystack, needle, min_match_score, scale, debug)
        logger.debug("locate -> %s in %.1fms", rect, metrics.stop_timer("locate"))
        return rect

    def locate_with_features(self, haystack: np.ndarray, needle: np.ndarray,
                             haystack_features: Tuple[List[cv2.KeyPoint], Optional[np.ndarray]],
                             needle_features: Tuple[List[cv2.KeyPoint], Optional[np.ndarray]],
                             min_match_score: Optional[float] = None,
                             debug: bool = False) -> Rect:
        """Feature search reusing (keypoints, descriptors) from extract_features."""
        if min_match_score is None:
            min_match_score = self.config["matching"]["min_match_score"]
        haystack_keypoints, haystack_descriptors = haystack_features
        needle_keypoints, needle_descriptors = needle_features
        return self.feature_matcher.locate_with_features(
            haystack, needle,
            haystack_keypoints, haystack_descriptors,
            needle_keypoints, needle_descriptors,
            min_match_score, debug
        )

    def extract_features(self, image: np.ndarray) -> Tuple[List[cv2.KeyPoint], Optional[np.ndarray]]:
        return self.extractor.extract_keypoints(image)

    def roi_from_keyphrase(self, keyphrase: str, size: Tuple[int, int]) -> Rect:
        return self.keyphrase_parser.parse(keyphrase, size)

    def rotate(self, image: np.ndarray, direction: str, angle: float) -> np.ndarray:
        return rotate_image(image, direction, angle)

    def search(self, haystack: np.ndarray, needle: np.ndarray,
               keyphrase: str = DEFAULT_KEYPHRASE, method: str = "template") -> Rect:
        """
        Search only the keyphrase region of haystack.

        Args:
            haystack: Image to search in
            needle: Image to search for
            keyphrase: Region of haystack to search, e.g. "right 1/2 top 1/3"
            method: "template" for correlation, "features" for homography matching

        Returns:
            Match rectangle in haystack coordinates, or Rect.empty()
        """
        if method not in METHODS:
            raise ValueError(f"Unknown locate method: {method}")

        roi = self.roi_from_keyphrase(keyphrase, image_size(haystack))
        region = get_region_of_interest(haystack, roi)
        if region is None:
            return Rect.empty()

        if method == "template":
            rect = self.find(region, needle)
        else:
            rect = self.locate(region, needle)

        if not rect.found:
            return Rect.empty()
        return rect.offset(roi.x, roi.y)

    def find_on_screen(self, needle: np.ndarray, keyphrase: str = DEFAULT_KEYPHRASE,
                       method: str = "template") -> Rect:
        """Capture the screen and search it; the result is in screen coordinates."""
        screen = self._require_backend().capture_screen()
        return self.search(screen, needle, keyphrase, method)

    def find_in_window(self, title: str, needle: np.ndarray,
                       keyphrase: str = DEFAULT_KEYPHRASE,
                       method: str = "template") -> Rect:
        """Capture a window by title and search it; the result is window-local."""
        backend = self._require_backend()
        window = backend.find_window_by_title(title)
        if window is None:
            logger.warning("No window titled %r", title)
            return Rect.empty()
        return self.search(backend.capture_window(window), needle, keyphrase, method)

    def click_rect(self, rect: Rect) -> bool:
        """Click the centre of a found rectangle."""
        if not rect.found:
            logger.warning("Nothing to click: %s", rect)
            return False
        x, y = rect.center
        self._require_backend().click_at(x, y)
        return True

    def _require_backend(self) -> CaptureBackend:
        if self.backend is None:
            raise RuntimeError("No capture backend configured")
        return self.backend
