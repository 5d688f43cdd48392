"""Tests for correlation template matching."""

import cv2
import numpy as np
import pytest

from locator.geometry.rect import Rect
from locator.matching.template_matcher import (CorrelationMatcher, find_image_in_image,
                                               resize_pair, validate_scale)


class TestCorrelationMatcher:
    """Test correlation search."""

    def test_initialization(self):
        """Test initialization."""
        matcher = CorrelationMatcher()
        assert matcher.method == "TM_CCOEFF_NORMED"
        assert matcher.method_code == cv2.TM_CCOEFF_NORMED

    def test_unknown_method(self):
        """Test unknown method."""
        with pytest.raises(ValueError):
            CorrelationMatcher(method="TM_BOGUS")
        with pytest.raises(ValueError):
            CorrelationMatcher(method="COLOR_BGR2GRAY")

    def test_exact_match(self, haystack, needle, needle_rect):
        """An exact copy is found at its offset with its own size."""
        rect = CorrelationMatcher().find(haystack, needle, scale=1.0)
        assert rect == needle_rect

    def test_exact_match_grayscale(self, haystack, needle, needle_rect):
        """Test exact match grayscale."""
        rect = find_image_in_image(haystack, needle, scale=1.0, grayscale=True)
        assert rect == needle_rect

    def test_sqdiff_method(self, haystack, needle, needle_rect):
        """Test squared-difference matching."""
        rect = CorrelationMatcher(method="TM_SQDIFF_NORMED").find(haystack, needle)
        assert rect == needle_rect

    def test_downscaled_match_near_origin(self, haystack, needle, needle_rect):
        """Test downscaled match near origin."""
        rect = CorrelationMatcher().find(haystack, needle, scale=0.5)
        assert abs(rect.x - needle_rect.x) <= 2
        assert abs(rect.y - needle_rect.y) <= 2
        assert abs(rect.width - needle_rect.width) <= 2
        assert abs(rect.height - needle_rect.height) <= 2

    @pytest.mark.parametrize("scale", [0.0, -0.5, 1.01, 2.0, float("nan")])
    def test_invalid_scale_raises(self, haystack, needle, scale):
        """Test invalid scale raises."""
        with pytest.raises(ValueError):
            CorrelationMatcher().find(haystack, needle, scale=scale)

    @pytest.mark.parametrize("scale", [0.1, 0.25, 0.33, 0.5, 0.7, 0.9, 1.0])
    def test_result_within_bounds(self, haystack, scale):
        """Matches at the image edge never leave the haystack after rescaling."""
        corner_needle = haystack[-97:, -131:].copy()
        rect = CorrelationMatcher().find(haystack, corner_needle, scale=scale)
        assert rect.x >= 0 and rect.y >= 0
        assert rect.right <= haystack.shape[1]
        assert rect.bottom <= haystack.shape[0]

    def test_inputs_not_modified(self, haystack, needle):
        """Test inputs not modified."""
        haystack_copy, needle_copy = haystack.copy(), needle.copy()
        CorrelationMatcher().find(haystack, needle, scale=0.5, grayscale=True)
        assert np.array_equal(haystack, haystack_copy)
        assert np.array_equal(needle, needle_copy)

    def test_bgra_needle_in_bgr_haystack(self, haystack, needle, needle_rect):
        """Test bgra needle in bgr haystack."""
        needle_bgra = cv2.cvtColor(needle, cv2.COLOR_BGR2BGRA)
        rect = CorrelationMatcher().find(haystack, needle_bgra)
        assert rect == needle_rect

    def test_gray_needle_in_color_haystack(self, haystack, needle, needle_rect):
        """Test gray needle in color haystack."""
        gray_needle = cv2.cvtColor(needle, cv2.COLOR_BGR2GRAY)
        rect = CorrelationMatcher().find(haystack, gray_needle)
        assert rect == needle_rect

    def test_needle_larger_than_haystack(self, haystack):
        """Test needle larger than haystack."""
        big = cv2.resize(haystack, None, fx=1.5, fy=1.5)
        assert CorrelationMatcher().find(haystack, big) == Rect.empty()

    def test_needle_vanishes_when_scaled(self, haystack):
        """Test needle vanishes when scaled."""
        tiny = haystack[:2, :2].copy()
        assert CorrelationMatcher().find(haystack, tiny, scale=0.1) == Rect.empty()


class TestScaling:
    """Test scale validation and resizing."""

    def test_validate_scale_accepts_range(self):
        """Test that scales in (0, 1] are accepted."""
        for scale in (1e-6, 0.5, 1.0):
            validate_scale(scale)

    def test_validate_scale_rejects_nan(self):
        """Test that NaN is rejected before any resizing."""
        with pytest.raises(ValueError):
            validate_scale(float("nan"))

    def test_resize_pair_uses_bilinear(self, haystack, needle):
        """Test that downscaling matches OpenCV's default bilinear resize."""
        large, small = resize_pair(haystack, needle, 0.5)
        assert np.array_equal(large, cv2.resize(haystack, (320, 240)))
        assert np.array_equal(small, cv2.resize(needle, (120, 90)))

    def test_resize_pair_identity(self, haystack, needle):
        """Test that scale 1.0 leaves both images untouched."""
        large, small = resize_pair(haystack, needle, 1.0)
        assert large is haystack and small is needle
