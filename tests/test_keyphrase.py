"""Tests for keyphrase region parsing."""

import pytest

from locator.geometry.keyphrase import KeyphraseParser, parse_fraction, roi_from_keyphrase
from locator.geometry.rect import Rect


class TestParseFraction:
    """Test fraction token parsing."""

    def test_ratio(self):
        """Test a/b fractions."""
        assert parse_fraction("1/2") == 0.5
        assert parse_fraction("2/3") == pytest.approx(2 / 3)

    def test_decimal(self):
        """Test decimal."""
        assert parse_fraction("0.25") == 0.25
        assert parse_fraction("1") == 1.0

    def test_malformed(self):
        """Test malformed fractions."""
        assert parse_fraction("half") is None
        assert parse_fraction("1/x") is None
        assert parse_fraction("1/0") is None


class TestKeyphraseParser:
    """Test keyphrase to rectangle derivation."""

    def test_default_is_full_image(self):
        """Test default is full image."""
        assert roi_from_keyphrase("default", (100, 100)) == Rect(0, 0, 100, 100)
        assert roi_from_keyphrase("default", (1920, 1080)) == Rect(0, 0, 1920, 1080)

    def test_left_half(self):
        """Test left half."""
        assert roi_from_keyphrase("left 1/2", (100, 100)) == Rect(0, 0, 50, 100)

    def test_right_half(self):
        """Test right half."""
        assert roi_from_keyphrase("right 1/2", (100, 100)) == Rect(50, 0, 50, 100)

    def test_top_and_bottom(self):
        """Test top and bottom."""
        assert roi_from_keyphrase("top 0.25", (100, 200)) == Rect(0, 0, 100, 50)
        assert roi_from_keyphrase("bottom 0.25", (100, 200)) == Rect(0, 150, 100, 50)

    def test_center_half(self):
        """Test center half."""
        assert roi_from_keyphrase("center 1/2", (100, 100)) == Rect(25, 25, 50, 50)

    def test_composition(self):
        """Later tokens narrow the rect produced by earlier ones."""
        assert roi_from_keyphrase("left 1/2 bottom 1/2", (100, 100)) == Rect(0, 50, 50, 50)
        assert roi_from_keyphrase("right 1/4 top 1/4", (200, 100)) == Rect(150, 0, 50, 25)

    def test_right_anchors_to_image_edge(self):
        """right is measured against the image width, not the current rect."""
        rect = roi_from_keyphrase("left 1/2 right 1/4", (100, 100))
        assert rect == Rect(75, 0, 25, 100)

    def test_clamped_after_composition(self):
        """Test clamped after composition."""
        rect = roi_from_keyphrase("right 1/3 left 1/2", (100, 100))
        assert rect == Rect(67, 0, 33, 100)

    def test_invalid_direction_gives_full_image(self):
        """Test invalid direction gives full image."""
        assert roi_from_keyphrase("left 1/2 up 1/2", (100, 100)) == Rect(0, 0, 100, 100)

    def test_malformed_fraction_gives_full_image(self):
        """Test malformed fraction gives full image."""
        assert roi_from_keyphrase("left half", (100, 100)) == Rect(0, 0, 100, 100)
        assert roi_from_keyphrase("left 1/0", (100, 100)) == Rect(0, 0, 100, 100)

    def test_out_of_range_fraction_gives_full_image(self):
        """Test out of range fraction gives full image."""
        assert roi_from_keyphrase("left 3/2", (100, 100)) == Rect(0, 0, 100, 100)
        assert roi_from_keyphrase("top -0.5", (100, 100)) == Rect(0, 0, 100, 100)

    def test_trailing_token_ignored(self):
        """Test trailing token ignored."""
        assert roi_from_keyphrase("left 1/2 bottom", (100, 100)) == Rect(0, 0, 50, 100)

    def test_tokenize(self):
        """Test tokenize."""
        parser = KeyphraseParser()
        assert parser.tokenize("left 1/2  top 0.3") == [("left", "1/2"), ("top", "0.3")]

    def test_empty_phrase_gives_full_image(self):
        """Test empty phrase gives full image."""
        assert KeyphraseParser().parse("", (64, 48)) == Rect(0, 0, 64, 48)
