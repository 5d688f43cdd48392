"""Shared fixtures: synthetic screenshots and needles cut out of them."""

import cv2
import numpy as np
import pytest

from locator.geometry.rect import Rect


def make_scene(width: int = 640, height: int = 480, seed: int = 7) -> np.ndarray:
    """Build a deterministic, well-textured BGR image."""
    rng = np.random.default_rng(seed)
    image = np.full((height, width, 3), 35, dtype=np.uint8)

    for _ in range(80):
        x1, y1 = int(rng.integers(0, width)), int(rng.integers(0, height))
        x2, y2 = x1 + int(rng.integers(10, 90)), y1 + int(rng.integers(10, 90))
        color = tuple(int(c) for c in rng.integers(0, 256, 3))
        cv2.rectangle(image, (x1, y1), (x2, y2), color, -1)

    for _ in range(40):
        center = (int(rng.integers(0, width)), int(rng.integers(0, height)))
        color = tuple(int(c) for c in rng.integers(0, 256, 3))
        cv2.circle(image, center, int(rng.integers(5, 40)), color, int(rng.integers(1, 4)))

    words = ["OK", "Cancel", "Play", "Menu", "Settings", "Exit", "Save", "Load"]
    for _ in range(25):
        org = (int(rng.integers(0, width - 60)), int(rng.integers(15, height)))
        color = tuple(int(c) for c in rng.integers(0, 256, 3))
        cv2.putText(image, str(rng.choice(words)), org,
                    cv2.FONT_HERSHEY_SIMPLEX, 0.6, color, 2)

    noise = rng.integers(0, 25, image.shape, dtype=np.uint8)
    return cv2.add(image, noise)


@pytest.fixture
def haystack():
    """640x480 textured screenshot."""
    return make_scene()


@pytest.fixture
def needle_rect():
    """Where the needle fixture was cut from the haystack."""
    return Rect(200, 150, 240, 180)


@pytest.fixture
def needle(haystack, needle_rect):
    """Exact crop of the haystack under needle_rect."""
    r = needle_rect
    return haystack[r.y:r.bottom, r.x:r.right].copy()


@pytest.fixture
def blank_image():
    return np.zeros((200, 200, 3), dtype=np.uint8)
