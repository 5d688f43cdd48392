"""Rectangles, image transforms and keyphrase regions."""

from .rect import (Rect, clamp_rect, contains, get_region_of_interest,
                   image_size, shift_into_bounds)
from .transform import is_aspect_ratio_close, rotate_image, to_grayscale
from .keyphrase import KeyphraseParser, roi_from_keyphrase

__all__ = [
    'Rect', 'clamp_rect', 'contains', 'get_region_of_interest', 'image_size',
    'shift_into_bounds', 'is_aspect_ratio_close', 'rotate_image',
    'to_grayscale', 'KeyphraseParser', 'roi_from_keyphrase',
]
