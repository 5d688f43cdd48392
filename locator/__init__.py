"""
Locator - find a reference image inside a screenshot

Correlation template search, ORB feature matching with a RANSAC homography,
and keyphrase-derived regions of interest.
"""

from .core import ImageLocator
from .geometry.rect import Rect

__all__ = ['ImageLocator', 'Rect']
__version__ = '1.0.0'
