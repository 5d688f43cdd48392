"""Homography estimation and refinement."""

from .homography import HomographyCalculator
from .optimizer import HomographyOptimizer

__all__ = ['HomographyCalculator', 'HomographyOptimizer']
