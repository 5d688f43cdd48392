"""Keypoint and descriptor extraction."""

from .feature_extractor import (FeatureExtractor, compute_keypoints_and_descriptors,
                                has_descriptors)

__all__ = ['FeatureExtractor', 'compute_keypoints_and_descriptors', 'has_descriptors']
