"""Correlation and feature-based needle localization."""

from .template_matcher import CorrelationMatcher, find_image_in_image, validate_scale
from .feature_matcher import FeatureMatcher

__all__ = ['CorrelationMatcher', 'FeatureMatcher', 'find_image_in_image', 'validate_scale']
