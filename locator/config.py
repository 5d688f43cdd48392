"""
Configuration management for Locator
"""

import copy
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

DEFAULT_CONFIG = {
    "correlation": {
        "method": "TM_CCOEFF_NORMED",
        "scale": 1.0,
        "grayscale": False
    },
    "features": {
        "min_keypoints": 500,
        "keypoint_density": 0.005
    },
    "matching": {
        "scale": 1.0,
        "min_match_score": 230,
        "min_good_matches": 4,
        "ransac_threshold": 3.0,
        "ransac_max_iters": 2000,
        "aspect_tolerance": 0.2,
        "refine_homography": False,
        "random_seed": None
    },
    "logging": {
        "level": None,
        "file": None
    }
}


def _merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> None:
    for section, values in overrides.items():
        if section not in base:
            raise ValueError(f"Unknown config section: {section}")
        if not isinstance(values, dict):
            raise ValueError(f"Config section '{section}' must be a mapping")
        base[section].update(values)


def load_config(path: Optional[Union[str, Path]] = None,
                overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Build a configuration from defaults, an optional YAML file and overrides.

    Args:
        path: YAML file whose top-level keys are config sections
        overrides: Section dictionaries applied after the file

    Returns:
        New configuration dictionary
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if path is not None:
        with open(path, 'r') as f:
            file_config = yaml.safe_load(f) or {}
        _merge(config, file_config)

    if overrides:
        _merge(config, overrides)

    return config
