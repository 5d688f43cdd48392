"""Image file and buffer I/O."""

from pathlib import Path
from typing import Optional, Union

import cv2
import numpy as np


def save_image(image: np.ndarray, output_path: Union[str, Path]) -> bool:
    """Save image to file, creating parent directories."""
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    return bool(cv2.imwrite(str(output_path), image))


def load_image(image_path: Union[str, Path]) -> Optional[np.ndarray]:
    """Load image from file."""
    return cv2.imread(str(image_path), cv2.IMREAD_COLOR)


def decode_image(data: bytes) -> Optional[np.ndarray]:
    """Decode an encoded image (PNG, JPEG, BMP, ...) held in memory."""
    if not data:
        return None
    buffer = np.frombuffer(data, dtype=np.uint8)
    return cv2.imdecode(buffer, cv2.IMREAD_COLOR)
