"""Homography refinement using Levenberg-Marquardt."""

import numpy as np
from scipy.optimize import least_squares


class HomographyOptimizer:
    """Refine homography matrix using non-linear optimization."""

    def __init__(self, max_iters: int = 100):
        self.max_iters = max_iters

    def optimize(self, H: np.ndarray, src_points: np.ndarray,
                 dst_points: np.ndarray) -> np.ndarray:
        """
        Minimize reprojection error of src_points onto dst_points.

        H is normalized so H[2, 2] == 1 and the remaining eight entries are
        optimized. Fewer than four correspondences leave H unchanged.
        """
        if len(src_points) < 4:
            return H

        src = np.asarray(src_points, dtype=np.float64).reshape(-1, 2)
        dst = np.asarray(dst_points, dtype=np.float64).reshape(-1, 2)
        h_params = (H / H[2, 2]).flatten()[:8]

        def residuals(params):
            H_opt = self._params_to_matrix(params)
            return (self._transform_points(src, H_opt) - dst).flatten()

        result = least_squares(residuals, h_params, method='lm', max_nfev=self.max_iters)
        return self._params_to_matrix(result.x)

    def _params_to_matrix(self, params: np.ndarray) -> np.ndarray:
        """Convert parameter vector to 3x3 matrix."""
        return np.append(params, 1).reshape(3, 3)

    def _transform_points(self, points: np.ndarray, H: np.ndarray) -> np.ndarray:
        points_h = np.hstack([points, np.ones((points.shape[0], 1))])
        transformed = (H @ points_h.T).T
        return transformed[:, :2] / transformed[:, 2:]
