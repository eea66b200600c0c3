"""
Homography estimation from user-marked calibration points.
"""

import logging
from typing import List, Sequence, Tuple

import numpy as np

from ..logging_utils import log_performance
from .solver import LinearSolver, normal_equations
from .types import (
    CalibrationConfig, CalibrationPoint, CalibrationResult, Homography,
    ValidationResult, CalibrationError, InsufficientPointsError,
    DuplicateLabelError, DegenerateConfigurationError
)
from .transformer import CoordinateProjector

logger = logging.getLogger(__name__)

# Relative size of the smallest singular value of a centered point cloud
# below which the points are treated as lying on a line.
COLLINEARITY_TOLERANCE = 1e-9


class HomographyEstimator:
    """
    Direct Linear Transform with h[2][2] fixed to 1 (8 unknowns).

    Exactly four points give a square system that is solved directly; more
    points are reduced to normal equations for a least-squares fit.
    """

    def __init__(self, config: CalibrationConfig = None):
        """Initialize estimator with configuration."""
        self.config = config or CalibrationConfig()
        self.solver = LinearSolver(pivot_tolerance=self.config.pivot_tolerance)

    @log_performance("homography_estimation")
    def estimate(self, points: Sequence[CalibrationPoint]) -> CalibrationResult:
        """
        Estimate the video-to-court homography.

        Args:
            points: Calibration points, at least ``config.min_points`` of them,
                each landmark label used once.

        Returns:
            CalibrationResult carrying the Homography and its reprojection
            quality, or the failure reason.
        """
        points = list(points)
        try:
            homography = self._estimate(points)
        except CalibrationError as e:
            logger.warning(f"Calibration failed ({e.failure.value}): {e}")
            return CalibrationResult.failed(e.failure, str(e))

        projector = CoordinateProjector(homography)
        validation = ValidationResult.from_errors(
            projector.reprojection_errors(points),
            self.config.max_reprojection_error
        )
        logger.info(f"Calibration successful from {len(points)} points "
                    f"(mean error {validation.mean_error:.4f}m, max {validation.max_error:.4f}m)")
        if not validation.is_valid:
            logger.warning(f"Reprojection error {validation.max_error:.3f}m exceeds "
                           f"{self.config.max_reprojection_error}m; markings may be inconsistent")
        return CalibrationResult.succeeded(homography, validation, points)

    def _estimate(self, points: List[CalibrationPoint]) -> Homography:
        self._check_points(points)

        A, b = self.build_system(points)
        if len(points) > 4:
            A, b = normal_equations(A, b)

        solution = self.solver.solve(A, b)
        if solution.is_rank_deficient:
            raise DegenerateConfigurationError(
                f"Calibration points are collinear or coincident "
                f"(underdetermined parameters {list(solution.deficient_columns)})"
            )

        self._check_geometry(points)

        homography = Homography.from_parameters(solution.x, self.config.source_scale)
        if not homography.is_finite():
            raise DegenerateConfigurationError("Solved homography contains non-finite values")
        if abs(homography.determinant()) < self.config.pivot_tolerance:
            raise DegenerateConfigurationError("Solved homography is singular")
        return homography

    def build_system(self, points: Sequence[CalibrationPoint]) -> Tuple[np.ndarray, np.ndarray]:
        """
        Build the 2n x 8 DLT system for the given correspondences.

        Each point (x, y) -> (x', y') contributes:
            [x, y, 1, 0, 0, 0, -x'x, -x'y] = x'
            [0, 0, 0, x, y, 1, -y'x, -y'y] = y'
        with (x, y) the video coordinates after source scaling.
        """
        sx, sy = self.config.source_scale
        A = np.zeros((2 * len(points), 8), dtype=np.float64)
        b = np.zeros(2 * len(points), dtype=np.float64)

        for i, point in enumerate(points):
            x = point.video_x * sx
            y = point.video_y * sy
            xp, yp = point.court_x, point.court_y
            A[2 * i] = [x, y, 1.0, 0.0, 0.0, 0.0, -xp * x, -xp * y]
            A[2 * i + 1] = [0.0, 0.0, 0.0, x, y, 1.0, -yp * x, -yp * y]
            b[2 * i] = xp
            b[2 * i + 1] = yp

        return A, b

    def _check_points(self, points: List[CalibrationPoint]):
        min_points = max(4, self.config.min_points)
        if len(points) < min_points:
            raise InsufficientPointsError(
                f"Need at least {min_points} points for calibration, got {len(points)}"
            )

        seen = set()
        for point in points:
            if point.label and point.label in seen:
                raise DuplicateLabelError(f"Point '{point.label}' is already marked")
            seen.add(point.label)

        distinct = {point.video for point in points}
        if len(distinct) < 4:
            raise DegenerateConfigurationError(
                f"Only {len(distinct)} distinct video locations among {len(points)} points"
            )

    def _check_geometry(self, points: List[CalibrationPoint]):
        sx, sy = self.config.source_scale
        video = np.array([[p.video_x * sx, p.video_y * sy] for p in points])
        court = np.array([p.court for p in points], dtype=np.float64)
        if _is_collinear(video):
            raise DegenerateConfigurationError("Video points are collinear")
        if _is_collinear(court):
            raise DegenerateConfigurationError("Court points are collinear")


def _is_collinear(pts: np.ndarray) -> bool:
    centered = pts - pts.mean(axis=0)
    s = np.linalg.svd(centered, compute_uv=False)
    if s[0] == 0.0:
        return True
    return bool(s[1] <= COLLINEARITY_TOLERANCE * s[0])
