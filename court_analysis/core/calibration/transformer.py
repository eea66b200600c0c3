"""
Coordinate transformation from normalized video space to court meters.
"""

import math
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from ..types import CourtPosition, TrackerSample
from .types import (
    Homography, CalibrationPoint, ProjectionFailure, ValidationResult,
    CoordinateTransformationError
)

logger = logging.getLogger(__name__)

# Homogeneous divisors smaller than this put the point at infinity.
W_TOLERANCE = 1e-12


@dataclass(frozen=True)
class ProjectionResult:
    """Outcome of projecting one point: a position or a per-point failure."""
    position: Optional[CourtPosition] = None
    failure: Optional[ProjectionFailure] = None

    @property
    def ok(self) -> bool:
        return self.position is not None


def project_point(homography: Homography, video_x: float, video_y: float,
                  timestamp: float = 0.0) -> ProjectionResult:
    """
    Map a normalized video point to court space.

    Applies the homography's source scaling, then divides by the
    homogeneous component w. Points whose w is near zero, or whose result
    is not finite, are reported as PROJECTION_TO_INFINITY.
    """
    H = homography.matrix
    sx, sy = homography.source_scale
    u = video_x * sx
    v = video_y * sy

    w = H[2, 0] * u + H[2, 1] * v + H[2, 2]
    if not math.isfinite(w) or abs(w) < W_TOLERANCE:
        return ProjectionResult(failure=ProjectionFailure.PROJECTION_TO_INFINITY)

    x = (H[0, 0] * u + H[0, 1] * v + H[0, 2]) / w
    y = (H[1, 0] * u + H[1, 1] * v + H[1, 2]) / w
    if not (math.isfinite(x) and math.isfinite(y)):
        return ProjectionResult(failure=ProjectionFailure.PROJECTION_TO_INFINITY)

    return ProjectionResult(position=CourtPosition(timestamp=timestamp, x=float(x), y=float(y)))


class CoordinateProjector:
    """
    Projects tracker samples through a fixed homography.

    Holds the homography read-only; recalibration means building a new
    projector, never mutating this one.
    """

    def __init__(self, homography: Homography):
        """Initialize projector for a calibrated homography."""
        if not homography.is_finite():
            raise CoordinateTransformationError("Homography contains non-finite values")
        self.homography = homography

    def project(self, sample: TrackerSample) -> ProjectionResult:
        """Project a single tracker sample."""
        return project_point(self.homography, sample.video_x, sample.video_y, sample.timestamp)

    def project_batch(self, samples: Iterable[TrackerSample]) -> List[ProjectionResult]:
        """
        Project every sample; failures are reported per element.

        Returns:
            One ProjectionResult per input sample, in input order.
        """
        results = [self.project(sample) for sample in samples]
        failed = sum(1 for r in results if not r.ok)
        if failed:
            logger.debug(f"{failed} of {len(results)} samples projected to infinity")
        return results

    def valid_positions(self, samples: Iterable[TrackerSample]) -> List[CourtPosition]:
        """Project samples and keep only the ones that landed in court space."""
        return [r.position for r in self.project_batch(samples) if r.ok]

    def court_to_video(self, court_x: float, court_y: float) -> Tuple[float, float]:
        """
        Map a court point back into normalized video space.

        Raises:
            CoordinateTransformationError: If the matrix is not invertible or
                the point maps to infinity.
        """
        inverse = self._inverse_matrix()
        u, v, w = inverse @ np.array([court_x, court_y, 1.0])
        if abs(w) < W_TOLERANCE:
            raise CoordinateTransformationError(
                f"Court point ({court_x}, {court_y}) maps to infinity in video space"
            )
        sx, sy = self.homography.source_scale
        return (float(u / w / sx), float(v / w / sy))

    def reprojection_errors(self, points: Sequence[CalibrationPoint]) -> List[float]:
        """Euclidean distance (meters) between projected and marked court points."""
        errors = []
        for point in points:
            result = project_point(self.homography, point.video_x, point.video_y)
            if not result.ok:
                errors.append(float('inf'))
                continue
            errors.append(float(np.hypot(result.position.x - point.court_x,
                                         result.position.y - point.court_y)))
        return errors

    def validate(self, points: Sequence[CalibrationPoint],
                 threshold: float = 0.5) -> ValidationResult:
        """Validate transformation accuracy against known correspondences."""
        return ValidationResult.from_errors(self.reprojection_errors(points), threshold)

    def _inverse_matrix(self) -> np.ndarray:
        try:
            return np.linalg.inv(self.homography.matrix)
        except np.linalg.LinAlgError as e:
            raise CoordinateTransformationError(f"Homography is not invertible: {e}")
