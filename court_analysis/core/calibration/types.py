"""
Data types for court calibration system.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Dict, Any
from enum import Enum
import numpy as np


class CalibrationFailure(Enum):
    """Reasons a calibration attempt can fail."""
    INSUFFICIENT_POINTS = "insufficient_points"
    DUPLICATE_LABEL = "duplicate_label"
    DEGENERATE_CONFIGURATION = "degenerate_configuration"


class ProjectionFailure(Enum):
    """Per-point projection failures."""
    PROJECTION_TO_INFINITY = "projection_to_infinity"


@dataclass(frozen=True)
class CalibrationPoint:
    """A user-marked correspondence between video and court space.

    Video coordinates are normalized to [0, 1] with the origin at the
    top-left of the frame. Court coordinates are in meters.
    """
    video_x: float
    video_y: float
    court_x: float
    court_y: float
    label: str = ""

    @property
    def video(self) -> Tuple[float, float]:
        return (self.video_x, self.video_y)

    @property
    def court(self) -> Tuple[float, float]:
        return (self.court_x, self.court_y)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'videoX': self.video_x,
            'videoY': self.video_y,
            'courtX': self.court_x,
            'courtY': self.court_y,
            'label': self.label
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CalibrationPoint':
        """Create from dictionary (camelCase keys as sent by the calibration UI)."""
        return cls(
            video_x=float(data['videoX']),
            video_y=float(data['videoY']),
            court_x=float(data['courtX']),
            court_y=float(data['courtY']),
            label=str(data.get('label', ''))
        )


@dataclass(frozen=True)
class Homography:
    """Immutable 3x3 projective transform from scaled video space to court meters.

    ``source_scale`` is the factor applied to normalized video coordinates
    before the matrix is used. It is fixed at estimation time so that every
    projection uses the same convention the matrix was solved with.
    """
    matrix: np.ndarray
    source_scale: Tuple[float, float] = (10.0, 20.0)

    def __post_init__(self):
        matrix = np.array(self.matrix, dtype=np.float64)
        if matrix.shape != (3, 3):
            raise ValueError(f"Homography matrix must be 3x3, got shape {matrix.shape}")
        matrix.setflags(write=False)
        object.__setattr__(self, 'matrix', matrix)
        object.__setattr__(self, 'source_scale',
                           (float(self.source_scale[0]), float(self.source_scale[1])))

    @classmethod
    def from_parameters(cls, h: np.ndarray,
                        source_scale: Tuple[float, float] = (10.0, 20.0)) -> 'Homography':
        """Assemble H = [[h0,h1,h2],[h3,h4,h5],[h6,h7,1]] from the 8 solved unknowns."""
        h = np.asarray(h, dtype=np.float64)
        if h.shape != (8,):
            raise ValueError(f"Expected 8 homography parameters, got shape {h.shape}")
        return cls(matrix=np.append(h, 1.0).reshape(3, 3), source_scale=source_scale)

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self.matrix)))

    def determinant(self) -> float:
        return float(np.linalg.det(self.matrix))

    def to_list(self) -> List[List[float]]:
        """Row-major nested lists, ready for JSON."""
        return self.matrix.tolist()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'matrix': self.to_list(),
            'source_scale': list(self.source_scale)
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Homography':
        """Create from dictionary."""
        scale = data.get('source_scale', (10.0, 20.0))
        return cls(matrix=np.array(data['matrix'], dtype=np.float64),
                   source_scale=(scale[0], scale[1]))


@dataclass
class ValidationResult:
    """Reprojection quality of a calibration, errors in meters."""
    mean_error: float
    max_error: float
    errors: List[float]
    is_valid: bool

    @classmethod
    def from_errors(cls, errors: List[float], threshold: float) -> 'ValidationResult':
        if not errors:
            return cls(mean_error=0.0, max_error=0.0, errors=[], is_valid=False)
        mean_error = float(np.mean(errors))
        max_error = float(np.max(errors))
        return cls(
            mean_error=mean_error,
            max_error=max_error,
            errors=[float(e) for e in errors],
            is_valid=bool(np.isfinite(max_error) and max_error <= threshold)
        )


@dataclass
class CalibrationResult:
    """Result of calibration attempt."""
    success: bool
    homography: Optional[Homography] = None
    failure: Optional[CalibrationFailure] = None
    error_message: Optional[str] = None
    validation_result: Optional[ValidationResult] = None
    points: List[CalibrationPoint] = field(default_factory=list)

    @classmethod
    def succeeded(cls, homography: Homography, validation_result: ValidationResult,
                  points: List[CalibrationPoint]) -> 'CalibrationResult':
        """Create successful calibration result."""
        return cls(
            success=True,
            homography=homography,
            validation_result=validation_result,
            points=list(points)
        )

    @classmethod
    def failed(cls, failure: CalibrationFailure, error_message: str) -> 'CalibrationResult':
        """Create failed calibration result."""
        return cls(
            success=False,
            failure=failure,
            error_message=error_message
        )

    def raise_for_failure(self) -> Homography:
        """Return the homography, or raise the exception matching the failure."""
        if self.success and self.homography is not None:
            return self.homography
        error_class = _FAILURE_ERRORS.get(self.failure, CalibrationError)
        raise error_class(self.error_message or "Calibration failed")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data: Dict[str, Any] = {'success': self.success}
        if self.success:
            data['matrix'] = self.homography.to_list()
            data['source_scale'] = list(self.homography.source_scale)
            if self.validation_result is not None:
                data['mean_error'] = self.validation_result.mean_error
                data['max_error'] = self.validation_result.max_error
        else:
            data['failure'] = self.failure.value if self.failure else None
            data['error'] = self.error_message
        return data


@dataclass
class CalibrationConfig:
    """Configuration for calibration system."""
    min_points: int = 4
    source_scale: Tuple[float, float] = (10.0, 20.0)
    pivot_tolerance: float = 1e-10
    max_reprojection_error: float = 0.5  # meters

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'min_points': self.min_points,
            'source_scale': list(self.source_scale),
            'pivot_tolerance': self.pivot_tolerance,
            'max_reprojection_error': self.max_reprojection_error
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CalibrationConfig':
        """Create from dictionary."""
        scale = data.get('source_scale', (10.0, 20.0))
        return cls(
            min_points=int(data.get('min_points', 4)),
            source_scale=(float(scale[0]), float(scale[1])),
            pivot_tolerance=float(data.get('pivot_tolerance', 1e-10)),
            max_reprojection_error=float(data.get('max_reprojection_error', 0.5))
        )


class CalibrationError(Exception):
    """Exception raised for calibration errors."""
    failure: Optional[CalibrationFailure] = None


class InsufficientPointsError(CalibrationError):
    """Fewer calibration points than the transform needs."""
    failure = CalibrationFailure.INSUFFICIENT_POINTS


class DuplicateLabelError(CalibrationError):
    """The same court landmark was marked more than once."""
    failure = CalibrationFailure.DUPLICATE_LABEL


class DegenerateConfigurationError(CalibrationError):
    """Points are collinear or coincident; the system is rank-deficient."""
    failure = CalibrationFailure.DEGENERATE_CONFIGURATION


class CoordinateTransformationError(CalibrationError):
    """Exception raised for coordinate transformation errors."""
    pass


_FAILURE_ERRORS = {
    CalibrationFailure.INSUFFICIENT_POINTS: InsufficientPointsError,
    CalibrationFailure.DUPLICATE_LABEL: DuplicateLabelError,
    CalibrationFailure.DEGENERATE_CONFIGURATION: DegenerateConfigurationError,
}
