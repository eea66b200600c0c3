"""
Court calibration system: homography estimation and coordinate projection.
"""

from .types import (
    CalibrationPoint, Homography, CalibrationConfig, CalibrationResult,
    ValidationResult, CalibrationFailure, ProjectionFailure,
    CalibrationError, InsufficientPointsError, DuplicateLabelError,
    DegenerateConfigurationError, CoordinateTransformationError
)
from .solver import LinearSolver, SolveResult, normal_equations
from .transformer import CoordinateProjector, ProjectionResult, project_point
from .estimator import HomographyEstimator
from .landmarks import (
    CourtLandmark, PADEL_LANDMARKS, TENNIS_LANDMARKS,
    landmarks_for_sport, calibration_point
)

__all__ = [
    # Types
    'CalibrationPoint', 'Homography', 'CalibrationConfig', 'CalibrationResult',
    'ValidationResult', 'CalibrationFailure', 'ProjectionFailure',
    'CalibrationError', 'InsufficientPointsError', 'DuplicateLabelError',
    'DegenerateConfigurationError', 'CoordinateTransformationError',

    # Core classes
    'LinearSolver', 'SolveResult', 'normal_equations',
    'HomographyEstimator',
    'CoordinateProjector', 'ProjectionResult', 'project_point',

    # Landmarks
    'CourtLandmark', 'PADEL_LANDMARKS', 'TENNIS_LANDMARKS',
    'landmarks_for_sport', 'calibration_point'
]
