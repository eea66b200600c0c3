"""Core modules for court calibration and zone analytics."""

from .types import (
    TrackerSample, CourtPosition, RallyWindow, ZoneStat, PlayerDominance,
    DominanceConfig, rally_windows
)

from .calibration import (
    CalibrationPoint, Homography, CalibrationConfig, CalibrationResult,
    ValidationResult, CalibrationFailure, ProjectionFailure,
    CalibrationError, InsufficientPointsError, DuplicateLabelError,
    DegenerateConfigurationError, CoordinateTransformationError,
    LinearSolver, SolveResult, HomographyEstimator,
    CoordinateProjector, ProjectionResult, project_point,
    calibration_point
)
from .zones import (
    ZoneDefinition, ZoneModel,
    IdentityConvention, TennisConvention, PadelConvention, convention_for_sport,
    PADEL_ZONE_SYSTEMS, TENNIS_ZONE_SYSTEMS, zone_systems_for_sport, get_zone_system
)
from .dominance import ZoneDominanceAggregator, combine_zone_stats, summarize, GAP_THRESHOLD
from .io_utils import CourtIO, TrackingSession

__all__ = [
    # Types
    'TrackerSample', 'CourtPosition', 'RallyWindow', 'ZoneStat', 'PlayerDominance',
    'DominanceConfig', 'rally_windows',

    # Calibration
    'CalibrationPoint', 'Homography', 'CalibrationConfig', 'CalibrationResult',
    'ValidationResult', 'CalibrationFailure', 'ProjectionFailure',
    'CalibrationError', 'InsufficientPointsError', 'DuplicateLabelError',
    'DegenerateConfigurationError', 'CoordinateTransformationError',
    'LinearSolver', 'SolveResult', 'HomographyEstimator',
    'CoordinateProjector', 'ProjectionResult', 'project_point',
    'calibration_point',

    # Zones
    'ZoneDefinition', 'ZoneModel',
    'IdentityConvention', 'TennisConvention', 'PadelConvention', 'convention_for_sport',
    'PADEL_ZONE_SYSTEMS', 'TENNIS_ZONE_SYSTEMS', 'zone_systems_for_sport', 'get_zone_system',

    # Analytics
    'ZoneDominanceAggregator', 'combine_zone_stats', 'summarize', 'GAP_THRESHOLD',

    # I/O
    'CourtIO', 'TrackingSession'
]
