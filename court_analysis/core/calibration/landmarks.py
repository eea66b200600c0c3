"""
Known court reference points (meters) that users mark during calibration.

Padel court: 10m wide x 20m long, net at y=10.
Tennis court (doubles): 10.97m wide x 23.77m long, net at y=11.885,
service lines 6.40m either side of the net.
"""

from dataclasses import dataclass
from typing import Dict

from .types import CalibrationPoint


@dataclass(frozen=True)
class CourtLandmark:
    """A named physical point on the court."""
    id: str
    x: float
    y: float
    label: str


def _landmarks(*items: CourtLandmark) -> Dict[str, CourtLandmark]:
    return {item.id: item for item in items}


PADEL_LANDMARKS = _landmarks(
    # Back wall corners (y=0)
    CourtLandmark("back-left", 0.0, 0.0, "Back wall - Left corner"),
    CourtLandmark("back-right", 10.0, 0.0, "Back wall - Right corner"),
    # Service line near back (y=3)
    CourtLandmark("service-back-left", 0.0, 3.0, "Service line (back) - Left"),
    CourtLandmark("service-back-right", 10.0, 3.0, "Service line (back) - Right"),
    CourtLandmark("service-back-center", 5.0, 3.0, "Service line (back) - Center"),
    # Net (y=10)
    CourtLandmark("net-left", 0.0, 10.0, "Net - Left post"),
    CourtLandmark("net-right", 10.0, 10.0, "Net - Right post"),
    CourtLandmark("net-center", 5.0, 10.0, "Net - Center"),
    # Service line near front (y=17)
    CourtLandmark("service-front-left", 0.0, 17.0, "Service line (front) - Left"),
    CourtLandmark("service-front-right", 10.0, 17.0, "Service line (front) - Right"),
    CourtLandmark("service-front-center", 5.0, 17.0, "Service line (front) - Center"),
    # Front wall corners (y=20)
    CourtLandmark("front-left", 0.0, 20.0, "Front wall - Left corner"),
    CourtLandmark("front-right", 10.0, 20.0, "Front wall - Right corner"),
)

TENNIS_LANDMARKS = _landmarks(
    CourtLandmark("near-baseline-left", 0.0, 0.0, "Near baseline - Left corner"),
    CourtLandmark("near-baseline-right", 10.97, 0.0, "Near baseline - Right corner"),
    CourtLandmark("near-baseline-center", 5.485, 0.0, "Near baseline - Center mark"),
    CourtLandmark("near-service-left", 1.37, 5.485, "Near service line - Left"),
    CourtLandmark("near-service-right", 9.60, 5.485, "Near service line - Right"),
    CourtLandmark("near-service-center", 5.485, 5.485, "Near service line - Center"),
    CourtLandmark("net-left", 0.0, 11.885, "Net - Left post"),
    CourtLandmark("net-right", 10.97, 11.885, "Net - Right post"),
    CourtLandmark("far-service-left", 1.37, 18.285, "Far service line - Left"),
    CourtLandmark("far-service-right", 9.60, 18.285, "Far service line - Right"),
    CourtLandmark("far-service-center", 5.485, 18.285, "Far service line - Center"),
    CourtLandmark("far-baseline-left", 0.0, 23.77, "Far baseline - Left corner"),
    CourtLandmark("far-baseline-right", 10.97, 23.77, "Far baseline - Right corner"),
)

_LANDMARKS_BY_SPORT = {
    "padel": PADEL_LANDMARKS,
    "tennis": TENNIS_LANDMARKS,
}


def landmarks_for_sport(sport: str) -> Dict[str, CourtLandmark]:
    """Landmark catalog for a sport; anything unrecognized uses padel."""
    return _LANDMARKS_BY_SPORT.get(sport, PADEL_LANDMARKS)


def calibration_point(landmark_id: str, video_x: float, video_y: float,
                      sport: str = "padel") -> CalibrationPoint:
    """Pair a clicked video location with a known court landmark.

    Raises:
        KeyError: If the landmark is not in the sport's catalog.
    """
    catalog = landmarks_for_sport(sport)
    if landmark_id not in catalog:
        raise KeyError(f"Unknown {sport} landmark: {landmark_id}")
    landmark = catalog[landmark_id]
    return CalibrationPoint(
        video_x=video_x,
        video_y=video_y,
        court_x=landmark.x,
        court_y=landmark.y,
        label=landmark.label
    )
