"""Type definitions for court analysis system."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import math


@dataclass(frozen=True)
class TrackerSample:
    """Raw tracker output: a position in normalized video space at a time."""
    timestamp: float   # seconds
    video_x: float     # 0..1, left to right
    video_y: float     # 0..1, top to bottom

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TrackerSample':
        """Create from the tracking pipeline's ``{timestamp, X, Y}`` record."""
        return cls(
            timestamp=float(data['timestamp']),
            video_x=float(data['X']),
            video_y=float(data['Y'])
        )


@dataclass(frozen=True)
class CourtPosition:
    """One sample of a tracked entity in court space (meters)."""
    timestamp: float
    x: float
    y: float

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    def to_dict(self) -> Dict[str, float]:
        return {'timestamp': self.timestamp, 'x': self.x, 'y': self.y}


@dataclass(frozen=True)
class RallyWindow:
    """Closed interval of active play, in seconds."""
    start: float
    end: float

    def contains(self, timestamp: float) -> bool:
        return self.start <= timestamp <= self.end

    @property
    def duration(self) -> float:
        return max(0.0, self.end - self.start)

    @classmethod
    def from_pair(cls, pair) -> 'RallyWindow':
        """Create from a ``[start, end]`` pair as sent by the rally detector."""
        start, end = pair
        return cls(start=float(start), end=float(end))


@dataclass
class ZoneStat:
    """Time spent, share of play and entry count for one zone."""
    zone_id: str
    zone_name: str
    time_spent: float = 0.0
    percentage: float = 0.0
    entry_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'zoneId': self.zone_id,
            'zoneName': self.zone_name,
            'timeSpent': self.time_spent,
            'percentage': self.percentage,
            'entryCount': self.entry_count
        }


@dataclass
class PlayerDominance:
    """Per-subject summary over one zone model."""
    subject_id: str
    total_time: float
    zones: List[ZoneStat] = field(default_factory=list)
    dominant_zone: str = "Unknown"
    dominant_zone_percentage: float = 0.0
    pressure_zone_time: float = 0.0
    pressure_percentage: float = 0.0

    def zone(self, zone_id: str) -> Optional[ZoneStat]:
        for stat in self.zones:
            if stat.zone_id == zone_id:
                return stat
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'subjectId': self.subject_id,
            'totalTime': self.total_time,
            'dominantZone': self.dominant_zone,
            'dominantZonePercentage': self.dominant_zone_percentage,
            'pressureZoneTime': self.pressure_zone_time,
            'pressurePercentage': self.pressure_percentage,
            'zones': [z.to_dict() for z in self.zones]
        }


@dataclass
class DominanceConfig:
    """Configuration for zone dominance aggregation."""
    gap_threshold: float = 2.0          # seconds; larger gaps accrue no time
    sport: str = "padel"
    zone_system: str = "traffic-light"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'gap_threshold': self.gap_threshold,
            'sport': self.sport,
            'zone_system': self.zone_system
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DominanceConfig':
        """Create from dictionary."""
        return cls(
            gap_threshold=float(data.get('gap_threshold', 2.0)),
            sport=str(data.get('sport', 'padel')),
            zone_system=str(data.get('zone_system', 'traffic-light'))
        )


def rally_windows(pairs) -> List[RallyWindow]:
    """Convert ``[start, end]`` pairs (or RallyWindows) into RallyWindows."""
    windows = []
    for pair in pairs:
        if isinstance(pair, RallyWindow):
            windows.append(pair)
        else:
            windows.append(RallyWindow.from_pair(pair))
    return windows
