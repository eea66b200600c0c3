"""I/O utilities for court analysis."""

import csv
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import yaml

from .calibration.types import CalibrationConfig, CalibrationPoint, Homography
from .types import DominanceConfig, PlayerDominance, RallyWindow, TrackerSample, ZoneStat
from .zones import ZoneModel

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass
class TrackingSession:
    """Everything the core needs for one match: markings, rallies and tracks."""
    calibration_points: List[CalibrationPoint] = field(default_factory=list)
    rallies: List[RallyWindow] = field(default_factory=list)
    tracks: Dict[str, List[TrackerSample]] = field(default_factory=dict)


def _is_yaml(filepath: PathLike) -> bool:
    return str(filepath).endswith(('.yaml', '.yml'))


class CourtIO:
    """I/O utilities for calibration, configuration and zone statistics."""

    def read_data(self, filepath: PathLike) -> Any:
        """Read a JSON or YAML document, chosen by file extension."""
        with open(filepath, 'r') as f:
            if _is_yaml(filepath):
                return yaml.safe_load(f)
            return json.load(f)

    def write_data(self, data: Any, filepath: PathLike):
        """Write a JSON or YAML document, chosen by file extension."""
        with open(filepath, 'w') as f:
            if _is_yaml(filepath):
                yaml.safe_dump(data, f, sort_keys=False)
            else:
                json.dump(data, f, indent=2)

    def read_mapping(self, filepath: PathLike) -> Dict[str, Any]:
        """Read a document whose top level must be a mapping; empty files give {}."""
        data = self.read_data(filepath)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"{filepath} must contain a mapping, got {type(data).__name__}")
        return data

    def save_homography(self, homography: Homography, filepath: PathLike):
        """Save homography matrix to file."""
        self.write_data(homography.to_dict(), filepath)
        logger.info(f"Homography saved to {filepath}")

    def load_homography(self, filepath: PathLike) -> Optional[Homography]:
        """Load homography matrix from file; None if missing or invalid."""
        try:
            return Homography.from_dict(self.read_mapping(filepath))
        except (OSError, ValueError, KeyError, TypeError, IndexError, yaml.YAMLError) as e:
            logger.error(f"Error loading homography from {filepath}: {e}")
            return None

    def load_config(self, filepath: PathLike) -> Tuple[CalibrationConfig, DominanceConfig]:
        """
        Load calibration and dominance configuration.

        The file may hold ``calibration:`` and ``dominance:`` sections; missing
        sections or keys fall back to defaults.

        Raises:
            ValueError: If the file or one of its sections is not a mapping.
        """
        data = self.read_mapping(filepath)
        sections = {}
        for name in ('calibration', 'dominance'):
            section = data.get(name) or {}
            if not isinstance(section, dict):
                raise ValueError(f"'{name}' section in {filepath} must be a mapping")
            sections[name] = section
        calibration = CalibrationConfig.from_dict(sections['calibration'])
        dominance = DominanceConfig.from_dict(sections['dominance'])
        return calibration, dominance

    def save_config(self, calibration: CalibrationConfig, dominance: DominanceConfig,
                    filepath: PathLike):
        """Save configuration to file."""
        self.write_data({
            'calibration': calibration.to_dict(),
            'dominance': dominance.to_dict()
        }, filepath)

    def load_zone_model(self, filepath: PathLike) -> ZoneModel:
        """Load a custom zone system definition."""
        return ZoneModel.from_dict(self.read_mapping(filepath))

    def load_session(self, filepath: PathLike) -> TrackingSession:
        """
        Load a tracking session.

        Expected layout::

            calibration_points: [{videoX, videoY, courtX, courtY, label}, ...]
            rallies: [[start, end], ...]
            tracks: {subject_id: [{timestamp, X, Y}, ...]}
        """
        data = self.read_mapping(filepath)
        return TrackingSession(
            calibration_points=[CalibrationPoint.from_dict(p)
                                for p in data.get('calibration_points', [])],
            rallies=[RallyWindow.from_pair(r) for r in data.get('rallies', [])],
            tracks={
                str(subject): [TrackerSample.from_dict(s) for s in samples]
                for subject, samples in (data.get('tracks') or {}).items()
            }
        )

    def zone_stats_to_dict(self, summaries: Mapping[str, PlayerDominance],
                           combined: Optional[Sequence[ZoneStat]] = None) -> Dict[str, Any]:
        """Plain structure of zone statistics, ready for JSON."""
        data: Dict[str, Any] = {
            'players': [summary.to_dict() for summary in summaries.values()]
        }
        if combined is not None:
            data['all'] = [stat.to_dict() for stat in combined]
        return data

    def export_zone_stats_csv(self, summaries: Mapping[str, PlayerDominance], filepath: PathLike,
                              combined: Optional[Sequence[ZoneStat]] = None):
        """Export zone statistics to CSV file, one row per subject and zone."""
        with open(filepath, 'w', newline='') as csvfile:
            fieldnames = ['subject_id', 'zone_id', 'zone_name', 'time_spent',
                          'percentage', 'entry_count']
            writer = csv.DictWriter(csvfile, fieldnames=fieldnames)

            writer.writeheader()
            rows = [(summary.subject_id, summary.zones) for summary in summaries.values()]
            if combined is not None:
                rows.append(('all', combined))

            for subject_id, stats in rows:
                for stat in stats:
                    writer.writerow({
                        'subject_id': subject_id,
                        'zone_id': stat.zone_id,
                        'zone_name': stat.zone_name,
                        'time_spent': round(stat.time_spent, 4),
                        'percentage': round(stat.percentage, 4),
                        'entry_count': stat.entry_count
                    })
