"""Time-weighted zone occupancy (zone dominance) analytics."""

import logging
import math
import re
from collections import OrderedDict
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from .types import CourtPosition, DominanceConfig, PlayerDominance, RallyWindow, ZoneStat, rally_windows
from .zones import ZoneModel, IdentityConvention

logger = logging.getLogger(__name__)

GAP_THRESHOLD = 2.0  # seconds


class ZoneDominanceAggregator:
    """
    Computes per-zone time, share of play and entries for one subject.

    Only samples inside a rally window count. Time between consecutive
    samples is credited to the zone of the later sample, unless the gap is
    a discontinuity (>= gap threshold). Each call is independent.
    """

    def __init__(self, zone_model: ZoneModel, convention=None,
                 config: Optional[DominanceConfig] = None):
        """Initialize aggregator for a zone model and court convention."""
        self.zone_model = zone_model
        self.convention = convention or IdentityConvention()
        self.config = config or DominanceConfig(gap_threshold=GAP_THRESHOLD)

    def aggregate(self, positions: Iterable[CourtPosition],
                  rallies: Iterable) -> List[ZoneStat]:
        """
        Aggregate zone statistics for one subject.

        Args:
            positions: Court-space samples, any order.
            rallies: RallyWindows or ``[start, end]`` pairs (inclusive).

        Returns:
            One ZoneStat per zone, in zone model order.
        """
        windows = rally_windows(rallies)
        stats = OrderedDict(
            (z.id, ZoneStat(zone_id=z.id, zone_name=z.name)) for z in self.zone_model.zones
        )

        in_play = [p for p in positions if _in_any_rally(p.timestamp, windows)]
        if not in_play:
            logger.debug("No samples inside rally windows; returning empty zone stats")
            return list(stats.values())

        in_play.sort(key=lambda p: p.timestamp)

        gap_threshold = self.config.gap_threshold
        total_time = 0.0
        last_timestamp = in_play[0].timestamp
        last_zone_id = None

        for position in in_play:
            if not position.is_finite():
                continue

            x, y = self.convention.normalize(position.x, position.y)
            zone = self.zone_model.find_zone(x, y)

            if zone is not None:
                dt = position.timestamp - last_timestamp
                if 0 < dt < gap_threshold:
                    stats[zone.id].time_spent += dt
                    total_time += dt

                if zone.id != last_zone_id:
                    stats[zone.id].entry_count += 1
                    last_zone_id = zone.id

            last_timestamp = position.timestamp

        _apply_percentages(stats.values(), total_time)
        logger.debug(f"Aggregated {len(in_play)} rally samples into {len(stats)} zones "
                     f"({total_time:.2f}s of play)")
        return list(stats.values())

    def summarize(self, subject_id: str, positions: Iterable[CourtPosition],
                  rallies: Iterable) -> PlayerDominance:
        """Aggregate and summarize one subject."""
        return summarize(subject_id, self.aggregate(positions, rallies), self.zone_model)

    def aggregate_subjects(self, positions_by_subject: Mapping[str, Sequence[CourtPosition]],
                           rallies: Iterable) -> Dict[str, PlayerDominance]:
        """
        Summarize every subject, keyed and ordered by natural sort of subject id.
        """
        windows = rally_windows(rallies)
        summaries = {}
        for subject_id in sorted(positions_by_subject, key=_natural_key):
            summaries[subject_id] = self.summarize(
                subject_id, positions_by_subject[subject_id], windows
            )
        return summaries

    def aggregate_all(self, positions_by_subject: Mapping[str, Sequence[CourtPosition]],
                      rallies: Iterable) -> List[ZoneStat]:
        """The "all players" view: per-subject stats summed, percentages recomputed."""
        summaries = self.aggregate_subjects(positions_by_subject, rallies)
        return combine_zone_stats([s.zones for s in summaries.values()], self.zone_model)


def combine_zone_stats(per_subject: Iterable[Sequence[ZoneStat]],
                       zone_model: ZoneModel) -> List[ZoneStat]:
    """
    Sum time and entries per zone across subjects and recompute percentages
    from the combined total.
    """
    combined = OrderedDict(
        (z.id, ZoneStat(zone_id=z.id, zone_name=z.name)) for z in zone_model.zones
    )
    for stats in per_subject:
        for stat in stats:
            if stat.zone_id not in combined:
                logger.warning(f"Zone '{stat.zone_id}' is not in model '{zone_model.id}'; ignored")
                continue
            combined[stat.zone_id].time_spent += stat.time_spent
            combined[stat.zone_id].entry_count += stat.entry_count

    total = sum(s.time_spent for s in combined.values())
    _apply_percentages(combined.values(), total)
    return list(combined.values())


def summarize(subject_id: str, stats: Sequence[ZoneStat],
              zone_model: ZoneModel) -> PlayerDominance:
    """Dominant zone and pressure-zone share for one subject's stats."""
    total_time = sum(s.time_spent for s in stats)

    dominant = None
    for stat in stats:
        if stat.time_spent > 0 and (dominant is None or stat.time_spent > dominant.time_spent):
            dominant = stat

    pressure_ids = set(zone_model.pressure_zone_ids)
    pressure_time = sum(s.time_spent for s in stats if s.zone_id in pressure_ids)

    return PlayerDominance(
        subject_id=str(subject_id),
        total_time=total_time,
        zones=list(stats),
        dominant_zone=dominant.zone_name if dominant else "Unknown",
        dominant_zone_percentage=dominant.percentage if dominant else 0.0,
        pressure_zone_time=pressure_time,
        pressure_percentage=(pressure_time / total_time) * 100 if total_time > 0 else 0.0
    )


def _apply_percentages(stats: Iterable[ZoneStat], total_time: float):
    for stat in stats:
        stat.percentage = (stat.time_spent / total_time) * 100 if total_time > 0 else 0.0


def _in_any_rally(timestamp: float, windows: Sequence[RallyWindow]) -> bool:
    return math.isfinite(timestamp) and any(w.contains(timestamp) for w in windows)


def _natural_key(value) -> List:
    # "player_10" sorts after "player_2"
    return [int(part) if part.isdigit() else part.lower()
            for part in re.split(r'(\d+)', str(value))]
