#!/usr/bin/env python3
"""Calibrate a session, project its tracks and report zone dominance."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from court_analysis.core import (
    CalibrationConfig, CourtIO, CoordinateProjector, DominanceConfig,
    HomographyEstimator, PlayerDominance, ZoneDominanceAggregator, ZoneStat, combine_zone_stats,
    convention_for_sport, get_zone_system
)
from court_analysis.core.logging_utils import setup_logging, log_operation

logger = logging.getLogger('court_analysis.scripts.analyze_zones')


def format_duration(seconds: float) -> str:
    """Format seconds as m:ss."""
    minutes, secs = divmod(int(round(seconds)), 60)
    return f"{minutes}:{secs:02d}"


def print_zone_table(title: str, stats: List[ZoneStat]):
    print(f"\n{title}")
    print("-" * len(title))
    for stat in stats:
        print(f"  {stat.zone_name:<20} {format_duration(stat.time_spent):>6} "
              f"{stat.percentage:6.1f}%  {stat.entry_count:3d} entries")


def print_summary(summary: PlayerDominance):
    print_zone_table(f"Player {summary.subject_id}", summary.zones)
    print(f"  Dominant zone: {summary.dominant_zone} "
          f"({summary.dominant_zone_percentage:.0f}%)")
    print(f"  Under pressure: {summary.pressure_percentage:.0f}% "
          f"({format_duration(summary.pressure_zone_time)})")


def analyze_session(session_path: str, calibration_config: CalibrationConfig,
                    dominance_config: DominanceConfig,
                    output_csv: Optional[str] = None,
                    output_json: Optional[str] = None,
                    homography_path: Optional[str] = None) -> int:
    """Run calibration and zone analysis for one session file. Returns an exit code."""
    io_utils = CourtIO()
    session = io_utils.load_session(session_path)

    with log_operation("calibration", logger):
        result = HomographyEstimator(calibration_config).estimate(session.calibration_points)

    if not result.success:
        print(f"Calibration failed: {result.error_message}", file=sys.stderr)
        return 1

    if homography_path:
        io_utils.save_homography(result.homography, homography_path)

    projector = CoordinateProjector(result.homography)
    positions: Dict[str, list] = {}
    for subject_id, samples in session.tracks.items():
        positions[subject_id] = projector.valid_positions(samples)
        dropped = len(samples) - len(positions[subject_id])
        if dropped:
            logger.warning(f"{subject_id}: {dropped} samples projected to infinity and were dropped")

    zone_model = get_zone_system(dominance_config.sport, dominance_config.zone_system)
    aggregator = ZoneDominanceAggregator(
        zone_model,
        convention=convention_for_sport(dominance_config.sport),
        config=dominance_config
    )

    with log_operation("zone_dominance", logger):
        summaries = aggregator.aggregate_subjects(positions, session.rallies)
        combined = combine_zone_stats([s.zones for s in summaries.values()], zone_model)

    print(f"Zone system: {zone_model.name} ({dominance_config.sport})")
    if result.validation_result is not None:
        print(f"Calibration error: mean {result.validation_result.mean_error:.3f}m, "
              f"max {result.validation_result.max_error:.3f}m")
    for summary in summaries.values():
        print_summary(summary)
    print_zone_table("All players", combined)

    if output_csv:
        io_utils.export_zone_stats_csv(summaries, output_csv, combined)
        print(f"\nExported zone stats to: {output_csv}")
    if output_json:
        with open(output_json, 'w') as f:
            json.dump(io_utils.zone_stats_to_dict(summaries, combined), f, indent=2)
        print(f"Exported zone stats to: {output_json}")

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main analysis function."""
    parser = argparse.ArgumentParser(description='Court calibration and zone dominance analysis')
    parser.add_argument('--session', required=True,
                        help='Session file (JSON/YAML) with calibration points, rallies and tracks')
    parser.add_argument('--config', help='Configuration file (JSON/YAML)')
    parser.add_argument('--sport', choices=['padel', 'tennis'], help='Override configured sport')
    parser.add_argument('--zone-system', help='Zone system id (e.g. traffic-light, 6-zone)')
    parser.add_argument('--output-csv', help='Write zone statistics CSV here')
    parser.add_argument('--output-json', help='Write zone statistics JSON here')
    parser.add_argument('--save-homography', help='Write the calibrated homography here')
    parser.add_argument('--log-level', default='WARNING', help='Logging level')

    args = parser.parse_args(argv)
    setup_logging(level=args.log_level)

    if not Path(args.session).exists():
        print(f"Error: Session file not found: {args.session}", file=sys.stderr)
        return 2

    calibration_config, dominance_config = CalibrationConfig(), DominanceConfig()
    if args.config:
        try:
            calibration_config, dominance_config = CourtIO().load_config(args.config)
        except (OSError, ValueError, yaml.YAMLError) as e:
            print(f"Error: Invalid configuration file {args.config}: {e}", file=sys.stderr)
            return 2
    if args.sport:
        dominance_config.sport = args.sport
    if args.zone_system:
        dominance_config.zone_system = args.zone_system

    return analyze_session(
        args.session, calibration_config, dominance_config,
        output_csv=args.output_csv,
        output_json=args.output_json,
        homography_path=args.save_homography
    )


if __name__ == "__main__":
    sys.exit(main())
