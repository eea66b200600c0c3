"""Tests for zone dominance aggregation."""

import pytest

from court_analysis.core import (
    CourtPosition, DominanceConfig, PadelConvention, RallyWindow, TennisConvention, ZoneDefinition,
    ZoneDominanceAggregator, ZoneModel, ZoneStat, combine_zone_stats, get_zone_system,
    summarize
)

HALVES = ZoneModel(
    id="halves",
    name="Halves",
    zones=(
        ZoneDefinition("left", "Left", 0, 5, 0, 10),
        ZoneDefinition("right", "Right", 5, 10, 0, 10, is_pressure_zone=True),
    ),
)

LEFT, RIGHT, OFF_COURT = 2.0, 8.0, 12.0


def track(*samples, y=5.0):
    """Build positions from (timestamp, x) pairs."""
    return [CourtPosition(timestamp=t, x=x, y=y) for t, x in samples]


def by_id(stats):
    return {stat.zone_id: stat for stat in stats}


class TestZoneDominanceAggregator:
    """Test zone dominance aggregator."""

    def setup_method(self):
        """Set up test fixtures."""
        self.aggregator = ZoneDominanceAggregator(HALVES)
        self.rallies = [(0.0, 100.0)]

    def test_time_credited_to_later_sample_zone(self):
        """Test that each interval counts toward the zone of its end sample."""
        positions = track((0.0, LEFT), (0.5, LEFT), (1.0, RIGHT), (1.5, RIGHT))

        stats = by_id(self.aggregator.aggregate(positions, self.rallies))

        assert stats["left"].time_spent == pytest.approx(0.5)
        assert stats["right"].time_spent == pytest.approx(1.0)
        assert stats["left"].percentage == pytest.approx(100 / 3)
        assert stats["right"].percentage == pytest.approx(200 / 3)
        assert stats["left"].entry_count == 1
        assert stats["right"].entry_count == 1

    def test_one_stat_per_zone_in_model_order(self):
        stats = self.aggregator.aggregate(track((0.0, RIGHT)), self.rallies)

        assert [s.zone_id for s in stats] == ["left", "right"]
        assert [s.zone_name for s in stats] == ["Left", "Right"]

    def test_percentages_sum_to_100(self):
        positions = track(*[(i * 0.3, LEFT if i % 3 else RIGHT) for i in range(20)])

        stats = self.aggregator.aggregate(positions, self.rallies)

        assert sum(s.percentage for s in stats) == pytest.approx(100.0)

    def test_empty_input(self):
        """Test that no samples yields all-zero stats, not an error."""
        stats = self.aggregator.aggregate([], self.rallies)

        assert len(stats) == 2
        for stat in stats:
            assert stat.time_spent == 0.0
            assert stat.percentage == 0.0
            assert stat.entry_count == 0

    def test_no_rallies(self):
        """Test that samples outside every rally count for nothing."""
        stats = self.aggregator.aggregate(track((0.0, LEFT), (0.5, LEFT)), [])

        assert all(s.time_spent == 0.0 and s.entry_count == 0 for s in stats)

    def test_single_sample(self):
        """Test that one sample enters a zone but accrues no time."""
        stats = by_id(self.aggregator.aggregate(track((3.0, LEFT)), self.rallies))

        assert stats["left"].entry_count == 1
        assert stats["left"].time_spent == 0.0
        assert stats["left"].percentage == 0.0

    def test_samples_outside_rallies_discarded(self):
        """Test that rally bounds are inclusive and dead time is dropped."""
        positions = track((0.0, LEFT), (0.5, LEFT), (1.0, LEFT), (1.5, RIGHT))

        stats = by_id(self.aggregator.aggregate(positions, [(0.0, 1.0)]))

        assert stats["left"].time_spent == pytest.approx(1.0)
        assert stats["right"].time_spent == 0.0
        assert stats["right"].entry_count == 0

    def test_time_between_rallies_not_counted(self):
        positions = track((0.0, LEFT), (0.5, LEFT), (1.0, LEFT), (3.0, LEFT), (3.5, LEFT))

        stats = by_id(self.aggregator.aggregate(positions, [(0.0, 1.0), (3.0, 4.0)]))

        assert stats["left"].time_spent == pytest.approx(1.5)

    def test_rally_window_objects(self):
        positions = track((0.0, LEFT), (0.5, LEFT))

        from_pairs = self.aggregator.aggregate(positions, [(0.0, 1.0)])
        from_windows = self.aggregator.aggregate(positions, [RallyWindow(0.0, 1.0)])

        assert from_pairs == from_windows

    def test_gap_excluded(self):
        """Test that a gap of 2 seconds or more accrues no time."""
        positions = track((0.0, LEFT), (0.5, LEFT), (1.0, LEFT), (4.0, LEFT), (4.5, LEFT))

        stats = by_id(self.aggregator.aggregate(positions, self.rallies))

        assert stats["left"].time_spent == pytest.approx(1.5)
        assert stats["left"].entry_count == 1

    def test_gap_threshold_is_exclusive(self):
        exactly = by_id(self.aggregator.aggregate(track((0.0, LEFT), (2.0, LEFT)), self.rallies))
        under = by_id(self.aggregator.aggregate(track((0.0, LEFT), (1.99, LEFT)), self.rallies))

        assert exactly["left"].time_spent == 0.0
        assert under["left"].time_spent == pytest.approx(1.99)

    def test_configured_gap_threshold(self):
        aggregator = ZoneDominanceAggregator(HALVES, config=DominanceConfig(gap_threshold=5.0))

        stats = by_id(aggregator.aggregate(track((0.0, LEFT), (3.0, LEFT)), self.rallies))

        assert stats["left"].time_spent == pytest.approx(3.0)

    def test_duplicate_timestamps_accrue_nothing(self):
        stats = by_id(self.aggregator.aggregate(track((1.0, LEFT), (1.0, RIGHT)), self.rallies))

        assert stats["left"].time_spent == 0.0
        assert stats["right"].time_spent == 0.0
        assert stats["right"].entry_count == 1

    def test_alternating_zones_entry_count(self):
        """Test that N samples alternating between two zones give N entries."""
        n = 11
        positions = track(*[(i * 0.2, LEFT if i % 2 == 0 else RIGHT) for i in range(n)])

        stats = by_id(self.aggregator.aggregate(positions, self.rallies))

        assert stats["left"].entry_count + stats["right"].entry_count == n
        assert stats["left"].entry_count == 6
        assert stats["right"].entry_count == 5

    def test_unmatched_sample_keeps_last_zone(self):
        """Test that leaving all zones briefly is not a new entry but still advances time."""
        positions = track((0.0, LEFT), (0.5, OFF_COURT), (1.0, LEFT))

        stats = by_id(self.aggregator.aggregate(positions, self.rallies))

        assert stats["left"].entry_count == 1
        assert stats["left"].time_spent == pytest.approx(0.5)
        assert stats["left"].percentage == pytest.approx(100.0)

    def test_unsorted_input(self):
        """Test that sample order does not matter."""
        ordered = track((0.0, LEFT), (0.5, LEFT), (1.0, RIGHT), (1.5, LEFT), (2.0, RIGHT))
        shuffled = [ordered[i] for i in (3, 0, 4, 2, 1)]

        assert (self.aggregator.aggregate(shuffled, self.rallies)
                == self.aggregator.aggregate(ordered, self.rallies))

    def test_non_finite_positions_skipped(self):
        """Test that a NaN position is ignored entirely."""
        positions = [
            CourtPosition(0.0, LEFT, 5.0),
            CourtPosition(0.5, float('nan'), 5.0),
            CourtPosition(1.0, LEFT, 5.0),
        ]

        stats = by_id(self.aggregator.aggregate(positions, self.rallies))

        assert stats["left"].time_spent == pytest.approx(1.0)
        assert stats["left"].entry_count == 1

    def test_overlapping_zones_first_wins(self):
        stats = by_id(self.aggregator.aggregate(track((0.0, 5.0), (0.5, 5.0)), self.rallies))

        assert stats["left"].time_spent == pytest.approx(0.5)
        assert stats["right"].entry_count == 0

    def test_calls_are_independent(self):
        positions = track((0.0, LEFT), (0.5, RIGHT))

        first = self.aggregator.aggregate(positions, self.rallies)
        second = self.aggregator.aggregate(positions, self.rallies)

        assert first == second
        assert first is not second

    def test_padel_convention_mirrors_far_half(self):
        """Test that a far-half position counts in the mirrored near-half zone."""
        aggregator = ZoneDominanceAggregator(get_zone_system("padel", "traffic-light"),
                                             convention=PadelConvention())
        positions = track((0.0, 5.0), (0.5, 5.0), y=15.0)

        stats = by_id(aggregator.aggregate(positions, self.rallies))

        assert stats["orange"].time_spent == pytest.approx(0.5)
        assert stats["green"].time_spent == 0.0

    def test_tennis_convention_folds_full_court(self):
        """Test that far-half and behind-baseline tennis positions land in near-half zones."""
        aggregator = ZoneDominanceAggregator(get_zone_system("tennis", "traffic-light"),
                                             convention=TennisConvention())
        positions = [
            CourtPosition(0.0, 5.0, 20.0),   # far half, folds to 3.77 (baseline)
            CourtPosition(0.5, 5.0, 20.0),
            CourtPosition(1.0, 5.0, -1.0),   # behind near baseline, clamps to 0
            CourtPosition(1.5, 5.0, 12.5),   # just past the net, folds to 11.27
            CourtPosition(2.0, 5.0, 10.0),   # near half, unchanged
        ]

        stats = by_id(aggregator.aggregate(positions, self.rallies))

        assert stats["baseline"].time_spent == pytest.approx(0.5)
        assert stats["deep-defense"].time_spent == pytest.approx(0.5)
        assert stats["net"].time_spent == pytest.approx(1.0)
        assert stats["transition"].time_spent == 0.0
        assert [stats[z].entry_count for z in ("net", "transition", "baseline", "deep-defense")] == [1, 0, 1, 1]


class TestSummaries:
    """Test per-subject summaries and multi-subject combination."""

    def setup_method(self):
        """Set up test fixtures."""
        self.aggregator = ZoneDominanceAggregator(HALVES)
        self.rallies = [(0.0, 100.0)]
        self.positions = {
            "player_10": track((0.0, LEFT), (0.5, LEFT), (1.0, LEFT)),
            "player_2": track((0.0, RIGHT), (1.0, RIGHT), (2.0, RIGHT), (3.0, RIGHT)),
            "player_1": track((0.0, LEFT), (0.5, RIGHT), (1.0, RIGHT)),
        }

    def test_summarize(self):
        summary = self.aggregator.summarize("player_2", self.positions["player_2"], self.rallies)

        assert summary.subject_id == "player_2"
        assert summary.total_time == pytest.approx(3.0)
        assert summary.dominant_zone == "Right"
        assert summary.dominant_zone_percentage == pytest.approx(100.0)
        assert summary.pressure_zone_time == pytest.approx(3.0)
        assert summary.pressure_percentage == pytest.approx(100.0)
        assert summary.zone("right").entry_count == 1

    def test_summarize_without_time(self):
        summary = summarize("p", [ZoneStat("left", "Left"), ZoneStat("right", "Right")], HALVES)

        assert summary.dominant_zone == "Unknown"
        assert summary.dominant_zone_percentage == 0.0
        assert summary.pressure_percentage == 0.0

    def test_summarize_tie_first_zone_wins(self):
        stats = [ZoneStat("left", "Left", 1.0, 50.0, 1), ZoneStat("right", "Right", 1.0, 50.0, 1)]

        assert summarize("p", stats, HALVES).dominant_zone == "Left"

    def test_subjects_in_natural_order(self):
        summaries = self.aggregator.aggregate_subjects(self.positions, self.rallies)

        assert list(summaries) == ["player_1", "player_2", "player_10"]

    def test_combine_zone_stats(self):
        """Test that subjects are summed and percentages recomputed from the total."""
        left_only = [ZoneStat("left", "Left", 1.0, 100.0, 2), ZoneStat("right", "Right")]
        right_only = [ZoneStat("left", "Left"), ZoneStat("right", "Right", 3.0, 100.0, 1)]

        combined = by_id(combine_zone_stats([left_only, right_only], HALVES))

        assert combined["left"].time_spent == pytest.approx(1.0)
        assert combined["right"].time_spent == pytest.approx(3.0)
        assert combined["left"].percentage == pytest.approx(25.0)
        assert combined["right"].percentage == pytest.approx(75.0)
        assert combined["left"].entry_count == 2
        assert combined["right"].entry_count == 1

    def test_combine_does_not_modify_inputs(self):
        stats = [ZoneStat("left", "Left", 1.0, 100.0, 1), ZoneStat("right", "Right")]

        combine_zone_stats([stats, stats], HALVES)

        assert stats[0].time_spent == 1.0
        assert stats[0].percentage == 100.0

    def test_combine_ignores_unknown_zones(self):
        combined = combine_zone_stats([[ZoneStat("middle", "Middle", 5.0, 100.0, 1)]], HALVES)

        assert all(s.time_spent == 0.0 and s.percentage == 0.0 for s in combined)

    def test_combine_nothing(self):
        combined = combine_zone_stats([], HALVES)

        assert [s.zone_id for s in combined] == ["left", "right"]
        assert all(s.percentage == 0.0 for s in combined)

    def test_aggregate_all(self):
        combined = by_id(self.aggregator.aggregate_all(self.positions, self.rallies))

        # player_10: left 1.0; player_2: right 3.0; player_1: right 1.0
        assert combined["left"].time_spent == pytest.approx(1.0)
        assert combined["right"].time_spent == pytest.approx(4.0)
        assert combined["left"].percentage + combined["right"].percentage == pytest.approx(100.0)
        assert combined["left"].entry_count == 2
        assert combined["right"].entry_count == 2

    def test_to_dict(self):
        summary = self.aggregator.summarize("player_1", self.positions["player_1"], self.rallies)

        data = summary.to_dict()

        assert data['subjectId'] == "player_1"
        assert data['dominantZone'] == "Right"
        assert [z['zoneId'] for z in data['zones']] == ["left", "right"]
