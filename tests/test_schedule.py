"""
Tests for preference normalization and schedule overlap.
"""

import pytest

from skillswap_match.stages.stage2_schedule import (
    ScheduleOverlapStage,
    normalize_days,
    normalize_times,
    parse_time_range,
    overlap_fraction,
)
from skillswap_match.models.schemas import MatchCandidate
from skillswap_match.models.scoring_config import ScheduleBlend


class TestNormalizeDays:
    """Test day tag normalization."""

    def test_canonical_names(self):
        assert normalize_days(["Monday", " FRIDAY "]) == {"monday", "friday"}

    def test_german_names(self):
        """German day names map to their English equivalents."""
        assert normalize_days(["Montag", "mittwoch", "Sonntag"]) == {
            "monday", "wednesday", "sunday",
        }

    def test_abbreviations(self):
        assert normalize_days(["mon", "Tue", "thurs"]) == {"monday", "tuesday", "thursday"}

    def test_blank_tags_dropped(self):
        """Empty and whitespace-only tags are ignored."""
        assert normalize_days(["", "  ", None]) == set()

    def test_unknown_tags_kept(self):
        """Unknown tags survive as lowercased literals."""
        assert normalize_days(["Weekends"]) == {"weekends"}

    def test_none_input(self):
        assert normalize_days(None) == set()


class TestNormalizeTimes:
    """Test time tag normalization."""

    def test_bucket_names(self):
        assert normalize_times(["Morning", "evening"]) == {"morning", "evening"}

    def test_german_aliases(self):
        assert normalize_times(["abends", "Nachmittag"]) == {"evening", "afternoon"}

    def test_range_within_bucket(self):
        """A range fully inside one bucket maps to that bucket."""
        assert normalize_times(["18:00-20:00"]) == {"evening"}

    def test_range_spanning_buckets(self):
        """A range crossing a boundary maps to every bucket it touches."""
        assert normalize_times(["11:00-13:30"]) == {"morning", "afternoon"}

    def test_boundary_is_exclusive(self):
        """A range ending exactly at a bucket start does not touch it."""
        assert normalize_times(["09:00-12:00"]) == {"morning"}

    def test_night_range(self):
        assert normalize_times(["22:30-23:45"]) == {"night"}
        assert normalize_times(["05:00-07:00"]) == {"night", "morning"}

    def test_invalid_range_kept_literally(self):
        """Backwards or malformed ranges are kept as literal tags."""
        assert normalize_times(["20:00-18:00"]) == {"20:00-18:00"}
        assert normalize_times(["25:00-26:00"]) == {"25:00-26:00"}


class TestParseTimeRange:
    """Test HH:MM-HH:MM parsing."""

    def test_valid(self):
        assert parse_time_range("9:00-10:00") == ["morning"]

    def test_spaces_around_dash(self):
        assert parse_time_range("17:00 - 18:00") == ["evening"]

    @pytest.mark.parametrize("value", ["", "evening", "10:00", "10:00-10:00", "12:60-13:00"])
    def test_invalid(self, value):
        assert parse_time_range(value) is None


class TestOverlapFraction:
    """Test set overlap."""

    def test_empty_side_is_full_overlap(self):
        assert overlap_fraction(set(), {"monday"}) == 1.0
        assert overlap_fraction({"monday"}, set()) == 1.0
        assert overlap_fraction(set(), set()) == 1.0

    def test_smaller_mode(self):
        assert overlap_fraction({"a", "b", "c"}, {"b", "d"}) == 0.5

    def test_union_mode(self):
        assert overlap_fraction({"a", "b", "c"}, {"b", "d"}, mode="union") == 0.25

    def test_disjoint(self):
        assert overlap_fraction({"a"}, {"b"}) == 0.0

    def test_subset_is_full_in_smaller_mode(self):
        assert overlap_fraction({"a"}, {"a", "b", "c"}) == 1.0


class TestScheduleOverlapStage:
    """Test the blended stage output."""

    def _candidate(self, **overrides) -> MatchCandidate:
        data = {
            "skills_match": True,
            "requester_rating": 4.0,
            "target_user_rating": 4.0,
        }
        data.update(overrides)
        return MatchCandidate(**data)

    def test_cross_language_overlap(self):
        """'Montag' and 'monday' and a range vs bucket tag fully overlap."""
        result = ScheduleOverlapStage().process(self._candidate(
            requester_preferred_days={"monday"},
            target_user_preferred_days={"Montag"},
            requester_preferred_times={"evening"},
            target_user_preferred_times={"18:00-20:00"},
        ))
        assert result.overlap == 1.0
        assert result.common_days == ["monday"]
        assert result.common_times == ["evening"]

    def test_blend(self):
        """Day and time overlap are blended by their weights."""
        stage = ScheduleOverlapStage(ScheduleBlend(day_weight=3, time_weight=1))
        result = stage.process(self._candidate(
            requester_preferred_days={"monday"},
            target_user_preferred_days={"monday"},
            requester_preferred_times={"morning"},
            target_user_preferred_times={"evening"},
        ))
        assert result.day_overlap == 1.0
        assert result.time_overlap == 0.0
        assert result.overlap == 0.75

    def test_zero_weights_are_neutral(self):
        stage = ScheduleOverlapStage(ScheduleBlend(day_weight=0, time_weight=0))
        result = stage.process(self._candidate(
            requester_preferred_days={"monday"},
            target_user_preferred_days={"friday"},
        ))
        assert result.overlap == 1.0
