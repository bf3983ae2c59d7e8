"""Tests for the streak and heatmap engine.

Covers:
- Empty history
- Consecutive days and gaps
- Streaks ending today, yesterday, or earlier
- Several completions on the same day
- Invalid timestamps
- Timezone-aware timestamps
"""

from __future__ import annotations

import random
from datetime import date, datetime, timedelta, timezone

import pytest

from habitsage.models.habit import Completion
from habitsage.services.streaks import (
    HeatmapCell,
    InvalidCompletionError,
    StreakData,
    calculate_completion_rate,
    completion_days,
    compute_streak_data,
    generate_heatmap_data,
)

NOW = datetime(2024, 3, 13, 9, 30)
TODAY = NOW.date()


def _done(when, habit_id: int = 1) -> Completion:
    return Completion(habit_id=habit_id, user_id=1, completed_at=when)


def _days_ago(n: int, hour: int = 8) -> Completion:
    day = TODAY - timedelta(days=n)
    return _done(datetime(day.year, day.month, day.day, hour))


class TestCurrentStreak:
    """Tests for the streak ending at the most recent completion."""

    def test_empty_history_returns_zeroed_statistics(self):
        assert compute_streak_data([], NOW) == StreakData(
            current=0, longest=0, completion_rate=0, heatmap_data=[]
        )

    def test_single_completion_today(self):
        data = compute_streak_data([_days_ago(0)], NOW)

        assert data.current == 1
        assert data.longest == 1

    def test_today_and_yesterday(self):
        data = compute_streak_data([_days_ago(0), _days_ago(1)], NOW)

        assert data.current == 2
        assert data.longest == 2

    def test_yesterday_still_counts(self):
        """A streak is not broken until a whole day is missed."""
        data = compute_streak_data([_days_ago(1), _days_ago(2), _days_ago(3)], NOW)

        assert data.current == 3

    def test_stale_streak_is_zero(self):
        data = compute_streak_data([_days_ago(2), _days_ago(3)], NOW)

        assert data.current == 0
        assert data.longest == 2

    def test_gap_limits_current_to_latest_run(self):
        data = compute_streak_data([_days_ago(0), _days_ago(3)], NOW)

        assert data.current == 1
        assert data.longest == 1

    def test_current_is_latest_run_not_oldest(self):
        recent = [_days_ago(0), _days_ago(1)]
        older = [_days_ago(n) for n in range(5, 11)]

        data = compute_streak_data(recent + older, NOW)

        assert data.current == 2
        assert data.longest == 6

    def test_future_completion_makes_current_zero(self):
        """A completion dated after `now` is neither today nor yesterday."""
        data = compute_streak_data([_days_ago(0), _days_ago(-1)], NOW)

        assert data.current == 0
        assert data.longest == 2
        assert [c.date for c in data.heatmap_data] == ["2024-03-13", "2024-03-14"]

    def test_late_night_completion_counts_for_its_own_day(self):
        late = datetime.combine(TODAY - timedelta(days=1), datetime.max.time())
        data = compute_streak_data([_done(late), _days_ago(0, hour=0)], NOW)

        assert data.current == 2


class TestLongestStreak:
    """Tests for the longest historical streak."""

    def test_multiple_runs_returns_longest(self):
        start = datetime(2024, 1, 1, 7)
        entries = [_done(start + timedelta(days=i)) for i in range(3)]
        entries += [_done(datetime(2024, 1, 10, 7) + timedelta(days=i)) for i in range(7)]
        entries += [_done(datetime(2024, 1, 20, 7) + timedelta(days=i)) for i in range(4)]

        data = compute_streak_data(entries, NOW)

        assert data.longest == 7
        assert data.current == 0

    def test_current_run_can_be_longest(self):
        entries = [_done(datetime(2024, 1, 1, 7)), _done(datetime(2024, 1, 2, 7))]
        entries += [_days_ago(n) for n in range(14)]

        data = compute_streak_data(entries, NOW)

        assert data.longest == 14
        assert data.current == 14

    def test_unsorted_input_gives_same_result(self):
        entries = [_days_ago(n) for n in (0, 1, 2, 6, 7)]
        shuffled = list(entries)
        random.Random(7).shuffle(shuffled)

        assert compute_streak_data(shuffled, NOW) == compute_streak_data(entries, NOW)

    def test_runs_across_month_boundary(self):
        entries = [_done(datetime(2024, 2, 28, 7)), _done(datetime(2024, 2, 29, 7)), _done(datetime(2024, 3, 1, 7))]

        assert compute_streak_data(entries, NOW).longest == 3

    @pytest.mark.parametrize("seed", range(25))
    def test_longest_never_below_current(self, seed):
        rng = random.Random(seed)
        entries = [_days_ago(rng.randint(0, 30), hour=rng.randint(0, 23)) for _ in range(rng.randint(1, 40))]

        data = compute_streak_data(entries, NOW)

        assert data.longest >= data.current >= 0


class TestDuplicatesAndHeatmap:
    """Several completions per day count once for streaks but fully for heatmaps."""

    def test_same_day_duplicates(self):
        entries = [_days_ago(0, hour=7), _days_ago(0, hour=19)]

        data = compute_streak_data(entries, NOW)

        assert data.current == 1
        assert data.longest == 1
        assert data.heatmap_data == [HeatmapCell(date="2024-03-13", count=2)]

    def test_heatmap_sorted_ascending_with_counts(self):
        entries = [_days_ago(0), _days_ago(5), _days_ago(5, hour=20), _days_ago(2)]

        cells = generate_heatmap_data(entries, NOW)

        assert cells == [
            HeatmapCell(date="2024-03-08", count=2),
            HeatmapCell(date="2024-03-11", count=1),
            HeatmapCell(date="2024-03-13", count=1),
        ]

    def test_heatmap_skips_days_without_completions(self):
        cells = generate_heatmap_data([_days_ago(0), _days_ago(10)], NOW)

        assert [c.date for c in cells] == ["2024-03-03", "2024-03-13"]

    def test_completion_days_are_distinct_and_descending(self):
        entries = [_days_ago(3), _days_ago(0), _days_ago(3, hour=22), _days_ago(1)]

        assert completion_days(entries, NOW) == [
            date(2024, 3, 13),
            date(2024, 3, 12),
            date(2024, 3, 10),
        ]


class TestCompletionRate:
    """The completion metric is the raw record count."""

    def test_rate_is_record_count(self):
        entries = [_days_ago(0), _days_ago(0, hour=12), _days_ago(4)]

        assert compute_streak_data(entries, NOW).completion_rate == 3
        assert calculate_completion_rate(entries) == 3

    def test_rate_empty(self):
        assert calculate_completion_rate([]) == 0


class TestTimestamps:
    """Timestamp normalisation and validation."""

    @pytest.mark.parametrize("bad", [None, "2024-03-13", 1710322200.0])
    def test_invalid_timestamp_rejected(self, bad):
        entries = [_days_ago(0), Completion(habit_id=1, user_id=1, completed_at=bad)]

        with pytest.raises(InvalidCompletionError):
            compute_streak_data(entries, NOW)

    def test_invalid_timestamp_is_value_error(self):
        with pytest.raises(ValueError):
            compute_streak_data([_done(None)], NOW)

    def test_plain_dates_are_accepted(self):
        data = compute_streak_data([_done(TODAY), _done(TODAY - timedelta(days=1))], NOW)

        assert data.current == 2

    def test_now_may_be_a_date(self):
        assert compute_streak_data([_days_ago(1)], TODAY).current == 1

    def test_aware_timestamps_use_now_timezone(self):
        eastern = timezone(timedelta(hours=-5))
        now = datetime(2024, 3, 13, 9, 30, tzinfo=eastern)
        # 02:00 UTC on the 13th is 21:00 on the 12th in UTC-5
        late = datetime(2024, 3, 13, 2, 0, tzinfo=timezone.utc)

        data = compute_streak_data([_done(late)], now)

        assert data.heatmap_data == [HeatmapCell(date="2024-03-12", count=1)]
        assert data.current == 1

    def test_accepts_generator_input(self):
        data = compute_streak_data((_days_ago(n) for n in range(3)), NOW)

        assert data.current == 3
        assert data.completion_rate == 3
        assert len(data.heatmap_data) == 3

    def test_input_list_is_not_modified(self):
        entries = [_days_ago(4), _days_ago(0), _days_ago(2)]
        before = list(entries)

        compute_streak_data(entries, NOW)

        assert entries == before
