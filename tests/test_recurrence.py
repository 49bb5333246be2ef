"""Unit tests for the recurrence rule mapper."""
from datetime import datetime, timezone

import pytest

from processor.calendar import RepeatingSpec
from processor.models import RecurrenceException, RecurrenceRule
from processor.recurrence import map_frequency, map_recurrence_rule, map_weekday


def make_rule(**overrides):
    """Create a weekly rule with no constraints."""
    values = {'start': '2024-01-01T18:00:00+00:00', 'frequency': 2}
    values.update(overrides)
    return RecurrenceRule(**values)


def make_exception(start, is_canceled, exception_id='1'):
    return RecurrenceException(
        event_id='175928847299117063',
        event_exception_id=exception_id,
        scheduled_start_time=start,
        scheduled_end_time=None,
        is_canceled=is_canceled
    )


class TestFrequencyMapping:
    """Test cases for frequency remapping."""

    @pytest.mark.parametrize('value,expected', [
        (0, 'YEARLY'),
        (1, 'MONTHLY'),
        (2, 'WEEKLY'),
        (3, 'DAILY'),
    ])
    def test_frequency_only_changes_freq(self, value, expected):
        """Each frequency maps to its RRULE value and nothing else is set."""
        spec = map_recurrence_rule(make_rule(frequency=value), [])

        assert spec == RepeatingSpec(freq=expected, exclude=[], start_of_week='SU')

    def test_unknown_frequency_fails(self):
        """An out-of-range frequency is rejected."""
        with pytest.raises(ValueError):
            map_recurrence_rule(make_rule(frequency=4), [])

    def test_negative_frequency_fails(self):
        """Negative values are not treated as indexes from the end."""
        with pytest.raises(ValueError):
            map_frequency(-1)

    def test_missing_frequency_fails(self):
        """A rule without a frequency is rejected."""
        with pytest.raises(ValueError):
            map_recurrence_rule(make_rule(frequency=None), [])


class TestWeekdayMapping:
    """Test cases for weekday remapping."""

    @pytest.mark.parametrize('value,expected', [
        (0, 'SU'),
        (1, 'MO'),
        (2, 'TU'),
        (3, 'WE'),
        (4, 'TH'),
        (5, 'FR'),
        (6, 'SA'),
    ])
    def test_weekday_codes(self, value, expected):
        assert map_weekday(value) == expected

    def test_by_weekday_list(self):
        spec = map_recurrence_rule(make_rule(by_weekday=[1, 3, 5]), [])

        assert spec.by_day == ['MO', 'WE', 'FR']

    def test_absent_by_weekday(self):
        spec = map_recurrence_rule(make_rule(by_weekday=None), [])

        assert spec.by_day is None

    def test_unknown_weekday_fails(self):
        with pytest.raises(ValueError):
            map_recurrence_rule(make_rule(by_weekday=[7]), [])


class TestConstraintPassThrough:
    """Test cases for fields copied from the source rule."""

    def test_all_constraints(self):
        rule = make_rule(
            frequency=0,
            end='2025-01-01T00:00:00+00:00',
            interval=2,
            by_month=[3, 6],
            by_month_day=[15],
            by_year_day=[100],
            count=10
        )

        spec = map_recurrence_rule(rule, [])

        assert spec.freq == 'YEARLY'
        assert spec.interval == 2
        assert spec.until == datetime(2025, 1, 1, tzinfo=timezone.utc)
        assert spec.by_month == [3, 6]
        assert spec.by_month_day == [15]
        assert spec.by_set_pos == [100]
        assert spec.count == 10
        assert spec.start_of_week == 'SU'

    def test_zero_interval_is_kept(self):
        """Zero is a value, not an absence."""
        spec = map_recurrence_rule(make_rule(interval=0), [])

        assert spec.interval == 0

    def test_absent_fields_stay_absent(self):
        spec = map_recurrence_rule(make_rule(), [])

        assert spec.interval is None
        assert spec.until is None
        assert spec.by_month is None
        assert spec.by_month_day is None
        assert spec.by_set_pos is None
        assert spec.count is None


class TestExclusions:
    """Test cases for exception handling."""

    def test_only_cancelled_exceptions_are_excluded(self):
        exceptions = [
            make_exception('2024-01-08T18:00:00+00:00', True, '1'),
            make_exception('2024-01-15T19:00:00+00:00', False, '2'),
            make_exception('2024-01-22T18:00:00+00:00', True, '3'),
            make_exception('2024-01-29T20:00:00+00:00', False, '4'),
        ]

        spec = map_recurrence_rule(make_rule(), exceptions)

        assert spec.exclude == [
            datetime(2024, 1, 8, 18, 0, tzinfo=timezone.utc),
            datetime(2024, 1, 22, 18, 0, tzinfo=timezone.utc),
        ]

    def test_rescheduled_only(self):
        exceptions = [make_exception('2024-01-15T19:00:00+00:00', False)]

        spec = map_recurrence_rule(make_rule(), exceptions)

        assert spec.exclude == []

    def test_no_exceptions(self):
        assert map_recurrence_rule(make_rule(), []).exclude == []

    def test_zulu_timestamps(self):
        exceptions = [make_exception('2024-01-08T18:00:00Z', True)]

        spec = map_recurrence_rule(make_rule(), exceptions)

        assert spec.exclude == [datetime(2024, 1, 8, 18, 0, tzinfo=timezone.utc)]
