"""Translation of Discord recurrence rules into iCalendar recurrences."""
from typing import Dict, List

from processor.calendar import RepeatingSpec, parse_timestamp
from processor.models import (
    RecurrenceException,
    RecurrenceFrequency,
    RecurrenceRule,
    RecurrenceWeekday,
)


FREQUENCY_TABLE: Dict[RecurrenceFrequency, str] = {
    RecurrenceFrequency.YEARLY: 'YEARLY',
    RecurrenceFrequency.MONTHLY: 'MONTHLY',
    RecurrenceFrequency.WEEKLY: 'WEEKLY',
    RecurrenceFrequency.DAILY: 'DAILY',
}

WEEKDAY_TABLE: Dict[RecurrenceWeekday, str] = {
    RecurrenceWeekday.SUNDAY: 'SU',
    RecurrenceWeekday.MONDAY: 'MO',
    RecurrenceWeekday.TUESDAY: 'TU',
    RecurrenceWeekday.WEDNESDAY: 'WE',
    RecurrenceWeekday.THURSDAY: 'TH',
    RecurrenceWeekday.FRIDAY: 'FR',
    RecurrenceWeekday.SATURDAY: 'SA',
}

START_OF_WEEK = WEEKDAY_TABLE[RecurrenceWeekday.SUNDAY]


def map_frequency(value: int) -> str:
    """
    Map a Discord frequency value to an RRULE FREQ.

    Raises:
        ValueError: If the value is not a known frequency
    """
    return FREQUENCY_TABLE[RecurrenceFrequency(value)]


def map_weekday(value: int) -> str:
    """
    Map a Discord weekday value to an RRULE weekday code.

    Raises:
        ValueError: If the value is not a known weekday
    """
    return WEEKDAY_TABLE[RecurrenceWeekday(value)]


def map_recurrence_rule(
    rule: RecurrenceRule,
    exceptions: List[RecurrenceException]
) -> RepeatingSpec:
    """
    Convert a Discord recurrence rule and its exceptions to a RepeatingSpec.

    Constraint fields are passed through unchanged, absent stays absent.
    `by_year_day` is carried into BYSETPOS as-is; the two do not mean the
    same thing in RFC 5545 but existing subscribers rely on the output.
    Only cancelled exceptions become EXDATEs; rescheduled ones are dropped.

    Args:
        rule: Recurrence rule of the event
        exceptions: All exceptions recorded for the event

    Returns:
        RepeatingSpec for the calendar entry

    Raises:
        ValueError: If the frequency or a weekday is missing or unknown
    """
    if rule.frequency is None:
        raise ValueError("Recurrence rule is missing its frequency")

    return RepeatingSpec(
        freq=map_frequency(rule.frequency),
        interval=rule.interval,
        until=parse_timestamp(rule.end) if rule.end is not None else None,
        by_day=(
            [map_weekday(weekday) for weekday in rule.by_weekday]
            if rule.by_weekday is not None else None
        ),
        by_month=rule.by_month,
        by_month_day=rule.by_month_day,
        by_set_pos=rule.by_year_day,
        count=rule.count,
        exclude=[
            parse_timestamp(exception.scheduled_start_time)
            for exception in exceptions
            if exception.is_canceled
        ],
        start_of_week=START_OF_WEEK
    )
