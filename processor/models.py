"""Data models for Discord guild scheduled events."""
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional


class RecurrenceFrequency(IntEnum):
    """Discord recurrence rule frequency."""
    YEARLY = 0
    MONTHLY = 1
    WEEKLY = 2
    DAILY = 3


class RecurrenceWeekday(IntEnum):
    """Discord recurrence rule weekday."""
    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6


class EventStatus(IntEnum):
    """Discord guild scheduled event status."""
    SCHEDULED = 1
    ACTIVE = 2
    COMPLETED = 3
    CANCELED = 4


@dataclass
class NWeekday:
    """Weekday within a month, e.g. the 2nd Tuesday."""
    n: int
    day: int

    @classmethod
    def from_dict(cls, data: dict) -> 'NWeekday':
        return cls(n=data['n'], day=data['day'])


@dataclass
class RecurrenceRule:
    """Recurrence rule attached to a scheduled event."""
    start: str
    frequency: int
    end: Optional[str] = None
    interval: Optional[int] = None
    by_weekday: Optional[List[int]] = None
    by_n_weekday: Optional[List[NWeekday]] = None
    by_month: Optional[List[int]] = None
    by_month_day: Optional[List[int]] = None
    by_year_day: Optional[List[int]] = None
    count: Optional[int] = None

    @classmethod
    def from_dict(cls, data: dict) -> 'RecurrenceRule':
        """
        Build a rule from the Discord JSON object.

        Args:
            data: `recurrence_rule` object from the API

        Returns:
            RecurrenceRule object
        """
        by_n_weekday = data.get('by_n_weekday')
        return cls(
            start=data['start'],
            frequency=data['frequency'],
            end=data.get('end'),
            interval=data.get('interval'),
            by_weekday=data.get('by_weekday'),
            by_n_weekday=(
                [NWeekday.from_dict(item) for item in by_n_weekday]
                if by_n_weekday is not None else None
            ),
            by_month=data.get('by_month'),
            by_month_day=data.get('by_month_day'),
            by_year_day=data.get('by_year_day'),
            count=data.get('count')
        )


@dataclass
class RecurrenceException:
    """A rescheduled or cancelled occurrence of a recurring event."""
    event_id: str
    event_exception_id: str
    scheduled_start_time: str
    scheduled_end_time: Optional[str]
    is_canceled: bool

    @classmethod
    def from_dict(cls, data: dict) -> 'RecurrenceException':
        return cls(
            event_id=data['event_id'],
            event_exception_id=data['event_exception_id'],
            scheduled_start_time=data['scheduled_start_time'],
            scheduled_end_time=data.get('scheduled_end_time'),
            is_canceled=bool(data.get('is_canceled', False))
        )


@dataclass
class ScheduledEvent:
    """Guild scheduled event as returned by the Discord API."""
    id: str
    guild_id: str
    name: str
    scheduled_start_time: str
    status: int
    description: Optional[str] = None
    scheduled_end_time: Optional[str] = None
    location: Optional[str] = None
    creator_name: Optional[str] = None
    recurrence_rule: Optional[RecurrenceRule] = None
    exceptions: List[RecurrenceException] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> 'ScheduledEvent':
        """
        Build an event from the Discord JSON object.

        Only the fields used for calendar generation are kept. Optional
        nested objects (`entity_metadata`, `creator`, `recurrence_rule`)
        may be missing or null.

        Args:
            data: Scheduled event object from the API

        Returns:
            ScheduledEvent object
        """
        metadata = data.get('entity_metadata') or {}
        creator = data.get('creator') or {}
        rule = data.get('recurrence_rule')
        exceptions = data.get('guild_scheduled_event_exceptions') or []

        return cls(
            id=data['id'],
            guild_id=data['guild_id'],
            name=data['name'],
            scheduled_start_time=data['scheduled_start_time'],
            status=data['status'],
            description=data.get('description'),
            scheduled_end_time=data.get('scheduled_end_time'),
            location=metadata.get('location'),
            creator_name=creator.get('username'),
            recurrence_rule=RecurrenceRule.from_dict(rule) if rule else None,
            exceptions=[RecurrenceException.from_dict(item) for item in exceptions]
        )
