"""Builds calendar data from Discord guild scheduled events."""
import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

from processor.calendar import CalendarData, CalendarEntry, parse_timestamp
from processor.models import EventStatus, ScheduledEvent
from processor.recurrence import map_recurrence_rule

logger = logging.getLogger(__name__)


DISCORD_EPOCH_MS = 1420070400000
SNOWFLAKE_TIMESTAMP_DIVISOR = 4194304  # 2 ** 22
UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def snowflake_to_milliseconds(snowflake: str) -> int:
    """
    Extract the creation time encoded in a Discord snowflake.

    Args:
        snowflake: Snowflake identifier (decimal string)

    Returns:
        Milliseconds since the Unix epoch
    """
    return int(snowflake) // SNOWFLAKE_TIMESTAMP_DIVISOR + DISCORD_EPOCH_MS


def snowflake_to_datetime(snowflake: str) -> datetime:
    """Creation time of a Discord snowflake as a UTC datetime."""
    return UNIX_EPOCH + timedelta(milliseconds=snowflake_to_milliseconds(snowflake))


def is_url(value: Optional[str]) -> bool:
    """True if the value starts with http:// or https://."""
    return bool(value) and (
        value.startswith('http://') or value.startswith('https://')
    )


class CalendarBuilder:
    """Converts scheduled events into calendar entries."""

    def __init__(self, calendar_name: Optional[str] = None):
        """
        Initialize the builder.

        Args:
            calendar_name: Optional X-WR-CALNAME for the generated calendar
        """
        self.calendar_name = calendar_name

    def build(self, events: List[ScheduledEvent]) -> CalendarData:
        """
        Build a calendar containing one entry per event.

        A failure on any event aborts the whole build so a partial calendar
        is never cached.

        Args:
            events: Scheduled events from the Discord API

        Returns:
            CalendarData with entries in the order received
        """
        entries = [self.build_entry(event) for event in events]
        recurring = sum(1 for entry in entries if entry.repeating is not None)

        logger.info(
            f"Built calendar with {len(entries)} entries "
            f"({recurring} recurring)"
        )
        return CalendarData(entries=entries, name=self.calendar_name)

    def build_entry(self, event: ScheduledEvent) -> CalendarEntry:
        """
        Convert a single scheduled event.

        Args:
            event: Scheduled event

        Returns:
            CalendarEntry for the event
        """
        location, url = self._split_location(event.location)

        repeating = None
        if event.recurrence_rule is not None:
            repeating = map_recurrence_rule(event.recurrence_rule, event.exceptions)

        return CalendarEntry(
            id=event.id,
            start=parse_timestamp(event.scheduled_start_time),
            end=(
                parse_timestamp(event.scheduled_end_time)
                if event.scheduled_end_time else None
            ),
            summary=event.name,
            created=snowflake_to_datetime(event.id),
            repeating=repeating,
            location=location,
            description=event.description,
            organizer=event.creator_name,
            status='CANCELLED' if event.status == EventStatus.CANCELED else None,
            url=url
        )

    def _split_location(self, location: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
        """
        Decide whether a location is a venue or a link.

        Returns:
            Tuple of (display location, url)
        """
        if is_url(location):
            return None, location
        return location, None
