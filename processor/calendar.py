"""Calendar data model and iCalendar rendering."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from icalendar import Calendar, Event, vCalAddress


DEFAULT_PRODID = '-//discord-events-ical//EN'


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO 8601 timestamp, keeping its embedded UTC offset.

    Args:
        value: Timestamp string (e.g. "2024-05-01T18:00:00+00:00" or "...Z")

    Returns:
        Timezone-aware datetime when the source carries an offset
    """
    return datetime.fromisoformat(value.replace('Z', '+00:00'))


def _format_optional(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _parse_optional(value: Optional[str]) -> Optional[datetime]:
    return parse_timestamp(value) if value is not None else None


@dataclass
class RepeatingSpec:
    """iCalendar recurrence (RRULE + EXDATE) for a calendar entry."""
    freq: str
    interval: Optional[int] = None
    until: Optional[datetime] = None
    by_day: Optional[List[str]] = None
    by_month: Optional[List[int]] = None
    by_month_day: Optional[List[int]] = None
    by_set_pos: Optional[List[int]] = None
    count: Optional[int] = None
    exclude: List[datetime] = field(default_factory=list)
    start_of_week: str = 'SU'

    def to_dict(self) -> Dict[str, Any]:
        return {
            'freq': self.freq,
            'interval': self.interval,
            'until': _format_optional(self.until),
            'by_day': self.by_day,
            'by_month': self.by_month,
            'by_month_day': self.by_month_day,
            'by_set_pos': self.by_set_pos,
            'count': self.count,
            'exclude': [value.isoformat() for value in self.exclude],
            'start_of_week': self.start_of_week
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RepeatingSpec':
        return cls(
            freq=data['freq'],
            interval=data.get('interval'),
            until=_parse_optional(data.get('until')),
            by_day=data.get('by_day'),
            by_month=data.get('by_month'),
            by_month_day=data.get('by_month_day'),
            by_set_pos=data.get('by_set_pos'),
            count=data.get('count'),
            exclude=[parse_timestamp(value) for value in data.get('exclude', [])],
            start_of_week=data.get('start_of_week', 'SU')
        )

    def to_rrule(self) -> Dict[str, Any]:
        """
        Build the RRULE value understood by icalendar's vRecur.

        Absent parts and empty lists are left out; vRecur orders the
        remaining parts canonically.
        """
        parts = {
            'freq': self.freq,
            'interval': self.interval,
            'until': self.until,
            'byday': self.by_day,
            'bymonth': self.by_month,
            'bymonthday': self.by_month_day,
            'bysetpos': self.by_set_pos,
            'count': self.count,
            'wkst': self.start_of_week
        }
        return {
            key: value for key, value in parts.items()
            if value is not None and value != []
        }


@dataclass
class CalendarEntry:
    """A single VEVENT derived from one scheduled event."""
    id: str
    start: datetime
    summary: str
    created: datetime
    end: Optional[datetime] = None
    repeating: Optional[RepeatingSpec] = None
    location: Optional[str] = None
    description: Optional[str] = None
    organizer: Optional[str] = None
    status: Optional[str] = None
    url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'start': self.start.isoformat(),
            'end': _format_optional(self.end),
            'summary': self.summary,
            'created': self.created.isoformat(),
            'repeating': self.repeating.to_dict() if self.repeating else None,
            'location': self.location,
            'description': self.description,
            'organizer': self.organizer,
            'status': self.status,
            'url': self.url
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CalendarEntry':
        repeating = data.get('repeating')
        return cls(
            id=data['id'],
            start=parse_timestamp(data['start']),
            end=_parse_optional(data.get('end')),
            summary=data['summary'],
            created=parse_timestamp(data['created']),
            repeating=RepeatingSpec.from_dict(repeating) if repeating else None,
            location=data.get('location'),
            description=data.get('description'),
            organizer=data.get('organizer'),
            status=data.get('status'),
            url=data.get('url')
        )

    def to_ical_event(self) -> Event:
        """
        Build the icalendar VEVENT component for this entry.

        DTSTAMP is the entry's creation time so that rendering depends only
        on the entry data.
        """
        event = Event()
        event.add('uid', self.id)
        event.add('dtstamp', self.created)
        event.add('dtstart', self.start)
        if self.end is not None:
            event.add('dtend', self.end)
        event.add('summary', self.summary)
        if self.location:
            event.add('location', self.location)
        if self.description:
            event.add('description', self.description)
        if self.organizer:
            organizer = vCalAddress('')
            organizer.params['cn'] = self.organizer
            event.add('organizer', organizer)
        if self.status:
            event.add('status', self.status)
        if self.url:
            event.add('url', self.url)
        event.add('created', self.created)

        if self.repeating is not None:
            event.add('rrule', self.repeating.to_rrule())
            if self.repeating.exclude:
                event.add('exdate', self.repeating.exclude)

        return event


@dataclass
class CalendarData:
    """Calendar metadata plus its ordered entries."""
    entries: List[CalendarEntry] = field(default_factory=list)
    prodid: str = DEFAULT_PRODID
    name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible structure."""
        return {
            'prodid': self.prodid,
            'name': self.name,
            'entries': [entry.to_dict() for entry in self.entries]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CalendarData':
        """Rebuild calendar data from the structure produced by to_dict."""
        return cls(
            entries=[CalendarEntry.from_dict(item) for item in data.get('entries', [])],
            prodid=data.get('prodid', DEFAULT_PRODID),
            name=data.get('name')
        )

    def to_ical(self) -> str:
        """
        Render the calendar as iCalendar text.

        Returns:
            Contents of an .ics file (CRLF line endings, folded lines)
        """
        calendar = Calendar()
        calendar.add('prodid', self.prodid)
        calendar.add('version', '2.0')
        if self.name:
            calendar.add('x-wr-calname', self.name)

        for entry in self.entries:
            calendar.add_component(entry.to_ical_event())

        return calendar.to_ical().decode('utf-8')
