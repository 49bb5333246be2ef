"""AWS Lambda handlers for the Discord events calendar feed."""
import json
import logging
import time
from typing import Dict, Any

from config import AppConfig
from discord_api.scheduled_events import DiscordEventsClient
from processor.calendar import CalendarData
from processor.calendar_builder import CalendarBuilder
from storage.cache_manager import CalendarCacheManager


CACHE_TTL_SECONDS = 300

CALENDAR_HEADERS = {
    'Content-Type': 'text/calendar; charset=utf-8',
    'Content-Disposition': 'attachment; filename="events.ics"',
    'Cache-Control': (
        'public, max-age=300, s-maxage=300, '
        'stale-while-revalidate=300, stale-if-error=300'
    )
}

TEXT_HEADERS = {'Content-Type': 'text/plain; charset=utf-8'}

# Attributes every LogRecord has; anything else came in through `extra`.
_RESERVED_LOG_ATTRS = set(vars(logging.LogRecord('', 0, '', 0, '', (), None))) | {
    'message', 'asctime'
}


# Configure JSON logging
class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON, including any `extra` fields."""
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name
        }

        for key, value in vars(record).items():
            if key not in _RESERVED_LOG_ATTRS and key not in log_data:
                log_data[key] = value

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(log_level: str = 'INFO') -> None:
    """
    Configure logging with JSON formatter.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def refresh_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Scheduled handler: rebuild the calendar and cache it.

    Failures are logged and re-raised so the invocation is reported as
    failed; the previously cached calendar stays in place until it expires.

    Args:
        event: EventBridge event payload
        context: Lambda context object

    Returns:
        Response dict with statusCode and summary statistics
    """
    config = AppConfig.from_env()
    setup_logging(config.log_level)
    logger = logging.getLogger(__name__)

    start_time = time.time()
    logger.info(
        "Calendar refresh started",
        extra={'guild_id': config.guild_id, 'table_name': config.table_name}
    )

    try:
        config.require_discord()

        client = DiscordEventsClient(
            token=config.discord_token,
            timeout=config.timeout_seconds,
            base_url=config.api_base_url
        )
        builder = CalendarBuilder()
        cache = CalendarCacheManager(table_name=config.table_name)

        logger.info("Fetching scheduled events from Discord")
        events = client.fetch_scheduled_events(config.guild_id)

        logger.info("Building calendar")
        calendar = builder.build(events)
        recurring = sum(1 for entry in calendar.entries if entry.repeating is not None)

        logger.info("Writing calendar to cache")
        cache.put_calendar(calendar.to_dict(), ttl_seconds=CACHE_TTL_SECONDS)

    except Exception as e:
        duration = time.time() - start_time
        logger.error(
            f"Calendar refresh failed: {str(e)}",
            extra={
                'duration_seconds': round(duration, 2),
                'error_type': type(e).__name__
            },
            exc_info=True
        )
        raise

    duration = time.time() - start_time
    logger.info(
        "Calendar refresh completed successfully",
        extra={
            'duration_seconds': round(duration, 2),
            'events_fetched': len(events),
            'recurring_entries': recurring
        }
    )

    return {
        'statusCode': 200,
        'body': json.dumps({
            'message': 'Calendar refreshed',
            'statistics': {
                'events_fetched': len(events),
                'entries_cached': len(calendar.entries),
                'recurring_entries': recurring,
                'duration_seconds': round(duration, 2)
            }
        })
    }


def serve_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    HTTP handler: return the cached calendar as an .ics download.

    Args:
        event: API Gateway / Function URL request payload
        context: Lambda context object

    Returns:
        HTTP response dict (statusCode, headers, body)
    """
    config = AppConfig.from_env()
    setup_logging(config.log_level)
    logger = logging.getLogger(__name__)

    try:
        cache = CalendarCacheManager(table_name=config.table_name)
        cached = cache.get_calendar()
        if cached is None:
            logger.info("No cached calendar available")
            return {
                'statusCode': 404,
                'headers': dict(TEXT_HEADERS),
                'body': 'No events found'
            }

        body = CalendarData.from_dict(cached).to_ical()

    except Exception as e:
        logger.error(
            f"Failed to serve calendar: {str(e)}",
            extra={'error_type': type(e).__name__},
            exc_info=True
        )
        return {
            'statusCode': 500,
            'headers': dict(TEXT_HEADERS),
            'body': 'Internal server error'
        }

    return {
        'statusCode': 200,
        'headers': dict(CALENDAR_HEADERS),
        'body': body
    }
