"""Client for the Discord guild scheduled events endpoint."""
import logging
from typing import List

import requests

from config import DEFAULT_API_BASE_URL
from processor.models import ScheduledEvent

logger = logging.getLogger(__name__)


class DiscordEventsClient:
    """Fetches guild scheduled events using a bot token."""

    def __init__(
        self,
        token: str,
        timeout: int = 30,
        base_url: str = DEFAULT_API_BASE_URL
    ):
        """
        Initialize the Discord client.

        Args:
            token: Discord bot token
            timeout: HTTP request timeout in seconds (default: 30)
            base_url: Discord API base URL
        """
        self.token = token
        self.timeout = timeout
        self.base_url = base_url.rstrip('/')

    def fetch_scheduled_events(self, guild_id: str) -> List[ScheduledEvent]:
        """
        Fetch all scheduled events of a guild.

        There is no retry; the next scheduled refresh tries again.

        Args:
            guild_id: Discord guild identifier

        Returns:
            List of ScheduledEvent objects

        Raises:
            requests.RequestException: On network errors, non-2xx responses
                or an undecodable body
            ValueError: If the payload is not a list of events
        """
        url = f"{self.base_url}/guilds/{guild_id}/scheduled-events"
        logger.info(f"Fetching scheduled events for guild {guild_id}")

        response = requests.get(
            url,
            headers={'Authorization': f"Bot {self.token}"},
            timeout=self.timeout
        )
        response.raise_for_status()

        payload = response.json()
        if not isinstance(payload, list):
            raise ValueError(
                f"Expected a list of scheduled events, got {type(payload).__name__}"
            )

        events = [ScheduledEvent.from_dict(item) for item in payload]
        logger.info(f"Fetched {len(events)} scheduled events")
        return events
