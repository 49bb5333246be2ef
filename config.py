"""Runtime configuration for the Discord events calendar feed."""
import os
from dataclasses import dataclass
from typing import Mapping, Optional


DEFAULT_TABLE_NAME = 'discord-events-cache'
DEFAULT_API_BASE_URL = 'https://discord.com/api/v10'


@dataclass(frozen=True)
class AppConfig:
    """Configuration passed explicitly into both Lambda entry points."""
    discord_token: Optional[str]
    guild_id: Optional[str]
    table_name: str = DEFAULT_TABLE_NAME
    log_level: str = 'INFO'
    timeout_seconds: int = 30
    api_base_url: str = DEFAULT_API_BASE_URL

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'AppConfig':
        """
        Build configuration from environment variables.

        Args:
            environ: Mapping to read from (default: os.environ)

        Returns:
            AppConfig instance
        """
        env = os.environ if environ is None else environ
        return cls(
            discord_token=env.get('DISCORD_TOKEN') or None,
            guild_id=env.get('DISCORD_GUILD_ID') or None,
            table_name=env.get('TABLE_NAME', DEFAULT_TABLE_NAME),
            log_level=env.get('LOG_LEVEL', 'INFO'),
            timeout_seconds=int(env.get('TIMEOUT_SECONDS', '30')),
            api_base_url=env.get('DISCORD_API_BASE_URL', DEFAULT_API_BASE_URL)
        )

    def require_discord(self) -> None:
        """Raise ValueError if the Discord credentials are not configured."""
        missing = []
        if not self.discord_token:
            missing.append('DISCORD_TOKEN')
        if not self.guild_id:
            missing.append('DISCORD_GUILD_ID')
        if missing:
            raise ValueError(
                f"Missing required configuration: {', '.join(missing)}"
            )
