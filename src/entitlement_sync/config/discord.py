"""Discord API configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from entitlement_sync import __version__

from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

DISCORD_BASE_URL = "https://discord.com/api/v10"
DISCORD_TIMEOUT_SECONDS = 15.0
USER_AGENT = f"DiscordBot (https://github.com/entitlement-sync, {__version__})"


@dataclass(frozen=True, slots=True)
class DiscordConfig:
    """Holds Discord API configuration values."""

    application_id: int
    token: str
    base_url: str = DISCORD_BASE_URL
    proxy_host: str | None = None

    def resilience(self) -> ResilienceConfig:
        return ResilienceConfig(
            name="discord",
            base_url=self.base_url,
            timeout_seconds=DISCORD_TIMEOUT_SECONDS,
            retry=RetryPolicy(total=3),
            ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
            default_headers={
                "Authorization": f"Bot {self.token}",
                "User-Agent": USER_AGENT,
            },
        )


def get_discord_config() -> DiscordConfig:
    values = require_env_vars(("DISCORD_APPLICATION_ID", "DISCORD_TOKEN"))
    try:
        application_id = int(values["DISCORD_APPLICATION_ID"])
    except ValueError as exc:
        raise ConfigurationError("DISCORD_APPLICATION_ID must be a numeric snowflake") from exc

    return DiscordConfig(
        application_id=application_id,
        token=values["DISCORD_TOKEN"].strip(),
        base_url=(optional_env_var("DISCORD_API_BASE_URL") or DISCORD_BASE_URL).rstrip("/"),
        proxy_host=optional_env_var("DISCORD_PROXY_HOST"),
    )
