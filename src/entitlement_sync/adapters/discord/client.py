"""HTTP client for the Discord application entitlements API."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from logging import getLogger
from typing import TYPE_CHECKING, Final

import httpx
from pydantic import ValidationError

from entitlement_sync.adapters.http_resilience import (
    ResilienceConfig,
    ResilientClient,
    rewrite_to_proxy,
)
from entitlement_sync.config.discord import DiscordConfig, get_discord_config
from entitlement_sync.domain.errors import FetchError
from entitlement_sync.domain.ports.fetching import EntitlementFetcher

from .schema import EntitlementPage, EntitlementPayload, ErrorResponse
from .translator import parse_entitlement

if TYPE_CHECKING:
    from collections.abc import Callable

    from entitlement_sync.domain.model import ExternalEntitlement

log = getLogger(__name__)

PAGE_LIMIT: Final[int] = 100


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def build_resilience(config: DiscordConfig) -> ResilienceConfig:
    resilience = config.resilience()
    if config.proxy_host:
        resilience = replace(resilience, request_hooks=(rewrite_to_proxy(config.proxy_host),))
    return resilience


class DiscordAPIError(FetchError):
    """Raised when Discord answers a listing request with an error payload."""

    def __init__(self, message: str, *, status_code: int, code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code


@dataclass(slots=True)
class DiscordEntitlementFetcher:
    """Page through every active entitlement of the configured application."""

    config: DiscordConfig = field(default_factory=get_discord_config)
    page_limit: int = PAGE_LIMIT
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    async def fetch_all(self) -> list[ExternalEntitlement]:
        entitlements: list[ExternalEntitlement] = []
        after = 0

        async with self.client_factory(build_resilience(self.config)) as client:
            while True:
                log.debug(
                    "Fetching page of entitlements: after=%s, limit=%s, total=%s",
                    after,
                    self.page_limit,
                    len(entitlements),
                )
                page = await self._request_page(client=client, after=after)
                entitlements.extend(parse_entitlement(payload) for payload in page)

                if len(page) < self.page_limit:
                    return entitlements

                next_after = max(payload.id for payload in page)
                if next_after <= after:
                    raise FetchError(
                        f"Entitlement cursor did not advance past {after} (got {next_after})"
                    )
                after = next_after

    async def _request_page(
        self,
        *,
        client: ResilientClient,
        after: int,
    ) -> list[EntitlementPayload]:
        # Without an explicit cursor Discord lists newest first.
        params: dict[str, str | int] = {
            "after": after,
            "limit": self.page_limit,
            "exclude_ended": "true",
        }

        url = f"{self.config.base_url}/applications/{self.config.application_id}/entitlements"
        try:
            response = await client.get(url, params=httpx.QueryParams(params))
        except httpx.HTTPError as exc:
            raise FetchError(f"Failed to list entitlements: {exc}") from exc

        if response.is_error:
            raise self._api_error(response)

        try:
            return EntitlementPage.validate_json(response.content)
        except ValidationError as exc:
            raise FetchError(f"Unexpected Discord entitlements payload: {exc}") from exc

    @staticmethod
    def _api_error(response: httpx.Response) -> DiscordAPIError:
        try:
            error = ErrorResponse.model_validate_json(response.content)
        except ValidationError:
            message = f"Discord API returned HTTP {response.status_code}"
            code = None
        else:
            message = f"Discord API error {error.code}: {error.message}"
            code = error.code
        log.error("%s (HTTP %s)", message, response.status_code)
        return DiscordAPIError(message, status_code=response.status_code, code=code)


if TYPE_CHECKING:
    _fetcher_check: EntitlementFetcher = DiscordEntitlementFetcher()
