"""Entitlement pagination and error mapping against a mocked Discord API."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import TYPE_CHECKING

import httpx
import pytest

from entitlement_sync.adapters.discord import DiscordAPIError, DiscordEntitlementFetcher
from entitlement_sync.adapters.discord.client import build_resilience
from entitlement_sync.adapters.http_resilience import ResilientClient, rewrite_to_proxy
from entitlement_sync.config.discord import DiscordConfig
from entitlement_sync.domain.errors import FetchError

if TYPE_CHECKING:
    from entitlement_sync.config.http_resilience import ResilienceConfig

APPLICATION_ID = 123456789
CONFIG = DiscordConfig(
    application_id=APPLICATION_ID,
    token="secret-token",
    base_url="https://discord.test/api/v10",
)

Handler = Callable[[httpx.Request], httpx.Response]


def _payload(entitlement_id: int, *, sku_id: int = 1100) -> dict[str, object]:
    return {
        "id": str(entitlement_id),
        "sku_id": str(sku_id),
        "application_id": str(APPLICATION_ID),
        "guild_id": str(900_000 + entitlement_id),
        "type": 8,
        "deleted": False,
        "starts_at": "2025-01-01T00:00:00+00:00",
        "ends_at": "2026-01-01T00:00:00+00:00",
    }


def _mocked_factory(handler: Handler) -> Callable[[ResilienceConfig], ResilientClient]:
    def factory(config: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(config)
        client._client = httpx.AsyncClient(  # noqa: SLF001
            transport=httpx.MockTransport(handler),
            headers=dict(config.default_headers or {}),
            event_hooks={"request": list(config.request_hooks)},
        )
        return client

    return factory


def _fetcher(handler: Handler, *, config: DiscordConfig = CONFIG) -> DiscordEntitlementFetcher:
    return DiscordEntitlementFetcher(config=config, client_factory=_mocked_factory(handler))


def test_fetch_all_follows_cursor_across_pages() -> None:
    ids = list(range(1001, 1251))
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        after = int(request.url.params["after"])
        page = [i for i in ids if i > after][:100]
        return httpx.Response(200, json=[_payload(i) for i in page])

    entitlements = asyncio.run(_fetcher(handler).fetch_all())

    assert [item.id for item in entitlements] == ids
    assert len(requests) == 3
    assert requests[0].url.params["after"] == "0"
    assert requests[1].url.params["after"] == "1100"
    assert requests[2].url.params["after"] == "1200"
    for request in requests:
        assert request.url.path == f"/api/v10/applications/{APPLICATION_ID}/entitlements"
        assert request.url.params["limit"] == "100"
        assert request.url.params["exclude_ended"] == "true"
        assert request.headers["Authorization"] == "Bot secret-token"


def test_first_page_is_requested_in_ascending_order() -> None:
    ids = list(range(1, 151))

    def handler(request: httpx.Request) -> httpx.Response:
        if "after" not in request.url.params:
            newest_first = sorted(ids, reverse=True)[:100]
            return httpx.Response(200, json=[_payload(i) for i in newest_first])
        after = int(request.url.params["after"])
        page = [i for i in ids if i > after][:100]
        return httpx.Response(200, json=[_payload(i) for i in page])

    entitlements = asyncio.run(_fetcher(handler).fetch_all())

    assert sorted(item.id for item in entitlements) == ids


def test_fetch_all_translates_payload_fields() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        payload = _payload(77, sku_id=4242)
        payload.update(guild_id=None, user_id="31337", deleted=True, ends_at=None)
        return httpx.Response(200, json=[payload])

    (entitlement,) = asyncio.run(_fetcher(handler).fetch_all())

    assert entitlement.id == 77
    assert entitlement.sku_id == 4242
    assert entitlement.guild_id is None
    assert entitlement.user_id == 31337
    assert entitlement.deleted is True
    assert entitlement.ends_at is None


def test_exact_multiple_of_page_size_ends_on_empty_page() -> None:
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        after = request.url.params["after"]
        calls.append(after)
        if after == "0":
            return httpx.Response(200, json=[_payload(i) for i in range(1, 101)])
        return httpx.Response(200, json=[])

    entitlements = asyncio.run(_fetcher(handler).fetch_all())

    assert len(entitlements) == 100
    assert calls == ["0", "100"]


def test_failure_on_later_page_discards_partial_results() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.params["after"] != "0":
            return httpx.Response(200, content=b"<html>gateway error</html>")
        return httpx.Response(200, json=[_payload(i) for i in range(1, 101)])

    with pytest.raises(FetchError, match="Unexpected Discord entitlements payload"):
        asyncio.run(_fetcher(handler).fetch_all())


def test_error_response_raises_discord_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"code": 0, "message": "401: Unauthorized"})

    with pytest.raises(DiscordAPIError) as exc:
        asyncio.run(_fetcher(handler).fetch_all())

    assert exc.value.status_code == 401
    assert exc.value.code == 0
    assert "401: Unauthorized" in str(exc.value)


def test_error_without_json_body_still_raises_fetch_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, text="not found")

    with pytest.raises(DiscordAPIError) as exc:
        asyncio.run(_fetcher(handler).fetch_all())

    assert exc.value.code is None


def test_transport_error_raises_fetch_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(FetchError, match="Failed to list entitlements"):
        asyncio.run(_fetcher(handler).fetch_all())


def test_cursor_that_does_not_advance_is_rejected() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[_payload(i) for i in range(1, 101)])

    with pytest.raises(FetchError, match="cursor did not advance"):
        asyncio.run(_fetcher(handler).fetch_all())


def test_proxy_host_rewrites_outgoing_requests() -> None:
    seen: list[httpx.Request] = []
    config = DiscordConfig(
        application_id=APPLICATION_ID,
        token="secret-token",
        base_url="https://discord.test/api/v10",
        proxy_host="proxy.internal:8080",
    )

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[])

    asyncio.run(_fetcher(handler, config=config).fetch_all())

    (request,) = seen
    assert request.url.scheme == "http"
    assert request.url.host == "proxy.internal"
    assert request.url.port == 8080
    assert request.url.path == f"/api/v10/applications/{APPLICATION_ID}/entitlements"
    assert request.headers["Host"] == "discord.test"


def test_build_resilience_adds_proxy_hook_only_when_configured() -> None:
    assert build_resilience(CONFIG).request_hooks == ()

    proxied = DiscordConfig(application_id=1, token="t", proxy_host="proxy:3000")
    assert len(build_resilience(proxied).request_hooks) == 1


def test_rewrite_to_proxy_keeps_query() -> None:
    request = httpx.Request("GET", "https://discord.com/api/v10/x?limit=100")

    asyncio.run(rewrite_to_proxy("localhost:9000")(request))

    assert str(request.url) == "http://localhost:9000/api/v10/x?limit=100"
