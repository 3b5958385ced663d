"""Pydantic models describing the Discord entitlement payloads."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime  # noqa: TC003

from pydantic import BaseModel, ConfigDict, TypeAdapter, field_validator

Snowflake = int


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class DiscordBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class EntitlementPayload(DiscordBaseModel):
    id: Snowflake
    sku_id: Snowflake
    application_id: Snowflake | None = None
    user_id: Snowflake | None = None
    guild_id: Snowflake | None = None
    type: int | None = None
    deleted: bool = False
    consumed: bool | None = None
    starts_at: datetime | None = None
    ends_at: datetime | None = None

    _normalize_optional = field_validator(
        "user_id", "guild_id", "starts_at", "ends_at", mode="before"
    )(_blank_to_none)


class ErrorResponse(DiscordBaseModel):
    code: int = 0
    message: str


EntitlementPage = TypeAdapter(list[EntitlementPayload])

EntitlementPayloadInput = EntitlementPayload | Mapping[str, object]
