from __future__ import annotations

import os

import pytest

from entitlement_sync.domain.model import Sku
from tests.support.entitlements import PREMIUM_SKU_ID, InMemoryStore

os.environ.setdefault("DATABASE_URI", "sqlite+aiosqlite:///:memory:")


@pytest.fixture
def premium_sku() -> Sku:
    return Sku(label="Premium", external_id=PREMIUM_SKU_ID)


@pytest.fixture
def store(premium_sku: Sku) -> InMemoryStore:
    return InMemoryStore([premium_sku])
