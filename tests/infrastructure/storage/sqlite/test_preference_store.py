"""Tests for SQLitePreferenceStore."""

import asyncio
from pathlib import Path

import pytest

from renewals.core.entities import NotificationChannel, PartialNotificationSettings
from renewals.infrastructure.storage.sqlite.preference_store import SQLitePreferenceStore


@pytest.fixture
def seed() -> PartialNotificationSettings:
    return PartialNotificationSettings(
        enabled=True, offsets=[30, 7], channels=[NotificationChannel.EMAIL]
    )


class TestSQLitePreferenceStore:
    @pytest.fixture(autouse=True)
    def _setup(self, db: Path):
        self.store = SQLitePreferenceStore()

    async def test_get_by_user_missing(self):
        assert await self.store.get_by_user(1) is None

    async def test_get_or_create_creates_once(self, seed):
        created = await self.store.get_or_create(1, seed)
        again = await self.store.get_or_create(
            1, PartialNotificationSettings(offsets=[90])
        )

        assert created.id is not None
        assert again.id == created.id
        assert again.global_settings.offsets == [30, 7]

    async def test_concurrent_get_or_create_single_row(self, seed):
        results = await asyncio.gather(*(self.store.get_or_create(1, seed) for _ in range(5)))
        assert len({p.id for p in results}) == 1

    async def test_save_round_trips_overrides(self, seed):
        pref = await self.store.get_or_create(1, seed)
        pref.category_overrides[4] = PartialNotificationSettings(channels=[NotificationChannel.SMS])
        pref.global_settings = PartialNotificationSettings(enabled=False)

        await self.store.save(pref)
        loaded = await self.store.get_by_user(1)

        assert loaded.global_settings.enabled is False
        assert loaded.global_settings.offsets is None
        assert loaded.category_overrides[4].channels == [NotificationChannel.SMS]
        assert loaded.category_overrides[4].offsets is None

    async def test_save_removes_override(self, seed):
        pref = await self.store.get_or_create(1, seed)
        pref.category_overrides[4] = PartialNotificationSettings(enabled=False)
        await self.store.save(pref)

        pref.category_overrides.pop(4)
        await self.store.save(pref)

        assert (await self.store.get_by_user(1)).category_overrides == {}
