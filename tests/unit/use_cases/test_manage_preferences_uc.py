"""Unit tests for ManagePreferencesUseCase."""

from unittest.mock import AsyncMock

import pytest

from renewals.application.use_cases import ManagePreferencesUseCase
from renewals.core.entities import (
    NotificationChannel,
    PartialNotificationSettings,
    UserPreference,
)
from renewals.core.exceptions import ValidationError
from renewals.core.services import PreferenceResolver
from renewals.infrastructure.catalog import build_product_catalog


class TestManagePreferences:
    def _make_use_case(self, existing=None, items=None, ancestors=None):
        pref_store = AsyncMock()
        pref_store.get_by_user = AsyncMock(return_value=existing)

        async def get_or_create(user_id, seed):
            return UserPreference(user_id=user_id, global_settings=seed)

        async def save(preference):
            return preference

        pref_store.get_or_create = AsyncMock(side_effect=get_or_create)
        pref_store.save = AsyncMock(side_effect=save)

        item_store = AsyncMock()
        item_store.list_items_for_user = AsyncMock(return_value=items or [])

        category_store = AsyncMock()
        category_store.get_ancestors = AsyncMock(return_value=ancestors or [])

        use_case = ManagePreferencesUseCase(
            preference_store=pref_store,
            item_store=item_store,
            category_store=category_store,
            catalog=build_product_catalog([30, 7]),
            resolver=PreferenceResolver([NotificationChannel.EMAIL]),
        )
        return use_case, pref_store

    async def test_get_or_create_seeds_catalog_offsets(self, item_factory):
        items = [
            item_factory(item_id=1, product_type="Home Insurance"),
            item_factory(item_id=2, product_type="MOT Certificate"),
        ]
        use_case, store = self._make_use_case(items=items)

        pref = await use_case.get_or_create_for_user(1)

        seed = store.get_or_create.call_args.args[1]
        assert seed.enabled is True
        assert seed.channels == [NotificationChannel.EMAIL]
        assert seed.offsets == sorted(seed.offsets, reverse=True)
        assert {60, 30, 14, 7} <= set(seed.offsets)
        assert pref.user_id == 1

    async def test_get_or_create_without_items_uses_default_offsets(self):
        use_case, store = self._make_use_case()
        pref = await use_case.get_or_create_for_user(1)
        assert pref.global_settings.offsets == [30, 7]

    async def test_existing_preference_returned(self):
        existing = UserPreference(user_id=1)
        use_case, store = self._make_use_case(existing=existing)

        assert await use_case.get_or_create_for_user(1) is existing
        store.get_or_create.assert_not_awaited()

    async def test_update_global_settings(self):
        use_case, store = self._make_use_case(existing=UserPreference(user_id=1))
        pref = await use_case.update_global_settings(
            1, PartialNotificationSettings(offsets=[45, 15])
        )
        assert pref.global_settings.offsets == [45, 15]
        store.save.assert_awaited_once()

    async def test_invalid_offsets_rejected_before_save(self):
        use_case, store = self._make_use_case(existing=UserPreference(user_id=1))
        with pytest.raises(ValidationError):
            await use_case.update_global_settings(
                1, PartialNotificationSettings(offsets=[7, 30])
            )
        store.save.assert_not_awaited()

    async def test_set_category_override(self):
        use_case, _ = self._make_use_case(existing=UserPreference(user_id=1))
        pref = await use_case.set_category_override(
            1, 4, PartialNotificationSettings(channels=[NotificationChannel.SMS])
        )
        assert pref.category_overrides[4].channels == [NotificationChannel.SMS]
        assert pref.category_overrides[4].offsets is None

    async def test_empty_override_rejected(self):
        use_case, store = self._make_use_case(existing=UserPreference(user_id=1))
        with pytest.raises(ValidationError):
            await use_case.set_category_override(1, 4, PartialNotificationSettings())
        store.save.assert_not_awaited()

    async def test_remove_category_override(self):
        existing = UserPreference(
            user_id=1,
            category_overrides={4: PartialNotificationSettings(enabled=False)},
        )
        use_case, store = self._make_use_case(existing=existing)

        pref = await use_case.remove_category_override(1, 4)

        assert 4 not in pref.category_overrides
        store.save.assert_awaited_once()

    async def test_remove_missing_override_is_noop(self):
        use_case, store = self._make_use_case(existing=UserPreference(user_id=1))
        await use_case.remove_category_override(1, 4)
        store.save.assert_not_awaited()

    async def test_settings_for_category_resolves_ancestors(self):
        existing = UserPreference(
            user_id=1,
            global_settings=PartialNotificationSettings(offsets=[30]),
            category_overrides={2: PartialNotificationSettings(offsets=[10, 5])},
        )
        use_case, store = self._make_use_case(existing=existing, ancestors=[2, 1])

        settings = await use_case.get_reminder_settings_for_category(1, 4, "Passport")

        assert settings.offsets == [10, 5]
        assert settings.channels == [NotificationChannel.EMAIL]
        store.get_or_create.assert_not_awaited()

    async def test_settings_for_category_without_preference(self):
        use_case, store = self._make_use_case()
        settings = await use_case.get_reminder_settings_for_category(1, 4, "Passport")
        assert settings.offsets == [365, 180, 90]
        store.get_or_create.assert_not_awaited()
