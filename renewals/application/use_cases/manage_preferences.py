"""
Manage Preferences Use Case.

Get-or-create, global updates and per-category overrides of a user's
reminder preferences, plus the read-only effective-settings projection.
"""

from renewals.config import get_logger, get_settings
from renewals.core.entities.catalog import ProductCatalog
from renewals.core.entities.preference import (
    NotificationChannel,
    NotificationSettings,
    PartialNotificationSettings,
    UserPreference,
)
from renewals.core.exceptions import ValidationError
from renewals.core.interfaces.storage import ICategoryStore, IItemStore, IPreferenceStore
from renewals.core.services.preference_resolver import (
    PreferenceResolver,
    aggregate_catalog_defaults,
    validate_partial,
)

logger = get_logger(__name__)


class ManagePreferencesUseCase:
    """Use case for reading and updating reminder preferences."""

    def __init__(
        self,
        preference_store: IPreferenceStore | None = None,
        item_store: IItemStore | None = None,
        category_store: ICategoryStore | None = None,
        catalog: ProductCatalog | None = None,
        resolver: PreferenceResolver | None = None,
    ):
        self._pref_store = preference_store
        self._item_store = item_store
        self._category_store = category_store
        self._catalog = catalog
        self._resolver = resolver

    async def _get_pref_store(self) -> IPreferenceStore:
        if self._pref_store is None:
            from renewals.infrastructure.storage.sqlite import get_preference_store
            self._pref_store = await get_preference_store()
        return self._pref_store

    async def _get_item_store(self) -> IItemStore:
        if self._item_store is None:
            from renewals.infrastructure.storage.sqlite import get_item_store
            self._item_store = await get_item_store()
        return self._item_store

    async def _get_category_store(self) -> ICategoryStore:
        if self._category_store is None:
            from renewals.infrastructure.storage.sqlite import get_category_store
            self._category_store = await get_category_store()
        return self._category_store

    def _get_catalog(self) -> ProductCatalog:
        if self._catalog is None:
            from renewals.infrastructure.catalog import get_product_catalog
            self._catalog = get_product_catalog()
        return self._catalog

    def _get_resolver(self) -> PreferenceResolver:
        if self._resolver is None:
            from renewals.application.services import get_preference_resolver
            self._resolver = get_preference_resolver()
        return self._resolver

    async def get_or_create_for_user(self, user_id: int) -> UserPreference:
        """
        Return the user's preference, creating it on first access.

        New preferences are seeded with the union of catalog offsets for
        the product types of the user's active items. Concurrent calls
        for the same user produce a single record.
        """
        store = await self._get_pref_store()
        existing = await store.get_by_user(user_id)
        if existing is not None:
            return existing

        settings = get_settings().reminders
        catalog = self._get_catalog()
        items = await (await self._get_item_store()).list_items_for_user(user_id)
        entries = [
            catalog.lookup(item.renewal_info.product_type)
            for item in items
            if item.renewal_info is not None
        ]

        seed = PartialNotificationSettings(
            enabled=True,
            offsets=aggregate_catalog_defaults(entries, settings.default_offsets),
            channels=[NotificationChannel(c) for c in settings.default_channels],
        )
        preference = await store.get_or_create(user_id, seed)
        logger.debug("preference_seeded", user_id=user_id, offsets=seed.offsets)
        return preference

    async def update_global_settings(
        self, user_id: int, settings: PartialNotificationSettings
    ) -> UserPreference:
        """Replace the global layer. Unset fields fall through to the catalog."""
        validate_partial(settings)
        preference = await self.get_or_create_for_user(user_id)
        preference.global_settings = settings
        saved = await (await self._get_pref_store()).save(preference)
        logger.info("global_settings_updated", user_id=user_id)
        return saved

    async def set_category_override(
        self,
        user_id: int,
        category_id: int,
        settings: PartialNotificationSettings,
    ) -> UserPreference:
        """
        Store an override for one category.

        Raises:
            ValidationError: If the override is empty or its offsets are
                not positive, unique and descending. Nothing is stored.
        """
        if settings.is_empty():
            raise ValidationError("settings", "at least one field must be set")
        validate_partial(settings)

        preference = await self.get_or_create_for_user(user_id)
        preference.category_overrides[category_id] = settings
        saved = await (await self._get_pref_store()).save(preference)
        logger.info("category_override_set", user_id=user_id, category_id=category_id)
        return saved

    async def remove_category_override(self, user_id: int, category_id: int) -> UserPreference:
        preference = await self.get_or_create_for_user(user_id)
        if preference.category_overrides.pop(category_id, None) is None:
            return preference

        saved = await (await self._get_pref_store()).save(preference)
        logger.info("category_override_removed", user_id=user_id, category_id=category_id)
        return saved

    async def get_reminder_settings_for_category(
        self,
        user_id: int,
        category_id: int,
        product_type: str | None = None,
    ) -> NotificationSettings:
        """Effective settings for a category. Never creates a preference."""
        preference = await (await self._get_pref_store()).get_by_user(user_id)
        ancestors = await (await self._get_category_store()).get_ancestors(category_id)
        entry = self._get_catalog().lookup(product_type)
        return self._get_resolver().effective_settings(
            preference, category_id, entry, ancestors
        )
