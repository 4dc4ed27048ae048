"""
Due-Reminder Finder.

The read half of a tick: scans every active item and returns the
(item, offset) pairs that fire on the evaluation day.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from renewals.config import get_logger, today
from renewals.core.entities.catalog import ProductCatalog
from renewals.core.entities.ledger import ReminderKind
from renewals.core.entities.preference import UserPreference
from renewals.core.entities.reminder import DueReminder
from renewals.core.entities.renewal import TrackedItem
from renewals.core.exceptions import ConfigurationError
from renewals.core.interfaces.storage import ICategoryStore, IItemStore, IPreferenceStore
from renewals.core.services.preference_resolver import PreferenceResolver
from renewals.core.services.renewal_cycle import RenewalCycleCalculator

logger = get_logger(__name__)


@dataclass
class ReminderScan:
    """Result of one scan."""

    as_of: date
    reminders: list[DueReminder] = field(default_factory=list)
    items_processed: int = 0
    items_skipped: int = 0
    items_failed: int = 0
    errors: list[dict[str, Any]] = field(default_factory=list)


class DueReminderFinder:
    """
    Finds reminders due on a given day.

    Reads preferences without creating them; users who never opened
    their settings get catalog defaults.
    """

    def __init__(
        self,
        item_store: IItemStore,
        preference_store: IPreferenceStore,
        catalog: ProductCatalog,
        category_store: ICategoryStore | None = None,
        calculator: RenewalCycleCalculator | None = None,
        resolver: PreferenceResolver | None = None,
    ) -> None:
        self._items = item_store
        self._preferences = preference_store
        self._categories = category_store
        self._catalog = catalog
        self._calculator = calculator or RenewalCycleCalculator()
        self._resolver = resolver or PreferenceResolver()

    async def find_items_needing_reminders(self, as_of: date | None = None) -> list[DueReminder]:
        scan = await self.scan(as_of)
        return scan.reminders

    async def scan(self, as_of: date | None = None) -> ReminderScan:
        """
        Evaluate all active items.

        Items without renewal data are skipped and items with malformed
        data are counted as failed; neither aborts the scan.

        Args:
            as_of: Evaluation day, defaults to today.

        Returns:
            ReminderScan with reminders ordered by renewal date, item id
            and offset (largest first).
        """
        as_of = as_of or today()
        result = ReminderScan(as_of=as_of)

        items = await self._items.list_active_items()
        preferences: dict[int, UserPreference | None] = {}
        ancestors: dict[int, list[int]] = {}

        for item in items:
            if item.renewal_info is None:
                result.items_skipped += 1
                continue

            if item.user_id not in preferences:
                preferences[item.user_id] = await self._preferences.get_by_user(item.user_id)

            try:
                due = await self._evaluate_item(
                    item, as_of, preferences[item.user_id], ancestors
                )
            except ConfigurationError as e:
                logger.warning(
                    "reminder_item_misconfigured",
                    item_id=item.id,
                    user_id=item.user_id,
                    error=e.message,
                )
                result.items_failed += 1
                result.errors.append({"item_id": item.id, **e.to_dict()})
                continue

            if due is None:
                result.items_skipped += 1
                continue

            result.items_processed += 1
            result.reminders.extend(due)

        result.reminders.sort(key=lambda r: (r.renewal_date, r.item.id, -r.offset_days))

        logger.info(
            "reminder_scan_complete",
            as_of=as_of.isoformat(),
            items=len(items),
            due=len(result.reminders),
            processed=result.items_processed,
            skipped=result.items_skipped,
            failed=result.items_failed,
        )
        return result

    async def _ancestors_of(
        self, category_id: int | None, cache: dict[int, list[int]]
    ) -> list[int]:
        if category_id is None or self._categories is None:
            return []
        if category_id not in cache:
            cache[category_id] = await self._categories.get_ancestors(category_id)
        return cache[category_id]

    async def _evaluate_item(
        self,
        item: TrackedItem,
        as_of: date,
        preference: UserPreference | None,
        ancestor_cache: dict[int, list[int]],
    ) -> list[DueReminder] | None:
        """Due reminders for one item, or None when it is not eligible."""
        info = item.renewal_info
        assert info is not None

        entry = self._catalog.lookup(info.product_type)
        end_date_type = info.end_date_type or entry.end_date_type

        if not self._calculator.is_active(info, as_of, end_date_type, item_id=item.id):
            logger.debug("reminder_item_inactive", item_id=item.id)
            return None
        renewal_date = self._calculator.next_renewal_date(
            info, as_of, end_date_type, item_id=item.id
        )
        assert renewal_date is not None

        settings = self._resolver.effective_settings(
            preference,
            item.category_id,
            entry,
            await self._ancestors_of(item.category_id, ancestor_cache),
            item_offsets=info.reminder_offsets,
        )
        if not settings.enabled:
            return None

        days_until = (renewal_date - as_of).days
        kind = ReminderKind.OVERDUE if days_until < 0 else ReminderKind.LEAD_TIME

        due: list[DueReminder] = []
        for offset in settings.offsets:
            if not self._calculator.needs_reminder(
                info, offset, as_of, settings.offsets, end_date_type, item_id=item.id
            ):
                continue
            due.append(
                DueReminder(
                    item=item,
                    user_id=item.user_id,
                    offset_days=offset,
                    renewal_date=renewal_date,
                    days_until_renewal=days_until,
                    kind=kind,
                    channels=settings.channels,
                    urgency_level=entry.urgency_level,
                    end_date_type=end_date_type,
                )
            )
        return due
