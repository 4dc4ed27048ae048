"""
Process Renewal Reminders Use Case.

One scheduler tick: find due reminders, skip those already in the
ledger, dispatch the rest and record each success. A ledger entry is
written only after the notifier confirms, so a failed or timed-out
dispatch is retried by the next tick.
"""

import asyncio
import time
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any

from renewals.config import get_logger, get_settings, tick_context, today
from renewals.core.entities.catalog import ProductCatalog
from renewals.core.entities.reminder import DueReminder, ReminderContent
from renewals.core.exceptions import (
    DuplicateKeyError,
    NotifierError,
    NotifierTimeoutError,
)
from renewals.core.interfaces import (
    ICategoryStore,
    IItemStore,
    ILedgerStore,
    INotifier,
    IPreferenceStore,
    NotificationResult,
)

logger = get_logger(__name__)

# Serializes ticks within one process; the ledger's unique key
# covers other processes.
_tick_lock = asyncio.Lock()


@dataclass
class TickSummary:
    """Outcome of one tick."""

    as_of: date
    skipped: bool = False
    tick_id: str | None = None
    items_processed: int = 0
    items_skipped: int = 0
    items_failed: int = 0
    reminders_due: int = 0
    reminders_sent: int = 0
    duplicates: int = 0
    notifier_failures: int = 0
    # Delivery errors; items_failed counts each affected item once
    reminders_failed: int = 0
    duration_ms: int = 0
    errors: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["as_of"] = self.as_of.isoformat()
        return data


class ProcessRenewalRemindersUseCase:
    """
    Runs one reminder tick.

    Overlapping calls in the same process return a skipped summary
    instead of waiting.
    """

    def __init__(
        self,
        item_store: IItemStore | None = None,
        preference_store: IPreferenceStore | None = None,
        category_store: ICategoryStore | None = None,
        ledger_store: ILedgerStore | None = None,
        notifier: INotifier | None = None,
        catalog: ProductCatalog | None = None,
        notifier_timeout: float | None = None,
    ):
        self._item_store = item_store
        self._pref_store = preference_store
        self._category_store = category_store
        self._ledger_store = ledger_store
        self._notifier = notifier
        self._catalog = catalog
        self._notifier_timeout = notifier_timeout

    async def _get_ledger_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from renewals.infrastructure.storage.sqlite import get_ledger_store
            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    def _get_notifier(self) -> INotifier:
        if self._notifier is None:
            from renewals.infrastructure.notifier import get_notifier
            self._notifier = get_notifier()
        return self._notifier

    def _get_catalog(self) -> ProductCatalog:
        if self._catalog is None:
            from renewals.infrastructure.catalog import get_product_catalog
            self._catalog = get_product_catalog()
        return self._catalog

    @property
    def notifier_timeout(self) -> float:
        if self._notifier_timeout is None:
            return get_settings().reminders.notifier_timeout_seconds
        return self._notifier_timeout

    async def execute(self, as_of: date | None = None) -> TickSummary:
        """
        Run a tick.

        Args:
            as_of: Evaluation day, defaults to today.

        Returns:
            TickSummary with per-stage counts.
        """
        as_of = as_of or today()

        if _tick_lock.locked():
            logger.warning("tick_already_running", as_of=as_of.isoformat())
            return TickSummary(as_of=as_of, skipped=True)

        async with _tick_lock:
            with tick_context(as_of) as tick_id:
                summary = await self._run(as_of)
                summary.tick_id = tick_id
                return summary

    async def _run(self, as_of: date) -> TickSummary:
        from renewals.application.services import get_due_reminder_finder

        started = time.monotonic()
        catalog = self._get_catalog()
        finder = await get_due_reminder_finder(
            item_store=self._item_store,
            preference_store=self._pref_store,
            category_store=self._category_store,
            catalog=catalog,
        )
        scan = await finder.scan(as_of)

        summary = TickSummary(
            as_of=as_of,
            items_processed=scan.items_processed,
            items_skipped=scan.items_skipped,
            items_failed=scan.items_failed,
            reminders_due=len(scan.reminders),
            errors=list(scan.errors),
        )

        ledger = await self._get_ledger_store()
        failed_items: set[int] = set()
        for due in scan.reminders:
            try:
                await self._deliver(due, ledger, catalog, summary)
            except Exception as e:
                logger.warning(
                    "reminder_delivery_error",
                    item_id=due.item.id,
                    offset_days=due.offset_days,
                    exc_info=True,
                )
                summary.reminders_failed += 1
                failed_items.add(due.item.id)
                summary.errors.append(
                    {"item_id": due.item.id, "error": type(e).__name__, "message": str(e)}
                )
        summary.items_failed += len(failed_items)

        summary.duration_ms = int((time.monotonic() - started) * 1000)
        logger.info(
            "tick_complete",
            due=summary.reminders_due,
            sent=summary.reminders_sent,
            duplicates=summary.duplicates,
            notifier_failures=summary.notifier_failures,
            failed=summary.items_failed,
            reminders_failed=summary.reminders_failed,
            duration_ms=summary.duration_ms,
        )
        return summary

    async def _deliver(
        self,
        due: DueReminder,
        ledger: ILedgerStore,
        catalog: ProductCatalog,
        summary: TickSummary,
    ) -> None:
        from renewals.application.services import get_content_builder

        item = due.item
        assert item.renewal_info is not None

        if await ledger.was_reminder_sent(
            item.id, due.user_id, due.ledger_offset, due.renewal_date
        ):
            summary.duplicates += 1
            return

        builder = get_content_builder()
        entry = catalog.lookup(item.renewal_info.product_type)
        content = builder.build(due, entry)

        result = await self._dispatch(due, content)
        if result is None:
            summary.notifier_failures += 1
            return

        try:
            await ledger.record_sent(
                item.id,
                due.user_id,
                due.ledger_offset,
                due.renewal_date,
                result.channel,
                builder.snapshot(due, content),
                kind=due.kind,
            )
        except DuplicateKeyError:
            # A concurrent tick recorded it first
            summary.duplicates += 1
            return

        summary.reminders_sent += 1
        logger.info(
            "reminder_sent",
            item_id=item.id,
            user_id=due.user_id,
            offset_days=due.offset_days,
            kind=due.kind.value,
            channel=result.channel.value,
        )

    async def _dispatch(
        self, due: DueReminder, content: ReminderContent
    ) -> NotificationResult | None:
        """Try the resolved channels in order; first success wins."""
        notifier = self._get_notifier()
        timeout = self.notifier_timeout

        for channel in due.channels:
            if not notifier.supports(channel):
                continue
            try:
                result = await asyncio.wait_for(
                    notifier.send(due.user_id, due.item.id, due.offset_days, content, channel),
                    timeout=timeout,
                )
            except TimeoutError:
                error = NotifierTimeoutError(channel.value, timeout, item_id=due.item.id)
                logger.warning("notifier_timeout", **error.details)
                continue
            except NotifierError as e:
                logger.warning("notifier_failed", **e.details)
                continue

            if result.success:
                return result
            logger.warning(
                "notifier_rejected",
                channel=channel.value,
                item_id=due.item.id,
                error=result.error,
            )

        return None
