"""Unit tests for ProcessRenewalRemindersUseCase."""

import asyncio
from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from renewals.application import services
from renewals.application.use_cases import process_renewal_reminders
from renewals.application.use_cases.process_renewal_reminders import (
    ProcessRenewalRemindersUseCase,
)
from renewals.core.entities import (
    DueReminder,
    NotificationChannel,
    PartialNotificationSettings,
    ReminderKind,
    UserPreference,
)
from renewals.core.exceptions import DuplicateKeyError, NotifierError
from renewals.core.interfaces import NotificationResult
from renewals.core.services.due_reminder_finder import ReminderScan
from renewals.infrastructure.catalog import build_product_catalog

AS_OF = date(2024, 12, 18)


def _notifier(success: bool = True, channels=None) -> MagicMock:
    notifier = MagicMock()
    supported = set(channels or NotificationChannel)
    notifier.supports = MagicMock(side_effect=lambda c: c in supported)

    async def send(user_id, item_id, offset_days, content, channel):
        return NotificationResult(
            success=success,
            channel=channel,
            provider_message_id="msg-1" if success else None,
            error=None if success else "rejected",
        )

    notifier.send = AsyncMock(side_effect=send)
    return notifier


class TestProcessRenewalReminders:
    def _make_use_case(self, items, notifier=None, sent=False, preference=None, timeout=1.0):
        item_store = AsyncMock()
        item_store.list_active_items = AsyncMock(return_value=items)

        pref_store = AsyncMock()
        pref_store.get_by_user = AsyncMock(return_value=preference)

        category_store = AsyncMock()
        category_store.get_ancestors = AsyncMock(return_value=[])

        ledger = AsyncMock()
        ledger.was_reminder_sent = AsyncMock(return_value=sent)
        ledger.record_sent = AsyncMock()

        use_case = ProcessRenewalRemindersUseCase(
            item_store=item_store,
            preference_store=pref_store,
            category_store=category_store,
            ledger_store=ledger,
            notifier=notifier or _notifier(),
            catalog=build_product_catalog([30, 7]),
            notifier_timeout=timeout,
        )
        return use_case, ledger

    async def test_sends_and_records(self, item_factory):
        item = item_factory(reminder_offsets=[30, 14, 7])
        use_case, ledger = self._make_use_case([item])

        summary = await use_case.execute(AS_OF)

        assert summary.reminders_due == 1
        assert summary.reminders_sent == 1
        assert summary.duplicates == 0
        ledger.record_sent.assert_awaited_once()
        args, kwargs = ledger.record_sent.call_args
        assert args[:5] == (1, 1, 14, date(2025, 1, 1), NotificationChannel.EMAIL)
        assert args[5].subject == "REMINDER: Home Insurance expires in 14 days"
        assert kwargs["kind"] == ReminderKind.LEAD_TIME

    async def test_already_sent_is_duplicate(self, item_factory):
        notifier = _notifier()
        use_case, ledger = self._make_use_case(
            [item_factory(reminder_offsets=[14])], notifier=notifier, sent=True
        )

        summary = await use_case.execute(AS_OF)

        assert summary.duplicates == 1
        assert summary.reminders_sent == 0
        notifier.send.assert_not_awaited()
        ledger.record_sent.assert_not_awaited()

    async def test_concurrent_insert_counts_as_duplicate(self, item_factory):
        use_case, ledger = self._make_use_case([item_factory(reminder_offsets=[14])])
        ledger.record_sent.side_effect = DuplicateKeyError(1, 1, 14, "2025-01-01")

        summary = await use_case.execute(AS_OF)

        assert summary.duplicates == 1
        assert summary.reminders_sent == 0
        assert summary.items_failed == 0

    async def test_notifier_rejection_writes_nothing(self, item_factory):
        use_case, ledger = self._make_use_case(
            [item_factory(reminder_offsets=[14])], notifier=_notifier(success=False)
        )

        summary = await use_case.execute(AS_OF)

        assert summary.notifier_failures == 1
        ledger.record_sent.assert_not_awaited()

    async def test_notifier_error_writes_nothing(self, item_factory):
        notifier = _notifier()
        notifier.send.side_effect = NotifierError("email", "connection refused")
        use_case, ledger = self._make_use_case(
            [item_factory(reminder_offsets=[14])], notifier=notifier
        )

        summary = await use_case.execute(AS_OF)

        assert summary.notifier_failures == 1
        ledger.record_sent.assert_not_awaited()

    async def test_notifier_timeout_writes_nothing(self, item_factory):
        notifier = _notifier()

        async def hang(*args, **kwargs):
            await asyncio.sleep(10)

        notifier.send.side_effect = hang
        use_case, ledger = self._make_use_case(
            [item_factory(reminder_offsets=[14])], notifier=notifier, timeout=0.05
        )

        summary = await use_case.execute(AS_OF)

        assert summary.notifier_failures == 1
        ledger.record_sent.assert_not_awaited()

    async def test_falls_back_to_next_channel(self, item_factory):
        pref = UserPreference(
            user_id=1,
            global_settings=PartialNotificationSettings(
                channels=[NotificationChannel.SMS, NotificationChannel.IN_APP]
            ),
        )
        notifier = _notifier(channels=[NotificationChannel.IN_APP])
        use_case, ledger = self._make_use_case(
            [item_factory(reminder_offsets=[14])], notifier=notifier, preference=pref
        )

        summary = await use_case.execute(AS_OF)

        assert summary.reminders_sent == 1
        assert ledger.record_sent.call_args.args[4] == NotificationChannel.IN_APP

    async def test_overdue_recorded_under_offset_zero(self, item_factory):
        item = item_factory(auto_renewal=True, reminder_offsets=[30, 7])
        use_case, ledger = self._make_use_case([item])

        summary = await use_case.execute(date(2025, 1, 3))

        assert summary.reminders_sent == 1
        ledger.was_reminder_sent.assert_awaited_once_with(1, 1, 0, date(2025, 1, 1))
        args, kwargs = ledger.record_sent.call_args
        assert args[2] == 0
        assert kwargs["kind"] == ReminderKind.OVERDUE

    async def test_item_failure_does_not_stop_tick(self, item_factory):
        items = [
            item_factory(item_id=1, reminder_offsets=[14]),
            item_factory(item_id=2, reminder_offsets=[14]),
        ]
        use_case, ledger = self._make_use_case(items)
        ledger.was_reminder_sent.side_effect = [RuntimeError("disk I/O error"), False]

        summary = await use_case.execute(AS_OF)

        assert summary.items_failed == 1
        assert summary.reminders_sent == 1
        assert summary.errors[0]["item_id"] == 1
        assert summary.reminders_failed == 1

    async def test_failed_item_counted_once(self, item_factory, monkeypatch: pytest.MonkeyPatch):
        item = item_factory(reminder_offsets=[30, 14])
        reminders = [
            DueReminder(
                item=item,
                user_id=1,
                offset_days=offset,
                renewal_date=date(2025, 1, 1),
                days_until_renewal=14,
                channels=[NotificationChannel.EMAIL],
            )
            for offset in (30, 14)
        ]
        finder = AsyncMock()
        finder.scan.return_value = ReminderScan(as_of=AS_OF, reminders=reminders, items_processed=1)
        monkeypatch.setattr(services, "get_due_reminder_finder", AsyncMock(return_value=finder))
        use_case, ledger = self._make_use_case([item])
        ledger.was_reminder_sent.side_effect = RuntimeError("disk I/O error")

        summary = await use_case.execute(AS_OF)

        assert summary.reminders_failed == 2
        assert summary.items_failed == 1
        assert len(summary.errors) == 2

    async def test_second_run_sends_nothing(self, item_factory):
        item = item_factory(reminder_offsets=[14])
        use_case, ledger = self._make_use_case([item])
        recorded: set = set()

        async def was_sent(item_id, user_id, offset, renewal_date):
            return (item_id, user_id, offset, renewal_date) in recorded

        async def record(item_id, user_id, offset, renewal_date, *args, **kwargs):
            recorded.add((item_id, user_id, offset, renewal_date))

        ledger.was_reminder_sent.side_effect = was_sent
        ledger.record_sent.side_effect = record

        first = await use_case.execute(AS_OF)
        second = await use_case.execute(AS_OF)

        assert first.reminders_sent == 1
        assert second.reminders_sent == 0
        assert second.duplicates == 1

    async def test_failed_dispatch_is_retried_next_tick(self, item_factory):
        outcomes = iter([False, True])

        async def send(user_id, item_id, offset_days, content, channel):
            ok = next(outcomes)
            return NotificationResult(
                success=ok,
                channel=channel,
                provider_message_id="msg-2" if ok else None,
                error=None if ok else "mailbox unavailable",
            )

        notifier = _notifier()
        notifier.send.side_effect = send
        use_case, ledger = self._make_use_case([item_factory(reminder_offsets=[14])], notifier=notifier)
        recorded: set = set()

        async def was_sent(item_id, user_id, offset, renewal_date):
            return (item_id, user_id, offset, renewal_date) in recorded

        async def record(item_id, user_id, offset, renewal_date, *args, **kwargs):
            recorded.add((item_id, user_id, offset, renewal_date))

        ledger.was_reminder_sent.side_effect = was_sent
        ledger.record_sent.side_effect = record

        first = await use_case.execute(AS_OF)
        second = await use_case.execute(AS_OF)

        assert first.notifier_failures == 1
        assert first.reminders_sent == 0
        assert second.reminders_sent == 1
        assert second.duplicates == 0
        assert recorded == {(1, 1, 14, date(2025, 1, 1))}

    async def test_overlapping_tick_is_skipped(self, item_factory, monkeypatch: pytest.MonkeyPatch):
        lock = asyncio.Lock()
        monkeypatch.setattr(process_renewal_reminders, "_tick_lock", lock)
        use_case, ledger = self._make_use_case([item_factory(reminder_offsets=[14])])

        async with lock:
            summary = await use_case.execute(AS_OF)

        assert summary.skipped is True
        assert summary.reminders_due == 0
        ledger.was_reminder_sent.assert_not_awaited()

    async def test_summary_to_dict(self, item_factory):
        use_case, _ = self._make_use_case([item_factory(reminder_offsets=[14])])
        data = (await use_case.execute(AS_OF)).to_dict()
        assert data["as_of"] == "2024-12-18"
        assert data["reminders_sent"] == 1
        assert len(data["tick_id"]) == 12
