"""
Track Reminder Interaction Use Case.

Receives click-tracking and delivery-receipt events for ledger entries.
"""

from datetime import datetime

from renewals.config import get_logger
from renewals.core.entities.ledger import (
    InteractionOutcome,
    InteractionType,
    ReminderLedgerEntry,
)
from renewals.core.interfaces.storage import ILedgerStore

logger = get_logger(__name__)


class TrackReminderInteractionUseCase:
    """Appends interactions and records reported delivery failures."""

    def __init__(self, ledger_store: ILedgerStore | None = None):
        self._ledger_store = ledger_store

    async def _get_ledger_store(self) -> ILedgerStore:
        if self._ledger_store is None:
            from renewals.infrastructure.storage.sqlite import get_ledger_store
            self._ledger_store = await get_ledger_store()
        return self._ledger_store

    async def execute(
        self,
        entry_id: int,
        interaction_type: InteractionType,
        outcome: InteractionOutcome | None = None,
        occurred_at: datetime | None = None,
    ) -> ReminderLedgerEntry:
        """
        Append an interaction to a ledger entry.

        Repeats of the same type and outcome within one minute are
        collapsed.

        Raises:
            ValidationError: If an 'acted' interaction has no outcome.
            LedgerEntryNotFoundError: If the entry does not exist.
        """
        store = await self._get_ledger_store()
        return await store.track_interaction(entry_id, interaction_type, outcome, occurred_at)

    async def mark_failed(self, entry_id: int, error_message: str) -> ReminderLedgerEntry:
        """Flag a bounce reported after the notifier accepted the reminder."""
        store = await self._get_ledger_store()
        entry = await store.mark_failed(entry_id, error_message)
        logger.info("delivery_failure_reported", entry_id=entry_id)
        return entry
