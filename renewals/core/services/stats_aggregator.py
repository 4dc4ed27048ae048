"""Read-only rollup over a user's reminder ledger."""

from __future__ import annotations

from collections import Counter

from renewals.core.entities.ledger import InteractionType, ReminderLedgerEntry
from renewals.core.entities.reminder import ReminderStats
from renewals.core.interfaces.storage import ILedgerStore

# Interactions that count towards engagement_rate
_ENGAGEMENT_TYPES = frozenset({
    InteractionType.OPENED,
    InteractionType.CLICKED,
    InteractionType.ACTED,
})


def summarize(user_id: int, entries: list[ReminderLedgerEntry]) -> ReminderStats:
    """Aggregate ledger entries. Zero entries gives all-zero stats."""
    by_status: Counter[str] = Counter()
    by_channel: Counter[str] = Counter()
    by_outcome: Counter[str] = Counter()
    by_type: Counter[InteractionType] = Counter()

    for entry in entries:
        by_status[entry.status.value] += 1
        by_channel[entry.channel.value] += 1
        for interaction in entry.interactions:
            by_type[interaction.type] += 1
            if interaction.outcome is not None:
                by_outcome[interaction.outcome.value] += 1

    total = len(entries)
    engaged = sum(count for kind, count in by_type.items() if kind in _ENGAGEMENT_TYPES)

    return ReminderStats(
        user_id=user_id,
        total_sent=total,
        by_status=dict(by_status),
        by_channel=dict(by_channel),
        by_outcome=dict(by_outcome),
        opened=by_type[InteractionType.OPENED],
        clicked=by_type[InteractionType.CLICKED],
        acted=by_type[InteractionType.ACTED],
        engagement_rate=round(engaged / total, 4) if total else 0.0,
    )


class StatsAggregator:
    """Computes reminder statistics for a user."""

    def __init__(self, ledger_store: ILedgerStore) -> None:
        self._ledger = ledger_store

    async def get_stats(self, user_id: int) -> ReminderStats:
        entries = await self._ledger.list_by_user(user_id)
        return summarize(user_id, entries)
