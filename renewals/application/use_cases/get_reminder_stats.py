"""Get Reminder Stats Use Case."""

from renewals.core.entities.reminder import ReminderStats
from renewals.core.interfaces.storage import ILedgerStore
from renewals.core.services.stats_aggregator import StatsAggregator


class GetReminderStatsUseCase:
    """Ledger rollup for one user. Pure read."""

    def __init__(self, ledger_store: ILedgerStore | None = None):
        self._ledger_store = ledger_store

    async def execute(self, user_id: int) -> ReminderStats:
        if self._ledger_store is None:
            from renewals.application.services import get_stats_aggregator
            aggregator = await get_stats_aggregator()
        else:
            aggregator = StatsAggregator(self._ledger_store)
        return await aggregator.get_stats(user_id)
