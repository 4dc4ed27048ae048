"""
Service factory functions for dependency injection.

Wires infrastructure implementations to core services. Use cases and
the CLI import from here.
"""

from typing import TYPE_CHECKING

from renewals.config import get_settings
from renewals.core.entities.preference import NotificationChannel
from renewals.core.services import (
    DueReminderFinder,
    PreferenceResolver,
    ReminderContentBuilder,
    RenewalCycleCalculator,
    StatsAggregator,
)

if TYPE_CHECKING:
    from renewals.core.entities.catalog import ProductCatalog
    from renewals.core.interfaces import (
        ICategoryStore,
        IItemStore,
        ILedgerStore,
        IPreferenceStore,
    )


# Stateless singletons
_calculator: RenewalCycleCalculator | None = None
_resolver: PreferenceResolver | None = None
_content_builder: ReminderContentBuilder | None = None


def get_renewal_cycle_calculator() -> RenewalCycleCalculator:
    global _calculator
    if _calculator is None:
        _calculator = RenewalCycleCalculator()
    return _calculator


def get_preference_resolver() -> PreferenceResolver:
    """Resolver using the configured default channels as the catalog layer."""
    global _resolver
    if _resolver is None:
        channels = [NotificationChannel(c) for c in get_settings().reminders.default_channels]
        _resolver = PreferenceResolver(default_channels=channels)
    return _resolver


def get_content_builder() -> ReminderContentBuilder:
    global _content_builder
    if _content_builder is None:
        _content_builder = ReminderContentBuilder()
    return _content_builder


async def get_due_reminder_finder(
    item_store: "IItemStore | None" = None,
    preference_store: "IPreferenceStore | None" = None,
    category_store: "ICategoryStore | None" = None,
    catalog: "ProductCatalog | None" = None,
) -> DueReminderFinder:
    """
    Build a DueReminderFinder.

    Missing collaborators are taken from the SQLite stores and the
    process-wide catalog.
    """
    # Lazy import infrastructure to avoid circular imports
    from renewals.infrastructure.catalog import get_product_catalog
    from renewals.infrastructure.storage.sqlite import (
        get_category_store,
        get_item_store,
        get_preference_store,
    )

    return DueReminderFinder(
        item_store=item_store or await get_item_store(),
        preference_store=preference_store or await get_preference_store(),
        catalog=catalog or get_product_catalog(),
        category_store=category_store or await get_category_store(),
        calculator=get_renewal_cycle_calculator(),
        resolver=get_preference_resolver(),
    )


async def get_stats_aggregator(ledger_store: "ILedgerStore | None" = None) -> StatsAggregator:
    from renewals.infrastructure.storage.sqlite import get_ledger_store

    return StatsAggregator(ledger_store or await get_ledger_store())


def reset_services() -> None:
    """Reset all service singletons (for testing)."""
    global _calculator, _resolver, _content_builder
    _calculator = None
    _resolver = None
    _content_builder = None
