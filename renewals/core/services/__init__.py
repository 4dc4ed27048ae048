"""Core domain services."""

from renewals.core.services.due_reminder_finder import DueReminderFinder, ReminderScan
from renewals.core.services.preference_resolver import (
    PreferenceResolver,
    aggregate_catalog_defaults,
    validate_offsets,
    validate_partial,
)
from renewals.core.services.reminder_content import ReminderContentBuilder
from renewals.core.services.renewal_cycle import RenewalCycleCalculator, add_months
from renewals.core.services.stats_aggregator import StatsAggregator

__all__ = [
    "DueReminderFinder",
    "ReminderScan",
    "PreferenceResolver",
    "aggregate_catalog_defaults",
    "validate_offsets",
    "validate_partial",
    "ReminderContentBuilder",
    "RenewalCycleCalculator",
    "add_months",
    "StatsAggregator",
]
