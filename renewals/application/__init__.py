"""
Application layer - use cases, DTOs, service factories and the scheduler.

Use cases are the entry point for API handlers and the CLI.
"""

from renewals.application.services import (
    get_content_builder,
    get_due_reminder_finder,
    get_preference_resolver,
    get_renewal_cycle_calculator,
    get_stats_aggregator,
    reset_services,
)
from renewals.application.use_cases import (
    GetReminderStatsUseCase,
    ManagePreferencesUseCase,
    ProcessRenewalRemindersUseCase,
    TickSummary,
    TrackReminderInteractionUseCase,
)

__all__ = [
    # Use cases
    "ProcessRenewalRemindersUseCase",
    "TickSummary",
    "ManagePreferencesUseCase",
    "TrackReminderInteractionUseCase",
    "GetReminderStatsUseCase",
    # Service factories
    "get_renewal_cycle_calculator",
    "get_preference_resolver",
    "get_content_builder",
    "get_due_reminder_finder",
    "get_stats_aggregator",
    "reset_services",
]
