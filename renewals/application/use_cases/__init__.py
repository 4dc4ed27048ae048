"""Application use cases."""

from renewals.application.use_cases.get_reminder_stats import GetReminderStatsUseCase
from renewals.application.use_cases.manage_preferences import ManagePreferencesUseCase
from renewals.application.use_cases.process_renewal_reminders import (
    ProcessRenewalRemindersUseCase,
    TickSummary,
)
from renewals.application.use_cases.track_reminder_interaction import (
    TrackReminderInteractionUseCase,
)

__all__ = [
    "ProcessRenewalRemindersUseCase",
    "TickSummary",
    "ManagePreferencesUseCase",
    "TrackReminderInteractionUseCase",
    "GetReminderStatsUseCase",
]
