"""Request and response DTOs."""

from renewals.application.dto.requests import (
    MarkFailedRequest,
    NotificationSettingsRequest,
    ProcessRemindersRequest,
    TrackInteractionRequest,
)
from renewals.application.dto.responses import (
    CatalogEntryResponse,
    CatalogResponse,
    ComponentHealthResponse,
    DueReminderResponse,
    DueRemindersResponse,
    EffectiveSettingsResponse,
    ErrorResponse,
    HealthResponse,
    InteractionResponse,
    LedgerEntryResponse,
    NotificationSettingsResponse,
    PartialSettingsResponse,
    PreferenceResponse,
    ReminderSentResponse,
    ReminderStatsResponse,
    TickSummaryResponse,
)

__all__ = [
    # Requests
    "NotificationSettingsRequest",
    "ProcessRemindersRequest",
    "TrackInteractionRequest",
    "MarkFailedRequest",
    # Responses
    "PartialSettingsResponse",
    "NotificationSettingsResponse",
    "PreferenceResponse",
    "EffectiveSettingsResponse",
    "DueReminderResponse",
    "DueRemindersResponse",
    "TickSummaryResponse",
    "ReminderSentResponse",
    "InteractionResponse",
    "LedgerEntryResponse",
    "ReminderStatsResponse",
    "CatalogEntryResponse",
    "CatalogResponse",
    "ComponentHealthResponse",
    "HealthResponse",
    "ErrorResponse",
]
