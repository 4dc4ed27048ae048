"""Response DTOs for API endpoints."""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field

from renewals.core.entities.catalog import CatalogEntry
from renewals.core.entities.ledger import ReminderLedgerEntry
from renewals.core.entities.preference import (
    NotificationChannel,
    NotificationSettings,
    PartialNotificationSettings,
    UserPreference,
)
from renewals.core.entities.reminder import DueReminder, ReminderStats


# --- Preferences ---


class PartialSettingsResponse(BaseModel):
    """One settings layer; null fields inherit."""

    enabled: bool | None = None
    offsets: list[int] | None = None
    channels: list[NotificationChannel] | None = None

    @classmethod
    def from_entity(cls, partial: PartialNotificationSettings) -> "PartialSettingsResponse":
        return cls(**partial.model_dump())


class NotificationSettingsResponse(BaseModel):
    """Fully resolved settings."""

    enabled: bool
    offsets: list[int]
    channels: list[NotificationChannel]

    @classmethod
    def from_entity(cls, settings: NotificationSettings) -> "NotificationSettingsResponse":
        return cls(**settings.model_dump())


class PreferenceResponse(BaseModel):
    """A user's stored reminder preferences."""

    user_id: int
    global_settings: PartialSettingsResponse
    category_overrides: dict[int, PartialSettingsResponse] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, preference: UserPreference) -> "PreferenceResponse":
        return cls(
            user_id=preference.user_id,
            global_settings=PartialSettingsResponse.from_entity(preference.global_settings),
            category_overrides={
                cid: PartialSettingsResponse.from_entity(p)
                for cid, p in preference.category_overrides.items()
            },
            created_at=preference.created_at,
            updated_at=preference.updated_at,
        )


class EffectiveSettingsResponse(BaseModel):
    """Settings that apply to items in a category."""

    user_id: int
    category_id: int
    product_type: str | None = None
    settings: NotificationSettingsResponse


# --- Reminders ---


class DueReminderResponse(BaseModel):
    """A reminder that fires on the evaluation day."""

    item_id: int
    user_id: int
    title: str
    provider: str | None = None
    offset_days: int
    renewal_date: date
    days_until_renewal: int
    kind: str
    channels: list[NotificationChannel]
    urgency_level: str
    end_date_type: str

    @classmethod
    def from_entity(cls, due: DueReminder) -> "DueReminderResponse":
        return cls(
            item_id=due.item.id,
            user_id=due.user_id,
            title=due.item.title,
            provider=due.item.provider,
            offset_days=due.offset_days,
            renewal_date=due.renewal_date,
            days_until_renewal=due.days_until_renewal,
            kind=due.kind.value,
            channels=due.channels,
            urgency_level=due.urgency_level.value,
            end_date_type=due.end_date_type.value,
        )


class DueRemindersResponse(BaseModel):
    """Result of a scan without dispatch."""

    as_of: date
    reminders: list[DueReminderResponse]
    total: int
    items_processed: int = 0
    items_skipped: int = 0
    items_failed: int = 0


class TickSummaryResponse(BaseModel):
    """Result of one processed tick."""

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
    reminders_failed: int = 0
    duration_ms: int = 0
    errors: list[dict[str, Any]] = Field(default_factory=list)


class ReminderSentResponse(BaseModel):
    """Ledger lookup for a dedup key."""

    item_id: int
    user_id: int
    offset_days: int
    renewal_date: date
    sent: bool


class InteractionResponse(BaseModel):
    type: str
    outcome: str | None = None
    occurred_at: datetime


class LedgerEntryResponse(BaseModel):
    """A delivered reminder with its interactions."""

    id: int
    item_id: int
    user_id: int
    offset_days: int
    renewal_date: date
    kind: str
    status: str
    channel: str
    title: str
    subject: str | None = None
    error_message: str | None = None
    sent_at: datetime
    interactions: list[InteractionResponse] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, entry: ReminderLedgerEntry) -> "LedgerEntryResponse":
        return cls(
            id=entry.id or 0,
            item_id=entry.item_id,
            user_id=entry.user_id,
            offset_days=entry.offset_days,
            renewal_date=entry.renewal_date,
            kind=entry.kind.value,
            status=entry.status.value,
            channel=entry.channel.value,
            title=entry.content_snapshot.title,
            subject=entry.content_snapshot.subject,
            error_message=entry.error_message,
            sent_at=entry.sent_at,
            interactions=[
                InteractionResponse(
                    type=i.type.value,
                    outcome=i.outcome.value if i.outcome else None,
                    occurred_at=i.occurred_at,
                )
                for i in entry.interactions
            ],
        )


class ReminderStatsResponse(BaseModel):
    """Ledger rollup for a user."""

    user_id: int
    total_sent: int
    by_status: dict[str, int]
    by_channel: dict[str, int]
    by_outcome: dict[str, int]
    opened: int
    clicked: int
    acted: int
    engagement_rate: float

    @classmethod
    def from_entity(cls, stats: ReminderStats) -> "ReminderStatsResponse":
        return cls(**stats.model_dump())


# --- Catalog ---


class CatalogEntryResponse(BaseModel):
    name: str
    category: str
    default_offsets: list[int]
    urgency_level: str
    end_date_type: str
    requires_action: bool
    regulatory_type: str | None = None
    notice_period: int | None = None
    renewal_notes: str | None = None

    @classmethod
    def from_entity(cls, entry: CatalogEntry) -> "CatalogEntryResponse":
        return cls(
            name=entry.name,
            category=entry.category,
            default_offsets=list(entry.default_offsets),
            urgency_level=entry.urgency_level.value,
            end_date_type=entry.end_date_type.value,
            requires_action=entry.requires_action,
            regulatory_type=entry.regulatory_type,
            notice_period=entry.notice_period,
            renewal_notes=entry.renewal_notes,
        )


class CatalogResponse(BaseModel):
    version: str
    categories: list[str]
    entries: list[CatalogEntryResponse]
    total: int


# --- Health / errors ---


class ComponentHealthResponse(BaseModel):
    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ComponentHealthResponse | None = None
    scheduler_enabled: bool = False
    catalog_version: str | None = None
    next_tick_at: datetime | None = None
    pending_migrations: list[str] | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. VALIDATION_ERROR)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    request_id: str | None = Field(default=None, description="Correlates with server logs")
    timestamp: datetime = Field(default_factory=datetime.now)
