"""
Dependency injection container for FastAPI.

Provides use cases, stores and services to route handlers. Tests swap
any of these through `app.dependency_overrides`.
"""

from functools import lru_cache

from renewals.application.services import get_due_reminder_finder
from renewals.application.use_cases import (
    GetReminderStatsUseCase,
    ManagePreferencesUseCase,
    ProcessRenewalRemindersUseCase,
    TrackReminderInteractionUseCase,
)
from renewals.config import Settings, get_settings
from renewals.core.entities.catalog import ProductCatalog
from renewals.core.services import DueReminderFinder
from renewals.infrastructure.catalog import get_product_catalog
from renewals.infrastructure.storage.sqlite import SQLiteLedgerStore, get_ledger_store


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Use case dependencies
def get_process_reminders_use_case() -> ProcessRenewalRemindersUseCase:
    return ProcessRenewalRemindersUseCase()


def get_manage_preferences_use_case() -> ManagePreferencesUseCase:
    return ManagePreferencesUseCase()


def get_track_interaction_use_case() -> TrackReminderInteractionUseCase:
    return TrackReminderInteractionUseCase()


def get_reminder_stats_use_case() -> GetReminderStatsUseCase:
    return GetReminderStatsUseCase()


# Service dependencies
async def get_finder() -> DueReminderFinder:
    """Get a due-reminder finder wired to the SQLite stores."""
    return await get_due_reminder_finder()


def get_catalog() -> ProductCatalog:
    return get_product_catalog()


# Store dependencies
async def get_ledger() -> SQLiteLedgerStore:
    """Get reminder ledger store."""
    return await get_ledger_store()
