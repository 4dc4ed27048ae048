"""SQLite storage implementations."""

from renewals.infrastructure.storage.sqlite.category_store import SQLiteCategoryStore
from renewals.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from renewals.infrastructure.storage.sqlite.item_store import SQLiteItemStore
from renewals.infrastructure.storage.sqlite.ledger_store import SQLiteLedgerStore
from renewals.infrastructure.storage.sqlite.preference_store import SQLitePreferenceStore

# Singleton instances
_item_store: SQLiteItemStore | None = None
_category_store: SQLiteCategoryStore | None = None
_preference_store: SQLitePreferenceStore | None = None
_ledger_store: SQLiteLedgerStore | None = None


async def get_item_store() -> SQLiteItemStore:
    """Get singleton item store instance."""
    global _item_store
    if _item_store is None:
        _item_store = SQLiteItemStore()
    return _item_store


async def get_category_store() -> SQLiteCategoryStore:
    """Get singleton category store instance."""
    global _category_store
    if _category_store is None:
        _category_store = SQLiteCategoryStore()
    return _category_store


async def get_preference_store() -> SQLitePreferenceStore:
    """Get singleton preference store instance."""
    global _preference_store
    if _preference_store is None:
        _preference_store = SQLitePreferenceStore()
    return _preference_store


async def get_ledger_store() -> SQLiteLedgerStore:
    """Get singleton ledger store instance."""
    global _ledger_store
    if _ledger_store is None:
        _ledger_store = SQLiteLedgerStore()
    return _ledger_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store classes
    "SQLiteItemStore",
    "SQLiteCategoryStore",
    "SQLitePreferenceStore",
    "SQLiteLedgerStore",
    # Factory functions
    "get_item_store",
    "get_category_store",
    "get_preference_store",
    "get_ledger_store",
]
