"""Storage infrastructure implementations."""

from renewals.infrastructure.storage.sqlite import (
    SQLiteCategoryStore,
    SQLiteItemStore,
    SQLiteLedgerStore,
    SQLitePreferenceStore,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)

__all__ = [
    # SQLite stores
    "SQLiteItemStore",
    "SQLiteCategoryStore",
    "SQLitePreferenceStore",
    "SQLiteLedgerStore",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
