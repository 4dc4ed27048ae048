"""Pytest configuration and shared fixtures."""

import json
from collections.abc import AsyncGenerator, Generator
from datetime import date
from pathlib import Path
from typing import Any

import aiosqlite
import pytest

from renewals.application.services import reset_services
from renewals.config import reset_settings
from renewals.core.entities import RenewalInfo, TrackedItem
from renewals.infrastructure.catalog import reset_product_catalog
from renewals.infrastructure.notifier import reset_notifier


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Point storage at a per-test directory and clear cached singletons."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("STORAGE_POOL_SIZE", "2")
    monkeypatch.setenv("STORAGE_BUSY_TIMEOUT", "5000")
    monkeypatch.delenv("NOTIFIER_WEBHOOK_URL", raising=False)
    monkeypatch.delenv("REMINDER_SCHEDULER_ENABLED", raising=False)

    reset_settings()
    reset_services()
    reset_product_catalog()
    reset_notifier()
    yield
    reset_settings()
    reset_services()
    reset_product_catalog()
    reset_notifier()


@pytest.fixture
async def db() -> AsyncGenerator[Path, None]:
    """Migrated database behind the global connection pool."""
    from renewals.config import get_settings
    from renewals.infrastructure.storage.sqlite import close_pool
    from renewals.infrastructure.storage.sqlite.migrations import initialize_database

    db_path = get_settings().storage.db_path
    await initialize_database(db_path, create_backup_before=False)
    yield db_path
    await close_pool()


async def insert_category(
    db_path: Path,
    name: str,
    parent_id: int | None = None,
    user_id: int | None = 1,
) -> int:
    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute(
            "INSERT INTO categories (user_id, name, parent_id) VALUES (?, ?, ?)",
            (user_id, name, parent_id),
        )
        await conn.commit()
        return cursor.lastrowid


async def insert_item(
    db_path: Path,
    title: str,
    renewal_info: dict[str, Any] | str | None,
    user_id: int = 1,
    category_id: int | None = None,
    provider: str | None = None,
    is_archived: bool = False,
) -> int:
    """Insert an item row; dict renewal data is stored as JSON."""
    raw = json.dumps(renewal_info) if isinstance(renewal_info, dict) else renewal_info
    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute(
            """
            INSERT INTO items (user_id, title, provider, category_id, renewal_info, is_archived)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (user_id, title, provider, category_id, raw, int(is_archived)),
        )
        await conn.commit()
        return cursor.lastrowid


def make_item(
    item_id: int = 1,
    user_id: int = 1,
    title: str = "Home Insurance",
    category_id: int | None = None,
    provider: str | None = "Aviva",
    **renewal: Any,
) -> TrackedItem:
    """Build a TrackedItem; keyword arguments go to RenewalInfo."""
    renewal.setdefault("end_date", date(2025, 1, 1))
    renewal.setdefault("renewal_cycle", "none")
    return TrackedItem(
        id=item_id,
        user_id=user_id,
        title=title,
        provider=provider,
        category_id=category_id,
        renewal_info=RenewalInfo(**renewal),
    )


@pytest.fixture
def item_factory():
    """Factory for in-memory TrackedItems."""
    return make_item


@pytest.fixture
def seed_item(db: Path):
    """Insert item rows into the migrated test database."""

    async def _seed(title: str, renewal_info: dict[str, Any] | str | None, **kwargs: Any) -> int:
        return await insert_item(db, title, renewal_info, **kwargs)

    return _seed


@pytest.fixture
def seed_category(db: Path):
    """Insert category rows into the migrated test database."""

    async def _seed(name: str, parent_id: int | None = None, user_id: int | None = 1) -> int:
        return await insert_category(db, name, parent_id, user_id)

    return _seed
