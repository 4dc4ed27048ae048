"""Tests for SQLiteItemStore and SQLiteCategoryStore."""

from pathlib import Path

import aiosqlite

from renewals.infrastructure.storage.sqlite.category_store import SQLiteCategoryStore
from renewals.infrastructure.storage.sqlite.item_store import SQLiteItemStore

ACTIVE = {"end_date": "2025-01-01", "renewal_cycle": "annually", "reminder_offsets": [30, 7]}


class TestSQLiteItemStore:
    async def test_list_active_items(self, seed_item):
        active = await seed_item("Car Insurance", ACTIVE, provider="Direct Line")
        await seed_item("Archived", ACTIVE, is_archived=True)
        await seed_item("Paused", {**ACTIVE, "is_active": False})
        await seed_item("Untracked", None)

        items = await SQLiteItemStore().list_active_items()

        assert [i.id for i in items] == [active]
        info = items[0].renewal_info
        assert info.reminder_offsets == [30, 7]
        assert info.renewal_cycle == "annually"
        assert items[0].provider == "Direct Line"

    async def test_legacy_renewal_info_kept_as_none(self, seed_item):
        legacy = await seed_item("Legacy", "annual;2025-01-01")
        wrong_shape = await seed_item("Array", "[1, 2]")

        items = await SQLiteItemStore().list_active_items()

        assert {i.id for i in items} == {legacy, wrong_shape}
        assert all(i.renewal_info is None for i in items)

    async def test_list_items_for_user(self, seed_item):
        mine = await seed_item("Mine", ACTIVE, user_id=1)
        await seed_item("Theirs", ACTIVE, user_id=2)
        legacy = await seed_item("Legacy", "not json", user_id=1)

        store = SQLiteItemStore()
        assert [i.id for i in await store.list_items_for_user(1)] == [mine]
        assert [i.id for i in await store.list_items_for_user(1, active_only=False)] == [mine, legacy]

    async def test_get_item(self, seed_item):
        item_id = await seed_item("Passport", {**ACTIVE, "product_type": "Passport"})
        store = SQLiteItemStore()

        item = await store.get_item(item_id)
        assert item.renewal_info.product_type == "Passport"
        assert await store.get_item(999) is None


class TestSQLiteCategoryStore:
    async def test_get_category(self, seed_category):
        root = await seed_category("Household")
        child = await seed_category("Insurance", parent_id=root)

        category = await SQLiteCategoryStore().get_category(child)
        assert category.name == "Insurance"
        assert category.parent_id == root
        assert await SQLiteCategoryStore().get_category(999) is None

    async def test_ancestors_nearest_first(self, seed_category):
        root = await seed_category("Household")
        mid = await seed_category("Insurance", parent_id=root)
        leaf = await seed_category("Motor", parent_id=mid)

        store = SQLiteCategoryStore()
        assert await store.get_ancestors(leaf) == [mid, root]
        assert await store.get_ancestors(root) == []
        assert await store.get_ancestors(999) == []

    async def test_cycle_terminates(self, db: Path, seed_category):
        a = await seed_category("A")
        b = await seed_category("B", parent_id=a)
        async with aiosqlite.connect(db) as conn:
            await conn.execute("UPDATE categories SET parent_id = ? WHERE id = ?", (b, a))
            await conn.commit()

        assert await SQLiteCategoryStore().get_ancestors(b) == [a]
