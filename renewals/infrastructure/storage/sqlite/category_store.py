"""SQLite read access to the category tree."""

import aiosqlite

from renewals.core.entities.renewal import Category
from renewals.core.interfaces.storage import ICategoryStore
from renewals.infrastructure.storage.sqlite.connection import get_connection

# Guards against cycles in externally maintained parent links
MAX_CATEGORY_DEPTH = 32


class SQLiteCategoryStore(ICategoryStore):
    """SQLite implementation of category reads."""

    async def get_category(self, category_id: int) -> Category | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM categories WHERE id = ?", (category_id,)
            )
            row = await cursor.fetchone()
        return self._row_to_entity(row) if row else None

    async def get_ancestors(self, category_id: int) -> list[int]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                WITH RECURSIVE chain(id, parent_id, depth) AS (
                    SELECT id, parent_id, 0 FROM categories WHERE id = ?
                    UNION ALL
                    SELECT c.id, c.parent_id, chain.depth + 1
                    FROM categories c
                    JOIN chain ON c.id = chain.parent_id
                    WHERE chain.depth < ?
                )
                SELECT id FROM chain WHERE depth > 0 ORDER BY depth
                """,
                (category_id, MAX_CATEGORY_DEPTH),
            )
            rows = await cursor.fetchall()

        ancestors: list[int] = []
        for row in rows:
            if row["id"] == category_id or row["id"] in ancestors:
                break
            ancestors.append(row["id"])
        return ancestors

    @staticmethod
    def _row_to_entity(row: aiosqlite.Row) -> Category:
        return Category(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            parent_id=row["parent_id"],
        )
