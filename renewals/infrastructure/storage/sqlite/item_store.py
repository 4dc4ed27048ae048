"""
SQLite read access to tracked items.

Items belong to the record CRUD surface. Renewal data is stored as a
JSON document; rows whose document is missing or in a legacy shape are
returned with `renewal_info=None` so the finder can skip them.
"""

import json

import aiosqlite
from pydantic import ValidationError as PydanticValidationError

from renewals.config import get_logger
from renewals.core.entities.renewal import RenewalInfo, TrackedItem
from renewals.core.interfaces.storage import IItemStore
from renewals.infrastructure.storage.sqlite.connection import get_connection

logger = get_logger(__name__)


class SQLiteItemStore(IItemStore):
    """SQLite implementation of item reads."""

    async def list_active_items(self) -> list[TrackedItem]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM items
                WHERE is_archived = 0 AND renewal_info IS NOT NULL
                ORDER BY id
                """
            )
            rows = await cursor.fetchall()
        return [item for item in map(self._row_to_entity, rows) if self._is_tracked(item)]

    async def list_items_for_user(
        self, user_id: int, active_only: bool = True
    ) -> list[TrackedItem]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM items WHERE user_id = ? AND is_archived = 0 ORDER BY id",
                (user_id,),
            )
            rows = await cursor.fetchall()
        items = [self._row_to_entity(row) for row in rows]
        if active_only:
            items = [
                i for i in items if i.renewal_info is not None and i.renewal_info.is_active
            ]
        return items

    async def get_item(self, item_id: int) -> TrackedItem | None:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM items WHERE id = ?", (item_id,))
            row = await cursor.fetchone()
        return self._row_to_entity(row) if row else None

    @staticmethod
    def _is_tracked(item: TrackedItem) -> bool:
        # Unparseable renewal data stays in so the scan can report it
        return item.renewal_info is None or item.renewal_info.is_active

    @staticmethod
    def _parse_renewal_info(item_id: int, raw: str | None) -> RenewalInfo | None:
        if not raw:
            return None
        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError("renewal_info is not an object")
            return RenewalInfo.model_validate(data)
        except (ValueError, PydanticValidationError) as e:
            logger.debug("legacy_renewal_info", item_id=item_id, error=str(e))
            return None

    def _row_to_entity(self, row: aiosqlite.Row) -> TrackedItem:
        return TrackedItem(
            id=row["id"],
            user_id=row["user_id"],
            title=row["title"],
            provider=row["provider"],
            category_id=row["category_id"],
            renewal_info=self._parse_renewal_info(row["id"], row["renewal_info"]),
        )
