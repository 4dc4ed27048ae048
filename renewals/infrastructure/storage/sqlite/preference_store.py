"""
SQLite implementation of user preference storage.

Settings layers are stored as JSON documents. `user_id` is unique, so a
get-or-create race between two requests resolves to a single row.
"""

import json
from datetime import UTC, datetime

import aiosqlite

from renewals.config import get_logger
from renewals.core.entities.preference import PartialNotificationSettings, UserPreference
from renewals.core.interfaces.storage import IPreferenceStore
from renewals.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


def _dump_partial(partial: PartialNotificationSettings) -> dict:
    return partial.model_dump(mode="json", exclude_none=True)


class SQLitePreferenceStore(IPreferenceStore):
    """SQLite implementation of preference storage."""

    async def get_by_user(self, user_id: int) -> UserPreference | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM user_preferences WHERE user_id = ?", (user_id,)
            )
            row = await cursor.fetchone()
        return self._row_to_entity(row) if row else None

    async def get_or_create(
        self, user_id: int, seed: PartialNotificationSettings
    ) -> UserPreference:
        now = datetime.now(UTC).isoformat()
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO user_preferences (
                    user_id, global_settings, category_overrides, created_at, updated_at
                ) VALUES (?, ?, '{}', ?, ?)
                ON CONFLICT(user_id) DO NOTHING
                """,
                (user_id, json.dumps(_dump_partial(seed)), now, now),
            )
            created = cursor.rowcount > 0

            cursor = await conn.execute(
                "SELECT * FROM user_preferences WHERE user_id = ?", (user_id,)
            )
            row = await cursor.fetchone()

        if created:
            logger.info("preference_created", user_id=user_id)
        return self._row_to_entity(row)

    async def save(self, preference: UserPreference) -> UserPreference:
        preference.updated_at = datetime.now(UTC)
        overrides = {
            str(category_id): _dump_partial(partial)
            for category_id, partial in preference.category_overrides.items()
        }
        async with get_transaction() as conn:
            await conn.execute(
                """
                INSERT INTO user_preferences (
                    user_id, global_settings, category_overrides, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    global_settings = excluded.global_settings,
                    category_overrides = excluded.category_overrides,
                    updated_at = excluded.updated_at
                """,
                (
                    preference.user_id,
                    json.dumps(_dump_partial(preference.global_settings)),
                    json.dumps(overrides),
                    preference.created_at.isoformat(),
                    preference.updated_at.isoformat(),
                ),
            )
            cursor = await conn.execute(
                "SELECT id FROM user_preferences WHERE user_id = ?", (preference.user_id,)
            )
            row = await cursor.fetchone()

        preference.id = row["id"]
        logger.info(
            "preference_saved",
            user_id=preference.user_id,
            overrides=len(preference.category_overrides),
        )
        return preference

    @staticmethod
    def _row_to_entity(row: aiosqlite.Row) -> UserPreference:
        return UserPreference.model_validate(
            {
                "id": row["id"],
                "user_id": row["user_id"],
                "global_settings": json.loads(row["global_settings"] or "{}"),
                "category_overrides": json.loads(row["category_overrides"] or "{}"),
                "created_at": row["created_at"],
                "updated_at": row["updated_at"],
            }
        )
