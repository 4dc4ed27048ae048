"""
SQLite implementation of the reminder ledger.

The UNIQUE (item_id, user_id, offset_days, renewal_date) constraint is
the deduplication mechanism: a second insert for the same key fails at
the database and surfaces as DuplicateKeyError, whichever process or
tick attempted it.
"""

import json
from collections import defaultdict
from datetime import UTC, date, datetime

import aiosqlite

from renewals.config import get_logger
from renewals.core.entities.ledger import (
    ContentSnapshot,
    Interaction,
    InteractionOutcome,
    InteractionType,
    LedgerStatus,
    ReminderKind,
    ReminderLedgerEntry,
)
from renewals.core.entities.preference import NotificationChannel
from renewals.core.exceptions import (
    DuplicateKeyError,
    LedgerEntryNotFoundError,
    ValidationError,
)
from renewals.core.interfaces.storage import ILedgerStore
from renewals.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteLedgerStore(ILedgerStore):
    """SQLite implementation of the reminder ledger."""

    async def was_reminder_sent(
        self,
        item_id: int,
        user_id: int,
        offset_days: int,
        renewal_date: date,
    ) -> bool:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT 1 FROM reminder_ledger
                WHERE item_id = ? AND user_id = ? AND offset_days = ? AND renewal_date = ?
                """,
                (item_id, user_id, offset_days, renewal_date.isoformat()),
            )
            return await cursor.fetchone() is not None

    async def record_sent(
        self,
        item_id: int,
        user_id: int,
        offset_days: int,
        renewal_date: date,
        channel: NotificationChannel,
        content_snapshot: ContentSnapshot,
        kind: ReminderKind = ReminderKind.LEAD_TIME,
    ) -> ReminderLedgerEntry:
        entry = ReminderLedgerEntry(
            item_id=item_id,
            user_id=user_id,
            offset_days=offset_days,
            renewal_date=renewal_date,
            kind=kind,
            channel=channel,
            content_snapshot=content_snapshot,
        )
        sent_at = entry.sent_at.isoformat()

        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    """
                    INSERT INTO reminder_ledger (
                        item_id, user_id, offset_days, renewal_date, kind,
                        status, channel, content_snapshot, sent_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        item_id,
                        user_id,
                        offset_days,
                        renewal_date.isoformat(),
                        kind.value,
                        LedgerStatus.SENT.value,
                        channel.value,
                        content_snapshot.model_dump_json(),
                        sent_at,
                        sent_at,
                    ),
                )
                entry.id = cursor.lastrowid
        except aiosqlite.IntegrityError:
            logger.debug(
                "reminder_already_recorded",
                item_id=item_id,
                user_id=user_id,
                offset_days=offset_days,
                renewal_date=renewal_date.isoformat(),
            )
            raise DuplicateKeyError(
                item_id, user_id, offset_days, renewal_date.isoformat()
            ) from None

        logger.info(
            "reminder_recorded",
            entry_id=entry.id,
            item_id=item_id,
            user_id=user_id,
            offset_days=offset_days,
            channel=channel.value,
        )
        return entry

    async def track_interaction(
        self,
        entry_id: int,
        interaction_type: InteractionType,
        outcome: InteractionOutcome | None = None,
        occurred_at: datetime | None = None,
    ) -> ReminderLedgerEntry:
        if interaction_type == InteractionType.ACTED and outcome is None:
            raise ValidationError("outcome", "is required when the interaction type is 'acted'")

        occurred_at = occurred_at or datetime.now(UTC)
        if occurred_at.tzinfo is None:
            occurred_at = occurred_at.replace(tzinfo=UTC)
        interaction = Interaction(
            type=interaction_type, outcome=outcome, occurred_at=occurred_at.astimezone(UTC)
        )

        async with get_transaction() as conn:
            cursor = await conn.execute(
                "SELECT 1 FROM reminder_ledger WHERE id = ?", (entry_id,)
            )
            if await cursor.fetchone() is None:
                raise LedgerEntryNotFoundError(entry_id)

            cursor = await conn.execute(
                """
                INSERT OR IGNORE INTO reminder_interactions (
                    entry_id, type, outcome, outcome_key, minute_bucket, occurred_at
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    entry_id,
                    interaction.type.value,
                    outcome.value if outcome else None,
                    outcome.value if outcome else "",
                    interaction.minute_bucket,
                    interaction.occurred_at.isoformat(),
                ),
            )
            appended = cursor.rowcount > 0

        logger.info(
            "reminder_interaction_tracked",
            entry_id=entry_id,
            type=interaction_type.value,
            outcome=outcome.value if outcome else None,
            duplicate=not appended,
        )
        entry = await self.get_entry(entry_id)
        assert entry is not None
        return entry

    async def mark_failed(self, entry_id: int, error_message: str) -> ReminderLedgerEntry:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE reminder_ledger
                SET status = ?, error_message = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    LedgerStatus.FAILED.value,
                    error_message,
                    datetime.now(UTC).isoformat(),
                    entry_id,
                ),
            )
            if cursor.rowcount == 0:
                raise LedgerEntryNotFoundError(entry_id)

        logger.warning("reminder_marked_failed", entry_id=entry_id, error=error_message)
        entry = await self.get_entry(entry_id)
        assert entry is not None
        return entry

    async def get_entry(self, entry_id: int) -> ReminderLedgerEntry | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM reminder_ledger WHERE id = ?", (entry_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None

            cursor = await conn.execute(
                """
                SELECT * FROM reminder_interactions
                WHERE entry_id = ?
                ORDER BY occurred_at, id
                """,
                (entry_id,),
            )
            interactions = [self._row_to_interaction(r) for r in await cursor.fetchall()]

        return self._row_to_entity(row, interactions)

    async def list_by_user(self, user_id: int) -> list[ReminderLedgerEntry]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM reminder_ledger
                WHERE user_id = ?
                ORDER BY sent_at DESC, id DESC
                """,
                (user_id,),
            )
            rows = await cursor.fetchall()

            cursor = await conn.execute(
                """
                SELECT ri.* FROM reminder_interactions ri
                JOIN reminder_ledger rl ON rl.id = ri.entry_id
                WHERE rl.user_id = ?
                ORDER BY ri.occurred_at, ri.id
                """,
                (user_id,),
            )
            by_entry: dict[int, list[Interaction]] = defaultdict(list)
            for r in await cursor.fetchall():
                by_entry[r["entry_id"]].append(self._row_to_interaction(r))

        return [self._row_to_entity(row, by_entry.get(row["id"], [])) for row in rows]

    @staticmethod
    def _row_to_interaction(row: aiosqlite.Row) -> Interaction:
        return Interaction(
            type=InteractionType(row["type"]),
            outcome=InteractionOutcome(row["outcome"]) if row["outcome"] else None,
            occurred_at=datetime.fromisoformat(row["occurred_at"]),
        )

    @staticmethod
    def _row_to_entity(
        row: aiosqlite.Row, interactions: list[Interaction]
    ) -> ReminderLedgerEntry:
        return ReminderLedgerEntry(
            id=row["id"],
            item_id=row["item_id"],
            user_id=row["user_id"],
            offset_days=row["offset_days"],
            renewal_date=date.fromisoformat(row["renewal_date"]),
            kind=ReminderKind(row["kind"]),
            status=LedgerStatus(row["status"]),
            channel=NotificationChannel(row["channel"]),
            content_snapshot=ContentSnapshot.model_validate(json.loads(row["content_snapshot"])),
            interactions=interactions,
            error_message=row["error_message"],
            sent_at=datetime.fromisoformat(row["sent_at"]),
        )
