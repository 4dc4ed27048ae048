"""API tests for reminder endpoints."""

from datetime import UTC, date, datetime
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from renewals.api.dependencies import (
    get_finder,
    get_ledger,
    get_process_reminders_use_case,
    get_reminder_stats_use_case,
    get_track_interaction_use_case,
)
from renewals.api.main import app
from renewals.application.use_cases.process_renewal_reminders import TickSummary
from renewals.core.entities import (
    ContentSnapshot,
    DueReminder,
    Interaction,
    InteractionOutcome,
    InteractionType,
    LedgerStatus,
    NotificationChannel,
    ReminderLedgerEntry,
    ReminderStats,
    TrackedItem,
)
from renewals.core.exceptions import LedgerEntryNotFoundError, ValidationError
from renewals.core.services.due_reminder_finder import ReminderScan

AS_OF = date(2024, 12, 18)


@pytest.fixture
def ledger_entry() -> ReminderLedgerEntry:
    return ReminderLedgerEntry(
        id=1,
        item_id=10,
        user_id=1,
        offset_days=14,
        renewal_date=date(2025, 1, 1),
        channel=NotificationChannel.EMAIL,
        content_snapshot=ContentSnapshot(
            title="Home Insurance",
            subject="REMINDER: Home Insurance expires in 14 days",
        ),
        sent_at=datetime(2024, 12, 18, 9, 0, tzinfo=UTC),
    )


@pytest.fixture
def mock_ledger(ledger_entry):
    store = AsyncMock()
    store.get_entry.return_value = ledger_entry
    store.was_reminder_sent.return_value = True
    store.list_by_user.return_value = [ledger_entry]
    return store


@pytest.fixture
def mock_finder():
    finder = AsyncMock()
    due = DueReminder(
        item=TrackedItem(id=10, user_id=1, title="Home Insurance", provider="Aviva"),
        user_id=1,
        offset_days=14,
        renewal_date=date(2025, 1, 1),
        days_until_renewal=14,
        channels=[NotificationChannel.EMAIL],
    )
    finder.scan.return_value = ReminderScan(
        as_of=AS_OF, reminders=[due], items_processed=3, items_skipped=1
    )
    return finder


@pytest.fixture
def mock_process():
    use_case = AsyncMock()
    use_case.execute.return_value = TickSummary(
        as_of=AS_OF, items_processed=3, reminders_due=2, reminders_sent=1, duplicates=1
    )
    return use_case


@pytest.fixture
def mock_track(ledger_entry):
    use_case = AsyncMock()
    acted = ledger_entry.model_copy(
        update={
            "interactions": [
                Interaction(
                    type=InteractionType.ACTED,
                    outcome=InteractionOutcome.RENEWED,
                    occurred_at=datetime(2024, 12, 19, 10, 0, tzinfo=UTC),
                )
            ]
        }
    )
    use_case.execute.return_value = acted
    use_case.mark_failed.return_value = ledger_entry.model_copy(
        update={"status": LedgerStatus.FAILED, "error_message": "mailbox full"}
    )
    return use_case


@pytest.fixture
def mock_stats():
    use_case = AsyncMock()
    use_case.execute.return_value = ReminderStats(
        user_id=1, total_sent=4, by_status={"sent": 4}, opened=2, engagement_rate=0.5
    )
    return use_case


@pytest.fixture
async def rem_client(mock_ledger, mock_finder, mock_process, mock_track, mock_stats):
    """Async client with reminder dependencies overridden."""
    overrides = {
        get_ledger: lambda: mock_ledger,
        get_finder: lambda: mock_finder,
        get_process_reminders_use_case: lambda: mock_process,
        get_track_interaction_use_case: lambda: mock_track,
        get_reminder_stats_use_case: lambda: mock_stats,
    }
    app.dependency_overrides.update(overrides)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    for dep in overrides:
        app.dependency_overrides.pop(dep, None)


class TestDueAndProcess:
    async def test_due_lists_without_sending(self, rem_client: AsyncClient, mock_finder):
        response = await rem_client.get("/api/reminders/due", params={"as_of": "2024-12-18"})

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["items_skipped"] == 1
        assert data["reminders"][0]["title"] == "Home Insurance"
        assert data["reminders"][0]["kind"] == "lead_time"
        mock_finder.scan.assert_awaited_once_with(AS_OF)

    async def test_process_with_date(self, rem_client: AsyncClient, mock_process):
        response = await rem_client.post("/api/reminders/process", json={"as_of": "2024-12-18"})

        assert response.status_code == 200
        data = response.json()
        assert data["reminders_sent"] == 1
        assert data["duplicates"] == 1
        assert data["skipped"] is False
        mock_process.execute.assert_awaited_once_with(AS_OF)

    async def test_process_without_body(self, rem_client: AsyncClient, mock_process):
        response = await rem_client.post("/api/reminders/process")

        assert response.status_code == 200
        mock_process.execute.assert_awaited_once_with(None)


class TestLedgerEndpoints:
    async def test_was_sent(self, rem_client: AsyncClient, mock_ledger):
        response = await rem_client.get(
            "/api/reminders/sent",
            params={"item_id": 10, "user_id": 1, "renewal_date": "2025-01-01", "offset_days": 14},
        )

        assert response.status_code == 200
        assert response.json()["sent"] is True
        mock_ledger.was_reminder_sent.assert_awaited_once_with(10, 1, 14, date(2025, 1, 1))

    async def test_was_sent_rejects_negative_offset(self, rem_client: AsyncClient):
        response = await rem_client.get(
            "/api/reminders/sent",
            params={"item_id": 10, "user_id": 1, "renewal_date": "2025-01-01", "offset_days": -1},
        )
        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_get_entry(self, rem_client: AsyncClient):
        response = await rem_client.get("/api/reminders/ledger/1")

        assert response.status_code == 200
        data = response.json()
        assert data["subject"].startswith("REMINDER")
        assert data["status"] == "sent"

    async def test_get_missing_entry(self, rem_client: AsyncClient, mock_ledger):
        mock_ledger.get_entry.return_value = None

        response = await rem_client.get(
            "/api/reminders/ledger/99", headers={"X-Request-ID": "req-42"}
        )

        assert response.status_code == 404
        data = response.json()
        assert data["request_id"] == "req-42"
        assert data["error_code"] == "LEDGER_ENTRY_NOT_FOUND"
        assert data["path"] == "/api/reminders/ledger/99"

    async def test_history(self, rem_client: AsyncClient):
        response = await rem_client.get("/api/reminders/history/1")

        assert response.status_code == 200
        assert [e["id"] for e in response.json()] == [1]


class TestInteractions:
    async def test_track_acted(self, rem_client: AsyncClient, mock_track):
        response = await rem_client.post(
            "/api/reminders/ledger/1/interactions",
            json={"type": "acted", "outcome": "renewed"},
        )

        assert response.status_code == 200
        assert response.json()["interactions"][0]["outcome"] == "renewed"
        args = mock_track.execute.await_args.args
        assert args[:3] == (1, InteractionType.ACTED, InteractionOutcome.RENEWED)

    async def test_unknown_type_rejected(self, rem_client: AsyncClient):
        response = await rem_client.post(
            "/api/reminders/ledger/1/interactions", json={"type": "forwarded"}
        )
        assert response.status_code == 422

    async def test_domain_validation_maps_to_400(self, rem_client: AsyncClient, mock_track):
        mock_track.execute.side_effect = ValidationError("outcome", "required for acted")

        response = await rem_client.post(
            "/api/reminders/ledger/1/interactions", json={"type": "acted"}
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_missing_entry_maps_to_404(self, rem_client: AsyncClient, mock_track):
        mock_track.execute.side_effect = LedgerEntryNotFoundError(99)

        response = await rem_client.post(
            "/api/reminders/ledger/99/interactions", json={"type": "opened"}
        )

        assert response.status_code == 404
        assert response.json()["error_code"] == "LEDGER_ENTRY_NOT_FOUND"

    async def test_mark_failed(self, rem_client: AsyncClient, mock_track):
        response = await rem_client.post(
            "/api/reminders/ledger/1/failed", json={"error_message": "mailbox full"}
        )

        assert response.status_code == 200
        assert response.json()["status"] == "failed"
        mock_track.mark_failed.assert_awaited_once_with(1, "mailbox full")

    async def test_mark_failed_requires_message(self, rem_client: AsyncClient):
        response = await rem_client.post("/api/reminders/ledger/1/failed", json={"error_message": ""})
        assert response.status_code == 422


async def test_stats(rem_client: AsyncClient):
    response = await rem_client.get("/api/reminders/stats/1")

    assert response.status_code == 200
    data = response.json()
    assert data["total_sent"] == 4
    assert data["engagement_rate"] == 0.5
