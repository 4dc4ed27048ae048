"""
Reminder tick, ledger and stats endpoints.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query

from renewals.api.dependencies import (
    get_finder,
    get_ledger,
    get_process_reminders_use_case,
    get_reminder_stats_use_case,
    get_track_interaction_use_case,
)
from renewals.application.dto.requests import (
    MarkFailedRequest,
    ProcessRemindersRequest,
    TrackInteractionRequest,
)
from renewals.application.dto.responses import (
    DueReminderResponse,
    DueRemindersResponse,
    ErrorResponse,
    LedgerEntryResponse,
    ReminderSentResponse,
    ReminderStatsResponse,
    TickSummaryResponse,
)
from renewals.application.use_cases import (
    GetReminderStatsUseCase,
    ProcessRenewalRemindersUseCase,
    TrackReminderInteractionUseCase,
)
from renewals.core.exceptions import LedgerEntryNotFoundError
from renewals.core.services import DueReminderFinder
from renewals.infrastructure.storage.sqlite import SQLiteLedgerStore

router = APIRouter(prefix="/api/reminders", tags=["reminders"])


@router.get("/due", response_model=DueRemindersResponse)
async def list_due_reminders(
    as_of: date | None = None,
    finder: DueReminderFinder = Depends(get_finder),
) -> DueRemindersResponse:
    """Reminders that fire on `as_of` (default today). Nothing is sent."""
    scan = await finder.scan(as_of)
    return DueRemindersResponse(
        as_of=scan.as_of,
        reminders=[DueReminderResponse.from_entity(d) for d in scan.reminders],
        total=len(scan.reminders),
        items_processed=scan.items_processed,
        items_skipped=scan.items_skipped,
        items_failed=scan.items_failed,
    )


@router.post("/process", response_model=TickSummaryResponse)
async def process_reminders(
    request: ProcessRemindersRequest | None = None,
    use_case: ProcessRenewalRemindersUseCase = Depends(get_process_reminders_use_case),
) -> TickSummaryResponse:
    """
    Run one tick now.

    Returns `skipped=true` when a tick is already running in this process.
    """
    as_of = request.as_of if request else None
    summary = await use_case.execute(as_of)
    return TickSummaryResponse(**summary.to_dict())


@router.get("/sent", response_model=ReminderSentResponse)
async def was_reminder_sent(
    item_id: int,
    user_id: int,
    renewal_date: date,
    offset_days: int = Query(..., ge=0),
    store: SQLiteLedgerStore = Depends(get_ledger),
) -> ReminderSentResponse:
    sent = await store.was_reminder_sent(item_id, user_id, offset_days, renewal_date)
    return ReminderSentResponse(
        item_id=item_id,
        user_id=user_id,
        offset_days=offset_days,
        renewal_date=renewal_date,
        sent=sent,
    )


@router.get(
    "/ledger/{entry_id}",
    response_model=LedgerEntryResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_ledger_entry(
    entry_id: int,
    store: SQLiteLedgerStore = Depends(get_ledger),
) -> LedgerEntryResponse:
    entry = await store.get_entry(entry_id)
    if entry is None:
        raise LedgerEntryNotFoundError(entry_id)
    return LedgerEntryResponse.from_entity(entry)


@router.get("/history/{user_id}", response_model=list[LedgerEntryResponse])
async def list_user_history(
    user_id: int,
    store: SQLiteLedgerStore = Depends(get_ledger),
) -> list[LedgerEntryResponse]:
    """A user's ledger, newest first."""
    entries = await store.list_by_user(user_id)
    return [LedgerEntryResponse.from_entity(e) for e in entries]


@router.post(
    "/ledger/{entry_id}/interactions",
    response_model=LedgerEntryResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def track_interaction(
    entry_id: int,
    request: TrackInteractionRequest,
    use_case: TrackReminderInteractionUseCase = Depends(get_track_interaction_use_case),
) -> LedgerEntryResponse:
    """Record an open, click or action on a delivered reminder."""
    entry = await use_case.execute(
        entry_id, request.type, request.outcome, request.occurred_at
    )
    return LedgerEntryResponse.from_entity(entry)


@router.post(
    "/ledger/{entry_id}/failed",
    response_model=LedgerEntryResponse,
    responses={404: {"model": ErrorResponse}},
)
async def mark_delivery_failed(
    entry_id: int,
    request: MarkFailedRequest,
    use_case: TrackReminderInteractionUseCase = Depends(get_track_interaction_use_case),
) -> LedgerEntryResponse:
    entry = await use_case.mark_failed(entry_id, request.error_message)
    return LedgerEntryResponse.from_entity(entry)


@router.get("/stats/{user_id}", response_model=ReminderStatsResponse)
async def get_reminder_stats(
    user_id: int,
    use_case: GetReminderStatsUseCase = Depends(get_reminder_stats_use_case),
) -> ReminderStatsResponse:
    stats = await use_case.execute(user_id)
    return ReminderStatsResponse.from_entity(stats)
