"""
Journal API endpoints for Braintrader

This module provides API endpoints for recording trades, listing them and
streaming live journal state over a WebSocket.
"""

import asyncio
import json
import logging
from datetime import date
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status
from fastapi.concurrency import run_in_threadpool
from fastapi.websockets import WebSocketState

from braintrader.analytics import JournalFilter, ReportPeriod, filter_by_calendar, summarize
from braintrader.api.deps import get_auth_service, get_current_user, get_identity_registry, get_record_feed
from braintrader.core.config import settings
from braintrader.core.errors import JournalError
from braintrader.models.user import User
from braintrader.schemas.journal import TradeRecord, TradeRecordCreate
from braintrader.schemas.report import Summary
from braintrader.services.auth import AuthService
from braintrader.services.record_feed import RecordFeed
from braintrader.services.session import Identity, IdentityRegistry, JournalSession

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/records", response_model=List[TradeRecord])
def get_records(
    journal_filter: JournalFilter = Query(JournalFilter.ALL, alias="filter"),
    feed: RecordFeed = Depends(get_record_feed),
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Get the current user's records, newest first, narrowed by a calendar filter.
    """
    records = feed.snapshot(current_user.id)
    return filter_by_calendar(records, journal_filter, date.today())


@router.post("/records", response_model=TradeRecord, status_code=status.HTTP_201_CREATED)
def create_record(
    *,
    record_in: TradeRecordCreate,
    feed: RecordFeed = Depends(get_record_feed),
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Record a new trade. Profit is computed from the submitted prices.
    """
    return feed.append(current_user.id, record_in)


@router.get("/overview", response_model=Summary)
def get_overview(
    feed: RecordFeed = Depends(get_record_feed),
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Get headline statistics over all of the current user's records.
    """
    return summarize(feed.snapshot(current_user.id))


@router.get("/instruments", response_model=List[str])
def get_instruments(current_user: User = Depends(get_current_user)) -> Any:
    """
    Get the default instrument list offered when recording a trade.
    """
    return settings.default_instruments


# Queued by the identity watcher; tells the sender to close the socket
_SIGNED_OUT = object()


async def _forward(websocket: WebSocket, queue: asyncio.Queue) -> None:
    while True:
        payload = await queue.get()
        if payload is _SIGNED_OUT:
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason="Signed out")
            return
        await websocket.send_json(payload)


def _handle_message(session: JournalSession, text: str) -> None:
    """
    Apply one client message to the session.

    Raises:
        ValueError: Not JSON, unknown period or filter, or an invalid trade
        TypeError: The message is not a JSON object
    """
    message = json.loads(text)
    if not isinstance(message, dict):
        raise TypeError("expected a JSON object")
    if "period" in message:
        session.change_period(ReportPeriod(message["period"]))
    if "filter" in message:
        session.change_filter(JournalFilter(message["filter"]))
    if "record" in message:
        session.create_record(TradeRecordCreate.model_validate(message["record"]))


@router.websocket("/stream")
async def stream_journal(
    websocket: WebSocket,
    token: str = Query(...),
    period: ReportPeriod = Query(ReportPeriod(settings.default_report_period)),
    journal_filter: JournalFilter = Query(JournalFilter.ALL, alias="filter"),
    auth: AuthService = Depends(get_auth_service),
    feed: RecordFeed = Depends(get_record_feed),
    identities: IdentityRegistry = Depends(get_identity_registry),
):
    """
    Push journal state on every change.

    Each message holds the filtered records, the overview, the report for
    the selected period and the current error (if any). Clients may send
    ``{"period": ...}``, ``{"filter": ...}`` or ``{"record": {...}}``.
    Signing out the token closes the stream with code 1008.
    """
    try:
        user = await run_in_threadpool(auth.resolve, token)
        token_id = auth.token_id(token)
    except JournalError as e:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason=e.user_message)
        return

    await websocket.accept()
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()

    def push(session: JournalSession) -> None:
        # Feed callbacks may arrive on worker threads
        payload = session.state().model_dump(mode="json")
        loop.call_soon_threadsafe(queue.put_nowait, payload)

    session = JournalSession(
        feed,
        Identity.from_user(user),
        period=period,
        journal_filter=journal_filter,
        on_change=push,
    )

    def on_identity(identity: Optional[Identity]) -> None:
        if identity is None:
            session.sign_out()
            loop.call_soon_threadsafe(queue.put_nowait, _SIGNED_OUT)

    stop_watching = identities.watcher_for(token_id, session.identity).on_identity_change(on_identity)
    sender = asyncio.create_task(_forward(websocket, queue))
    try:
        # Revoked between resolve and registration
        if await run_in_threadpool(auth.denylist.is_revoked, token_id):
            on_identity(None)
        await run_in_threadpool(session.open)
        while websocket.application_state == WebSocketState.CONNECTED:
            text = await websocket.receive_text()
            try:
                await run_in_threadpool(_handle_message, session, text)
            except (TypeError, ValueError) as e:
                queue.put_nowait({"error": f"Unsupported message: {e}"})
    except WebSocketDisconnect:
        logger.debug(f"Journal stream closed for owner {user.id}")
    except JournalError as e:
        logger.info(f"Journal stream for owner {user.id} ended: {e}")
        if session.identity is None:
            # The queued sign-out closes the socket
            await sender
        else:
            sender.cancel()
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason=e.user_message)
    finally:
        stop_watching()
        identities.release(token_id)
        session.close()
        sender.cancel()
