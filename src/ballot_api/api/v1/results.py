"""Results endpoints: public tally, admin statistics, and a live feed.

The live feed pushes a fresh results payload on connect and again after
every change to votes, positions or candidates.
"""

import asyncio
import contextlib
from typing import Annotated

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from ballot_api.core.change_feed import ChangeEvent, ChangeFeed, Collection, change_feed
from ballot_api.core.dependencies import ResultsLoader, get_async_session, get_results_loader, require_role
from ballot_api.models.user import ADMIN_ROLES, User
from ballot_api.schemas.results import ElectionStatsResponse, ResultsResponse
from ballot_api.services import results_service

results_router = APIRouter(prefix="/results", tags=["results"])

LIVE_COLLECTIONS = (Collection.VOTES, Collection.POSITIONS, Collection.CANDIDATES)


def get_change_feed() -> ChangeFeed:
    """Return the process-wide change feed."""
    return change_feed


@results_router.get("", response_model=ResultsResponse)
async def get_results(
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> ResultsResponse:
    """Tabulate the current results (no authentication required)."""
    return await results_service.get_results(session)


@results_router.get("/stats", response_model=ElectionStatsResponse)
async def get_stats(
    _current_user: Annotated[User, Depends(require_role(*ADMIN_ROLES))],
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> ElectionStatsResponse:
    """Dashboard statistics: turnout, ballot size, and election status."""
    return await results_service.get_stats(session)


async def _push_updates(websocket: WebSocket, queue: asyncio.Queue[ChangeEvent], load: ResultsLoader) -> None:
    try:
        while True:
            await queue.get()
            # Coalesce a burst of changes into one payload.
            while not queue.empty():
                queue.get_nowait()
            results = await load()
            await websocket.send_json(results.model_dump(mode="json"))
    except WebSocketDisconnect:
        return
    except Exception:
        logger.exception("Live results push failed, closing connection")
        with contextlib.suppress(RuntimeError, WebSocketDisconnect):
            await websocket.close(code=status.WS_1011_INTERNAL_ERROR)


@results_router.websocket("/live")
async def live_results(
    websocket: WebSocket,
    load: Annotated[ResultsLoader, Depends(get_results_loader)],
    feed: Annotated[ChangeFeed, Depends(get_change_feed)],
) -> None:
    """Stream results to the client until it disconnects."""
    await websocket.accept()
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue[ChangeEvent] = asyncio.Queue()

    def on_change(event: ChangeEvent) -> None:
        loop.call_soon_threadsafe(queue.put_nowait, event)

    subscriptions = [feed.subscribe(collection, on_change) for collection in LIVE_COLLECTIONS]
    logger.debug("Live results client connected")
    pusher: asyncio.Task[None] | None = None
    try:
        results = await load()
        await websocket.send_json(results.model_dump(mode="json"))
        pusher = asyncio.create_task(_push_updates(websocket, queue, load))
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug("Live results client disconnected")
    finally:
        for subscription in subscriptions:
            subscription.unsubscribe()
        if pusher is not None:
            pusher.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await pusher
