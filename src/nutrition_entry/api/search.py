"""Food search endpoints."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request, WebSocket, WebSocketDisconnect, status
from fastapi.encoders import jsonable_encoder

from nutrition_entry.api.auth import require_api_token
from nutrition_entry.services.search import SearchScheduler

if TYPE_CHECKING:
    from nutrition_entry.containers import AppContainer
    from nutrition_entry.domain.nutrition import MacroRecord

_logger = logging.getLogger(__name__)

router = APIRouter(prefix="/foods", tags=["foods"])


@router.get("/search", dependencies=[Depends(require_api_token)])
async def search_foods(request: Request, q: str = "") -> dict[str, object]:
    """Run a single food search; failures yield no candidates."""
    container: AppContainer = request.app.state.container
    return {"candidates": await container.search_service.search(q)}


@router.websocket("/search/live")
async def live_search(websocket: WebSocket) -> None:
    """Debounced search driven by one text frame per keystroke."""
    container: AppContainer = websocket.app.state.container
    if websocket.headers.get("x-api-token") != container.settings.api_token:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    await websocket.accept()

    outbox: asyncio.Queue[list[MacroRecord]] = asyncio.Queue()
    scheduler = SearchScheduler(
        search_service=container.search_service,
        listener=outbox.put_nowait,
        debounce_seconds=container.settings.search_debounce_seconds,
        min_query_length=container.settings.min_query_length,
    )
    sender = asyncio.create_task(_forward_candidates(websocket, outbox))
    try:
        while True:
            scheduler.on_query_change(await websocket.receive_text())
    except WebSocketDisconnect:
        _logger.debug("Live search client disconnected")
    finally:
        await scheduler.aclose()
        sender.cancel()
        await asyncio.gather(sender, return_exceptions=True)


async def _forward_candidates(
    websocket: WebSocket, outbox: asyncio.Queue[list[MacroRecord]]
) -> None:
    while True:
        candidates = await outbox.get()
        await websocket.send_json(jsonable_encoder({"candidates": candidates}))
