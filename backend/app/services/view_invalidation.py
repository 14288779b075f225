from __future__ import annotations

import asyncio
import logging

from anyio import from_thread
from fastapi import WebSocket

logger = logging.getLogger(__name__)

CALENDARS_VIEW = "/dashboard/calendars"
EVENT_TYPES_VIEW = "/dashboard/event-types"
DASHBOARD_VIEW = "/dashboard"
LECTURE_SUMMARIES_VIEW = "/dashboard/lecture-summaries"


class ViewInvalidationHub:
    """Broadcasts "this page is stale" signals to connected dashboard clients."""

    def __init__(self) -> None:
        self._connections: set[WebSocket] = set()
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        async with self._lock:
            self._connections.add(websocket)

    async def disconnect(self, websocket: WebSocket) -> None:
        async with self._lock:
            self._connections.discard(websocket)

    async def publish(self, payload: dict) -> None:
        async with self._lock:
            sockets = list(self._connections)

        stale: list[WebSocket] = []
        for websocket in sockets:
            try:
                await websocket.send_json(payload)
            except Exception:  # pragma: no cover - network/runtime dependent
                stale.append(websocket)

        if stale:
            async with self._lock:
                for websocket in stale:
                    self._connections.discard(websocket)
            logger.debug("Removed %d stale view websocket(s)", len(stale))


view_hub = ViewInvalidationHub()


def mark_view_stale(*paths: str) -> None:
    """Fire-and-forget; delivery failures are never surfaced to the caller."""
    for path in paths:
        payload = {"event": "view.invalidated", "path": path}
        try:
            from_thread.run(view_hub.publish, payload)
        except Exception:  # pragma: no cover - runtime environment dependent
            logger.debug("Unable to publish view invalidation for %s", path, exc_info=True)
