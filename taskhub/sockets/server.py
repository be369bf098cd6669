# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Socket.IO server shared with the HTTP app, and the publisher services use to emit on it.
"""
import functools
from concurrent.futures import Future
from typing import Any, Dict, Iterable, List

import anyio.from_thread
import socketio

from taskhub.core.config import settings
from taskhub.core.logging import get_logger
from taskhub.metrics import NOTIFICATIONS_EMITTED

logger = get_logger(__name__)

sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins=settings.CORS_ORIGINS if settings.CORS_ORIGINS != ["*"] else "*",
)


def _log_failed_emit(event: str, room: str, future: Future) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        NOTIFICATIONS_EMITTED.labels(event=event, outcome="failed").inc()
        logger.warning("Socket emit failed event=%s room=%s: %s", event, room, exc)


class SocketPublisher:
    """
    Emits events from sync request handlers.
    Handlers run in the worker threadpool; each emit is scheduled on the event loop
    through `portal` and the handler does not wait for it.
    """

    def __init__(self, server: socketio.AsyncServer, portal: anyio.from_thread.BlockingPortal):
        self._server = server
        self._portal = portal

    def publish(self, event: str, payload: Dict[str, Any], rooms: Iterable[str]) -> List[Future]:
        futures = []
        for room in rooms:
            future = self._portal.start_task_soon(functools.partial(self._server.emit, event, payload, room=room))
            future.add_done_callback(functools.partial(_log_failed_emit, event, room))
            futures.append(future)
        logger.debug("Scheduled event=%s rooms=%d", event, len(futures))
        return futures
