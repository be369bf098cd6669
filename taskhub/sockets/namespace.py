# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Default Socket.IO namespace: authenticated connections, one room per user."""
from typing import Callable, Optional

import anyio.to_thread
import socketio

from taskhub.core.errors import ServiceError
from taskhub.core.logging import get_logger
from taskhub.services.notification_service import user_room

logger = get_logger(__name__)


def _bearer(environ: dict, auth) -> Optional[str]:
    if isinstance(auth, dict) and isinstance(auth.get("token"), str):
        token = auth["token"]
    else:
        token = environ.get("HTTP_AUTHORIZATION", "")
    if token.startswith("Bearer "):
        token = token[len("Bearer "):]
    return token.strip() or None


# noinspection PyMethodMayBeStatic
class MainNamespace(socketio.AsyncNamespace):

    def __init__(self, namespace: str, resolve_user: Callable[[str], dict]):
        super().__init__(namespace)
        self._resolve_user = resolve_user

    async def on_connect(self, sid, environ, auth=None):
        token = _bearer(environ, auth)
        if not token:
            raise ConnectionRefusedError("unauthorized!")
        try:
            user = await anyio.to_thread.run_sync(self._resolve_user, token)
        except ServiceError as exc:
            logger.info("Socket connection refused sid=%s: %s", sid, exc.message)
            raise ConnectionRefusedError("unauthorized!")

        user_id = str(user["_id"])
        await self.save_session(sid, {"user_id": user_id, "role": user["role"]})
        await self.enter_room(sid, user_room(user_id))
        logger.info("Socket connected sid=%s user=%s", sid, user_id)
        await self.emit("connection_response", {"success": True, "userId": user_id}, to=sid)

    async def on_identify(self, sid, user_id):
        session = await self.get_session(sid)
        if str(user_id) != session.get("user_id"):
            await self.emit("error", {"error_type": "identity_mismatch",
                                      "error": "User id does not match the authenticated user"}, to=sid)
            return
        await self.enter_room(sid, user_room(user_id))
        await self.emit("identified", {"userId": session["user_id"]}, to=sid)

    async def on_disconnect(self, sid, reason=None):
        logger.info("Socket disconnected sid=%s", sid)
