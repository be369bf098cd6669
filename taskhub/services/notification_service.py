# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: user notifications.
Persists notifications on the user document, then pushes them over the
socket channel. Pushes are fire-and-forget: a failed emit is logged, never raised.
"""
from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId

from taskhub.core.config import settings
from taskhub.core.errors import NotFoundError
from taskhub.core.logging import get_logger
from taskhub.metrics import NOTIFICATIONS_EMITTED
from taskhub.models.user import Notification
from taskhub.repositories.user_repository import UserRepository
from taskhub.services.dto import notification_dto
from taskhub.util import MongoId, ensure_object_id, same_id

logger = get_logger(__name__)


def user_room(user_id) -> str:
    return f"user:{user_id}"


class NotificationService:
    def __init__(self, user_repo: UserRepository, publisher):
        self._users = user_repo
        self._publisher = publisher

    # ── Commands ──

    def notify_user(self, user_id: MongoId, message: str, data: Optional[Dict[str, Any]] = None,
                    event: str = "notification", payload: Optional[Dict[str, Any]] = None
                    ) -> Optional[Dict[str, Any]]:
        """Store a notification for the user and push `event` to their room."""
        note = Notification(_id=ObjectId(), message=message, event=event, data=data)
        stored = self._users.push_notification(user_id, note.as_dict(), settings.NOTIFICATION_HISTORY_LIMIT)
        if not stored:
            logger.warning("Notification dropped, user not found user=%s", user_id)
            return None
        dto = notification_dto(note.as_dict())
        self._emit(event, payload or dto, [user_id])
        return dto

    def task_assigned(self, task: Dict[str, Any], actor_id: MongoId) -> None:
        assignee = task.get("assignedTo")
        if not assignee or same_id(assignee["id"], actor_id):
            return
        self.notify_user(
            assignee["id"],
            f"New task assigned: {task['title']}",
            data={"taskId": task["id"], "title": task["title"], "dueDate": task.get("dueDate")},
            event="taskAssigned",
            payload={"message": f"New task assigned: {task['title']}", "task": task},
        )

    def task_created(self, task: Dict[str, Any]) -> None:
        self._emit("taskCreated", task, self._task_audience(task))

    def task_updated(self, task: Dict[str, Any]) -> None:
        self._emit("taskUpdated", task, self._task_audience(task))

    def task_deleted(self, task: Dict[str, Any]) -> None:
        self._emit("taskDeleted", {"id": task["id"], "title": task["title"]},
                   self._task_audience(task))

    def mark_read(self, user_id: MongoId, notification_id: str) -> Dict[str, Any]:
        target = ensure_object_id(notification_id)
        if not self._users.mark_notification_read(user_id, target):
            self._require_user(user_id)
            raise NotFoundError("Notification not found")
        user = self._require_user(user_id)
        found = next((n for n in user.get("notifications") or [] if n.get("_id") == target), None)
        if found is None:
            raise NotFoundError("Notification not found")
        return notification_dto(found)

    def mark_all_read(self, user_id: MongoId) -> int:
        user = self._require_user(user_id)
        unread = sum(1 for n in user.get("notifications") or [] if not n.get("read"))
        if unread:
            self._users.mark_all_notifications_read(user_id)
        return unread

    # ── Queries ──

    def list_for_user(self, user_id: MongoId) -> Dict[str, Any]:
        user = self._require_user(user_id)
        notes = list(reversed(user.get("notifications") or []))
        return {
            "items": [notification_dto(n) for n in notes[:settings.NOTIFICATION_HISTORY_LIMIT]],
            "unreadCount": sum(1 for n in notes if not n.get("read")),
        }

    # ── Private ──

    def _require_user(self, user_id: MongoId) -> Dict[str, Any]:
        user = self._users.find_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    @staticmethod
    def _task_audience(task: Dict[str, Any]) -> List[str]:
        audience = []
        for ref in (task.get("createdBy"), task.get("assignedTo")):
            if ref and ref.get("id") and ref["id"] not in audience:
                audience.append(ref["id"])
        return audience

    def _emit(self, event: str, payload: Dict[str, Any], user_ids: Iterable) -> None:
        rooms = [user_room(u) for u in user_ids]
        if not rooms:
            return
        try:
            self._publisher.publish(event, payload, rooms)
            NOTIFICATIONS_EMITTED.labels(event=event, outcome="scheduled").inc()
        except Exception as exc:
            NOTIFICATIONS_EMITTED.labels(event=event, outcome="failed").inc()
            logger.warning("Socket emit failed event=%s rooms=%s: %s", event, rooms, exc)
