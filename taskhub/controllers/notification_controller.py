# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: the caller's stored notifications."""
from fastapi import APIRouter, Depends

from taskhub.core.config import settings
from taskhub.core.dependencies import get_current_user, get_notification_service
from taskhub.core.errors import ServiceError
from taskhub.core.responses import http_error, success
from taskhub.services.notification_service import NotificationService

router = APIRouter(prefix=f"{settings.API_PREFIX}/notifications", tags=["Notifications"])


@router.get("")
def list_notifications(user: dict = Depends(get_current_user),
                       service: NotificationService = Depends(get_notification_service)):
    try:
        return success(service.list_for_user(user["_id"]), "Notifications fetched")
    except ServiceError as exc:
        raise http_error(exc)


@router.post("/read-all")
def mark_all_read(user: dict = Depends(get_current_user),
                  service: NotificationService = Depends(get_notification_service)):
    try:
        updated = service.mark_all_read(user["_id"])
    except ServiceError as exc:
        raise http_error(exc)
    return success({"updated": updated}, "All notifications marked as read")


@router.post("/{notification_id}/read")
def mark_read(notification_id: str, user: dict = Depends(get_current_user),
              service: NotificationService = Depends(get_notification_service)):
    try:
        return success(service.mark_read(user["_id"], notification_id), "Notification marked as read")
    except ServiceError as exc:
        raise http_error(exc)
