# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Document → response dict mappers.
Hide internal fields (password hashes, notification lists) and stringify ids.
"""
from typing import Any, Dict, Optional

from taskhub.util import isoformat


def _id(value) -> Optional[str]:
    return str(value) if value is not None else None


def user_summary(ref) -> Optional[Dict[str, Any]]:
    """A joined user reference: `$lookup` yields a list, an unjoined one is a bare id."""
    if isinstance(ref, list):
        ref = ref[0] if ref else None
    if ref is None:
        return None
    if not isinstance(ref, dict):
        return {"id": str(ref)}
    return {
        "id": _id(ref.get("_id")),
        "name": ref.get("name"),
        "email": ref.get("email"),
        "role": ref.get("role"),
    }


def user_dto(user: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not user:
        return None
    return {
        "id": _id(user["_id"]),
        "name": user.get("name"),
        "email": user.get("email"),
        "role": user.get("role"),
        "team": _id(user.get("team")),
        "mustResetPassword": bool(user.get("mustResetPassword", False)),
        "createdAt": isoformat(user.get("createdAt")),
    }


def task_dto(task: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not task:
        return None
    return {
        "id": _id(task["_id"]),
        "title": task.get("title"),
        "description": task.get("description") or "",
        "status": task.get("status"),
        "priority": task.get("priority"),
        "dueDate": isoformat(task.get("dueDate")),
        "assignedTo": user_summary(task.get("assignedTo")),
        "createdBy": user_summary(task.get("createdBy")),
        "createdAt": isoformat(task.get("createdAt")),
        "updatedAt": isoformat(task.get("updatedAt")),
    }


def team_dto(team: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not team:
        return None
    members = team.get("members") or []
    return {
        "id": _id(team["_id"]),
        "name": team.get("name"),
        "manager": user_summary(team.get("manager")),
        "members": [user_summary(m) for m in members],
        "membersCount": len(members),
        "createdAt": isoformat(team.get("createdAt")),
        "updatedAt": isoformat(team.get("updatedAt")),
    }


def notification_dto(notification: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": _id(notification.get("_id")),
        "message": notification.get("message"),
        "event": notification.get("event"),
        "data": notification.get("data"),
        "read": bool(notification.get("read", False)),
        "createdAt": isoformat(notification.get("createdAt")),
    }


def page_dto(items, total: int, page: int, limit: int) -> Dict[str, Any]:
    return {
        "items": items,
        "pagination": {
            "total": total,
            "page": page,
            "limit": limit,
            "totalPages": (total + limit - 1) // limit if limit else 0,
        },
    }
