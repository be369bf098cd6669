# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Dependency injection — repositories and services built once per database,
plus the authentication and role guards used by the routers.
"""
from typing import Any, Callable, Dict, Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pymongo.database import Database

from taskhub.core.errors import AuthError, ForbiddenError
from taskhub.repositories.task_repository import TaskRepository
from taskhub.repositories.team_repository import TeamRepository
from taskhub.repositories.user_repository import UserRepository
from taskhub.services.admin_service import AdminService
from taskhub.services.notification_service import NotificationService
from taskhub.services.task_service import TaskService
from taskhub.services.team_service import TeamService
from taskhub.services.user_service import UserService

_user_repo: UserRepository | None = None
_user_service: UserService | None = None
_notification_service: NotificationService | None = None
_task_service: TaskService | None = None
_team_service: TeamService | None = None
_admin_service: AdminService | None = None

_bearer = HTTPBearer(auto_error=False)


def init_dependencies(db: Database, publisher) -> None:
    """Wire repositories and services against `db`; `publisher` delivers socket events."""
    global _user_repo, _user_service, _notification_service, _task_service, _team_service, _admin_service
    _user_repo = UserRepository(db)
    team_repo = TeamRepository(db)
    task_repo = TaskRepository(db)

    _notification_service = NotificationService(_user_repo, publisher)
    _user_service = UserService(_user_repo)
    _task_service = TaskService(task_repo, _user_repo, team_repo, _notification_service)
    _team_service = TeamService(team_repo, _user_repo, _task_service, _notification_service)
    _admin_service = AdminService(_user_repo, team_repo, task_repo, _user_service,
                                  _team_service, _task_service, _notification_service)


def get_user_repo() -> UserRepository:
    assert _user_repo is not None
    return _user_repo


def get_user_service() -> UserService:
    assert _user_service is not None
    return _user_service


def get_notification_service() -> NotificationService:
    assert _notification_service is not None
    return _notification_service


def get_task_service() -> TaskService:
    assert _task_service is not None
    return _task_service


def get_team_service() -> TeamService:
    assert _team_service is not None
    return _team_service


def get_admin_service() -> AdminService:
    assert _admin_service is not None
    return _admin_service


# ── Auth guards ──

def get_current_user(credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
                     service: UserService = Depends(get_user_service)) -> Dict[str, Any]:
    """Resolve the bearer token to the user document, re-read on every request."""
    if credentials is None:
        raise HTTPException(status_code=401, detail="Access denied. No token provided.")
    try:
        return service.user_from_token(credentials.credentials)
    except ForbiddenError as exc:
        raise HTTPException(status_code=403, detail=exc.message)
    except AuthError as exc:
        raise HTTPException(status_code=401, detail=exc.message)


def require_role(*roles: str) -> Callable[..., Dict[str, Any]]:
    def role_guard(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        if user["role"] not in roles:
            raise HTTPException(status_code=403, detail="Access denied: insufficient permissions")
        return user
    return role_guard
