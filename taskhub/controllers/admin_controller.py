# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: Admin console — user management, task oversight, dashboard aggregates."""
from fastapi import APIRouter, Depends

from taskhub.core.config import settings
from taskhub.core.dependencies import get_admin_service, get_task_service, require_role
from taskhub.core.errors import ServiceError
from taskhub.core.responses import http_error, success
from taskhub.models.user import ROLE_ADMIN
from taskhub.schemas.task import AdminTaskCreateRequest
from taskhub.schemas.user import AdminCreateUserRequest, AssignTeamRequest, UserUpdateRequest
from taskhub.services.admin_service import AdminService
from taskhub.services.task_service import TaskService

router = APIRouter(prefix=f"{settings.API_PREFIX}/admin", tags=["Admin"])

require_admin = require_role(ROLE_ADMIN)


# ── Users ──

@router.get("/users")
def list_users(_admin: dict = Depends(require_admin),
               service: AdminService = Depends(get_admin_service)):
    return success(service.list_users(), "Users fetched")


@router.post("/user", status_code=201)
def create_user(body: AdminCreateUserRequest, _admin: dict = Depends(require_admin),
                service: AdminService = Depends(get_admin_service)):
    try:
        user = service.create_user(body.name, body.email, body.password, body.role)
    except ServiceError as exc:
        raise http_error(exc)
    return success(user, "User created; password reset required on first login")


@router.get("/users/{user_id}")
def get_user(user_id: str, _admin: dict = Depends(require_admin),
             service: AdminService = Depends(get_admin_service)):
    try:
        return success(service.get_user(user_id), "User fetched")
    except ServiceError as exc:
        raise http_error(exc)


@router.put("/users/{user_id}")
def update_user(user_id: str, body: UserUpdateRequest, admin: dict = Depends(require_admin),
                service: AdminService = Depends(get_admin_service)):
    try:
        return success(service.update_user(user_id, body.changes(), admin), "User updated")
    except ServiceError as exc:
        raise http_error(exc)


@router.delete("/users/{user_id}")
def delete_user(user_id: str, admin: dict = Depends(require_admin),
                service: AdminService = Depends(get_admin_service)):
    try:
        service.delete_user(user_id, admin)
    except ServiceError as exc:
        raise http_error(exc)
    return success(None, "User deleted")


@router.get("/users/{user_id}/tasks")
def user_tasks(user_id: str, _admin: dict = Depends(require_admin),
               service: AdminService = Depends(get_admin_service)):
    try:
        return success(service.user_tasks(user_id), "User tasks fetched")
    except ServiceError as exc:
        raise http_error(exc)


@router.post("/users/{user_id}/promote")
def promote_user(user_id: str, _admin: dict = Depends(require_admin),
                 service: AdminService = Depends(get_admin_service)):
    try:
        return success(service.promote(user_id), "User promoted to manager")
    except ServiceError as exc:
        raise http_error(exc)


@router.post("/users/{user_id}/demote")
def demote_user(user_id: str, _admin: dict = Depends(require_admin),
                service: AdminService = Depends(get_admin_service)):
    try:
        return success(service.demote(user_id), "User demoted to user")
    except ServiceError as exc:
        raise http_error(exc)


@router.post("/users/{user_id}/assign-team")
def assign_team(user_id: str, body: AssignTeamRequest, _admin: dict = Depends(require_admin),
                service: AdminService = Depends(get_admin_service)):
    try:
        return success(service.assign_team(user_id, body.team_id), "User assigned to team")
    except ServiceError as exc:
        raise http_error(exc)


@router.post("/users/{user_id}/remove-team")
def remove_team(user_id: str, _admin: dict = Depends(require_admin),
                service: AdminService = Depends(get_admin_service)):
    try:
        return success(service.remove_team(user_id), "User removed from team")
    except ServiceError as exc:
        raise http_error(exc)


# ── Tasks ──

@router.post("/tasks", status_code=201)
def create_task(body: AdminTaskCreateRequest, admin: dict = Depends(require_admin),
                service: TaskService = Depends(get_task_service)):
    try:
        task = service.create_task(
            admin, title=body.title, due_date=body.due_date, description=body.description,
            priority=body.priority, status=body.status, assigned_to=body.assigned_to,
        )
    except ServiceError as exc:
        raise http_error(exc)
    return success(task, "Task created and assigned")


@router.delete("/tasks/{task_id}")
def delete_task(task_id: str, admin: dict = Depends(require_admin),
                service: TaskService = Depends(get_task_service)):
    try:
        service.delete_task(task_id, admin)
    except ServiceError as exc:
        raise http_error(exc)
    return success(None, "Task deleted")


# ── Dashboard ──

@router.get("/dashboard/task-stats")
def task_stats(_admin: dict = Depends(require_admin),
               service: AdminService = Depends(get_admin_service)):
    return success(service.task_stats(), "Task statistics")


@router.get("/dashboard/user-stats")
def user_stats(_admin: dict = Depends(require_admin),
               service: AdminService = Depends(get_admin_service)):
    return success(service.user_stats(), "User statistics")


@router.get("/dashboard/managers")
def managers(_admin: dict = Depends(require_admin),
             service: AdminService = Depends(get_admin_service)):
    return success(service.managers(), "Managers fetched")


@router.get("/dashboard/teams")
def teams(_admin: dict = Depends(require_admin),
          service: AdminService = Depends(get_admin_service)):
    return success(service.teams(), "Teams fetched")


@router.get("/dashboard/tasks-by-user")
def tasks_by_user(_admin: dict = Depends(require_admin),
                  service: AdminService = Depends(get_admin_service)):
    return success(service.tasks_by_user(), "Task totals per user")
