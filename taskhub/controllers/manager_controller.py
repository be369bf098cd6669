# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: Manager workspace — own teams, their members and their tasks."""
from fastapi import APIRouter, Depends, Query

from taskhub.core.config import settings
from taskhub.core.dependencies import get_task_service, get_team_service, get_user_service, require_role
from taskhub.core.errors import ServiceError
from taskhub.core.responses import http_error, success
from taskhub.models.user import ROLE_MANAGER
from taskhub.schemas.task import TaskCreateRequest, TaskUpdateRequest
from taskhub.schemas.team import TeamCreateRequest
from taskhub.services.task_service import TaskService
from taskhub.services.team_service import TeamService
from taskhub.services.user_service import UserService

router = APIRouter(prefix=f"{settings.API_PREFIX}/manager", tags=["Manager"])

require_manager = require_role(ROLE_MANAGER)


# ── Teams ──

@router.post("/team", status_code=201)
def create_team(body: TeamCreateRequest, manager: dict = Depends(require_manager),
                service: TeamService = Depends(get_team_service)):
    try:
        return success(service.create_team(manager, body.name), "Team created")
    except ServiceError as exc:
        raise http_error(exc)


@router.get("/teams")
def my_teams(manager: dict = Depends(require_manager),
             service: TeamService = Depends(get_team_service)):
    return success(service.teams_for_manager(manager), "Teams fetched")


@router.post("/team/{team_id}/add-user/{user_id}")
def add_user(team_id: str, user_id: str, manager: dict = Depends(require_manager),
             service: TeamService = Depends(get_team_service)):
    try:
        return success(service.add_member(team_id, user_id, manager), "User added to team")
    except ServiceError as exc:
        raise http_error(exc)


@router.post("/team/{team_id}/remove-user/{user_id}")
def remove_user(team_id: str, user_id: str, manager: dict = Depends(require_manager),
                service: TeamService = Depends(get_team_service)):
    try:
        return success(service.remove_member(team_id, user_id, manager), "User removed from team")
    except ServiceError as exc:
        raise http_error(exc)


@router.get("/team/{team_id}/tasks")
def team_tasks(team_id: str, manager: dict = Depends(require_manager),
               service: TeamService = Depends(get_team_service)):
    try:
        return success(service.team_tasks(team_id, manager), "Team tasks fetched")
    except ServiceError as exc:
        raise http_error(exc)


@router.get("/team/{team_id}/stats")
def team_stats(team_id: str, manager: dict = Depends(require_manager),
               service: TeamService = Depends(get_team_service)):
    try:
        return success(service.team_stats(team_id, manager), "Team statistics")
    except ServiceError as exc:
        raise http_error(exc)


@router.get("/team/{team_id}/available-users")
def available_users(team_id: str, manager: dict = Depends(require_manager),
                    service: TeamService = Depends(get_team_service)):
    try:
        return success(service.available_users(team_id, manager), "Available users fetched")
    except ServiceError as exc:
        raise http_error(exc)


@router.delete("/team/{team_id}")
def delete_team(team_id: str, manager: dict = Depends(require_manager),
                service: TeamService = Depends(get_team_service)):
    try:
        service.delete_team(team_id, manager)
    except ServiceError as exc:
        raise http_error(exc)
    return success(None, "Team deleted")


# ── Tasks ──

@router.post("/tasks", status_code=201)
def create_task(body: TaskCreateRequest, manager: dict = Depends(require_manager),
                service: TaskService = Depends(get_task_service)):
    try:
        task = service.create_task(
            manager, title=body.title, due_date=body.due_date, description=body.description,
            priority=body.priority, status=body.status, assigned_to=body.assigned_to,
        )
    except ServiceError as exc:
        raise http_error(exc)
    return success(task, "Task created")


@router.put("/tasks/{task_id}")
def update_task(task_id: str, body: TaskUpdateRequest, manager: dict = Depends(require_manager),
                service: TaskService = Depends(get_task_service)):
    try:
        return success(service.update_task(task_id, manager, body.changes()), "Task updated")
    except ServiceError as exc:
        raise http_error(exc)


@router.delete("/tasks/{task_id}")
def delete_task(task_id: str, manager: dict = Depends(require_manager),
                service: TaskService = Depends(get_task_service)):
    try:
        service.delete_task(task_id, manager)
    except ServiceError as exc:
        raise http_error(exc)
    return success(None, "Task deleted")


# ── Users ──

@router.get("/users")
def list_users(page: int = Query(default=1, ge=1),
               limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
               _manager: dict = Depends(require_manager),
               service: UserService = Depends(get_user_service)):
    return success(service.list_users(page, limit), "Users fetched")
