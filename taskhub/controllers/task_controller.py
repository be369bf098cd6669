# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: Task CRUD, filtered listing and grouped statistics."""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from taskhub.core.config import settings
from taskhub.core.dependencies import get_current_user, get_task_service
from taskhub.core.errors import ServiceError
from taskhub.core.responses import http_error, success
from taskhub.schemas.task import TaskCreateRequest, TaskUpdateRequest
from taskhub.services.task_service import TaskService

router = APIRouter(prefix=f"{settings.API_PREFIX}/tasks", tags=["Tasks"])


@router.post("", status_code=201)
def create_task(body: TaskCreateRequest, user: dict = Depends(get_current_user),
                service: TaskService = Depends(get_task_service)):
    try:
        task = service.create_task(
            user, title=body.title, due_date=body.due_date, description=body.description,
            priority=body.priority, status=body.status, assigned_to=body.assigned_to,
        )
    except ServiceError as exc:
        raise http_error(exc)
    return success(task, "Task created")


@router.get("")
def list_tasks(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    search: Optional[str] = Query(default=None, max_length=100),
    status: Optional[str] = None,
    priority: Optional[str] = None,
    user: dict = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    result = service.list_tasks(user, page, limit, search=search, status=status, priority=priority)
    return success(result, "Tasks fetched")


@router.get("/stats/{group_by}")
def task_stats(group_by: str, user: dict = Depends(get_current_user),
               service: TaskService = Depends(get_task_service)):
    try:
        return success(service.stats(user, group_by), "Task statistics")
    except ServiceError as exc:
        raise http_error(exc)


@router.get("/{task_id}")
def get_task(task_id: str, user: dict = Depends(get_current_user),
             service: TaskService = Depends(get_task_service)):
    try:
        return success(service.get_task(task_id, user), "Task fetched")
    except ServiceError as exc:
        raise http_error(exc)


@router.put("/{task_id}")
def update_task(task_id: str, body: TaskUpdateRequest, user: dict = Depends(get_current_user),
                service: TaskService = Depends(get_task_service)):
    try:
        return success(service.update_task(task_id, user, body.changes()), "Task updated")
    except ServiceError as exc:
        raise http_error(exc)


@router.delete("/{task_id}")
def delete_task(task_id: str, user: dict = Depends(get_current_user),
                service: TaskService = Depends(get_task_service)):
    try:
        service.delete_task(task_id, user)
    except ServiceError as exc:
        raise http_error(exc)
    return success(None, "Task deleted")
