# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Business logic for tasks: who may assign, see, change and delete them.

Visibility:
  admin    every task
  manager  tasks assigned to or created by them, plus tasks of their team members
  user     tasks assigned to or created by them
"""
from typing import Any, Dict, List, Optional

from bson import ObjectId

from taskhub.core.errors import BadRequestError, ForbiddenError, NotFoundError
from taskhub.core.logging import get_logger
from taskhub.metrics import TASK_STATUS_CHANGES, TASKS_CREATED
from taskhub.models.task import STATUS_DONE, STATUS_IN_PROGRESS, STATUS_TODO, TASK_PRIORITIES, TASK_STATUSES, Task
from taskhub.models.user import ROLE_ADMIN, ROLE_MANAGER
from taskhub.repositories.task_repository import TaskRepository
from taskhub.repositories.team_repository import TeamRepository
from taskhub.repositories.user_repository import UserRepository
from taskhub.services.dto import page_dto, task_dto
from taskhub.services.notification_service import NotificationService
from taskhub.util import MongoId, ensure_object_id, same_id

logger = get_logger(__name__)

GROUPABLE_FIELDS = {"status": TASK_STATUSES, "priority": TASK_PRIORITIES}

# request attribute → document field
_FIELD_NAMES = {
    "title": "title",
    "description": "description",
    "status": "status",
    "priority": "priority",
    "due_date": "dueDate",
    "assigned_to": "assignedTo",
}


class TaskService:
    def __init__(self, repo: TaskRepository, user_repo: UserRepository,
                 team_repo: TeamRepository, notifications: NotificationService):
        self._repo = repo
        self._users = user_repo
        self._teams = team_repo
        self._notifications = notifications

    # ── Commands ──

    def create_task(self, actor: Dict[str, Any], title: str, due_date, description: str = "",
                    priority: str = "medium", status: str = STATUS_TODO,
                    assigned_to: Optional[str] = None) -> Dict[str, Any]:
        assignee = self._check_assignee(actor, assigned_to or actor["_id"])
        task = Task(
            _id=None, title=title, description=description or "",
            status=status, priority=priority, dueDate=due_date,
            createdBy=actor["_id"], assignedTo=assignee["_id"],
        )
        doc = self._repo.create(task)
        TASKS_CREATED.labels(priority=priority).inc()
        logger.info("Task created id=%s by=%s assigned=%s", doc["_id"], actor["_id"], assignee["_id"])

        dto = task_dto(self._repo.find_populated(doc["_id"]))
        self._notifications.task_created(dto)
        self._notifications.task_assigned(dto, actor["_id"])
        return dto

    def update_task(self, task_id: MongoId, actor: Dict[str, Any],
                    changes: Dict[str, Any]) -> Dict[str, Any]:
        task = self._require(task_id)
        values = {_FIELD_NAMES[k]: v for k, v in changes.items() if k in _FIELD_NAMES and v is not None}
        if not values:
            raise BadRequestError("No changes provided")

        if not self._can_manage(task, actor):
            if not same_id(task.get("assignedTo"), actor["_id"]):
                raise ForbiddenError("Only the task creator or an admin can change this task")
            if set(values) != {"status"}:
                raise ForbiddenError("Assignees can only update the task status")

        reassigned = False
        if "assignedTo" in values:
            assignee = self._check_assignee(actor, values["assignedTo"])
            values["assignedTo"] = assignee["_id"]
            reassigned = not same_id(assignee["_id"], task.get("assignedTo"))

        self._repo.update(task["_id"], values)
        if values.get("status") and values["status"] != task.get("status"):
            TASK_STATUS_CHANGES.labels(status=values["status"]).inc()
        logger.info("Task updated id=%s by=%s fields=%s", task["_id"], actor["_id"], sorted(values))

        dto = task_dto(self._repo.find_populated(task["_id"]))
        self._notifications.task_updated(dto)
        if reassigned:
            self._notifications.task_assigned(dto, actor["_id"])
        return dto

    def delete_task(self, task_id: MongoId, actor: Dict[str, Any]) -> Dict[str, Any]:
        task = self._require(task_id)
        if not self._can_manage(task, actor):
            raise ForbiddenError("Only the task creator or an admin can delete this task")
        dto = task_dto(self._repo.find_populated(task["_id"]))
        self._repo.delete(task["_id"])
        logger.info("Task deleted id=%s by=%s", task["_id"], actor["_id"])
        self._notifications.task_deleted(dto)
        return dto

    # ── Queries ──

    def get_task(self, task_id: MongoId, actor: Dict[str, Any]) -> Dict[str, Any]:
        task = self._require(task_id)
        if not self._can_view(task, actor):
            raise ForbiddenError("Access denied")
        return task_dto(self._repo.find_populated(task["_id"]))

    def list_tasks(self, actor: Dict[str, Any], page: int, limit: int, search: Optional[str] = None,
                   status: Optional[str] = None, priority: Optional[str] = None) -> Dict[str, Any]:
        total, docs = self._repo.list_tasks(self.visibility_scope(actor), page, limit,
                                            search, status, priority)
        return page_dto([task_dto(d) for d in docs], total, page, limit)

    def stats(self, actor: Dict[str, Any], group_by: str) -> Dict[str, Any]:
        choices = GROUPABLE_FIELDS.get(group_by)
        if choices is None:
            raise BadRequestError(f"groupBy must be one of {sorted(GROUPABLE_FIELDS)}")
        counts = self._repo.count_by(group_by, self.visibility_scope(actor))
        return {
            "groupBy": group_by,
            "total": sum(counts.values()),
            "counts": {choice: counts.get(choice, 0) for choice in choices},
        }

    def tasks_assigned_to(self, user_ids: List[MongoId]) -> List[Dict[str, Any]]:
        if not user_ids:
            return []
        return [task_dto(d) for d in self._repo.find_for_users(user_ids)]

    def summarize(self, query: Optional[Dict[str, Any]] = None) -> Dict[str, int]:
        counts = self._repo.count_by("status", query)
        return {
            "total": sum(counts.values()),
            "todo": counts.get(STATUS_TODO, 0),
            "inProgress": counts.get(STATUS_IN_PROGRESS, 0),
            "done": counts.get(STATUS_DONE, 0),
            "overdue": self._repo.count_overdue(query),
        }

    def tasks_by_user(self) -> List[Dict[str, Any]]:
        rows = self._repo.count_by_user()
        return [
            {
                "userId": str(row["_id"]),
                "user": {"id": str(row["user"]["_id"]), "name": row["user"].get("name"),
                         "email": row["user"].get("email"), "role": row["user"].get("role")},
                "totalTasks": row["totalTasks"],
            }
            for row in rows
        ]

    def visibility_scope(self, actor: Dict[str, Any]) -> Dict[str, Any]:
        """Mongo filter selecting the tasks `actor` may see."""
        if actor["role"] == ROLE_ADMIN:
            return {}
        clauses: List[Dict[str, Any]] = [{"assignedTo": actor["_id"]}, {"createdBy": actor["_id"]}]
        if actor["role"] == ROLE_MANAGER:
            members = self.managed_member_ids(actor["_id"])
            if members:
                clauses.append({"assignedTo": {"$in": members}})
        return {"$or": clauses}

    def managed_member_ids(self, manager_id: MongoId) -> List[ObjectId]:
        members: List[ObjectId] = []
        for team in self._teams.find_by_manager(manager_id):
            members.extend(team.get("members") or [])
        return members

    # ── Private ──

    def _require(self, task_id: MongoId) -> Dict[str, Any]:
        task = self._repo.find_by_id(task_id)
        if not task:
            raise NotFoundError("Task not found")
        return task

    def _check_assignee(self, actor: Dict[str, Any], assignee_id: MongoId) -> Dict[str, Any]:
        assignee = self._users.find_by_id(ensure_object_id(assignee_id))
        if not assignee:
            raise NotFoundError("Assigned user not found")
        if actor["role"] == ROLE_ADMIN or same_id(assignee["_id"], actor["_id"]):
            return assignee
        if actor["role"] == ROLE_MANAGER:
            if assignee["_id"] in self.managed_member_ids(actor["_id"]):
                return assignee
            raise ForbiddenError("Managers can only assign tasks to themselves or their team members")
        raise ForbiddenError("You can only assign tasks to yourself")

    def _can_manage(self, task: Dict[str, Any], actor: Dict[str, Any]) -> bool:
        return actor["role"] == ROLE_ADMIN or same_id(task.get("createdBy"), actor["_id"])

    def _can_view(self, task: Dict[str, Any], actor: Dict[str, Any]) -> bool:
        if self._can_manage(task, actor) or same_id(task.get("assignedTo"), actor["_id"]):
            return True
        if actor["role"] == ROLE_MANAGER:
            return task.get("assignedTo") in self.managed_member_ids(actor["_id"])
        return False
