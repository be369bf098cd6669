# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Business logic behind the admin console: user management and dashboard aggregates."""
from typing import Any, Dict, List

from pymongo.errors import DuplicateKeyError

from taskhub.core.errors import BadRequestError, ConflictError, NotFoundError
from taskhub.core.logging import get_logger
from taskhub.models.user import ROLE_ADMIN, ROLE_MANAGER, ROLE_USER
from taskhub.repositories.task_repository import TaskRepository
from taskhub.repositories.team_repository import TeamRepository
from taskhub.repositories.user_repository import UserRepository
from taskhub.services.dto import user_dto
from taskhub.services.notification_service import NotificationService
from taskhub.services.task_service import TaskService
from taskhub.services.team_service import TeamService
from taskhub.services.user_service import UserService
from taskhub.util import MongoId, same_id

logger = get_logger(__name__)


class AdminService:
    def __init__(self, user_repo: UserRepository, team_repo: TeamRepository, task_repo: TaskRepository,
                 user_service: UserService, team_service: TeamService, task_service: TaskService,
                 notifications: NotificationService):
        self._users = user_repo
        self._teams = team_repo
        self._tasks_repo = task_repo
        self._accounts = user_service
        self._team_service = team_service
        self._tasks = task_service
        self._notifications = notifications

    # ── Users ──

    def list_users(self) -> List[Dict[str, Any]]:
        return [user_dto(u) for u in self._users.find_all()]

    def get_user(self, user_id: MongoId) -> Dict[str, Any]:
        return user_dto(self._require_user(user_id))

    def create_user(self, name: str, email: str, password: str, role: str) -> Dict[str, Any]:
        """Accounts created here must reset their password on first login."""
        doc = self._accounts.create_account(name, email, password, role,
                                            must_reset_password=True, source="admin")
        return user_dto(doc)

    def update_user(self, user_id: MongoId, changes: Dict[str, Any], actor: Dict[str, Any]) -> Dict[str, Any]:
        user = self._require_user(user_id)
        values = {k: v for k, v in changes.items() if v is not None}

        email = values.get("email")
        if email and email != user["email"]:
            other = self._users.find_by_email(email)
            if other and not same_id(other["_id"], user["_id"]):
                raise ConflictError("Email is already registered.")

        role = values.get("role")
        if role and role != user["role"]:
            self._check_role_change(user, role, actor)
            if role != ROLE_USER and user.get("team"):
                self._team_service.unassign_user(user["_id"])

        try:
            updated = self._users.update(user["_id"], values)
        except DuplicateKeyError:
            raise ConflictError("Email is already registered.")
        logger.info("User updated id=%s by=%s fields=%s", user["_id"], actor["_id"], sorted(values))
        return user_dto(updated)

    def delete_user(self, user_id: MongoId, actor: Dict[str, Any]) -> None:
        user = self._require_user(user_id)
        if same_id(user["_id"], actor["_id"]):
            raise BadRequestError("You cannot delete your own account")
        if self._teams.count_by_manager(user["_id"]):
            raise ConflictError("User still manages a team; delete or reassign the team first")

        self._teams.remove_member_everywhere(user["_id"])
        unassigned = self._tasks_repo.unassign_user(user["_id"])
        self._users.delete(user["_id"])
        logger.info("User deleted id=%s by=%s unassigned_tasks=%d", user["_id"], actor["_id"], unassigned)

    def user_tasks(self, user_id: MongoId) -> List[Dict[str, Any]]:
        user = self._require_user(user_id)
        return self._tasks.tasks_assigned_to([user["_id"]])

    def promote(self, user_id: MongoId) -> Dict[str, Any]:
        user = self._require_user(user_id)
        if user["role"] != ROLE_USER:
            raise BadRequestError("Only users with role 'user' can be promoted")
        if user.get("team"):
            self._team_service.unassign_user(user["_id"])
        updated = self._users.update(user["_id"], {"role": ROLE_MANAGER})
        logger.info("User promoted to manager id=%s", user["_id"])
        self._notifications.notify_user(user["_id"], "You have been promoted to manager",
                                        data={"role": ROLE_MANAGER})
        return user_dto(updated)

    def demote(self, user_id: MongoId) -> Dict[str, Any]:
        user = self._require_user(user_id)
        if user["role"] != ROLE_MANAGER:
            raise BadRequestError("Only managers can be demoted")
        if self._teams.count_by_manager(user["_id"]):
            raise ConflictError("Manager still manages a team; delete or reassign the team first")
        updated = self._users.update(user["_id"], {"role": ROLE_USER})
        logger.info("Manager demoted to user id=%s", user["_id"])
        self._notifications.notify_user(user["_id"], "Your role has been changed to user",
                                        data={"role": ROLE_USER})
        return user_dto(updated)

    def assign_team(self, user_id: MongoId, team_id: MongoId) -> Dict[str, Any]:
        return self._team_service.assign_user(user_id, team_id)

    def remove_team(self, user_id: MongoId) -> Dict[str, Any]:
        return self._team_service.unassign_user(user_id)

    # ── Dashboard ──

    def task_stats(self) -> Dict[str, int]:
        return self._tasks.summarize()

    def user_stats(self) -> Dict[str, int]:
        return {
            "totalUsers": self._users.count_by_role(ROLE_USER),
            "totalManagers": self._users.count_by_role(ROLE_MANAGER),
            "totalAdmins": self._users.count_by_role(ROLE_ADMIN),
        }

    def managers(self) -> List[Dict[str, Any]]:
        return [user_dto(u) for u in self._users.find_all(role=ROLE_MANAGER)]

    def teams(self) -> List[Dict[str, Any]]:
        return self._team_service.dashboard_teams()

    def tasks_by_user(self) -> List[Dict[str, Any]]:
        return self._tasks.tasks_by_user()

    # ── Private ──

    def _require_user(self, user_id: MongoId) -> Dict[str, Any]:
        user = self._users.find_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def _check_role_change(self, user: Dict[str, Any], role: str, actor: Dict[str, Any]) -> None:
        if same_id(user["_id"], actor["_id"]):
            raise BadRequestError("You cannot change your own role")
        if user["role"] == ROLE_MANAGER and self._teams.count_by_manager(user["_id"]):
            raise ConflictError("Manager still manages a team; delete or reassign the team first")
