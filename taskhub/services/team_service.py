# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Business logic for teams and their membership.
Keeps `team.members` and each member's `team` field in step.
"""
from typing import Any, Dict, List

from pymongo.errors import DuplicateKeyError

from taskhub.core.errors import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from taskhub.core.logging import get_logger
from taskhub.metrics import TEAMS_CREATED
from taskhub.models.team import Team
from taskhub.models.user import ROLE_ADMIN, ROLE_MANAGER, ROLE_USER
from taskhub.repositories.team_repository import TeamRepository
from taskhub.repositories.user_repository import UserRepository
from taskhub.services.dto import page_dto, team_dto, user_dto, user_summary
from taskhub.services.notification_service import NotificationService
from taskhub.services.task_service import TaskService
from taskhub.util import MongoId, ensure_object_id, same_id

logger = get_logger(__name__)


class TeamService:
    def __init__(self, repo: TeamRepository, user_repo: UserRepository,
                 task_service: TaskService, notifications: NotificationService):
        self._repo = repo
        self._users = user_repo
        self._tasks = task_service
        self._notifications = notifications

    # ── Commands ──

    def create_team(self, actor: Dict[str, Any], name: str, promote: bool = False) -> Dict[str, Any]:
        """
        Create a team managed by `actor`.
        With `promote`, a plain user becomes a manager on the way.
        """
        if actor["role"] == ROLE_ADMIN:
            raise ForbiddenError("Admins cannot own teams")
        if actor["role"] == ROLE_USER and not promote:
            raise ForbiddenError("Only managers can create teams")
        if actor.get("team"):
            raise ConflictError("Leave your current team before creating one")
        if self._repo.find_by_name(name):
            raise ConflictError("Team with this name already exists")

        try:
            doc = self._repo.create(Team(_id=None, name=name, manager=actor["_id"]))
        except DuplicateKeyError:
            raise ConflictError("Team with this name already exists")
        if actor["role"] == ROLE_USER:
            self._users.update(actor["_id"], {"role": ROLE_MANAGER})
            logger.info("User promoted to manager by team creation id=%s", actor["_id"])

        TEAMS_CREATED.inc()
        logger.info("Team created id=%s name=%s manager=%s", doc["_id"], name, actor["_id"])
        return team_dto(self._repo.find_populated(doc["_id"]))

    def add_member(self, team_id: MongoId, user_id: MongoId, actor: Dict[str, Any]) -> Dict[str, Any]:
        team = self._require(team_id)
        self._check_manages(team, actor)
        user = self._require_user(user_id)
        if user["role"] != ROLE_USER:
            raise BadRequestError("Only users with role 'user' can join a team")
        if same_id(user.get("team"), team["_id"]) or user["_id"] in team.get("members", []):
            raise ConflictError("User is already a member of this team")
        if user.get("team"):
            raise ConflictError("User already belongs to another team")
        return self._join(team, user)

    def remove_member(self, team_id: MongoId, user_id: MongoId, actor: Dict[str, Any]) -> Dict[str, Any]:
        user_id = ensure_object_id(user_id)
        team = self._require(team_id)
        self._check_manages(team, actor)
        member = next((m for m in team.get("members", []) if same_id(m, user_id)), None)
        if member is None:
            raise NotFoundError("User is not a member of this team")
        return self._leave(team, member)

    def assign_user(self, user_id: MongoId, team_id: MongoId) -> Dict[str, Any]:
        """Move a user into a team, leaving any previous one first."""
        team = self._require(team_id)
        user = self._require_user(user_id)
        if user["role"] != ROLE_USER:
            raise BadRequestError("Only users with role 'user' can join a team")
        if same_id(user.get("team"), team["_id"]):
            raise ConflictError("User is already a member of this team")
        if user.get("team"):
            self._repo.remove_member(user["team"], user["_id"])
        self._join(team, user)
        return user_dto(self._users.find_by_id(user["_id"]))

    def unassign_user(self, user_id: MongoId) -> Dict[str, Any]:
        user = self._require_user(user_id)
        if not user.get("team"):
            raise BadRequestError("User is not assigned to a team")
        self._repo.remove_member(user["team"], user["_id"])
        updated = self._users.clear_team(user["_id"])
        logger.info("User removed from team user=%s team=%s", user["_id"], user["team"])
        return user_dto(updated)

    def delete_team(self, team_id: MongoId, actor: Dict[str, Any]) -> None:
        team = self._require(team_id)
        self._check_manages(team, actor)
        released = self._users.clear_team_for_all(team["_id"])
        self._repo.delete(team["_id"])
        logger.info("Team deleted id=%s by=%s released_members=%d", team["_id"], actor["_id"], released)

    # ── Queries ──

    def get_team(self, team_id: MongoId) -> Dict[str, Any]:
        team = self._repo.find_populated(team_id)
        if not team:
            raise NotFoundError("Team not found")
        return team_dto(team)

    def list_teams(self, page: int, limit: int) -> Dict[str, Any]:
        total, docs = self._repo.list_teams(page, limit)
        return page_dto([team_dto(d) for d in docs], total, page, limit)

    def teams_for_manager(self, actor: Dict[str, Any]) -> List[Dict[str, Any]]:
        return [team_dto(self._repo.find_populated(t["_id"])) for t in self._repo.find_by_manager(actor["_id"])]

    def team_tasks(self, team_id: MongoId, actor: Dict[str, Any]) -> List[Dict[str, Any]]:
        team = self._require(team_id)
        self._check_manages(team, actor)
        return self._tasks.tasks_assigned_to(team.get("members", []))

    def team_stats(self, team_id: MongoId, actor: Dict[str, Any]) -> Dict[str, Any]:
        team = self._require(team_id)
        self._check_manages(team, actor)
        members = team.get("members", [])
        stats = self._tasks.summarize({"assignedTo": {"$in": members}})
        return {"teamId": str(team["_id"]), "name": team["name"], "membersCount": len(members), **stats}

    def available_users(self, team_id: MongoId, actor: Dict[str, Any]) -> List[Dict[str, Any]]:
        self._check_manages(self._require(team_id), actor)
        return [user_dto(u) for u in self._users.find_available()]

    def dashboard_teams(self) -> List[Dict[str, Any]]:
        return [
            {
                "id": str(t["_id"]),
                "name": t["name"],
                "manager": user_summary(t.get("manager")),
                "membersCount": len(t.get("members") or []),
            }
            for t in self._repo.find_all_with_manager()
        ]

    # ── Private ──

    def _require(self, team_id: MongoId) -> Dict[str, Any]:
        team = self._repo.find_by_id(team_id)
        if not team:
            raise NotFoundError("Team not found")
        return team

    def _require_user(self, user_id: MongoId) -> Dict[str, Any]:
        user = self._users.find_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    @staticmethod
    def _check_manages(team: Dict[str, Any], actor: Dict[str, Any]) -> None:
        if actor["role"] == ROLE_ADMIN or same_id(team.get("manager"), actor["_id"]):
            return
        raise ForbiddenError("You do not manage this team")

    def _join(self, team: Dict[str, Any], user: Dict[str, Any]) -> Dict[str, Any]:
        self._repo.add_member(team["_id"], user["_id"])
        self._users.set_team(user["_id"], team["_id"])
        logger.info("User joined team user=%s team=%s", user["_id"], team["_id"])
        self._notifications.notify_user(
            user["_id"], f"You have been added to team {team['name']}",
            data={"teamId": str(team["_id"]), "name": team["name"]},
        )
        return team_dto(self._repo.find_populated(team["_id"]))

    def _leave(self, team: Dict[str, Any], user_id) -> Dict[str, Any]:
        self._repo.remove_member(team["_id"], user_id)
        if self._users.find_by_id(user_id):
            self._users.clear_team(user_id)
            self._notifications.notify_user(
                user_id, f"You have been removed from team {team['name']}",
                data={"teamId": str(team["_id"]), "name": team["name"]},
            )
        logger.info("User left team user=%s team=%s", user_id, team["_id"])
        return team_dto(self._repo.find_populated(team["_id"]))
