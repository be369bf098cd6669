# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: User data access, including the embedded notification list.
"""
from typing import Any, Dict, List, Optional, Tuple

from pymongo import DESCENDING

from taskhub.models.user import User
from taskhub.repositories.base import Collection, MongoRepository
from taskhub.util import MongoId, ensure_object_id, utcnow

NEWEST_FIRST = [("createdAt", DESCENDING), ("_id", DESCENDING)]


class UserRepository(MongoRepository):
    collection = Collection.USER

    # ── Write ──

    def create(self, user: User) -> Dict[str, Any]:
        return self.insert(user)

    def set_team(self, user_id: MongoId, team_id: MongoId) -> Optional[Dict[str, Any]]:
        return self.update(user_id, {"team": ensure_object_id(team_id)})

    def clear_team(self, user_id: MongoId) -> Optional[Dict[str, Any]]:
        return self.update(user_id, {}, unset=["team"])

    def clear_team_for_all(self, team_id: MongoId) -> int:
        result = self._col.update_many(
            {"team": ensure_object_id(team_id)},
            {"$unset": {"team": ""}, "$set": {"updatedAt": utcnow()}},
        )
        return result.modified_count

    def update_password(self, user_id: MongoId, hashed_password: str) -> Optional[Dict[str, Any]]:
        return self.update(user_id, {"password": hashed_password, "mustResetPassword": False})

    def push_notification(self, user_id: MongoId, notification: Dict[str, Any], keep: int) -> bool:
        """Append a notification, keeping only the newest `keep` entries."""
        result = self._col.update_one(
            {"_id": ensure_object_id(user_id)},
            {"$push": {"notifications": {"$each": [notification], "$slice": -keep}}},
        )
        return result.matched_count > 0

    def mark_notification_read(self, user_id: MongoId, notification_id: MongoId) -> bool:
        result = self._col.update_one(
            {"_id": ensure_object_id(user_id), "notifications._id": ensure_object_id(notification_id)},
            {"$set": {"notifications.$.read": True}},
        )
        return result.matched_count > 0

    def mark_all_notifications_read(self, user_id: MongoId) -> bool:
        result = self._col.update_one(
            {"_id": ensure_object_id(user_id), "notifications.read": False},
            {"$set": {"notifications.$[].read": True}},
        )
        return result.modified_count > 0

    # ── Read ──

    def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        return self._col.find_one({"email": email.strip().lower()})

    def find_all(self, role: Optional[str] = None) -> List[Dict[str, Any]]:
        query = {"role": role} if role else {}
        return self.find(query, sort=NEWEST_FIRST)

    def find_by_ids(self, user_ids: List[MongoId]) -> List[Dict[str, Any]]:
        ids = [ensure_object_id(u) for u in user_ids]
        return self.find({"_id": {"$in": ids}}, sort=NEWEST_FIRST)

    def find_available(self) -> List[Dict[str, Any]]:
        """Plain users that do not belong to any team yet."""
        return self.find({"role": "user", "team": None}, sort=NEWEST_FIRST)

    def list_users(self, page: int, limit: int) -> Tuple[int, List[Dict[str, Any]]]:
        return self.paginate({}, page, limit, sort={"createdAt": -1, "_id": -1})

    def count_by_role(self, role: str) -> int:
        return self.count({"role": role})
