# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Team data access.
Manager and member references are joined from the users collection on read.
"""
from typing import Any, Dict, List, Optional, Tuple

from taskhub.models.team import Team
from taskhub.repositories.base import Collection, MongoRepository, lookup
from taskhub.util import MongoId, ensure_object_id, utcnow

MANAGER_JOIN = lookup("manager", Collection.USER)
MEMBERS_JOIN = lookup("members", Collection.USER)


class TeamRepository(MongoRepository):
    collection = Collection.TEAM

    # ── Write ──

    def create(self, team: Team) -> Dict[str, Any]:
        return self.insert(team)

    def add_member(self, team_id: MongoId, user_id: MongoId) -> bool:
        result = self._col.update_one(
            {"_id": ensure_object_id(team_id)},
            {"$addToSet": {"members": ensure_object_id(user_id)},
             "$set": {"updatedAt": utcnow()}},
        )
        return result.modified_count > 0

    def remove_member(self, team_id: MongoId, user_id: MongoId) -> bool:
        result = self._col.update_one(
            {"_id": ensure_object_id(team_id)},
            {"$pull": {"members": ensure_object_id(user_id)},
             "$set": {"updatedAt": utcnow()}},
        )
        return result.modified_count > 0

    def remove_member_everywhere(self, user_id: MongoId) -> int:
        result = self._col.update_many(
            {"members": ensure_object_id(user_id)},
            {"$pull": {"members": ensure_object_id(user_id)}},
        )
        return result.modified_count

    # ── Read ──

    def find_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        return self._col.find_one({"name": name.strip()})

    def find_by_manager(self, manager_id: MongoId) -> List[Dict[str, Any]]:
        return self.find({"manager": ensure_object_id(manager_id)}, sort=[("createdAt", -1)])

    def count_by_manager(self, manager_id: MongoId) -> int:
        return self.count({"manager": ensure_object_id(manager_id)})

    def find_populated(self, team_id: MongoId) -> Optional[Dict[str, Any]]:
        pipeline = [
            {"$match": {"_id": ensure_object_id(team_id)}},
            MANAGER_JOIN,
            MEMBERS_JOIN,
        ]
        result = list(self._col.aggregate(pipeline))
        return result[0] if result else None

    def list_teams(self, page: int, limit: int) -> Tuple[int, List[Dict[str, Any]]]:
        return self.paginate({}, page, limit, sort={"createdAt": -1, "_id": -1},
                             joins=[MANAGER_JOIN])

    def find_all_with_manager(self) -> List[Dict[str, Any]]:
        return list(self._col.aggregate([{"$sort": {"createdAt": -1, "_id": -1}}, MANAGER_JOIN]))
