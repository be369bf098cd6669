# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Task data access.
Filtering, sorting, pagination and counting are delegated to MongoDB.
"""
import re
from typing import Any, Dict, List, Optional, Tuple

from taskhub.models.task import Task
from taskhub.repositories.base import Collection, MongoRepository, lookup
from taskhub.util import MongoId, ensure_object_id, utcnow

USER_JOINS = [
    lookup("assignedTo", Collection.USER),
    lookup("createdBy", Collection.USER),
]


def build_filters(search: Optional[str] = None, status: Optional[str] = None,
                  priority: Optional[str] = None) -> Dict[str, Any]:
    query: Dict[str, Any] = {}
    if search:
        pattern = {"$regex": re.escape(search.strip()), "$options": "i"}
        query["$or"] = [{"title": pattern}, {"description": pattern}]
    if status:
        query["status"] = status
    if priority:
        query["priority"] = priority
    return query


def combine(*queries: Dict[str, Any]) -> Dict[str, Any]:
    parts = [q for q in queries if q]
    if not parts:
        return {}
    if len(parts) == 1:
        return parts[0]
    return {"$and": parts}


class TaskRepository(MongoRepository):
    collection = Collection.TASK

    # ── Write ──

    def create(self, task: Task) -> Dict[str, Any]:
        return self.insert(task)

    def unassign_user(self, user_id: MongoId) -> int:
        result = self._col.update_many(
            {"assignedTo": ensure_object_id(user_id)},
            {"$set": {"assignedTo": None, "updatedAt": utcnow()}},
        )
        return result.modified_count

    # ── Read ──

    def find_populated(self, task_id: MongoId) -> Optional[Dict[str, Any]]:
        pipeline = [{"$match": {"_id": ensure_object_id(task_id)}}, *USER_JOINS]
        result = list(self._col.aggregate(pipeline))
        return result[0] if result else None

    def list_tasks(self, scope: Dict[str, Any], page: int, limit: int,
                   search: Optional[str] = None, status: Optional[str] = None,
                   priority: Optional[str] = None) -> Tuple[int, List[Dict[str, Any]]]:
        query = combine(scope, build_filters(search, status, priority))
        return self.paginate(query, page, limit, sort={"createdAt": -1, "_id": -1},
                             joins=USER_JOINS)

    def find_for_users(self, user_ids: List[MongoId]) -> List[Dict[str, Any]]:
        ids = [ensure_object_id(u) for u in user_ids]
        pipeline = [
            {"$match": {"assignedTo": {"$in": ids}}},
            {"$sort": {"createdAt": -1, "_id": -1}},
            *USER_JOINS,
        ]
        return list(self._col.aggregate(pipeline))

    def count_by(self, field: str, query: Optional[Dict[str, Any]] = None) -> Dict[str, int]:
        pipeline = [
            {"$match": query or {}},
            {"$group": {"_id": f"${field}", "total": {"$sum": 1}}},
        ]
        return {row["_id"]: row["total"] for row in self._col.aggregate(pipeline)}

    def count_overdue(self, query: Optional[Dict[str, Any]] = None) -> int:
        overdue = {"dueDate": {"$lt": utcnow()}, "status": {"$ne": "done"}}
        return self.count(combine(query or {}, overdue))

    def count_by_user(self) -> List[Dict[str, Any]]:
        """Task totals per assignee, joined with the assignee's user document."""
        pipeline = [
            {"$match": {"assignedTo": {"$ne": None}}},
            {"$group": {"_id": "$assignedTo", "totalTasks": {"$sum": 1}}},
            lookup("_id", Collection.USER, to_field="user"),
            {"$unwind": "$user"},
            {"$sort": {"totalTasks": -1}},
        ]
        return list(self._col.aggregate(pipeline))
