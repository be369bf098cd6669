# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository base: collection names and the CRUD helpers every repository shares.
NO business rules here — pure data access.
"""
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pymongo import ReturnDocument
from pymongo.database import Database

from taskhub.models.base import MongoDocumentBase
from taskhub.util import MongoId, ensure_object_id, utcnow


class Collection(Enum):
    USER = "users"
    TEAM = "teams"
    TASK = "tasks"


def lookup(local_field: str, foreign_collection: Collection, to_field: Optional[str] = None,
           foreign_field: str = "_id") -> dict:
    """
    A `$lookup` stage, equivalent to a left outer join.
    The joined documents land in `to_field` (defaults to `local_field`) as a list.
    """
    return {
        "$lookup": {
            "from": foreign_collection.value,
            "localField": local_field,
            "foreignField": foreign_field,
            "as": to_field or local_field,
        }
    }


class MongoRepository:
    collection: Collection

    def __init__(self, db: Database):
        self._db = db
        self._col = db[self.collection.value]

    # ── Write ──

    def insert(self, item: MongoDocumentBase) -> Dict[str, Any]:
        """
        Inserts a document and returns it with its given id.
        The _id field is always dropped so MongoDB assigns it.
        """
        doc = item.as_dict()
        doc.pop("_id", None)
        result = self._col.insert_one(doc)
        return self._col.find_one({"_id": result.inserted_id})

    def update(self, document_id: MongoId, values: Dict[str, Any],
               unset: Optional[List[str]] = None) -> Optional[Dict[str, Any]]:
        """Applies `$set` (and optionally `$unset`) and returns the updated document."""
        update: Dict[str, Any] = {"$set": {**values, "updatedAt": utcnow()}}
        if unset:
            update["$unset"] = {name: "" for name in unset}
        return self._col.find_one_and_update(
            {"_id": ensure_object_id(document_id)},
            update,
            return_document=ReturnDocument.AFTER,
        )

    def delete(self, document_id: MongoId) -> bool:
        result = self._col.delete_one({"_id": ensure_object_id(document_id)})
        return result.deleted_count > 0

    # ── Read ──

    def find_by_id(self, document_id: MongoId) -> Optional[Dict[str, Any]]:
        return self._col.find_one({"_id": ensure_object_id(document_id)})

    def find(self, query: Optional[Dict[str, Any]] = None,
             sort: Optional[List[Tuple[str, int]]] = None) -> List[Dict[str, Any]]:
        cursor = self._col.find(query or {})
        if sort:
            cursor = cursor.sort(sort)
        return list(cursor)

    def count(self, query: Optional[Dict[str, Any]] = None) -> int:
        return self._col.count_documents(query or {})

    def paginate(self, query: Dict[str, Any], page: int, limit: int,
                 sort: Dict[str, int], joins: Optional[List[dict]] = None
                 ) -> Tuple[int, List[Dict[str, Any]]]:
        pipeline: List[dict] = [
            {"$match": query},
            {"$sort": sort},
            {"$skip": (page - 1) * limit},
            {"$limit": limit},
        ]
        pipeline.extend(joins or [])
        total = self._col.count_documents(query)
        return total, list(self._col.aggregate(pipeline))

    def verify_connection(self) -> None:
        self._db.command("ping")
