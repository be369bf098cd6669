# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""PyMongo client singleton and index bootstrap."""
import pymongo
from pymongo.database import Database

from taskhub.core.config import settings
from taskhub.core.logging import get_logger

logger = get_logger(__name__)

client = pymongo.MongoClient(
    settings.MONGO_URI,
    serverSelectionTimeoutMS=settings.MONGO_TIMEOUT_MS,
    connectTimeoutMS=settings.MONGO_TIMEOUT_MS,
    maxPoolSize=settings.MONGO_MAX_POOL_SIZE,
    minPoolSize=settings.MONGO_MIN_POOL_SIZE,
    retryWrites=True,
    w="majority",
)


def get_database() -> Database:
    return client[settings.MONGO_DB]


def ensure_indexes(db: Database) -> None:
    """Create the unique and lookup indexes the repositories rely on."""
    db["users"].create_index("email", unique=True)
    db["users"].create_index("team")
    db["teams"].create_index("name", unique=True)
    db["teams"].create_index("manager")
    db["tasks"].create_index("assignedTo")
    db["tasks"].create_index("createdBy")
    db["tasks"].create_index([("createdAt", pymongo.DESCENDING)])
    logger.info("MongoDB indexes ensured on database=%s", db.name)
