"""
MongoDB Connection Utility

MongoDB stores every portal entity, one collection per kind:
- students, companies, tpos: accounts (one collection per role, so an
  email is unique only within its own role)
- opportunities: job postings owned by a company
- applications: student -> opportunity applications
"""
import logging

from pymongo import ASCENDING, MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from app.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(settings.mongodb_uri, serverSelectionTimeoutMS=5000)
    return _client


def get_mongo_db() -> Database:
    """Get the portal database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    """Get a specific collection (see COLLECTIONS)."""
    db = get_mongo_db()
    return db[name]


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        # ping command checks connection
        get_mongo_db().command('ping')
        return True
    except Exception as e:
        logger.error(f"MongoDB connection failed: {e}")
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "students": "students",
    "companies": "companies",
    "tpos": "tpos",
    "opportunities": "opportunities",
    "applications": "applications",
}


def init_mongo_indexes():
    """
    Create indexes. Call this once during app startup.

    The unique indexes are the real guarantee behind "email already
    registered" and "already applied"; the routes' pre-check reads only
    give the nicer error in the common, non-racing case.
    """
    db = get_mongo_db()

    for name in ("students", "companies", "tpos"):
        db[COLLECTIONS[name]].create_index("email", unique=True)

    db[COLLECTIONS["opportunities"]].create_index("company")

    db[COLLECTIONS["applications"]].create_index([
        ("student", ASCENDING),
        ("opportunity_id", ASCENDING)
    ], unique=True)
    db[COLLECTIONS["applications"]].create_index("company")

    logger.info("✅ MongoDB indexes created")
