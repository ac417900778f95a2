import logging

from pymongo import MongoClient

logger = logging.getLogger(__name__)

_client = None
_db = None


def init_mongo(app, client=None):
    """Connect to MongoDB. ``client`` lets callers inject their own (tests use mongomock)."""
    global _client, _db
    _client = client if client is not None else MongoClient(app.config["MONGO_URI"])

    # DB name comes from the URI (e.g., /fintrack), falling back to "fintrack"
    _db = _client.get_default_database(default="fintrack")

    logger.info("Connected to MongoDB database %s", _db.name)


def get_db():
    """Get the database instance. Must be called after init_mongo."""
    return _db


def get_client():
    """Get the MongoDB client instance. Must be called after init_mongo."""
    return _client


# Proxy that always resolves to the current database
class _DBProxy:
    def __getattr__(self, name):
        if _db is None:
            raise RuntimeError("Database not initialized. Call init_mongo first.")
        return getattr(_db, name)

    def __getitem__(self, name):
        if _db is None:
            raise RuntimeError("Database not initialized. Call init_mongo first.")
        return _db[name]

    def __bool__(self):
        return _db is not None


db = _DBProxy()
