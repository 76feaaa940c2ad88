import logging

from pymongo import MongoClient
from pymongo.collection import Collection

from payparty import config

logger = logging.getLogger(__name__)


def create_client(uri: str = None, timeout_ms: int = None) -> MongoClient:
    """
    Open a MongoClient and block until the server answers a ping.

    Raises ValueError when no connection string is configured and
    pymongo's ServerSelectionTimeoutError when the server is unreachable
    within the timeout.
    """
    uri = uri or config.DATABASE_URL
    if not uri:
        raise ValueError("DATABASE_URL not found. Check your .env file location.")
    if timeout_ms is None:
        timeout_ms = config.CONNECT_TIMEOUT_MS

    client = MongoClient(uri, serverSelectionTimeoutMS=timeout_ms)
    client.admin.command("ping")
    return client


def get_collection(client: MongoClient, db_name: str = None, collection_name: str = None) -> Collection:
    db_name = db_name or config.DATABASE_NAME
    collection_name = collection_name or config.DATABASE_COLLECTION
    if not db_name:
        raise ValueError("DATABASE_NAME not found. Check your .env file location.")

    logger.info(f"Connected to MongoDB database: {db_name}, collection: {collection_name}")
    return client[db_name][collection_name]
