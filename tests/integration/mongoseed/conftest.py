import os

import pytest
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError

from mongoseed.database import MongoHelper

# MongoDB connection settings
MONGO_URL = os.environ.get("MONGOSEED_TEST_MONGO_URL", "mongodb://localhost:27017")
MONGO_DB = "mongoseed_test_db"


@pytest.fixture(scope="function")
async def mongo_client():
    """Create a MongoDB client for each test, skipping when no server is reachable."""
    client = AsyncIOMotorClient(MONGO_URL, serverSelectionTimeoutMS=1000)
    try:
        await client.admin.command("ping")
    except PyMongoError:
        client.close()
        pytest.skip(f"MongoDB is not reachable at {MONGO_URL}")
    try:
        yield client
    finally:
        client.close()


@pytest.fixture(scope="function")
async def test_db(mongo_client):
    """Create a test database and clean it up after the test."""
    db = mongo_client[MONGO_DB]
    try:
        yield db
    finally:
        await mongo_client.drop_database(MONGO_DB)


@pytest.fixture(scope="function")
async def mongo_helper(test_db):
    return MongoHelper(test_db)
