# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# Sets the environment before payparty.config is imported and provides an
# in-memory collection so no MongoDB server is needed.
# =============================================================================

import os

os.environ.setdefault("DATABASE_URL", "mongodb://localhost:27017")
os.environ.setdefault("DATABASE_NAME", "payparty_test")
os.environ.setdefault("DATABASE_COLLECTION", "parties")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import copy
from types import SimpleNamespace

import bson
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo import ReturnDocument

from payparty.main import app
from payparty.storage_mongo import PartyStorage, get_storage


class FakeClient:
    """Answers pings the way MongoClient.admin.command does."""

    def __init__(self):
        self.admin = self
        self.pings = 0
        self.closed = False

    def command(self, name):
        self.pings += 1
        return {"ok": 1.0}

    def close(self):
        self.closed = True


class FakeCollection:
    """
    The handful of pymongo Collection calls PartyStorage makes, backed by a
    list. Filters only ever match on equality. Writes go through bson.encode
    so values Mongo cannot store fail the same way.
    """

    def __init__(self):
        self.docs = []
        self.database = SimpleNamespace(client=FakeClient())

    def _matches(self, doc, query):
        return all(doc.get(k) == v for k, v in query.items())

    def find(self, query=None):
        return iter([copy.deepcopy(d) for d in self.docs if self._matches(d, query or {})])

    def find_one(self, query=None):
        for d in self.docs:
            if self._matches(d, query or {}):
                return copy.deepcopy(d)
        return None

    def insert_one(self, doc):
        # pymongo sets _id on the caller's dict as well
        doc.setdefault("_id", ObjectId())
        bson.encode(doc)
        self.docs.append(copy.deepcopy(doc))
        return SimpleNamespace(inserted_id=doc["_id"], acknowledged=True)

    def find_one_and_update(self, query, update, projection=None, return_document=ReturnDocument.BEFORE):
        bson.encode(update)
        for d in self.docs:
            if not self._matches(d, query):
                continue
            before = copy.deepcopy(d)
            for field, value in update.get("$set", {}).items():
                d[field] = copy.deepcopy(value)
            for field, value in update.get("$push", {}).items():
                d.setdefault(field, []).append(copy.deepcopy(value))
            result = copy.deepcopy(d) if return_document == ReturnDocument.AFTER else before
            if projection:
                result = {k: v for k, v in result.items() if k in projection}
            return result
        return None

    def delete_one(self, query):
        for i, d in enumerate(self.docs):
            if self._matches(d, query):
                del self.docs[i]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)


@pytest.fixture
def fake_collection():
    return FakeCollection()


@pytest.fixture
def storage(fake_collection):
    return PartyStorage(fake_collection)


@pytest.fixture
def client(storage):
    """TestClient without the lifespan, so no real connection is attempted."""
    app.dependency_overrides[get_storage] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sample_party():
    return {
        "name": "Hackathon payout",
        "description": "Split the prize pool between builders",
        "config": {"strategy": "quadratic", "nvotes": 5},
        "candidates": ["0xaaa", "0xbbb"],
        "participants": ["0xaaa", "0xbbb", "0xccc"],
        "ballots": [],
        "receipts": [],
        "notes": [],
    }


@pytest.fixture
def sample_ballot():
    return {
        "signature": "0xsig1",
        "data": {
            "party": "hackathon",
            "ballot": {"address": "0xccc", "votes": '{"0xaaa": 3, "0xbbb": 2}'},
            "timestamp": 1650000000000,
        },
    }
