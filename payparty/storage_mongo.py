# storage_mongo.py
import logging
from typing import Any, Dict, List

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import MongoClient, ReturnDocument
from pymongo.collection import Collection

from payparty.database.connection import create_client, get_collection
from payparty.exceptions import EmptyUpdate, InvalidIdentifier, PartyNotFound

logger = logging.getLogger(__name__)


def parse_party_id(party_id: str) -> ObjectId:
    try:
        return ObjectId(party_id)
    except (InvalidId, TypeError):
        raise InvalidIdentifier(party_id)


class PartyStorage:
    """
    Party collection access. Each method is a single store call; pymongo
    errors are left to propagate to the caller.
    """

    def __init__(self, collection: Collection, client: MongoClient = None):
        self.collection = collection
        self.client = client if client is not None else collection.database.client

    @classmethod
    def connect(cls) -> "PartyStorage":
        """Connect with the settings from payparty.config"""
        client = create_client()
        return cls(get_collection(client), client=client)

    def list_parties(self) -> List[Dict[str, Any]]:
        """
        Return every party in the collection, unfiltered and unpaginated.
        """
        parties = list(self.collection.find({}))
        logger.info(f"Retrieved {len(parties)} parties")
        return parties

    def get_party(self, party_id: str) -> Dict[str, Any]:
        """
        Retrieve a party by its ObjectId string

        Raises:
            InvalidIdentifier: party_id is not a valid ObjectId
            PartyNotFound: no document has that id
        """
        oid = parse_party_id(party_id)
        party = self.collection.find_one({"_id": oid})
        if party is None:
            logger.warning(f"Party {party_id} not found")
            raise PartyNotFound(party_id)
        return party

    def create_party(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a new party and return it as stored.

        Any client supplied identifier is dropped so Mongo always
        generates the ObjectId.
        """
        document = dict(document)
        document.pop("_id", None)
        document.pop("id", None)

        result = self.collection.insert_one(document)
        logger.info(f"Party {result.inserted_id} created")
        return self.collection.find_one({"_id": result.inserted_id})

    def update_party(self, party_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Overwrite only the given fields ($set) and return the updated party.
        """
        oid = parse_party_id(party_id)
        fields = {k: v for k, v in fields.items() if k not in ("_id", "id")}
        if not fields:
            raise EmptyUpdate()

        updated = self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            logger.warning(f"Party {party_id} not found for update")
            raise PartyNotFound(party_id)
        logger.info(f"Party {party_id} updated fields: {sorted(fields)}")
        return updated

    def _push(self, party_id: str, field: str, item: Dict[str, Any]) -> Dict[str, Any]:
        oid = parse_party_id(party_id)
        matched = self.collection.find_one_and_update(
            {"_id": oid},
            {"$push": {field: item}},
            projection={"_id": 1},
        )
        if matched is None:
            logger.warning(f"Party {party_id} not found for push to {field}")
            raise PartyNotFound(party_id)
        logger.info(f"Pushed to {field} of party {party_id}")
        return item

    def push_ballot(self, party_id: str, ballot: Dict[str, Any]) -> Dict[str, Any]:
        return self._push(party_id, "ballots", ballot)

    def push_receipt(self, party_id: str, receipt: Dict[str, Any]) -> Dict[str, Any]:
        return self._push(party_id, "receipts", receipt)

    def push_note(self, party_id: str, note: Dict[str, Any]) -> Dict[str, Any]:
        return self._push(party_id, "notes", note)

    def delete_party(self, party_id: str) -> None:
        """
        Delete a party by id

        Raises PartyNotFound when nothing was deleted.
        """
        oid = parse_party_id(party_id)
        result = self.collection.delete_one({"_id": oid})
        if result.deleted_count < 1:
            logger.warning(f"Party {party_id} not found for delete")
            raise PartyNotFound(party_id)
        logger.info(f"Party {party_id} deleted")

    def ping(self) -> bool:
        """True if the server answers a ping"""
        self.client.admin.command("ping")
        return True

    def close(self):
        """Close MongoDB connection"""
        self.client.close()
        logger.info("MongoDB connection closed")


_storage = None


def init_storage() -> PartyStorage:
    """Create the process wide storage once; later calls reuse it."""
    global _storage
    if _storage is None:
        _storage = PartyStorage.connect()
    return _storage


def get_storage() -> PartyStorage:
    """FastAPI dependency returning the shared storage."""
    return init_storage()


def close_storage():
    global _storage
    if _storage is not None:
        _storage.close()
        _storage = None
