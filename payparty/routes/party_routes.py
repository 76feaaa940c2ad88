import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response

from payparty.exceptions import EmptyUpdate, InvalidIdentifier, PartyNotFound
from payparty.models.party_model import Ballot, Note, Party, PartyIn, PartyUpdate, Receipt
from payparty.storage_mongo import PartyStorage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Party"])


def _http_error(exc) -> HTTPException:
    status = 404 if isinstance(exc, PartyNotFound) else 400
    return HTTPException(status_code=status, detail=exc.message)


# ------------------------------
# Parties
# ------------------------------
@router.get("/parties", response_model=List[Party])
def get_all_parties(storage: PartyStorage = Depends(get_storage)):
    logger.info("GET /parties")
    return [Party.from_mongo(doc) for doc in storage.list_parties()]


@router.get("/party/{party_id}", response_model=Party)
def get_party(party_id: str, storage: PartyStorage = Depends(get_storage)):
    logger.info(f"GET /party/{party_id}")
    try:
        doc = storage.get_party(party_id)
    except (InvalidIdentifier, PartyNotFound) as e:
        raise _http_error(e)
    return Party.from_mongo(doc)


@router.post("/party", response_model=Party)
def new_party(party: PartyIn, storage: PartyStorage = Depends(get_storage)):
    logger.info("POST /party")
    created = storage.create_party(party.to_document())
    return Party.from_mongo(created)


@router.put("/party/{party_id}", response_model=Party)
def update_party(party_id: str, update: PartyUpdate, storage: PartyStorage = Depends(get_storage)):
    """
    Partial update: fields present in the body replace the stored ones,
    everything else is left untouched. Arrays are appended through the
    /vote, /distribute and /note routes.
    """
    logger.info(f"PUT /party/{party_id}")
    try:
        doc = storage.update_party(party_id, update.to_fields())
    except (InvalidIdentifier, PartyNotFound, EmptyUpdate) as e:
        raise _http_error(e)
    return Party.from_mongo(doc)


# ------------------------------
# Appends
# ------------------------------
@router.put("/party/{party_id}/vote", response_model=Ballot)
def add_party_ballot(party_id: str, ballot: Ballot, storage: PartyStorage = Depends(get_storage)):
    logger.info(f"PUT /party/{party_id}/vote")
    try:
        storage.push_ballot(party_id, ballot.model_dump(by_alias=True))
    except (InvalidIdentifier, PartyNotFound) as e:
        raise _http_error(e)
    return ballot


@router.put("/party/{party_id}/distribute", response_model=Receipt)
def add_party_receipt(party_id: str, receipt: Receipt, storage: PartyStorage = Depends(get_storage)):
    logger.info(f"PUT /party/{party_id}/distribute")
    try:
        storage.push_receipt(party_id, receipt.model_dump(by_alias=True))
    except (InvalidIdentifier, PartyNotFound) as e:
        raise _http_error(e)
    return receipt


@router.put("/party/{party_id}/note", response_model=Note)
def add_party_note(party_id: str, note: Note, storage: PartyStorage = Depends(get_storage)):
    logger.info(f"PUT /party/{party_id}/note")
    try:
        storage.push_note(party_id, note.model_dump(by_alias=True))
    except (InvalidIdentifier, PartyNotFound) as e:
        raise _http_error(e)
    return note


@router.delete("/party/{party_id}", status_code=204)
def delete_party(party_id: str, storage: PartyStorage = Depends(get_storage)):
    logger.info(f"DELETE /party/{party_id}")
    try:
        storage.delete_party(party_id)
    except (InvalidIdentifier, PartyNotFound) as e:
        raise _http_error(e)
    return Response(status_code=204)
