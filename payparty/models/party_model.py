from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Annotated, Any, Dict, List, Optional

# Mongo stores signed 64-bit integers at most
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1
INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1

Int32 = Annotated[int, Field(ge=INT32_MIN, le=INT32_MAX)]
Int64 = Annotated[int, Field(ge=INT64_MIN, le=INT64_MAX)]


class PartyConfig(BaseModel):
    strategy: str = ""
    nvotes: Int32 = 0


class VotePayload(BaseModel):
    address: str = ""
    votes: Any = None


class BallotData(BaseModel):
    party: str = ""
    ballot: VotePayload = Field(default_factory=VotePayload)
    timestamp: Optional[Int64] = None


class Ballot(BaseModel):
    signature: str = ""
    data: BallotData = Field(default_factory=BallotData)


class Receipt(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    account: str = ""
    amount: Any = None  # BigNumber, keep whatever the client sent
    token: str = ""
    txn: str = ""
    strategy: Optional[str] = None
    chain_id: Optional[Int64] = Field(default=None, alias="chainId")

    @field_validator("amount")
    @classmethod
    def keep_big_amounts_exact(cls, v):
        # bool is an int subclass, leave it alone
        if isinstance(v, int) and not isinstance(v, bool) and not INT64_MIN <= v <= INT64_MAX:
            return str(v)
        return v


class Note(BaseModel):
    candidate: str = ""
    message: str = ""
    signature: str = ""


class SignedEnvelope(BaseModel):
    signature: str = ""
    message: Any = None
    signer: Optional[str] = None


# fields that always hold a value once stored
NON_NULL_FIELDS = (
    "name", "description", "config", "candidates",
    "participants", "ballots", "receipts", "notes",
)


class PartyBase(BaseModel):
    name: str = ""
    description: str = ""
    config: PartyConfig = Field(default_factory=PartyConfig)
    candidates: List[str] = Field(default_factory=list)
    participants: List[str] = Field(default_factory=list)
    ballots: List[Ballot] = Field(default_factory=list)
    receipts: List[Receipt] = Field(default_factory=list)
    notes: List[Note] = Field(default_factory=list)
    version: Optional[str] = None
    timestamp: Optional[Int64] = None
    nonce: Optional[str] = None
    signed: Optional[SignedEnvelope] = None

    @field_validator(*NON_NULL_FIELDS, mode="before")
    @classmethod
    def null_means_default(cls, v, info):
        # documents written by the older service hold null for empty arrays
        if v is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return v


class PartyIn(PartyBase):
    """Body of POST /party. A client ``id`` is accepted but never stored."""
    id: Optional[str] = None

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude={"id"})


class Party(PartyBase):
    id: str

    @classmethod
    def from_mongo(cls, doc: Dict[str, Any]) -> "Party":
        data = dict(doc)
        data["id"] = str(data.pop("_id"))
        return cls.model_validate(data)


class PartyUpdate(BaseModel):
    """Body of PUT /party/{id}: only the fields present are overwritten."""
    name: Optional[str] = None
    description: Optional[str] = None
    config: Optional[PartyConfig] = None
    candidates: Optional[List[str]] = None
    participants: Optional[List[str]] = None
    ballots: Optional[List[Ballot]] = None
    receipts: Optional[List[Receipt]] = None
    notes: Optional[List[Note]] = None
    version: Optional[str] = None
    timestamp: Optional[Int64] = None
    nonce: Optional[str] = None
    signed: Optional[SignedEnvelope] = None

    @model_validator(mode="before")
    @classmethod
    def reject_nulls(cls, data):
        if isinstance(data, dict):
            nulled = sorted(k for k in NON_NULL_FIELDS if k in data and data[k] is None)
            if nulled:
                raise ValueError(f"fields cannot be set to null: {', '.join(nulled)}")
        return data

    def to_fields(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)
