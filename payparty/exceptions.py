"""Errors raised by the party storage layer.

Routes translate these into HTTP status codes; store failures
(``pymongo.errors.PyMongoError``) are not wrapped and reach the
application-level handler untouched.
"""


class PartyError(Exception):
    """Base class for party storage errors."""

    def __init__(self, message: str = "Party error"):
        self.message = message
        super().__init__(self.message)


class InvalidIdentifier(PartyError):
    """The path identifier is not a valid ObjectId."""

    def __init__(self, party_id: str):
        self.party_id = party_id
        super().__init__(f"Invalid party ID format: {party_id!r}")


class PartyNotFound(PartyError):
    """No party matches the identifier."""

    def __init__(self, party_id: str):
        self.party_id = party_id
        super().__init__(f"Party {party_id} not found.")


class EmptyUpdate(PartyError):
    """An update request named no fields to set."""

    def __init__(self):
        super().__init__("Update must name at least one field.")
