"""Pay Party API: CRUD service for voting-round documents."""

__version__ = "0.2.0"
