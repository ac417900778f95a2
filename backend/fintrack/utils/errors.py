"""Ledger error taxonomy.

Services raise these; the app factory turns them into ``{"error": ...}``
JSON responses with the matching status code.
"""


class LedgerError(Exception):
    """Base class for caller-facing ledger failures."""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {"error": self.message}


class ValidationError(LedgerError):
    """Missing or malformed required field."""
    status_code = 400


class InvalidSplit(LedgerError):
    """Split input that cannot produce balanced obligations."""
    status_code = 400


class NotFound(LedgerError):
    """Record or participant does not exist."""
    status_code = 404
