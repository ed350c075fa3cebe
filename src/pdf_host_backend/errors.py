"""
Error taxonomy for the record service.

Every failure the service reports carries the HTTP status it maps to and a
caller-facing message. The API layer renders these as ``{status, message}``.
"""

from __future__ import annotations

from typing import Optional

INTERNAL_SERVER_ERROR = "Internal Server Error"


class RecordServiceError(Exception):
    status_code: int = 500
    default_message: str = INTERNAL_SERVER_ERROR

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(RecordServiceError):
    """Missing or malformed request data."""

    status_code = 400
    default_message = "Invalid input"


class NotFound(RecordServiceError):
    """No record matches the requested id."""

    status_code = 404
    default_message = "PDF not found"


class StoreUnavailable(RecordServiceError):
    """The metadata store is not connected or not reachable."""

    status_code = 500


class StoreWriteFailure(RecordServiceError):
    """The metadata store rejected a write."""

    status_code = 500


class EditNotSupported(RecordServiceError):
    status_code = 501
    default_message = "Editing PDF metadata is not supported"
