"""Typed failures raised by core operations."""
from typing import Optional


class BoardError(Exception):
    """Base class; carries the HTTP status the request layer should answer with."""

    status_code = 500
    default_detail = "request failed"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationFailed(BoardError):
    status_code = 422
    default_detail = "invalid request"


class NotFound(BoardError):
    status_code = 404
    default_detail = "not found"


class Conflict(BoardError):
    status_code = 409
    default_detail = "conflict"


class TransactionFailed(BoardError):
    status_code = 500
    default_detail = "operation failed"


class SubscriptionRequired(BoardError):
    """A realtime connection arrived without a board to bind to."""

    status_code = 400
    default_detail = "boardId required"
