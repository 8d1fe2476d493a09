"""Error taxonomy shared by handlers and services.

Each error is an ``HTTPException`` so it can be raised from anywhere in a
request and rendered into the response envelope by the app-level handler.
"""
from typing import Optional

from fastapi import HTTPException, status


class InvalidRequest(HTTPException):
    def __init__(self, detail: str = "Invalid request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class Unauthorized(HTTPException):
    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class PersistenceError(HTTPException):
    """The store rejected or failed a statement; nothing was committed."""

    def __init__(self, detail: str = "Server error", cause: Optional[Exception] = None):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
        self.cause = cause


class OrderCreationFailed(PersistenceError):
    def __init__(self, cause: Optional[Exception] = None):
        detail = "Could not create order"
        if cause is not None:
            detail = f"{detail}: {cause.__class__.__name__}"
        super().__init__(detail=detail, cause=cause)
