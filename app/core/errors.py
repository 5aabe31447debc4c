"""
Error taxonomy for the matching engine.

Every error is an ``HTTPException`` so services can raise them directly and
FastAPI renders them without extra plumbing. ``code`` is a stable,
machine-readable discriminator the clients switch on (for example to tell
"nothing to undo" apart from "too late to undo").
"""

from typing import Optional

from fastapi import HTTPException, status


class MatchingError(HTTPException):
    """Base class for all matching-engine errors."""

    code: str = "error"
    status_code_default: int = status.HTTP_400_BAD_REQUEST
    detail_default: str = "Request failed"

    def __init__(self, detail: Optional[str] = None, headers: Optional[dict] = None):
        super().__init__(
            status_code=self.status_code_default,
            detail=detail or self.detail_default,
            headers=headers,
        )


class Unauthenticated(MatchingError):
    code = "unauthenticated"
    status_code_default = status.HTTP_401_UNAUTHORIZED
    detail_default = "Could not validate credentials"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(MatchingError):
    code = "forbidden"
    status_code_default = status.HTTP_403_FORBIDDEN
    detail_default = "Access denied"


class InvalidTarget(MatchingError):
    code = "invalid_target"
    status_code_default = status.HTTP_400_BAD_REQUEST
    detail_default = "Invalid target user"


class ActionNotFound(MatchingError):
    code = "not_found"
    status_code_default = status.HTTP_404_NOT_FOUND
    detail_default = "No action found to undo"


class UndoExpired(MatchingError):
    code = "expired"
    status_code_default = status.HTTP_409_CONFLICT
    detail_default = "Action is too old to undo"


class StoreUnavailable(MatchingError):
    code = "store_unavailable"
    status_code_default = status.HTTP_503_SERVICE_UNAVAILABLE
    detail_default = "Data store unavailable, please retry"
