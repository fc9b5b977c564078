"""
Error taxonomy shared by the services.

Every error carries the HTTP status the routers answer with and a message
that is safe to show to the player.
"""
from fastapi import HTTPException, status


class DuelAppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(DuelAppError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(DuelAppError):
    status_code = status.HTTP_404_NOT_FOUND


class Forbidden(DuelAppError):
    status_code = status.HTTP_403_FORBIDDEN


class InvalidState(DuelAppError):
    status_code = status.HTTP_400_BAD_REQUEST


class Conflict(InvalidState):
    """Another request changed the document between our read and our write."""
    status_code = status.HTTP_409_CONFLICT


class InsufficientData(DuelAppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class Internal(DuelAppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def to_http_exception(error: DuelAppError) -> HTTPException:
    return HTTPException(status_code=error.status_code, detail=error.message)
