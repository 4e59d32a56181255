"""Error taxonomy shared by the services and the HTTP layer.

Services raise these; ``main.py`` turns every one of them into the
``{"success": false, "message": ...}`` envelope with ``status_code``.
"""
from fastapi import status


class WellnessError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(WellnessError):
    status_code = status.HTTP_400_BAD_REQUEST


class Conflict(WellnessError):
    # duplicate registration is reported as a plain bad request
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidState(WellnessError):
    status_code = status.HTTP_400_BAD_REQUEST


class Unauthorized(WellnessError):
    status_code = status.HTTP_401_UNAUTHORIZED


class NotOwner(Unauthorized):
    # Existing clients expect 401 here; switch to 403 in this one place if that changes.
    status_code = status.HTTP_401_UNAUTHORIZED


class NotFound(WellnessError):
    status_code = status.HTTP_404_NOT_FOUND
