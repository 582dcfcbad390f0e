"""Error types raised by the appointment services.

The HTTP-facing errors subclass ``HTTPException`` so a service call fails with
the same status code and detail whether it is invoked from a route or
directly from a script or test.
"""

from fastapi import HTTPException, status


class AppointmentValidationError(HTTPException):
    def __init__(self, detail: str) -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class NotFoundError(HTTPException):
    def __init__(self, detail: str) -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ForbiddenError(HTTPException):
    def __init__(self, detail: str = 'Forbidden') -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class AccrualError(Exception):
    """Instructor totals could not be updated after a completed lesson."""
