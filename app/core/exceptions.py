"""
Domain errors raised by the service layer.

Each error carries the HTTP status it maps to; ``app.main`` registers a
single handler that turns them into ``{"detail": message}`` responses.
"""

from fastapi import status


class MealPlannerError(Exception):
    """Base class for errors that are safe to show to the client"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(MealPlannerError):
    """Malformed or missing input, detected before any write"""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class NotFoundError(MealPlannerError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class AccessDeniedError(MealPlannerError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class ConstraintViolationError(MealPlannerError):
    """A unique constraint rejected the write (usually a concurrent duplicate)"""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflicting change, please retry"
