class AppError(Exception):
    """Base class for all application exceptions."""

    code = "error"

    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ForbiddenError(AppError):
    """Raised when the caller is authenticated but lacks the required permission."""

    code = "forbidden"

    def __init__(self, message: str = "You don't have permission to perform this action"):
        super().__init__(message, status_code=403)


class ValidationError(AppError):
    """Raised when input is malformed or references something that does not exist."""

    code = "validation_error"

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=422, details=details)


class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""

    code = "not_found"

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} not found",
            status_code=404,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class EventDateNotFoundError(ResourceNotFoundError, ValidationError):
    """The event does not occur on the requested date."""

    def __init__(self, event_id: str, target_date: str):
        AppError.__init__(
            self,
            f"Event does not occur on {target_date}",
            status_code=404,
            details={"resource_type": "CalendarEvent", "resource_id": event_id, "date": target_date},
        )


class ConflictError(AppError):
    """Raised on uniqueness or referential conflicts."""

    code = "conflict"

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=409, details=details)


class PersistenceError(AppError):
    """Raised when the underlying store fails. The message never carries internals."""

    code = "persistence_failure"

    def __init__(self, message: str = "Something went wrong. Please try again."):
        super().__init__(message, status_code=503)
