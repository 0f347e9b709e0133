"""Custom exceptions and error handling utilities."""
from fastapi import HTTPException, status
from typing import Optional


class AppException(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def user_message(self) -> str:
        """Human-readable message for the person who triggered the operation."""
        return f"Nothing was changed: {self.message}"


class NotFoundError(AppException):
    """Raised when a resource is not found."""
    pass


class ValidationError(AppException):
    """Raised when validation fails."""
    pass


class ConflictError(AppException):
    """Raised when an operation conflicts with the current state of a resource."""
    pass


class InvalidTransitionError(ConflictError):
    """Raised when a status change is not allowed by the lifecycle table."""

    def __init__(self, entity: str, current: str, target: str):
        super().__init__(f"{entity} cannot move from '{current}' to '{target}'")
        self.entity = entity
        self.current = current
        self.target = target


class ExternalServiceError(AppException):
    """Raised when a call to a collaborator (API, queue, DNS) fails."""

    @property
    def user_message(self) -> str:
        return f"{self.message}. Your local edits are safe."


class SaveFailedError(ExternalServiceError):
    """Raised when the editor could not persist the project."""
    pass


class BuildError(AppException):
    """Raised when a website document cannot be built for deployment."""

    @property
    def user_message(self) -> str:
        return f"Build failed: {self.message}"


def handle_database_error(error: Exception, operation: str) -> HTTPException:
    """
    Convert database errors to HTTP exceptions.

    Args:
        error: The database error
        operation: Description of the operation that failed

    Returns:
        HTTPException with appropriate status code
    """
    error_message = str(error)

    if "not found" in error_message.lower() or "does not exist" in error_message.lower():
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Resource not found: {operation}",
        )

    if "duplicate" in error_message.lower() or "unique" in error_message.lower():
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Resource already exists: {operation}",
        )

    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Database error during {operation}: {error_message}",
    )


def not_found_error(resource: str, identifier: Optional[str] = None) -> HTTPException:
    """
    Create a standardized 404 error.

    Args:
        resource: Name of the resource (e.g., "Website", "Deployment")
        identifier: Optional identifier that was not found

    Returns:
        HTTPException with 404 status
    """
    message = f"{resource} not found"
    if identifier:
        message += f": {identifier}"
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=message)


def validation_error(message: str) -> HTTPException:
    """Create a standardized 400 validation error."""
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


def conflict_error(message: str) -> HTTPException:
    """Create a standardized 409 conflict error."""
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=message)


def external_service_error(message: str) -> HTTPException:
    """Create a standardized 502 error for failed collaborator calls."""
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=message)


def to_http_exception(error: AppException) -> HTTPException:
    """
    Map an application exception onto the matching HTTP error.

    Args:
        error: The application exception raised by a service

    Returns:
        HTTPException carrying the user-facing message
    """
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error.message)
    if isinstance(error, ConflictError):
        return conflict_error(error.user_message)
    if isinstance(error, ExternalServiceError):
        return external_service_error(error.user_message)
    return validation_error(error.user_message)
