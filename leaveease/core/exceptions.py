from fastapi import status


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class Unauthenticated(ServiceError):
    def __init__(self, message: str = "Could not validate credentials") -> None:
        super().__init__(message, status.HTTP_401_UNAUTHORIZED)


class InvalidCredentials(ServiceError):
    def __init__(self, message: str = "Invalid username or password") -> None:
        super().__init__(message, status.HTTP_401_UNAUTHORIZED)


class Forbidden(ServiceError):
    def __init__(self, message: str = "Insufficient permissions") -> None:
        super().__init__(message, status.HTTP_403_FORBIDDEN)


class UserNotFound(ServiceError):
    def __init__(self, username: str) -> None:
        super().__init__(f"User not found: {username}", status.HTTP_404_NOT_FOUND)
        self.username = username


class NotFound(ServiceError):
    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_404_NOT_FOUND)


class InvalidRange(ServiceError):
    def __init__(self, message: str = "Start date must be before end date") -> None:
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class OverlapConflict(ServiceError):
    def __init__(
        self,
        message: str = "You already have an approved or pending leave that overlaps with this date range",
    ) -> None:
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class InvalidTransition(ServiceError):
    """Raised when a decision targets a request that is no longer PENDING."""

    def __init__(self, current_status: str) -> None:
        super().__init__(
            f"Only PENDING leave requests can be updated. Current status: {current_status}",
            status.HTTP_400_BAD_REQUEST,
        )
        self.current_status = current_status


class DuplicateUser(ServiceError):
    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_400_BAD_REQUEST)
