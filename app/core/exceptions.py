from typing import Optional


class ServiceException(Exception):
    error_type = "service_error"

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class NotFoundException(ServiceException):
    error_type = "not_found"

    def __init__(self, message: str):
        super().__init__(message, 404)


class IneligibleException(ServiceException):
    """Eligibility failure, bad state or malformed submission. Never retried."""

    error_type = "validation_error"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason, 400)


class InvalidTransitionError(IneligibleException):
    def __init__(self, current, target, reason: Optional[str] = None):
        self.current = current
        self.target = target
        super().__init__(reason or f"Cannot move attempt from {current} to {target}")


class PermissionDeniedException(ServiceException):
    error_type = "forbidden"

    def __init__(self, message: str):
        super().__init__(message, 403)
