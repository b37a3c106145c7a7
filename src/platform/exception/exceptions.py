class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(self, message: str, status_code: int = 500) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class ValidationError(DomainError):
    """Malformed request: missing passengers/contact details, bad seat list, negative price"""

    def __init__(self, message: str) -> None:
        super().__init__(message, 422)


class InvalidStateError(DomainError):
    """Flight not bookable, booking already cancelled / checked in, ..."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class TimingViolationError(DomainError):
    """Too close to or past departure, outside the check-in window"""

    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class ForbiddenError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 403)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class AuthenticationError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 401)


class ReferenceCollisionError(ConflictError):
    """Generated booking reference hit a unique constraint; regenerate and retry"""

    def __init__(self, message: str = 'Booking reference already in use') -> None:
        super().__init__(message)
