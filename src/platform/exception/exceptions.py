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
    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class InvalidStatusError(ValidationError):
    pass


class InvalidTargetError(ValidationError):
    pass


class InvalidTransitionError(DomainError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class InsufficientInventoryError(DomainError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class SlotsExhaustedError(DomainError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class DeparturePassedError(DomainError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class ForbiddenError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 403)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    """Lost a concurrent update against the store; the whole attempt was rolled back."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class CascadeIncompleteError(CustomBaseError):
    """A multi-record mutation did not complete; none of its writes were kept."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 500)


class AuthenticationError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 401)
