class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    error_code = 'Error'

    def __init__(self, message: str, status_code: int, *, detail: str | None = None) -> None:
        self.message = message
        self.status_code = status_code
        self.detail = detail or self.error_code
        super().__init__(message)


class InvalidInputError(CustomBaseError):
    error_code = 'InvalidInput'

    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class ForbiddenError(CustomBaseError):
    error_code = 'Forbidden'

    def __init__(self, message: str) -> None:
        super().__init__(message, 403)


class NotFoundError(CustomBaseError):
    error_code = 'NotFound'

    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    error_code = 'Conflict'

    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class StoreFailureError(CustomBaseError):
    """Underlying record store failed; `detail` carries the store's own message."""

    error_code = 'StoreFailure'

    def __init__(self, message: str, *, detail: str | None = None) -> None:
        super().__init__(message, 500, detail=detail)
