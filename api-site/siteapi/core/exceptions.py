# siteapi/core/exceptions.py

class AppError(Exception):
    def __init__(self, message: str, *, status_code: int = 400) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class BadRequestError(AppError):
    def __init__(self, message: str = "Bad request") -> None:
        super().__init__(message, status_code=400)


class NotFoundError(AppError):
    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, status_code=404)


class ConflictError(AppError):
    def __init__(self, message: str = "Resource conflict") -> None:
        super().__init__(message, status_code=409)


class UnauthorizedError(AppError):
    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message, status_code=401)


class ForbiddenError(AppError):
    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message, status_code=403)


class ValidationFailedError(AppError):
    def __init__(self, message: str = "Validation failed", *, errors: dict[str, list[str]] | None = None) -> None:
        super().__init__(message, status_code=422)
        self.errors = errors or {}


class TooManyRequestsError(AppError):
    def __init__(self, message: str = "Too many requests", *, headers: dict[str, str] | None = None) -> None:
        super().__init__(message, status_code=429)
        self.headers = headers or {}
