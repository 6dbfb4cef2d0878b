# common/api_error/ApiError.py
class AppError(Exception):
    """Base error for all application-specific issues."""

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        code: str = "INTERNAL_ERROR",
    ):
        self.message = message
        self.status_code = status_code
        self.code = code
        super().__init__(self.message)


class AuthError(AppError):
    """Rejected credentials, duplicate registration or a missing session."""

    def __init__(self, message: str, status_code: int = 401, code: str = "AUTH_ERROR"):
        super().__init__(message, status_code=status_code, code=code)


class DataAccessError(AppError):
    """A failed create/read/update/delete against the store."""

    def __init__(self, message: str, status_code: int = 400, code: str = "DATA_ERROR"):
        super().__init__(message, status_code=status_code, code=code)


__all__ = ["AppError", "AuthError", "DataAccessError"]
