# common/api_error/config_error.py
from typing import Optional, Sequence


class ConfigurationError(RuntimeError):
    """
    Raised when environment configuration is missing or invalid.

    ``problems`` keeps the individual field messages so startup can print
    every bad variable at once instead of failing on the first.
    """

    def __init__(self, message: str, problems: Optional[Sequence[str]] = None):
        self.problems = list(problems or [])
        super().__init__(message)


__all__ = ["ConfigurationError"]
