"""Domain errors raised by the repositories and mapped to HTTP statuses in main.py."""


class CRMError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(CRMError):
    """Missing required field or invalid cross-reference."""

    status_code = 400


class AuthenticationError(CRMError):
    status_code = 401


class NotFoundError(CRMError):
    """Entity is absent or owned by another user. Callers cannot tell which."""

    status_code = 404


class ConflictError(CRMError):
    status_code = 409
