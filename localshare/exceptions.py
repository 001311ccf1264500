"""Exception classes for the LocalShare client."""


class LocalShareError(Exception):
    """
    Base exception class for all client errors.
    """
    pass


class ConnectivityError(LocalShareError):
    """
    Raised when the server cannot be reached or the transport fails.
    """
    pass


class AuthError(LocalShareError):
    """
    Raised when a PIN or admin credentials are rejected.
    """
    pass


class AuthorizationLost(LocalShareError):
    """
    Raised when an operation that needs a session gets a 401.
    """
    pass


class ValidationError(LocalShareError):
    """
    Raised by client-side pre-flight checks; the request is never sent.
    """
    pass


class OperationError(LocalShareError):
    """
    Raised for non-2xx, non-401 failures of file operations.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AccessDeniedError(LocalShareError):
    """
    Raised when an operation is attempted before access has been granted.
    """
    pass
