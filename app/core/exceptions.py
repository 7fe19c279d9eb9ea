"""
Application error types.

The CRUD layer raises these; main.py turns them into JSON responses with the
same {"detail": ...} body that FastAPI uses for HTTPException.
"""


class JoblyError(Exception):
    """Base error carrying an HTTP status code and a client-safe message."""

    status_code: int = 500

    def __init__(self, message: str = "Internal Server Error"):
        super().__init__(message)
        self.message = message


class BadRequestError(JoblyError):
    """400: the request is well formed but cannot be applied."""
    status_code = 400

    def __init__(self, message: str = "Bad Request"):
        super().__init__(message)


class UnauthorizedError(JoblyError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class ForbiddenError(JoblyError):
    status_code = 403

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message)


class NotFoundError(JoblyError):
    status_code = 404

    def __init__(self, message: str = "Not Found"):
        super().__init__(message)
