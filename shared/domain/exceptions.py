"""
Domain Errors

Errors raised by application services when a request cannot be served.
Each error carries a stable machine-readable ``code`` so that callers can
branch without parsing messages. The API layer maps them to HTTP statuses
in ``shared.api.exceptions``.
"""


class DomainError(Exception):
    """Base class for all expected business failures"""

    default_code = "ERROR"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code

    def __str__(self):
        return self.message

    def __repr__(self):
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class NotFoundError(DomainError):
    """The referenced booking, entity or inquiry does not exist"""

    default_code = "NOT_FOUND"


class ForbiddenError(DomainError):
    """The caller lacks the required relationship to the resource"""

    default_code = "FORBIDDEN"


class BadRequestError(DomainError):
    """The request is well-formed but violates a business invariant"""

    default_code = "BAD_REQUEST"
