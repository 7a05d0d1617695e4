"""
Custom exceptions for the URL shortener.

Every error carries the HTTP status it maps to, so the API layer can turn
any of them into a `{"status": "error", "error": ...}` body without a lookup
table. Client-input errors are 400, auth is 403, everything else is 500.
"""


class ShortURLError(Exception):
    """Base exception for the URL shortener service."""

    status_code: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigurationError(ShortURLError):
    """Raised at startup when the environment is unusable. Always fatal."""


class AccessDenied(ShortURLError):
    status_code = 403

    def __init__(self, message: str = "access denied, token is missing"):
        super().__init__(message)


class MissingField(ShortURLError):
    status_code = 400

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"{field} is missing")


class InvalidIdentifier(ShortURLError):
    status_code = 400

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__("accepted characters for id are: [0-9a-zA-Z_-]")


class InvalidRequestBody(ShortURLError):
    status_code = 400


class IdentifierConflict(ShortURLError):
    status_code = 400

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__("given id already exists")


class AllocationExhausted(ShortURLError):
    """No free identifier found within the retry budget."""

    status_code = 400

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__("id generation exhausted")


class NotFound(ShortURLError):
    status_code = 400

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__("url with given id does not exist")


class UnsupportedMethod(ShortURLError):
    status_code = 400

    def __init__(self, method: str):
        self.method = method
        super().__init__(f"invalid HTTP method: {method}")


class BackendFault(ShortURLError):
    """Raised when the storage backend fails or returns undecodable data."""

    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        super().__init__(f"storage error: {message}")
