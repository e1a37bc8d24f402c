from typing import Optional


class AppError(Exception):
    """Base exception for portal errors."""
    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.original_error = original_error

class MalformedReferenceError(AppError):
    """Raised when no page identifier can be extracted from a workspace URL."""
    pass

class RemoteUnavailableError(AppError):
    """Raised when a call to the Notion API fails (network, auth, rate limit, not found)."""
    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        original_error: Exception = None,
    ):
        super().__init__(message, original_error=original_error)
        self.status_code = status_code
        self.code = code

class RemoteTimeoutError(RemoteUnavailableError):
    """Raised when a call to the Notion API times out."""
    pass

class SchemaNotDefinedError(AppError):
    """Raised when no expected schema exists for a database type."""
    pass

class ConfigurationError(AppError):
    """Raised when configuration is invalid or missing."""
    pass

class ValidationError(AppError):
    """Raised when record input is invalid."""
    pass
