"""Custom exception classes for the application."""

class BaseAssistantException(Exception):
    """Base exception for all application-specific errors."""
    pass

class ConfigError(BaseAssistantException):
    """Error related to configuration loading or values."""
    pass

class CompletionError(BaseAssistantException):
    """A completion request failed for good (retries exhausted or unusable response)."""
    def __init__(self, message: str, status: int | None = None, attempts: int | None = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.attempts = attempts

    def __str__(self) -> str:
        base = super().__str__()
        details = []
        if self.attempts:
            details.append(f"Attempts: {self.attempts}")
        if self.status:
            details.append(f"Status Code: {self.status}")
        if details:
            return f"{base} ({', '.join(details)})"
        return base

class NetworkError(CompletionError):
    """Transport failure talking to the completion endpoint."""
    pass

class HttpStatusError(CompletionError):
    """The completion endpoint answered with a non-2xx status."""
    pass

class FormatError(CompletionError):
    """A 2xx response whose body has no usable choice content. Never retried."""
    pass

class ExtractionError(BaseAssistantException):
    """An uploaded file did not yield enough readable text."""
    pass

class PersistenceError(BaseAssistantException):
    """Reading or writing the local key/value store failed."""
    pass

class RemoteSaveError(BaseAssistantException):
    """The optional remote document store rejected a write."""
    pass

class UserCancelledError(BaseAssistantException):
    """Error raised when the user cancels an operation."""
    pass
