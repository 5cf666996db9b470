"""
Exceptions raised while resolving a provider and querying it.
"""
from typing import Optional


class HowtoError(Exception):
    """Base class for all howto errors"""
    pass


class ProviderError(HowtoError):
    """Raised when a provider cannot be resolved"""
    pass


class UnknownProviderError(ProviderError):
    """Raised when a provider name is not recognized"""

    def __init__(self, name: str):
        super().__init__(f"unknown provider: {name}")
        self.name = name


class NotConfiguredError(ProviderError):
    """Raised when a provider's credential or CLI tool is missing"""
    pass


class CopilotError(HowtoError):
    """Raised when the GitHub Copilot CLI fails"""
    pass


class ToolNotFoundError(CopilotError):
    """Raised when the gh executable is not on the search path"""
    pass


class ToolNotAvailableError(CopilotError):
    """Raised when gh is installed but copilot is not usable"""
    pass


class NotAuthenticatedError(CopilotError):
    """Raised when gh is not logged in"""
    pass


class SubscriptionRequiredError(CopilotError):
    """Raised when the account has no Copilot subscription"""
    pass


class RequestError(HowtoError):
    """Base class for failures of the request/response pipeline"""
    pass


class SerializationError(RequestError):
    """Raised when the request body cannot be encoded"""
    pass


class TransportError(RequestError):
    """Raised when the request cannot be built or sent"""
    pass


class RequestTimeoutError(RequestError):
    """Raised when the request deadline expires"""

    def __init__(self, message: str = "request timed out"):
        super().__init__(message)


class DecodeError(RequestError):
    """Raised when a response body is not valid JSON"""
    pass


class ApiError(RequestError):
    """
    Raised when the provider reports an error.

    Carries either the provider's own message, or the HTTP status code and
    raw body when the error payload could not be parsed.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        if status_code is not None and body is not None:
            text = f"API returned status {status_code}: {body}"
        else:
            text = f"API error: {message}"
        super().__init__(text)
        self.message = message
        self.status_code = status_code
        self.body = body


class EmptyResponseError(RequestError):
    """Raised when the provider answers without any usable text"""
    pass
