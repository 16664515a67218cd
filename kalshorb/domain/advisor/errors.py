"""
Domain-specific errors for the advisor bounded context.

All errors raised from the domain layer must be defined here.
These are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""


class AdvisorError(Exception):
    """Base error for all advisor domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class InvalidRequestError(AdvisorError):
    """Raised when a required request field is missing."""


class UnknownActionError(AdvisorError):
    """Raised when the client asks for an action the advisor does not support."""

    def __init__(self, action: str) -> None:
        super().__init__(f"Unknown action: {action}")
        self.action = action


class UpstreamCompletionError(AdvisorError):
    """Raised when the chat-completion API cannot produce a reply.

    Always recovered locally by falling back to templated replies.
    """

    def __init__(self, reason: str, status_code: int | None = None) -> None:
        super().__init__(f"Chat completion failed: {reason}")
        self.reason = reason
        self.status_code = status_code


class PersistenceError(AdvisorError):
    """Raised when the datastore rejects a read or write.

    Persistence is best effort: use cases log and swallow this error.
    """

    def __init__(self, resource: str, reason: str) -> None:
        super().__init__(f"Datastore error on {resource}: {reason}")
        self.resource = resource
        self.reason = reason
