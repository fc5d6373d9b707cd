from typing import Optional


class ChatRequestError(Exception):
    """The visitor request is unusable (missing or non-string message)."""

    status_code = 400

    def __init__(self, detail: str = "Message is required"):
        super().__init__(detail)
        self.detail = detail


class ModelError(Exception):
    """Non-recoverable failure talking to the generative language service."""

    def __init__(self, message: str, *, status: Optional[int] = None, model: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.model = model


class ModelNotFoundError(ModelError):
    """The configured model identifier is unknown or retired (HTTP 404)."""


class RateLimitedError(ModelError):
    """Quota or rate limit hit (HTTP 429 or a quota/rate-limit message)."""


class ModelUnavailableError(ModelError):
    """No API key configured, so the model is never called."""
