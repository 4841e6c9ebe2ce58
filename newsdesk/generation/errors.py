"""Text generation error types."""


class GenerationError(Exception):
    """Raised when the text-generation service fails."""


class RateLimitedError(GenerationError):
    """Raised on a rate-limit response; safe to retry after a delay."""


class GenerationConfigError(GenerationError):
    """Raised when a text generator cannot be built, e.g. a missing API key."""
