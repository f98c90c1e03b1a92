"""Custom exceptions for the event generation pipeline."""


class EventPipelineError(Exception):
    """Base exception for pipeline failures.

    ``reason`` is a short machine-readable tag (e.g. ``"empty_response"``,
    ``"no_array_found"``) alongside the human-readable message. ``kind`` is
    the error kind reported in failure results.
    """

    kind = "EventPipelineError"

    def __init__(self, message: str, reason: str | None = None):
        super().__init__(message)
        self.reason = reason


class ProviderError(EventPipelineError):
    """AI backend call failed (transport error, HTTP error or empty response)."""

    kind = "ProviderError"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        reason: str | None = None,
    ):
        super().__init__(message, reason=reason)
        self.status_code = status_code


class ProviderConfigError(ProviderError):
    """Provider cannot be constructed from the configuration."""

    def __init__(self, message: str):
        super().__init__(message, reason="config")


class ParseError(EventPipelineError):
    """Model output is malformed or contains no usable events."""

    kind = "ParseError"


class IngestError(EventPipelineError):
    """Store rejected the batch insert; nothing from the batch was committed."""

    kind = "IngestError"
