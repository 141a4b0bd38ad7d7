from __future__ import annotations


class AnalysisError(Exception):
    """Base class for failures that end a single analysis or tool call."""

    default_message = "An unexpected error occurred. Please try again."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(AnalysisError, ValueError):
    default_message = "Please enter a website URL"


class InvalidUrl(InvalidInput):
    default_message = "Invalid URL format"


class UpstreamError(AnalysisError):
    default_message = "Failed to analyze website. Please try again."

    def __init__(self, message: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class FetchError(AnalysisError):
    default_message = "Failed to analyze URL"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class PersistenceError(AnalysisError):
    default_message = "Failed to process certification"


class DuplicateCertification(PersistenceError):
    default_message = "Domain already certified"
