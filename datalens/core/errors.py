"""
Failure taxonomy for the upload → analysis pipeline.

Each error carries the HTTP status it maps to and a short public message.
``detail`` holds the underlying reason and is returned as ``details`` in the
error body.
"""
from typing import Optional


class AnalysisError(Exception):
    """Base class for every recoverable pipeline failure."""

    status_code: int = 500
    error: str = "Data analysis failed. Please check the file format and content."

    def __init__(self, detail: Optional[str] = None, *, error: Optional[str] = None):
        self.detail = detail
        if error is not None:
            self.error = error
        super().__init__(detail or self.error)

    def to_payload(self) -> dict:
        payload = {"error": self.error}
        if self.detail:
            payload["details"] = self.detail
        return payload


class UnsupportedFormat(AnalysisError):
    status_code = 415
    error = "Unsupported file type."


class PayloadTooLarge(AnalysisError):
    status_code = 413
    error = "File is too large."


class ParseFailure(AnalysisError):
    status_code = 422
    error = "Failed to parse file."


class EmptyDataset(AnalysisError):
    status_code = 422
    error = "Parsed file contains no data."


class ConfigurationError(AnalysisError):
    status_code = 500
    error = "Analysis service is not configured."


class RemoteAnalysisError(AnalysisError):
    """The LLM endpoint could not be reached or answered with an error status."""

    status_code = 500
    error = "Data analysis failed. The analysis service did not respond successfully."

    def __init__(
        self,
        detail: Optional[str] = None,
        *,
        remote_status: Optional[int] = None,
        attempts: int = 1,
    ):
        self.remote_status = remote_status
        self.attempts = attempts
        super().__init__(detail)


class MalformedResponse(AnalysisError):
    """The LLM answered 200 but the payload could not be read as JSON."""

    status_code = 500
    error = "Failed to parse AI response as JSON."


class InvalidContract(AnalysisError):
    """The LLM answered with JSON that does not match the analysis contract."""

    status_code = 500
    error = "Invalid AI response structure."
