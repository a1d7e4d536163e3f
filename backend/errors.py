# errors.py
"""
Error taxonomy for the resume service.

Every failure the orchestrator can surface is a ResumeServiceError subclass.
The API layer turns them into JSON responses, using the class name as the
error tag and ``status_code`` as the HTTP status.
"""

from typing import Optional


class ResumeServiceError(Exception):
    status_code = 500

    def __init__(self, detail: str, status_code: Optional[int] = None) -> None:
        super().__init__(detail)
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code

    @property
    def tag(self) -> str:
        return type(self).__name__


class UnsupportedMediaType(ResumeServiceError):
    status_code = 422


class ExtractionFailed(ResumeServiceError):
    status_code = 500


class EmptyContent(ResumeServiceError):
    status_code = 500


class NotFound(ResumeServiceError):
    status_code = 404


class OracleUnavailable(ResumeServiceError):
    status_code = 500


class AnswerFailed(ResumeServiceError):
    status_code = 500


class ConfigurationError(ResumeServiceError):
    """Raised at startup only; the app must not serve requests after it."""
