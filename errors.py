"""
Error taxonomy for the symptom analysis API.

Each error carries the HTTP status it maps to and a message that is safe to
show to the caller. Anything private (provider tracebacks, raw exception
text) lives in `detail` and is only echoed outside production.
"""

from typing import List, Optional


class SymptomCheckerError(Exception):
    status_code = 500
    message = "Error processing request."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self) -> dict:
        return {"error": self.message}


class ValidationError(SymptomCheckerError):
    status_code = 400
    message = "Invalid input: symptoms should be an array and additionalInfo a string."

    def __init__(self, message: Optional[str] = None, errors: Optional[List[dict]] = None):
        super().__init__(message)
        self.errors = errors or []

    def to_dict(self) -> dict:
        out = super().to_dict()
        if self.errors:
            out["errors"] = self.errors
        return out


class AuthorizationError(SymptomCheckerError):
    status_code = 403
    message = "Unauthorized access"


class RateLimitExceeded(SymptomCheckerError):
    status_code = 429
    message = "Too many requests, please try again later."

    def __init__(self, retry_after: int = 1, message: Optional[str] = None):
        super().__init__(message)
        self.retry_after = max(1, int(retry_after))


class AnalysisFailedError(SymptomCheckerError):
    status_code = 500
    message = "Error processing request."

    def __init__(self, detail: str = "", message: Optional[str] = None):
        super().__init__(message)
        self.detail = detail
