# errors.py
from __future__ import annotations
from enum import Enum


class DispatchErrorKind(str, Enum):
    PROVIDER_ERROR = "provider_error"
    EMPTY_RESPONSE = "empty_response"
    TRANSPORT_ERROR = "transport_error"


class CoachError(Exception):
    """Base for every failure the HTTP layer knows how to report.

    `public_message` is what the user sees; the exception text itself may
    carry provider details and is only logged.
    """
    status_code = 500
    public_message = "AI request failed. Please try again."


class BadRequest(CoachError):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.public_message = message


class ConfigurationError(CoachError):
    status_code = 503
    public_message = "AI service is not configured."


class DispatchError(CoachError):
    status_code = 502

    _PUBLIC = {
        DispatchErrorKind.PROVIDER_ERROR: "AI provider returned an error. Please try again.",
        DispatchErrorKind.EMPTY_RESPONSE: "AI provider returned an empty response. Please try again.",
        DispatchErrorKind.TRANSPORT_ERROR: "Could not reach the AI provider. Please try again.",
    }

    def __init__(self, kind: DispatchErrorKind, message: str, attempts_made: int):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.attempts_made = attempts_made
        self.public_message = self._PUBLIC[kind]
        if kind is DispatchErrorKind.TRANSPORT_ERROR:
            self.status_code = 504


class DecodeFailure(CoachError):
    status_code = 502
    public_message = "AI analysis returned an unexpected format. Please try again."

    def __init__(self, reason: str, original_text: str = ""):
        super().__init__(reason)
        self.reason = reason
        self.original_text = original_text


class ShapeValidationFailure(DecodeFailure):
    pass
