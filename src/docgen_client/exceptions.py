"""
Document Generator Client - Exceptions

Error taxonomy for the generation call path. Internal failures are raised
as one of the `GenerationFailure` subclasses and surfaced to callers wrapped
in a single `DocumentGeneratorError`.
"""

from __future__ import annotations

from typing import Any, Optional


class GenerationFailure(Exception):
    """Base class for failures raised inside the generation call path."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    @property
    def kind(self) -> str:
        return self.__class__.__name__

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for reports and logs."""
        return {
            "error": self.kind,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(GenerationFailure):
    """Raised when generation options are unknown or have the wrong type."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message, {"field": field} if field else None)
        self.field = field


class SerializationError(GenerationFailure):
    """Raised when the request message cannot be encoded."""


class ConfigurationError(GenerationFailure):
    """Raised when the generator lacks configuration a call requires."""


class CryptoUnavailableError(GenerationFailure):
    """Raised when the crypto provider is unsafe or cannot produce an IV."""


class UpstreamError(GenerationFailure):
    """Raised when the service answers with a status other than 200.

    The upstream response body is never attached.
    """

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message, {"status_code": status_code})
        self.status_code = status_code


class TransportError(GenerationFailure):
    """Raised when the HTTP request itself fails (connect, DNS, timeout)."""


class DocumentGeneratorError(Exception):
    """The single error type raised by the public generator operations.

    Wraps the original failure: `kind` names its class, `cause` keeps the
    instance for diagnostics.
    """

    def __init__(self, cause: GenerationFailure) -> None:
        super().__init__(cause.message)
        self.message = cause.message
        self.cause = cause

    @property
    def kind(self) -> str:
        return self.cause.kind

    @property
    def status_code(self) -> Optional[int]:
        return getattr(self.cause, "status_code", None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "kind": self.kind,
            "message": self.message,
            "details": self.cause.details,
        }
