"""
Exceptions for the cine exposure solver.

Provides a hierarchy of exceptions for expected solve outcomes:
- CineExposureError (base)
  - SolveError
    - OutOfRangeError
    - InsufficientAttenuationError
    - InvalidInputError
  - UnknownCameraError

Solve errors are recoverable domain outcomes. Each carries the field that
failed, a message naming the violated constraint, and a hint toward a
different control the user can adjust.
"""

from typing import Any, Optional

from cine_exposure.core.types import SolveErrorKind


class CineExposureError(Exception):
    """Base exception for the package.

    Attributes:
        message: Human-readable error message.
        details: Additional error details.
    """

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        """Initialize error.

        Args:
            message: Human-readable error message.
            details: Additional context as key-value pairs.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        parts = [self.message]
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"Details: {details_str}")
        return " | ".join(parts)


class SolveError(CineExposureError):
    """A solve that could not produce a setting.

    Attributes:
        kind: Which constraint failed.
        field: Setting being solved or validated when the failure occurred.
        hint: Suggestion of an alternative control to adjust.
    """

    kind: SolveErrorKind = SolveErrorKind.INVALID_INPUT

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        hint: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, details=details)
        self.field = field
        self.hint = hint

    def user_message(self) -> str:
        """Message plus hint, as shown to the user."""
        if self.hint:
            return f"{self.message}. {self.hint}"
        return self.message

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "kind": self.kind.value,
            "field": self.field,
            "message": self.message,
            "hint": self.hint,
            "details": self.details,
        }


class OutOfRangeError(SolveError):
    """No selectable value lies within tolerance of the requirement.

    Raised when:
    - No shutter angle candidate matches the required exposure time
    - No frame rate candidate matches the required exposure time
    - A solved T-stop falls beyond the marked T1.0-T22 ladder
    """

    kind = SolveErrorKind.OUT_OF_RANGE


class InsufficientAttenuationError(SolveError):
    """ND solve needs less attenuation than the smallest usable filter.

    Raised when the target is not bright enough to take at least the
    minimum ND step, including when it is already darker than the reference.
    """

    kind = SolveErrorKind.INSUFFICIENT_ATTENUATION

    def __init__(
        self,
        message: str = "ND must be at least 1 stop (0.3 ND)",
        field: Optional[str] = "nd",
        hint: Optional[str] = "Use ISO or T-stop instead",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, field=field, hint=hint, details=details)


class InvalidInputError(SolveError, ValueError):
    """A required numeric input is missing, non-positive, or not finite."""

    kind = SolveErrorKind.INVALID_INPUT


class UnknownCameraError(CineExposureError, KeyError):
    """Camera id is not present in the profile registry."""

    def __init__(self, camera_id: str, available: Optional[list[str]] = None):
        super().__init__(
            f"Unknown camera '{camera_id}'",
            details={"available": available} if available else None,
        )
        self.camera_id = camera_id

    def __str__(self) -> str:
        return CineExposureError.__str__(self)
