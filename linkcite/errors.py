"""
Error Types
===========

Exceptions and non-fatal warnings raised or reported by linkcite.

The core (resolve, classify, enrich, format) never raises on well-formed
input. Only malformed input *shapes* are rejected, at construction time,
with a ``ConfigurationError``. Citation styles outside the supported set are
rejected at the boundary (CLI / HTTP) with ``UnsupportedFormatError``.

Everything else that can go wrong while generating a citation is reported as
a ``GenerationWarning`` attached to the result.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional


# =============================================================================
# EXCEPTIONS
# =============================================================================


@dataclass(frozen=True)
class ValidationIssue:
    """
    A single problem found while validating an input shape.

    Attributes:
        field: Dotted path of the offending value (e.g. "priority.default[2]")
        message: Human-readable description
    """
    field: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "message": self.message}


class LinkciteError(Exception):
    """Base exception for linkcite errors."""

    pass


class ConfigurationError(LinkciteError):
    """
    Raised when a request or configuration object has an invalid shape.

    Carries the list of individual issues so callers can surface all of
    them at once (CLI message, JSON ``error`` field).
    """

    def __init__(self, message: str, issues: Optional[List[ValidationIssue]] = None):
        self.message = message
        self.issues = issues or []
        super().__init__(message)

    def __str__(self) -> str:
        if not self.issues:
            return self.message
        details = "; ".join(f"{i.field}: {i.message}" for i in self.issues)
        return f"{self.message} ({details})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": "configuration_error",
            "message": self.message,
            "issues": [i.to_dict() for i in self.issues],
        }


class UnsupportedFormatError(LinkciteError):
    """Raised when a caller asks for a citation style that does not exist."""

    def __init__(self, requested: str, supported: List[str]):
        self.requested = requested
        self.supported = supported
        super().__init__(
            f"Unsupported format: {requested}. Supported: {supported}"
        )


# =============================================================================
# WARNINGS
# =============================================================================


class WarningCode(str, Enum):
    """Kinds of non-fatal problems reported alongside a generated citation."""
    MISSING_MANDATORY_ATTRIBUTE = "missing_mandatory_attribute"
    MALFORMED_DATE_INPUT = "malformed_date_input"
    UNAVAILABLE_FIELD = "unavailable_field"


@dataclass(frozen=True)
class GenerationWarning:
    """
    A non-fatal problem found during generation.

    Attributes:
        code: Warning kind
        attribute: Attribute type value the warning refers to, if any
        message: Human-readable description
    """
    code: WarningCode
    message: str
    attribute: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "attribute": self.attribute,
            "message": self.message,
        }


__all__ = [
    "ValidationIssue",
    "LinkciteError",
    "ConfigurationError",
    "UnsupportedFormatError",
    "WarningCode",
    "GenerationWarning",
]
