# errors.py
"""
Custom exceptions for the verifier.

Malformed QR input is never an exception: the parser degrades to an
'unknown' identifier instead. Everything below is raised to the caller.
"""

from typing import Any, Dict, Optional


class VerifierError(Exception):
    """Base class, carries an error code and an HTTP-like status."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(VerifierError):
    """Caller supplied an empty or otherwise unusable identifier."""

    status_code = 400
    code = "VALIDATION_ERROR"


class RegistryError(VerifierError):
    """Foundation / blacklist lookup failed or timed out."""

    status_code = 500
    code = "DATABASE_ERROR"


def format_error_response(error: Exception) -> Dict[str, Optional[Any]]:
    """Render any exception into a plain dict for display / logging."""
    if isinstance(error, VerifierError):
        return {
            "error": error.message,
            "code": error.code,
            "details": error.details,
            "status_code": error.status_code,
        }
    return {
        "error": str(error) or "An unexpected error occurred",
        "code": None,
        "details": None,
        "status_code": 500,
    }
