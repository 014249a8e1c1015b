"""
Error taxonomy surfaced by the rate resolver.
Every error carries a machine-readable ``kind`` and a human-readable message.
"""

from typing import Any, Optional


class RateError(Exception):
    kind = "error"

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class ValidationError(RateError):
    """Bad currency pair or date range. Never retried."""
    kind = "validation_error"


class NotFoundError(RateError):
    """No rate could be resolved for the requested date."""
    kind = "not_found"


class UpstreamError(RateError):
    """Transport or parse failure from one of the upstream endpoints."""
    kind = "upstream_error"
