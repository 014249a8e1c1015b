"""
Uniform success/failure envelope returned by every public resolver operation.
"""

import functools
import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests

from apps.rates.domain.errors import RateError, UpstreamError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderResponse:
    success: bool
    data: Any = None
    error: Optional[RateError] = None

    @classmethod
    def ok(cls, data: Any) -> "ProviderResponse":
        return cls(success=True, data=data)

    @classmethod
    def failure(cls, error: RateError) -> "ProviderResponse":
        return cls(success=False, error=error)


def transform_error(error: Exception) -> RateError:
    """Map any exception raised inside a provider call onto the rate error taxonomy."""
    if isinstance(error, RateError):
        return error

    if isinstance(error, requests.RequestException):
        response = getattr(error, "response", None)
        details = response.text if response is not None else None
        return UpstreamError(str(error), details=details)

    logger.exception("Unexpected error while resolving rates")
    return RateError(str(error))


def with_provider_response(func):
    """Run ``func`` and wrap its return value (or failure) in a ProviderResponse."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> ProviderResponse:
        try:
            return ProviderResponse.ok(func(*args, **kwargs))
        except Exception as e:
            error = transform_error(e)
            logger.debug("%s failed with %s: %s", func.__name__, error.kind, error.message)
            return ProviderResponse.failure(error)

    return wrapper
