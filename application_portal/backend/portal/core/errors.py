"""
Application error type and the mapping from exceptions to API error bodies.
"""

import logging
from typing import Tuple

from pydantic import ValidationError

from portal.core.constants import ERROR_MESSAGES

logger = logging.getLogger(__name__)


class ApplicationError(Exception):
    """An error with a user-facing message and the HTTP status it maps to."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def format_validation_error(error: ValidationError) -> str:
    """Collapse a pydantic ValidationError into a single readable line."""
    details = []
    for item in error.errors():
        field = ".".join(str(part) for part in item.get("loc", ()) if part != "body")
        msg = item.get("msg", "invalid value")
        details.append(f"{field}: {msg}" if field else msg)
    return "; ".join(details)


def handle_api_error(error: Exception) -> Tuple[str, int]:
    """Return (message, status_code) for any exception raised while serving a request."""
    if isinstance(error, ApplicationError):
        return error.message, error.status_code

    if isinstance(error, ValidationError):
        return f"{ERROR_MESSAGES['VALIDATION_ERROR']}: {format_validation_error(error)}", 400

    logger.error(f"Unhandled error: {error}", exc_info=error)
    return ERROR_MESSAGES["SERVER_ERROR"], 500
