"""
Temple Billing - Domain errors
Raised by the services layer and rendered by the handler in main.py
"""

from typing import Any, Optional

from fastapi import status


class BillingError(Exception):
    """Base error for rejected operations"""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details


class ValidationFailed(BillingError):
    """Invalid input (missing donation fields, bad quantity, unknown item ...)"""


class NotFound(BillingError):
    status_code = status.HTTP_404_NOT_FOUND
