# core/errors.py

"""
COMMERCE DOMAIN ERRORS

Centralized failure kinds shared by every service.

Rules:
- ValidationError / NotFoundError / InsufficientStockError are raised
  BEFORE any write happens.
- TransactionFailure is only raised from the atomic phase and always
  chains the original exception (raise ... from exc).
- Each error carries the HTTP status the API layer renders it with.
"""

from __future__ import annotations


class CommerceError(Exception):
    """Base exception for all commerce service failures."""

    status_code = 400
    code = "error"
    default_message = "Request could not be processed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def as_payload(self) -> dict:
        return {"detail": self.message, "code": self.code}


class ValidationError(CommerceError):
    """Malformed or inconsistent command."""

    status_code = 400
    code = "validation_error"
    default_message = "Invalid request"


class NotFoundError(CommerceError):
    """Referenced entity is missing or owned by another tenant."""

    status_code = 404
    code = "not_found"
    default_message = "Not found"


class InsufficientStockError(CommerceError):
    """Requested quantity exceeds what the open cost layers hold."""

    status_code = 400
    code = "insufficient_stock"

    def __init__(self, product_name: str, available: int, requested: int | None = None):
        self.product_name = product_name
        self.available = int(available)
        self.requested = requested
        message = f"Insufficient stock for {product_name}. Available: {self.available}"
        if requested is not None:
            message = f"{message}, requested: {requested}"
        super().__init__(message)

    def as_payload(self) -> dict:
        payload = super().as_payload()
        payload["product"] = self.product_name
        payload["available"] = self.available
        return payload


class TransactionFailure(CommerceError):
    """Unexpected failure inside the atomic phase; everything was rolled back."""

    status_code = 500
    code = "transaction_failure"
    default_message = "The operation failed and no changes were saved"
