# Overview: Domain exception taxonomy shared by services and routes.

from __future__ import annotations


class PosError(Exception):
    """Base class for expected, caller-facing failures."""

    status_code = 400

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}

    def to_dict(self) -> dict:
        body = {"error": str(self)}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(PosError):
    """400-level input problem."""
    status_code = 400


class NotFoundError(PosError):
    status_code = 404


class ForbiddenError(PosError):
    """Ownership mismatch between the caller and the resource."""
    status_code = 403


class ConflictError(PosError):
    """409-level business rule conflict (e.g., duplicate category)."""
    status_code = 409


class InsufficientStockError(PosError):
    status_code = 400

    def __init__(self, product_name: str, requested: int, available: int):
        super().__init__(
            f"Insufficient stock for {product_name}",
            details={
                "product": product_name,
                "requested_quantity": requested,
                "available": available,
            },
        )
        self.product_name = product_name


class InvalidStateError(PosError):
    """Operation not allowed in the resource's current lifecycle state."""
    status_code = 400
