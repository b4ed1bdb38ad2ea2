"""Error kinds raised by the coupon domain and service.

Each kind carries the HTTP status and the short ``code`` that the API layer
puts in the error body, so routes never have to translate them by hand.
"""

from __future__ import annotations

from fastapi import status


class CouponError(Exception):
    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "coupon_error"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class InvalidFormatError(CouponError):
    """Malformed or missing input."""

    code = "invalid_format"


class OutOfRangeError(CouponError):
    """Value outside the allowed bounds."""

    code = "out_of_range"


class InvalidStateError(CouponError):
    """Operation not allowed in the coupon's current lifecycle state."""

    code = "invalid_state"


class NotFoundError(CouponError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class ConflictError(CouponError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"


class AlreadyInTerminalStateError(Exception):
    """Raised by the entity when a one-way transition has already happened."""
