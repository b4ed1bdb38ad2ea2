from app.db.base import Base  # noqa: F401
from app.models.coupon import Coupon  # noqa: F401

__all__ = [
    "Base",
    "Coupon",
]
