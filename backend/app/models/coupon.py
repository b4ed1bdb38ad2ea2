from __future__ import annotations

import re
import uuid
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy import Boolean, Date, DateTime, Index, Numeric, String, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.core import clock
from app.core.errors import AlreadyInTerminalStateError, InvalidFormatError, OutOfRangeError
from app.db.base import Base

CODE_LENGTH = 6
DESCRIPTION_MAX_LENGTH = 500
MIN_DISCOUNT_VALUE = Decimal("0.5")

_NON_ALNUM_RE = re.compile(r"[^A-Za-z0-9]")


class Coupon(Base):
    __tablename__ = "cupons"
    __table_args__ = (
        # a code is unique among live coupons only; deleted codes can be reused
        Index(
            "uq_cupons_code_live",
            "code",
            unique=True,
            sqlite_where=text("deleted = 0"),
            postgresql_where=text("deleted = false"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    code: Mapped[str] = mapped_column(String(CODE_LENGTH), nullable=False, index=True)
    description: Mapped[str] = mapped_column(String(DESCRIPTION_MAX_LENGTH), nullable=False)
    discount_value: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    expiration_date: Mapped[date] = mapped_column(Date, nullable=False)
    published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<Coupon id={self.id} code={self.code!r} deleted={self.deleted}>"

    @staticmethod
    def normalize_code(raw_code: str | None) -> str:
        """Keep only ASCII letters and digits, uppercase them and cut to six characters.

        Characters beyond the sixth are dropped, so ``"ab@12-3xyz"`` and
        ``"AB123X"`` name the same coupon. Every code-bearing call has to go
        through here for lookups to stay consistent.
        """
        if not raw_code:
            raise InvalidFormatError("Coupon code must not be empty")
        normalized = _NON_ALNUM_RE.sub("", raw_code).upper()
        if len(normalized) < CODE_LENGTH:
            raise InvalidFormatError(
                f"Coupon code must have at least {CODE_LENGTH} alphanumeric characters; "
                f"got {len(normalized)} after removing special characters"
            )
        return normalized[:CODE_LENGTH]

    @staticmethod
    def validate_description(value: str | None) -> None:
        if value is None or not value.strip():
            raise InvalidFormatError("Description must not be blank")
        if len(value) > DESCRIPTION_MAX_LENGTH:
            raise InvalidFormatError(f"Description must have at most {DESCRIPTION_MAX_LENGTH} characters")

    @staticmethod
    def validate_expiration_date(value: date | None, *, today: date | None = None) -> None:
        if value is None:
            raise InvalidFormatError("Expiration date is required")
        current = today or clock.today()
        if value < current:
            raise OutOfRangeError(f"Expiration date cannot be in the past: {value.isoformat()}")

    @staticmethod
    def validate_discount_value(value: Any) -> None:
        if value is None:
            raise InvalidFormatError("Discount value is required")
        amount = _as_decimal(value)
        if amount < MIN_DISCOUNT_VALUE:
            raise OutOfRangeError(f"Discount value must be at least {MIN_DISCOUNT_VALUE}; got {value}")

    def is_expired(self, today: date | None = None) -> bool:
        return (today or clock.today()) > self.expiration_date

    def is_active(self, today: date | None = None) -> bool:
        return not self.deleted and not self.is_expired(today)

    def soft_delete(self, now: datetime | None = None) -> None:
        if self.deleted:
            raise AlreadyInTerminalStateError("Coupon is already deleted")
        stamp = now or clock.utcnow()
        self.deleted = True
        self.deleted_at = stamp
        self.updated_at = stamp

    def publish(self) -> None:
        self.published = True

    def unpublish(self) -> None:
        self.published = False


def _as_decimal(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise InvalidFormatError(f"Discount value must be a number; got {value!r}")
    if isinstance(value, Decimal):
        amount = value
    else:
        # floats go through str() so 0.1 stays 0.1 instead of its binary expansion
        try:
            amount = Decimal(str(value))
        except (InvalidOperation, ValueError) as exc:
            raise InvalidFormatError(f"Discount value must be a number; got {value!r}") from exc
    if not amount.is_finite():
        raise InvalidFormatError(f"Discount value must be a finite number; got {value!r}")
    return amount
