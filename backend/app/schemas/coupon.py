from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.coupon import DESCRIPTION_MAX_LENGTH


class CouponCreate(BaseModel):
    code: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1, max_length=DESCRIPTION_MAX_LENGTH)
    discount_value: Decimal
    expiration_date: date
    published: bool | None = None

    @field_validator("description")
    @classmethod
    def _validate_description(cls, description: str) -> str:
        if not description.strip():
            raise ValueError("Description must not be blank")
        return description


class CouponUpdate(BaseModel):
    # accepted for request compatibility; an update never renames a coupon
    code: str | None = None
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    discount_value: Decimal | None = None
    expiration_date: date | None = None
    published: bool | None = None

    @field_validator("description")
    @classmethod
    def _validate_description(cls, description: str | None) -> str | None:
        if description is not None and not description.strip():
            raise ValueError("Description must not be blank")
        return description


class CouponRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    code: str
    description: str
    discount_value: Decimal
    expiration_date: date
    published: bool
    deleted: bool
    active: bool
    expired: bool
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None
