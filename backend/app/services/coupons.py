from __future__ import annotations

import logging
import uuid
from datetime import date, datetime

from sqlalchemy.exc import IntegrityError

from app.core import clock, metrics
from app.core.errors import AlreadyInTerminalStateError, ConflictError, InvalidStateError, NotFoundError
from app.models.coupon import Coupon
from app.repositories.coupons import CouponRepository
from app.schemas.coupon import CouponCreate, CouponRead, CouponUpdate

logger = logging.getLogger(__name__)


def _now(now: datetime | None) -> datetime:
    return now or clock.utcnow()


def to_coupon_read(coupon: Coupon, *, today: date | None = None) -> CouponRead:
    current = today or clock.today()
    return CouponRead.model_validate(
        {
            "id": coupon.id,
            "code": coupon.code,
            "description": coupon.description,
            "discount_value": coupon.discount_value,
            "expiration_date": coupon.expiration_date,
            "published": coupon.published,
            "deleted": coupon.deleted,
            "active": coupon.is_active(current),
            "expired": coupon.is_expired(current),
            "created_at": clock.ensure_utc(coupon.created_at),
            "updated_at": clock.ensure_utc(coupon.updated_at),
            "deleted_at": clock.ensure_utc(coupon.deleted_at),
        }
    )


async def _get_or_404(repo: CouponRepository, coupon_id: uuid.UUID) -> Coupon:
    coupon = await repo.find_by_id(coupon_id)
    if coupon is None:
        raise NotFoundError(f"Coupon not found with id: {coupon_id}")
    return coupon


async def create_coupon(repo: CouponRepository, payload: CouponCreate, *, now: datetime | None = None) -> CouponRead:
    stamp = _now(now)
    today = stamp.date()
    code = Coupon.normalize_code(payload.code)

    if await repo.exists_by_code_excluding_deleted(code):
        metrics.record_coupon_conflict()
        raise ConflictError(f"An active coupon already uses the code: {code}")

    Coupon.validate_description(payload.description)
    Coupon.validate_expiration_date(payload.expiration_date, today=today)
    Coupon.validate_discount_value(payload.discount_value)

    coupon = Coupon(
        code=code,
        description=payload.description,
        discount_value=payload.discount_value,
        expiration_date=payload.expiration_date,
        published=bool(payload.published),
        deleted=False,
        created_at=stamp,
        updated_at=stamp,
    )
    try:
        coupon = await repo.save(coupon)
    except IntegrityError as exc:
        # another request took the code between the existence check and the insert
        metrics.record_coupon_conflict()
        raise ConflictError(f"An active coupon already uses the code: {code}") from exc

    metrics.record_coupon_created()
    logger.info("coupon_created", extra={"coupon_id": str(coupon.id), "coupon_code": coupon.code})
    return to_coupon_read(coupon, today=today)


async def list_coupons(repo: CouponRepository, *, now: datetime | None = None) -> list[CouponRead]:
    today = _now(now).date()
    coupons = await repo.find_all_excluding_deleted()
    return [to_coupon_read(coupon, today=today) for coupon in coupons]


async def list_published_coupons(repo: CouponRepository, *, now: datetime | None = None) -> list[CouponRead]:
    today = _now(now).date()
    coupons = await repo.find_all_published_excluding_deleted()
    return [to_coupon_read(coupon, today=today) for coupon in coupons]


async def get_coupon(repo: CouponRepository, coupon_id: uuid.UUID, *, now: datetime | None = None) -> CouponRead:
    coupon = await _get_or_404(repo, coupon_id)
    return to_coupon_read(coupon, today=_now(now).date())


async def get_coupon_by_code(repo: CouponRepository, code: str, *, now: datetime | None = None) -> CouponRead:
    normalized = Coupon.normalize_code(code)
    coupon = await repo.find_by_code_excluding_deleted(normalized)
    if coupon is None:
        raise NotFoundError(f"Coupon not found with code: {normalized}")
    return to_coupon_read(coupon, today=_now(now).date())


async def update_coupon(
    repo: CouponRepository,
    coupon_id: uuid.UUID,
    payload: CouponUpdate,
    *,
    now: datetime | None = None,
) -> CouponRead:
    stamp = _now(now)
    today = stamp.date()
    coupon = await _get_or_404(repo, coupon_id)
    if coupon.deleted:
        raise InvalidStateError("A deleted coupon cannot be updated")

    data = payload.model_dump(exclude_unset=True, exclude_none=True)
    data.pop("code", None)
    if "description" in data:
        Coupon.validate_description(data["description"])
    if "discount_value" in data:
        Coupon.validate_discount_value(data["discount_value"])
    if "expiration_date" in data:
        Coupon.validate_expiration_date(data["expiration_date"], today=today)

    for field, value in data.items():
        setattr(coupon, field, value)
    coupon.updated_at = stamp
    coupon = await repo.save(coupon)

    metrics.record_coupon_updated()
    logger.info(
        "coupon_updated",
        extra={"coupon_id": str(coupon.id), "coupon_code": coupon.code, "fields": sorted(data)},
    )
    return to_coupon_read(coupon, today=today)


async def delete_coupon(repo: CouponRepository, coupon_id: uuid.UUID, *, now: datetime | None = None) -> None:
    coupon = await _get_or_404(repo, coupon_id)
    try:
        coupon.soft_delete(_now(now))
    except AlreadyInTerminalStateError as exc:
        raise ConflictError(f"Coupon is already deleted: {coupon_id}") from exc
    await repo.save(coupon)

    metrics.record_coupon_deleted()
    logger.info("coupon_deleted", extra={"coupon_id": str(coupon.id), "coupon_code": coupon.code})


async def publish_coupon(repo: CouponRepository, coupon_id: uuid.UUID, *, now: datetime | None = None) -> CouponRead:
    stamp = _now(now)
    coupon = await _get_or_404(repo, coupon_id)
    if coupon.deleted:
        raise InvalidStateError("A deleted coupon cannot be published")
    coupon.publish()
    coupon.updated_at = stamp
    coupon = await repo.save(coupon)

    metrics.record_coupon_published()
    logger.info("coupon_published", extra={"coupon_id": str(coupon.id), "coupon_code": coupon.code})
    return to_coupon_read(coupon, today=stamp.date())


async def unpublish_coupon(repo: CouponRepository, coupon_id: uuid.UUID, *, now: datetime | None = None) -> CouponRead:
    stamp = _now(now)
    coupon = await _get_or_404(repo, coupon_id)
    coupon.unpublish()
    coupon.updated_at = stamp
    coupon = await repo.save(coupon)

    metrics.record_coupon_unpublished()
    logger.info("coupon_unpublished", extra={"coupon_id": str(coupon.id), "coupon_code": coupon.code})
    return to_coupon_read(coupon, today=stamp.date())
