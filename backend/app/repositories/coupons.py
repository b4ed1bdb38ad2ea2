from __future__ import annotations

import uuid
from collections.abc import Sequence

from fastapi import Depends
from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_session
from app.models.coupon import Coupon


class CouponRepository:
    """Storage access for coupons over one ``AsyncSession``.

    ``save`` commits, so every service call that persists is one transaction.
    The database assigns ``id`` and owns the uniqueness of live codes.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_id(self, coupon_id: uuid.UUID) -> Coupon | None:
        return await self.session.get(Coupon, coupon_id)

    async def find_by_code(self, code: str) -> Coupon | None:
        result = await self.session.execute(
            select(Coupon).where(Coupon.code == code).order_by(Coupon.deleted.asc(), Coupon.created_at.desc()).limit(1)
        )
        return result.scalar_one_or_none()

    async def find_by_code_excluding_deleted(self, code: str) -> Coupon | None:
        result = await self.session.execute(select(Coupon).where(Coupon.code == code, Coupon.deleted.is_(False)))
        return result.scalar_one_or_none()

    async def find_all_excluding_deleted(self) -> Sequence[Coupon]:
        result = await self.session.execute(
            select(Coupon).where(Coupon.deleted.is_(False)).order_by(Coupon.created_at, Coupon.code)
        )
        return result.scalars().all()

    async def find_all_published_excluding_deleted(self) -> Sequence[Coupon]:
        result = await self.session.execute(
            select(Coupon)
            .where(Coupon.deleted.is_(False), Coupon.published.is_(True))
            .order_by(Coupon.created_at, Coupon.code)
        )
        return result.scalars().all()

    async def exists_by_code_excluding_deleted(self, code: str) -> bool:
        stmt = select(exists().where(Coupon.code == code, Coupon.deleted.is_(False)))
        return bool(await self.session.scalar(stmt))

    async def save(self, coupon: Coupon) -> Coupon:
        self.session.add(coupon)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise
        await self.session.refresh(coupon)
        return coupon


def get_coupon_repository(session: AsyncSession = Depends(get_session)) -> CouponRepository:
    """FastAPI dependency wrapping the request session."""
    return CouponRepository(session)
