from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from app.api.json_body import DecimalJSONRoute
from app.repositories.coupons import CouponRepository, get_coupon_repository
from app.schemas.coupon import CouponCreate, CouponRead, CouponUpdate
from app.services import coupons as coupons_service

router = APIRouter(prefix="/cupons", tags=["coupons"], route_class=DecimalJSONRoute)

RepositoryDep = Annotated[CouponRepository, Depends(get_coupon_repository)]


@router.post("", response_model=CouponRead, status_code=status.HTTP_201_CREATED)
async def create_coupon(payload: CouponCreate, repo: RepositoryDep) -> CouponRead:
    """Create a coupon; the code is normalized to six uppercase alphanumerics."""
    return await coupons_service.create_coupon(repo, payload)


@router.get("", response_model=list[CouponRead])
async def list_coupons(repo: RepositoryDep) -> list[CouponRead]:
    """List every coupon that has not been deleted."""
    return await coupons_service.list_coupons(repo)


@router.get("/published", response_model=list[CouponRead])
async def list_published_coupons(repo: RepositoryDep) -> list[CouponRead]:
    return await coupons_service.list_published_coupons(repo)


@router.get("/code/{code}", response_model=CouponRead)
async def get_coupon_by_code(code: str, repo: RepositoryDep) -> CouponRead:
    return await coupons_service.get_coupon_by_code(repo, code)


@router.get("/{coupon_id}", response_model=CouponRead)
async def get_coupon(coupon_id: UUID, repo: RepositoryDep) -> CouponRead:
    """Fetch a coupon by id, deleted ones included."""
    return await coupons_service.get_coupon(repo, coupon_id)


@router.put("/{coupon_id}", response_model=CouponRead)
async def update_coupon(coupon_id: UUID, payload: CouponUpdate, repo: RepositoryDep) -> CouponRead:
    """Apply the fields present in the body. The code is never changed."""
    return await coupons_service.update_coupon(repo, coupon_id, payload)


@router.delete("/{coupon_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_coupon(coupon_id: UUID, repo: RepositoryDep) -> Response:
    """Soft delete: the record stays readable by id."""
    await coupons_service.delete_coupon(repo, coupon_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{coupon_id}/publish", response_model=CouponRead)
async def publish_coupon(coupon_id: UUID, repo: RepositoryDep) -> CouponRead:
    return await coupons_service.publish_coupon(repo, coupon_id)


@router.post("/{coupon_id}/unpublish", response_model=CouponRead)
async def unpublish_coupon(coupon_id: UUID, repo: RepositoryDep) -> CouponRead:
    return await coupons_service.unpublish_coupon(repo, coupon_id)
