"""Bid router — thin HTTP layer over BidService."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.pagination import PaginationParams
from groundwork.core.response import DataResponse, ListResponse, paginated
from groundwork.core.tenancy import get_tenant_id
from groundwork.db.base import get_db
from groundwork.domain.bid import BidStatus
from groundwork.schemas.bid import BidCreate, BidOut, BidUpdate, ConvertBidRequest, ConvertBidResult
from groundwork.services.bid import BidService

router = APIRouter(prefix="/bids", tags=["Bids"])


def _svc(session: AsyncSession, tenant_id: str) -> BidService:
    return BidService(session, tenant_id)


@router.get("", response_model=ListResponse[BidOut])
async def list_bids(
    filter_status: Optional[BidStatus] = Query(default=None, alias="status"),
    search: Optional[str] = Query(default=None, description="Matches name, number or owner"),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """List bids, newest first."""
    items, total = await _svc(session, tenant_id).list_bids(
        pagination, status=filter_status.value if filter_status else None, search=search
    )
    return paginated([BidOut.model_validate(b) for b in items], total, pagination)


@router.post("", response_model=DataResponse[BidOut], status_code=status.HTTP_201_CREATED)
async def create_bid(
    body: BidCreate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    bid = await _svc(session, tenant_id).create_bid(body)
    return {"data": BidOut.model_validate(bid)}


@router.get("/{bid_id}", response_model=DataResponse[BidOut])
async def get_bid(
    bid_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    bid = await _svc(session, tenant_id).get_bid(bid_id)
    return {"data": BidOut.model_validate(bid)}


@router.put("/{bid_id}", response_model=DataResponse[BidOut])
async def update_bid(
    bid_id: str,
    body: BidUpdate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Update a bid. Passing `items` replaces all existing line items."""
    bid = await _svc(session, tenant_id).update_bid(bid_id, body)
    return {"data": BidOut.model_validate(bid)}


@router.delete("/{bid_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_bid(
    bid_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    await _svc(session, tenant_id).delete_bid(bid_id)


@router.post("/{bid_id}/convert-to-project", response_model=DataResponse[ConvertBidResult])
async def convert_bid_to_project(
    bid_id: str,
    body: ConvertBidRequest,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Turn a won bid into a pre-construction project and link the two."""
    result = await _svc(session, tenant_id).convert_to_project(bid_id, body)
    return {"data": result}
