"""Bid service: bids with line items, and conversion of a won bid into a project."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.exceptions import BusinessRuleError, ConflictError, NotFoundError, ValidationError
from groundwork.core.money import to_cents
from groundwork.core.pagination import PaginationParams
from groundwork.domain.bid import Bid, BidItem, BidStatus
from groundwork.domain.project import ProjectStatus
from groundwork.repositories.bid import BidRepository
from groundwork.repositories.project import ProjectRepository
from groundwork.schemas.bid import BidCreate, BidItemIn, BidUpdate, ConvertBidRequest, ConvertBidResult

logger = logging.getLogger(__name__)


class BidService:
    def __init__(self, session: AsyncSession, tenant_id: str):
        self._tenant_id = tenant_id
        self._repo = BidRepository(session, tenant_id)
        self._projects = ProjectRepository(session, tenant_id)

    def _build_items(self, items: list[BidItemIn]) -> list[BidItem]:
        return [
            BidItem(
                tenant_id=self._tenant_id,
                position=position,
                description=item.description,
                category=item.category,
                quantity=item.quantity,
                unit_cost=item.unit_cost,
                total_cost=to_cents(item.quantity * item.unit_cost),
            )
            for position, item in enumerate(items)
        ]

    async def list_bids(
        self, pagination: PaginationParams, *, status: str | None = None, search: str | None = None
    ):
        return await self._repo.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
            filters={"status": status},
            conditions=[BidRepository.search_condition(search)] if search else None,
        )

    async def get_bid(self, bid_id: str) -> Bid:
        bid = await self._repo.get_by_id(bid_id)
        if not bid:
            raise NotFoundError("Bid", bid_id)
        return bid

    async def create_bid(self, data: BidCreate) -> Bid:
        if await self._repo.number_taken(data.number):
            raise ConflictError(f"Bid number '{data.number}' already exists", code="DUPLICATE_NUMBER")
        fields = data.model_dump(exclude_none=True, exclude={"items"})
        bid = Bid(status=BidStatus.DRAFT.value, items=self._build_items(data.items), **fields)
        bid = await self._repo.add(bid)
        logger.info("Created bid %s with %d items", bid.number, len(bid.items))
        return bid

    async def update_bid(self, bid_id: str, data: BidUpdate) -> Bid:
        bid = await self.get_bid(bid_id)
        changes = self._repo.changes(data, exclude={"items"})
        bid_date = changes.get("bid_date", bid.bid_date)
        due_date = changes.get("due_date", bid.due_date)
        if bid_date and due_date and due_date <= bid_date:
            raise ValidationError("dueDate must be after bidDate")
        if changes.get("number") and await self._repo.number_taken(changes["number"], exclude_id=bid_id):
            raise ConflictError(f"Bid number '{changes['number']}' already exists", code="DUPLICATE_NUMBER")
        for field, value in changes.items():
            setattr(bid, field, value)
        if data.items is not None:
            bid.items = self._build_items(data.items)
        return await self._repo.save(bid)

    async def delete_bid(self, bid_id: str) -> None:
        deleted = await self._repo.soft_delete(bid_id)
        if not deleted:
            raise NotFoundError("Bid", bid_id)

    async def convert_to_project(self, bid_id: str, request: ConvertBidRequest) -> ConvertBidResult:
        bid = await self.get_bid(bid_id)
        if bid.status != BidStatus.WON.value:
            raise BusinessRuleError("Only won bids can be converted to projects", code="INVALID_STATUS")
        if bid.project_id:
            raise ConflictError("Bid has already been converted to a project", code="ALREADY_CONVERTED")
        if await self._projects.number_taken(request.project_number):
            raise ConflictError(
                f"Project number '{request.project_number}' already exists", code="DUPLICATE_NUMBER"
            )

        project = await self._projects.create(
            name=request.project_name or bid.name,
            number=request.project_number,
            description=bid.description,
            status=ProjectStatus.PRE_CONSTRUCTION.value,
            type=request.project_type,
            contract_amount=bid.estimated_value,
            source_bid_id=bid.id,
        )
        bid.project_id = project.id
        await self._repo.save(bid)
        logger.info("Converted bid %s to project %s (%s)", bid.number, project.number, project.id)

        return ConvertBidResult(
            project_id=project.id,
            bid_id=bid.id,
            project_name=project.name,
            project_number=project.number,
        )
