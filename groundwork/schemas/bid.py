"""Bid Pydantic schemas (request DTOs and response models)."""


from datetime import date, datetime, timedelta

from pydantic import Field, model_validator

from groundwork.domain.bid import BidItemCategory, BidStatus
from groundwork.domain.project import ProjectType
from groundwork.schemas.common import CamelModel, Money


class BidItemIn(CamelModel):
    description: str = Field(min_length=1, max_length=500)
    category: BidItemCategory = BidItemCategory.GENERAL
    quantity: Money = Field(gt=0)
    unit_cost: Money = Field(ge=0)


class BidItemOut(CamelModel):
    id: str
    description: str
    category: BidItemCategory
    quantity: Money
    unit_cost: Money
    total_cost: Money


class _BidDates(CamelModel):
    bid_date: date | None = None
    due_date: date | None = None

    @model_validator(mode="after")
    def _check_dates(self):
        if self.bid_date and self.bid_date > date.today() + timedelta(days=365):
            raise ValueError("bidDate cannot be more than a year in the future")
        if self.bid_date and self.due_date and self.due_date <= self.bid_date:
            raise ValueError("dueDate must be after bidDate")
        return self


class BidCreate(_BidDates):
    name: str = Field(min_length=1, max_length=200)
    number: str = Field(min_length=1, max_length=50)
    description: str | None = Field(default=None, max_length=4000)
    owner: str | None = Field(default=None, max_length=200)
    estimated_value: Money = Field(default=0, ge=0)
    items: list[BidItemIn] = Field(default_factory=list)


class BidUpdate(_BidDates):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    number: str | None = Field(default=None, min_length=1, max_length=50)
    description: str | None = Field(default=None, max_length=4000)
    status: BidStatus | None = None
    owner: str | None = Field(default=None, max_length=200)
    estimated_value: Money | None = Field(default=None, ge=0)
    # When present, replaces the bid's items wholesale
    items: list[BidItemIn] | None = None


class BidOut(CamelModel):
    id: str
    name: str
    number: str
    description: str | None = None
    status: BidStatus
    owner: str | None = None
    estimated_value: Money
    bid_date: date | None = None
    due_date: date | None = None
    project_id: str | None = None
    items: list[BidItemOut] = []
    created_at: datetime
    updated_at: datetime


class ConvertBidRequest(CamelModel):
    project_number: str = Field(min_length=1, max_length=50)
    project_name: str | None = Field(default=None, min_length=1, max_length=200)
    project_type: ProjectType = ProjectType.COMMERCIAL


class ConvertBidResult(CamelModel):
    project_id: str
    bid_id: str
    project_name: str
    project_number: str
