"""RFI schemas."""


from datetime import date, datetime

from pydantic import Field

from groundwork.domain.rfi import RfiPriority, RfiStatus
from groundwork.schemas.common import CamelModel


class _RfiFields(CamelModel):
    priority: RfiPriority | None = None
    due_date: date | None = None
    assigned_to_id: str | None = None
    assigned_to_name: str | None = Field(default=None, max_length=200)
    ball_in_court_id: str | None = None
    ball_in_court_name: str | None = Field(default=None, max_length=200)


class RfiCreate(_RfiFields):
    subject: str = Field(min_length=1, max_length=200)
    question: str = Field(min_length=1, max_length=10000)
    created_by_name: str | None = Field(default=None, max_length=200)


class RfiUpdate(_RfiFields):
    subject: str | None = Field(default=None, min_length=1, max_length=200)
    question: str | None = Field(default=None, min_length=1, max_length=10000)
    answer: str | None = Field(default=None, max_length=10000)
    status: RfiStatus | None = None


class RfiOut(CamelModel):
    id: str
    project_id: str
    number: int
    subject: str
    question: str
    answer: str | None = None
    status: RfiStatus
    priority: RfiPriority
    due_date: date | None = None
    answered_at: datetime | None = None
    closed_at: datetime | None = None
    assigned_to_id: str | None = None
    assigned_to_name: str | None = None
    ball_in_court_id: str | None = None
    ball_in_court_name: str | None = None
    created_by_name: str | None = None
    created_at: datetime
    updated_at: datetime
