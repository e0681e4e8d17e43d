"""Project Pydantic schemas (request DTOs and response models)."""


from datetime import date, datetime

from pydantic import Field, model_validator

from groundwork.domain.project import ProjectStatus, ProjectType
from groundwork.schemas.common import EMAIL_PATTERN, CamelModel, Hours, Money


class _ProjectFields(CamelModel):
    description: str | None = Field(default=None, max_length=2000)
    address: str | None = Field(default=None, max_length=500)
    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, max_length=50)
    zip_code: str | None = Field(default=None, max_length=20)
    client_name: str | None = Field(default=None, max_length=200)
    client_contact: str | None = Field(default=None, max_length=200)
    client_email: str | None = Field(default=None, max_length=256, pattern=EMAIL_PATTERN)
    client_phone: str | None = Field(default=None, max_length=50)
    start_date: date | None = None
    estimated_completion_date: date | None = None
    actual_completion_date: date | None = None
    original_budget: Money | None = Field(default=None, ge=0)
    project_manager_id: str | None = None
    superintendent_id: str | None = None

    @model_validator(mode="after")
    def _completion_after_start(self):
        if (
            self.start_date
            and self.estimated_completion_date
            and self.estimated_completion_date <= self.start_date
        ):
            raise ValueError("estimatedCompletionDate must be after startDate")
        return self


class ProjectCreate(_ProjectFields):
    name: str = Field(min_length=1, max_length=200)
    number: str = Field(min_length=1, max_length=50)
    type: ProjectType = ProjectType.COMMERCIAL
    contract_amount: Money = Field(default=0, ge=0)


class ProjectUpdate(_ProjectFields):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    number: str | None = Field(default=None, min_length=1, max_length=50)
    status: ProjectStatus | None = None
    type: ProjectType | None = None
    contract_amount: Money | None = Field(default=None, ge=0)


class ProjectOut(CamelModel):
    id: str
    name: str
    number: str
    description: str | None = None
    status: ProjectStatus
    type: ProjectType
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    client_name: str | None = None
    client_contact: str | None = None
    client_email: str | None = None
    client_phone: str | None = None
    start_date: date | None = None
    estimated_completion_date: date | None = None
    actual_completion_date: date | None = None
    contract_amount: Money
    original_budget: Money
    source_bid_id: str | None = None
    project_manager_id: str | None = None
    superintendent_id: str | None = None
    created_at: datetime
    updated_at: datetime


class ProjectStatsOut(CamelModel):
    project_id: str
    project_name: str
    project_number: str
    total_hours: Hours
    regular_hours: Hours
    overtime_hours: Hours
    doubletime_hours: Hours
    total_labor_cost: Money
    time_entry_count: int
    approved_entry_count: int
    pending_entry_count: int
    assigned_employee_count: int
    first_entry_date: date | None = None
    last_entry_date: date | None = None
