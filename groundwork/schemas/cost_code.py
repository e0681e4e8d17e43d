"""Cost code schemas."""


from datetime import datetime

from pydantic import Field

from groundwork.domain.cost_code import CostType
from groundwork.schemas.common import CamelModel


class CostCodeCreate(CamelModel):
    code: str = Field(min_length=1, max_length=20)
    description: str = Field(min_length=1, max_length=200)
    division: str | None = Field(default=None, max_length=10)
    cost_type: CostType = CostType.LABOR
    is_active: bool = True


class CostCodeUpdate(CamelModel):
    description: str | None = Field(default=None, min_length=1, max_length=200)
    division: str | None = Field(default=None, max_length=10)
    cost_type: CostType | None = None
    is_active: bool | None = None


class CostCodeOut(CamelModel):
    id: str
    code: str
    description: str
    division: str | None = None
    cost_type: CostType
    is_active: bool
    created_at: datetime
    updated_at: datetime
