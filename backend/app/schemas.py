# backend/app/schemas.py
from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    StrictStr,
    field_validator,
)
from pydantic.alias_generators import to_camel


UserRole = Literal["admin", "portfolio_manager", "program_manager", "project_manager", "contributor"]
EntityStatus = Literal["active", "on_hold", "completed", "cancelled"]
LookupType = Literal["demand", "project"]
Priority = Literal["high", "medium", "low"]
ProductStatus = Literal["in_development", "active", "deprecated", "sunset"]
ChangeType = Literal["created", "updated", "deleted", "status_changed"]

Name = Annotated[StrictStr, Field(min_length=1, max_length=200)]
# Column widths: budgets are BIGINT, effort hours INTEGER
MAX_CENTS = 2**63 - 1
MAX_EFFORT_HOURS = 2**31 - 1

Cents = Annotated[StrictInt, Field(ge=0, le=MAX_CENTS)]


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in Python; both accepted on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _reject_null(v: Any) -> Any:
    if v is None:
        raise ValueError("may not be null")
    return v


# -------------------- Users --------------------

class UserOut(ApiModel):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    role: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserUpsert(ApiModel):
    id: StrictStr = Field(min_length=1, max_length=64)
    email: Optional[StrictStr] = None
    first_name: Optional[StrictStr] = None
    last_name: Optional[StrictStr] = None
    profile_image_url: Optional[StrictStr] = None
    role: Optional[UserRole] = None


class UserRoleUpdate(ApiModel):
    role: UserRole


# -------------------- Portfolios / Programs --------------------

class PortfolioCreate(ApiModel):
    name: Name
    description: Optional[StrictStr] = None
    status: EntityStatus = "active"
    budget: Optional[Cents] = None


class PortfolioUpdate(ApiModel):
    name: Optional[Name] = None
    description: Optional[StrictStr] = None
    status: Optional[EntityStatus] = None
    budget: Optional[Cents] = None

    @field_validator("name", "status")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        return _reject_null(v)


class PortfolioOut(ApiModel):
    id: str
    name: str
    description: Optional[str] = None
    owner_id: str
    status: str
    budget: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class ProgramCreate(ApiModel):
    name: Name
    description: Optional[StrictStr] = None
    portfolio_id: StrictStr
    status: EntityStatus = "active"
    budget: Optional[Cents] = None


class ProgramUpdate(ApiModel):
    name: Optional[Name] = None
    description: Optional[StrictStr] = None
    portfolio_id: Optional[StrictStr] = None
    status: Optional[EntityStatus] = None
    budget: Optional[Cents] = None

    @field_validator("name", "portfolio_id", "status")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        return _reject_null(v)


class ProgramOut(ApiModel):
    id: str
    name: str
    description: Optional[str] = None
    portfolio_id: str
    owner_id: str
    status: str
    budget: Optional[int] = None
    created_at: datetime
    updated_at: datetime


# -------------------- Lookups --------------------

class PhaseCreate(ApiModel):
    name: Name
    type: LookupType
    order: Optional[StrictInt] = Field(default=None, ge=0)
    is_active: bool = True


class PhaseUpdate(ApiModel):
    name: Optional[Name] = None
    order: Optional[StrictInt] = Field(default=None, ge=0)
    is_active: Optional[bool] = None

    @field_validator("name", "order", "is_active")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        return _reject_null(v)


class PhaseOut(ApiModel):
    id: str
    name: str
    type: str
    order: int
    is_active: bool


class StatusCreate(ApiModel):
    name: Name
    type: LookupType
    color: StrictStr = Field(default="gray", min_length=1, max_length=40)
    is_active: bool = True


class StatusUpdate(ApiModel):
    name: Optional[Name] = None
    color: Optional[StrictStr] = Field(default=None, min_length=1, max_length=40)
    is_active: Optional[bool] = None

    @field_validator("name", "color", "is_active")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        return _reject_null(v)


class StatusOut(ApiModel):
    id: str
    name: str
    type: str
    color: str
    is_active: bool


# -------------------- Demands / Projects / Products --------------------

class DemandCreate(ApiModel):
    title: Name
    description: Optional[StrictStr] = None
    program_id: StrictStr
    phase_id: Optional[StrictStr] = None
    status_id: Optional[StrictStr] = None
    priority: Priority = "medium"
    requested_date: Optional[datetime] = None
    estimated_effort: Optional[StrictInt] = Field(default=None, ge=0, le=MAX_EFFORT_HOURS)
    business_value: Optional[StrictStr] = None


class DemandUpdate(ApiModel):
    title: Optional[Name] = None
    description: Optional[StrictStr] = None
    program_id: Optional[StrictStr] = None
    phase_id: Optional[StrictStr] = None
    status_id: Optional[StrictStr] = None
    priority: Optional[Priority] = None
    requested_date: Optional[datetime] = None
    estimated_effort: Optional[StrictInt] = Field(default=None, ge=0, le=MAX_EFFORT_HOURS)
    business_value: Optional[StrictStr] = None

    @field_validator("title", "program_id", "priority", "requested_date")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        return _reject_null(v)


class DemandOut(ApiModel):
    id: str
    title: str
    description: Optional[str] = None
    program_id: str
    phase_id: Optional[str] = None
    status_id: Optional[str] = None
    owner_id: str
    priority: str
    requested_date: datetime
    estimated_effort: Optional[int] = None
    business_value: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ProjectCreate(ApiModel):
    title: Name
    description: Optional[StrictStr] = None
    program_id: StrictStr
    demand_id: Optional[StrictStr] = None
    phase_id: Optional[StrictStr] = None
    status_id: Optional[StrictStr] = None
    project_manager_id: Optional[StrictStr] = None
    priority: Priority = "medium"
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    budget: Optional[Cents] = None
    progress: StrictInt = Field(default=0, ge=0, le=100)


class ProjectUpdate(ApiModel):
    title: Optional[Name] = None
    description: Optional[StrictStr] = None
    program_id: Optional[StrictStr] = None
    demand_id: Optional[StrictStr] = None
    phase_id: Optional[StrictStr] = None
    status_id: Optional[StrictStr] = None
    project_manager_id: Optional[StrictStr] = None
    priority: Optional[Priority] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    budget: Optional[Cents] = None
    progress: Optional[StrictInt] = Field(default=None, ge=0, le=100)

    @field_validator("title", "program_id", "priority", "progress")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        return _reject_null(v)


class ProjectOut(ApiModel):
    id: str
    title: str
    description: Optional[str] = None
    program_id: str
    demand_id: Optional[str] = None
    phase_id: Optional[str] = None
    status_id: Optional[str] = None
    owner_id: str
    project_manager_id: Optional[str] = None
    priority: str
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    budget: Optional[int] = None
    progress: int
    created_at: datetime
    updated_at: datetime


class ProductCreate(ApiModel):
    name: Name
    description: Optional[StrictStr] = None
    program_id: StrictStr
    status: ProductStatus = "in_development"
    version: StrictStr = Field(default="1.0.0", min_length=1, max_length=40)
    launch_date: Optional[datetime] = None
    business_value: Optional[StrictStr] = None


class ProductUpdate(ApiModel):
    name: Optional[Name] = None
    description: Optional[StrictStr] = None
    program_id: Optional[StrictStr] = None
    status: Optional[ProductStatus] = None
    version: Optional[StrictStr] = Field(default=None, min_length=1, max_length=40)
    launch_date: Optional[datetime] = None
    business_value: Optional[StrictStr] = None

    @field_validator("name", "program_id", "status", "version")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        return _reject_null(v)


class ProductOut(ApiModel):
    id: str
    name: str
    description: Optional[str] = None
    program_id: str
    owner_id: str
    status: str
    version: str
    launch_date: Optional[datetime] = None
    business_value: Optional[str] = None
    created_at: datetime
    updated_at: datetime


# -------------------- Relationships --------------------

class ProjectProductCreate(ApiModel):
    project_id: StrictStr
    product_id: StrictStr


class ProjectProductOut(ApiModel):
    id: str
    project_id: str
    product_id: str


class AssignmentCreate(ApiModel):
    project_id: StrictStr
    user_id: StrictStr
    role: StrictStr = Field(min_length=1, max_length=60)


class AssignmentOut(ApiModel):
    id: str
    project_id: str
    user_id: str
    role: str
    assigned_at: datetime


# -------------------- Audit --------------------

class FieldChange(ApiModel):
    before: Any = None
    after: Any = None


class CreatedDetails(ApiModel):
    kind: Literal["created"] = "created"
    snapshot: dict[str, Any]


class ChangedDetails(ApiModel):
    kind: Literal["updated", "status_changed"]
    changes: dict[str, FieldChange]


class DeletedDetails(ApiModel):
    kind: Literal["deleted"] = "deleted"
    id: str


AuditDetails = Annotated[Union[CreatedDetails, ChangedDetails, DeletedDetails], Field(discriminator="kind")]


class AuditLogOut(ApiModel):
    id: str
    entity_type: str
    entity_id: str
    change_type: ChangeType
    changed_by: str
    details: Optional[AuditDetails] = None
    timestamp: datetime


# -------------------- Dashboard --------------------

class DashboardMetricsOut(ApiModel):
    active_projects: int
    pending_demands: int
    budget_utilized: int = Field(ge=0, le=100)
    at_risk_projects: int
