from __future__ import annotations
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from employee.models import EmployeeStatus


class EmployeeHierarchySummarySchema(BaseModel):
    id: int
    manager_id: Optional[int] = None
    is_top_level: bool
    is_manager: bool
    direct_report_count: int
    total_descendant_count: int
    model_config = ConfigDict(from_attributes=True)

class OrgChartNodeSchema(BaseModel):
    id: int
    full_name: str
    title: str
    status: EmployeeStatus
    is_manager: bool
    direct_report_count: int
    reports: list[OrgChartNodeSchema] = []
    model_config = ConfigDict(from_attributes=True)

class HierarchyStatsSchema(BaseModel):
    by_title: dict[str, int]
    by_status: dict[str, int]
    active_count: int
    average_tenure_years: float

class RelationCheckSchema(BaseModel):
    manager_id: int
    employee_id: int
    result: bool

class CommandResultSchema(BaseModel):
    changed: bool

class ManagerAssignPayload(BaseModel):
    manager_id: Optional[int] = Field(None, description="New manager, null makes the employee top-level")
    model_config = ConfigDict(extra="forbid")

class ReassignReportsPayload(BaseModel):
    to_manager_id: Optional[int] = Field(None, description="New manager for every direct report, null promotes them to top-level")
    model_config = ConfigDict(extra="forbid")

class StatusPayload(BaseModel):
    status: EmployeeStatus
    model_config = ConfigDict(extra="forbid")

class PromotePayload(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    manager_id: Optional[int] = Field(None, description="If omitted, the current manager is kept")
    salary: Optional[Decimal] = Field(None, ge=0, le=Decimal("999999999.99"))
    model_config = ConfigDict(extra="forbid")

class SalaryPayload(BaseModel):
    salary: Decimal = Field(..., ge=0, le=Decimal("999999999.99"))
    model_config = ConfigDict(extra="forbid")
