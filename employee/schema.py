from __future__ import annotations
from datetime import date
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from .models import EmployeeStatus


class EmployeeSchema(BaseModel):
    id: int
    manager_id: Optional[int] = None
    first_name: str
    last_name: str
    title: str
    status: EmployeeStatus
    model_config = ConfigDict(from_attributes=True)

# detail view, salary is None unless the caller may see it
class EmployeeDetailSchema(EmployeeSchema):
    document_id: str
    email: str
    hire_date: date
    salary: Optional[Decimal] = None

# PUBLIC payload, what clients send
class EmployeeCreatePayload(BaseModel):
    first_name: str = Field(..., min_length=2, max_length=100)
    last_name: str = Field(..., min_length=2, max_length=100)
    document_id: str = Field(..., max_length=20)
    email: str = Field(..., max_length=100)
    title: str = Field(..., max_length=100)
    hire_date: date
    salary: Decimal = Field(Decimal("0"), ge=0, le=Decimal("999999999.99"))
    manager_id: Optional[int] = None
    status: EmployeeStatus = EmployeeStatus.active
    model_config = ConfigDict(extra="forbid")


# INTERNAL DTO for the service
class EmployeeCreate(EmployeeCreatePayload):
    model_config = ConfigDict(extra="ignore")

# manager changes go through the hierarchy endpoints
class EmployeeUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=2, max_length=100)
    last_name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[str] = Field(None, max_length=100)
    title: Optional[str] = Field(None, max_length=100)
    document_id: Optional[str] = Field(None, max_length=20)
    hire_date: Optional[date] = None
    model_config = ConfigDict(extra="forbid")
