from __future__ import annotations
from datetime import date
from decimal import Decimal
from enum import Enum
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Date, Numeric, ForeignKey, CheckConstraint, Enum as SAEnum
from core.database import Base

class EmployeeStatus(str, Enum):
    active = "active"
    inactive = "inactive"
    on_leave = "on_leave"
    on_license = "on_license"

class Employee(Base):
    __tablename__ = "employees"

    id: Mapped[int] = mapped_column(primary_key=True)

    # self reference, None means top of the hierarchy
    manager_id: Mapped[int | None] = mapped_column(
        ForeignKey("employees.id", ondelete="RESTRICT"), nullable=True, index=True
    )

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name:  Mapped[str] = mapped_column(String(100), nullable=False)
    document_id: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(100), nullable=False)

    title:     Mapped[str]  = mapped_column(String(100), nullable=False)
    hire_date: Mapped[date] = mapped_column(Date(), nullable=False)
    salary:    Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))

    status: Mapped[EmployeeStatus] = mapped_column(
        SAEnum(EmployeeStatus, name="employee_status"),
        default=EmployeeStatus.active,
        nullable=False,
    )


    __table_args__ = (
        CheckConstraint("manager_id IS NULL OR manager_id <> id", name="ck_employee_not_own_manager"),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_top_level(self) -> bool:
        return self.manager_id is None
