from typing import Optional, List
from sqlalchemy.orm import Session
from sqlalchemy import select, or_, func
from fastapi import HTTPException
from .models import Employee, EmployeeStatus
from .schema import EmployeeCreate, EmployeeUpdate

def _ordered(statement):
    return statement.order_by(Employee.last_name.asc(), Employee.first_name.asc(), Employee.id.asc())

def get_employees(
    db: Session,
    *,
    status: Optional[EmployeeStatus] = None,
    title: Optional[str] = None,
    ) -> List[Employee]:
    statement = select(Employee)
    if status is not None:
        statement = statement.where(Employee.status == status)
    if title is not None:
        statement = statement.where(Employee.title == title)
    return list(db.scalars(_ordered(statement)))

def search_employees(db: Session, term: str) -> List[Employee]:
    # LIKE wildcards in the term match literally
    escaped = term.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    pattern = f"%{escaped}%"
    statement = select(Employee).where(
        or_(
            func.lower(Employee.first_name).like(pattern, escape="\\"),
            func.lower(Employee.last_name).like(pattern, escape="\\"),
        )
    )
    return list(db.scalars(_ordered(statement)))

def get_employee(db: Session, employee_id: int) -> Optional[Employee]:
    return db.get(Employee, employee_id)

def get_employee_by_document(db: Session, document_id: str) -> Optional[Employee]:
    statement = select(Employee).where(Employee.document_id == document_id)
    return db.scalars(statement).first()

def create_employee(db: Session, employee: EmployeeCreate) -> Employee:
    if employee.manager_id is not None and db.get(Employee, employee.manager_id) is None:
        raise HTTPException(status_code=422, detail="manager not found")
    db_employee = Employee(**employee.model_dump())
    db.add(db_employee)
    db.commit()
    db.refresh(db_employee)
    return db_employee

def update_employee(db: Session, employee_id: int, patch: EmployeeUpdate) -> Optional[Employee]:
    db_employee = db.get(Employee, employee_id)
    if not db_employee:
        return None
    data = patch.model_dump(exclude_unset=True, exclude_none=True)
    for k,v in data.items():
        setattr(db_employee, k, v)
    db.commit()
    db.refresh(db_employee)
    return db_employee

def delete_employee(db: Session, employee_id: int) -> bool:
    db_employee = db.get(Employee, employee_id)
    if not db_employee:
        return False
    has_reports = db.scalar(select(func.count(Employee.id)).where(Employee.manager_id == employee_id))
    if has_reports:
        raise HTTPException(status_code=409, detail="employee has direct reports, reassign them first")
    db.delete(db_employee)
    db.commit()
    return True
