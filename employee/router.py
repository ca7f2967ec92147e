from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.database import get_db
from authz.deps import get_current_employee_id
from hierarchy.deps import get_hierarchy_service
from hierarchy.errors import HierarchyIntegrityFault
from hierarchy.service import HierarchyService
from .models import EmployeeStatus
from .schema import EmployeeSchema, EmployeeDetailSchema, EmployeeCreatePayload, EmployeeCreate, EmployeeUpdate
from . import service

employee_router = APIRouter(prefix="/employees", tags=["Employees"])

# List all employees
@employee_router.get("", response_model=list[EmployeeSchema])
def list_employees(
    status_filter: Optional[EmployeeStatus] = Query(None, alias="status", description="Only employees in this status"),
    title: Optional[str] = Query(None, description="Only employees with this title"),
    db: Session = Depends(get_db),
):
    return service.get_employees(db, status=status_filter, title=title)

# Search by first or last name
@employee_router.get("/search", response_model=list[EmployeeSchema])
def search_employees(q: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    return service.search_employees(db, q)

# Get employee by identity document
@employee_router.get("/by-document/{document_id}", response_model=EmployeeSchema)
def employee_by_document(document_id: str, db: Session = Depends(get_db)):
    obj = service.get_employee_by_document(db, document_id)
    if not obj:
        raise HTTPException(status_code=404, detail="employee not found")
    return obj

# Get employee by id, salary only for the employee and their managers
@employee_router.get("/{employee_id}", response_model=EmployeeDetailSchema)
def employee_detail(
    employee_id: int,
    db: Session = Depends(get_db),
    viewer_id: Optional[int] = Depends(get_current_employee_id),
    hierarchy: HierarchyService = Depends(get_hierarchy_service),
):
    obj = service.get_employee(db, employee_id)
    if not obj:
        raise HTTPException(status_code=404, detail="employee not found")
    detail = EmployeeDetailSchema.model_validate(obj)
    try:
        visible = viewer_id is not None and hierarchy.can_view_sensitive(viewer_id, employee_id)
    except HierarchyIntegrityFault as e:
        raise HTTPException(status_code=500, detail=f"hierarchy integrity fault: {e.reason}")
    if not visible:
        detail.salary = None
    return detail

# Create employee
@employee_router.post("", response_model=EmployeeSchema, status_code=status.HTTP_201_CREATED)
def employee_post(payload: EmployeeCreatePayload, db: Session = Depends(get_db)):
    internal = EmployeeCreate(**payload.model_dump())
    try:
        return service.create_employee(db, internal)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="employee document already exists")

# Update employee
@employee_router.patch("/{employee_id}", response_model=EmployeeSchema)
def employee_patch(employee_id: int, payload: EmployeeUpdate, db: Session = Depends(get_db)):
    obj = service.get_employee(db, employee_id)
    if not obj:
        raise HTTPException(status_code=404, detail="employee not found")
    try:
        return service.update_employee(db, employee_id, payload)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="employee document already exists")

# Delete employee, refused while they still have direct reports
@employee_router.delete("/{employee_id}")
def employee_delete(employee_id: int, db: Session = Depends(get_db)):
    obj = service.get_employee(db, employee_id)
    if not obj:
        raise HTTPException(status_code=404, detail="employee not found")
    service.delete_employee(db, employee_id)
    return {"message": "employee deleted"}
