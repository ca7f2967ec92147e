from typing import NoReturn, Optional
from fastapi import APIRouter, Depends, HTTPException, Query

from authz.deps import require_employee
from employee.schema import EmployeeSchema
from .deps import get_hierarchy_service
from .errors import HierarchyIntegrityFault, InvalidReassignment
from .service import HierarchyService
from .schema import (
    EmployeeHierarchySummarySchema,
    OrgChartNodeSchema,
    HierarchyStatsSchema,
    RelationCheckSchema,
    CommandResultSchema,
    ManagerAssignPayload,
    ReassignReportsPayload,
    StatusPayload,
    PromotePayload,
    SalaryPayload,
)

hierarchy_router = APIRouter(prefix="/hierarchy", tags=["Hierarchy"])


def _integrity_error(e: HierarchyIntegrityFault) -> NoReturn:
    raise HTTPException(status_code=500, detail=f"hierarchy integrity fault: {e.reason}")

def _require_employee(svc: HierarchyService, employee_id: int) -> None:
    if svc.get_employee(employee_id) is None:
        raise HTTPException(status_code=404, detail="employee not found")


# ---------- whole-hierarchy queries ----------

@hierarchy_router.get("/top-level", response_model=list[EmployeeSchema])
def top_level(svc: HierarchyService = Depends(get_hierarchy_service)):
    return svc.top_level_employees()

@hierarchy_router.get("/managers", response_model=list[EmployeeSchema])
def managers(svc: HierarchyService = Depends(get_hierarchy_service)):
    return svc.managers_only()

@hierarchy_router.get("/org-chart", response_model=list[OrgChartNodeSchema])
def org_chart(svc: HierarchyService = Depends(get_hierarchy_service)):
    try:
        return svc.org_chart()
    except HierarchyIntegrityFault as e:
        _integrity_error(e)

@hierarchy_router.get("/stats", response_model=HierarchyStatsSchema)
def stats(svc: HierarchyService = Depends(get_hierarchy_service)):
    return HierarchyStatsSchema(
        by_title=svc.count_by_title(),
        by_status=svc.count_by_status(),
        active_count=svc.count_active(),
        average_tenure_years=round(svc.average_tenure_years(), 2),
    )

@hierarchy_router.get("/longest-serving", response_model=list[EmployeeSchema])
def longest_serving(
    limit: Optional[int] = Query(None, ge=1, le=100, description="Defaults to LONGEST_SERVING_LIMIT"),
    svc: HierarchyService = Depends(get_hierarchy_service),
):
    return svc.longest_serving(limit)


# ---------- per-employee queries ----------

@hierarchy_router.get("/{employee_id}/reports", response_model=list[EmployeeSchema])
def direct_reports(employee_id: int, svc: HierarchyService = Depends(get_hierarchy_service)):
    return svc.direct_reports(employee_id)

@hierarchy_router.get("/{employee_id}/descendants", response_model=list[EmployeeSchema])
def descendants(employee_id: int, svc: HierarchyService = Depends(get_hierarchy_service)):
    try:
        return svc.all_descendants(employee_id)
    except HierarchyIntegrityFault as e:
        _integrity_error(e)

@hierarchy_router.get("/{employee_id}/manager", response_model=EmployeeSchema)
def direct_manager(employee_id: int, svc: HierarchyService = Depends(get_hierarchy_service)):
    obj = svc.direct_manager(employee_id)
    if not obj:
        raise HTTPException(status_code=404, detail="employee has no manager")
    return obj

@hierarchy_router.get("/{employee_id}/chain", response_model=list[EmployeeSchema])
def manager_chain(employee_id: int, svc: HierarchyService = Depends(get_hierarchy_service)):
    try:
        return svc.manager_chain(employee_id)
    except HierarchyIntegrityFault as e:
        _integrity_error(e)

@hierarchy_router.get("/{employee_id}/summary", response_model=EmployeeHierarchySummarySchema)
def summary(employee_id: int, svc: HierarchyService = Depends(get_hierarchy_service)):
    try:
        obj = svc.summary(employee_id)
    except HierarchyIntegrityFault as e:
        _integrity_error(e)
    if not obj:
        raise HTTPException(status_code=404, detail="employee not found")
    return obj

@hierarchy_router.get("/{manager_id}/manages/{employee_id}", response_model=RelationCheckSchema)
def manages(manager_id: int, employee_id: int, svc: HierarchyService = Depends(get_hierarchy_service)):
    try:
        result = svc.is_manager_of(manager_id, employee_id)
    except HierarchyIntegrityFault as e:
        _integrity_error(e)
    return RelationCheckSchema(manager_id=manager_id, employee_id=employee_id, result=result)

@hierarchy_router.get("/{manager_id}/can-manage/{employee_id}", response_model=RelationCheckSchema)
def can_manage(manager_id: int, employee_id: int, svc: HierarchyService = Depends(get_hierarchy_service)):
    try:
        result = svc.can_assign_manager(manager_id, employee_id)
    except HierarchyIntegrityFault as e:
        _integrity_error(e)
    return RelationCheckSchema(manager_id=manager_id, employee_id=employee_id, result=result)


# ---------- commands ----------

@hierarchy_router.put("/{employee_id}/manager", response_model=CommandResultSchema)
def assign_manager(
    employee_id: int,
    payload: ManagerAssignPayload,
    svc: HierarchyService = Depends(get_hierarchy_service),
    _caller: int = Depends(require_employee),
):
    _require_employee(svc, employee_id)
    try:
        changed = svc.reassign_manager(employee_id, payload.manager_id)
    except InvalidReassignment as e:
        raise HTTPException(status_code=409, detail=e.reason)
    except HierarchyIntegrityFault as e:
        _integrity_error(e)
    return CommandResultSchema(changed=changed)

@hierarchy_router.post("/{employee_id}/reports/reassign", response_model=CommandResultSchema)
def reassign_reports(
    employee_id: int,
    payload: ReassignReportsPayload,
    svc: HierarchyService = Depends(get_hierarchy_service),
    _caller: int = Depends(require_employee),
):
    _require_employee(svc, employee_id)
    try:
        changed = svc.reassign_all_direct_reports(employee_id, payload.to_manager_id)
    except InvalidReassignment as e:
        raise HTTPException(status_code=409, detail=e.reason)
    except HierarchyIntegrityFault as e:
        _integrity_error(e)
    return CommandResultSchema(changed=changed)

@hierarchy_router.patch("/{employee_id}/status", response_model=CommandResultSchema)
def change_status(
    employee_id: int,
    payload: StatusPayload,
    svc: HierarchyService = Depends(get_hierarchy_service),
    _caller: int = Depends(require_employee),
):
    _require_employee(svc, employee_id)
    return CommandResultSchema(changed=svc.change_status(employee_id, payload.status))

@hierarchy_router.post("/{employee_id}/promote", response_model=CommandResultSchema)
def promote(
    employee_id: int,
    payload: PromotePayload,
    svc: HierarchyService = Depends(get_hierarchy_service),
    _caller: int = Depends(require_employee),
):
    _require_employee(svc, employee_id)
    try:
        changed = svc.promote(employee_id, payload.title, payload.manager_id, payload.salary)
    except InvalidReassignment as e:
        raise HTTPException(status_code=409, detail=e.reason)
    except HierarchyIntegrityFault as e:
        _integrity_error(e)
    return CommandResultSchema(changed=changed)

@hierarchy_router.put("/{employee_id}/salary", response_model=CommandResultSchema)
def update_salary(
    employee_id: int,
    payload: SalaryPayload,
    svc: HierarchyService = Depends(get_hierarchy_service),
    _caller: int = Depends(require_employee),
):
    _require_employee(svc, employee_id)
    return CommandResultSchema(changed=svc.update_salary(employee_id, payload.salary))
