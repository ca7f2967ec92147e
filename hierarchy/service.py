from __future__ import annotations
import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional, List

from core.config_loader import settings
from employee.models import Employee, EmployeeStatus

from .errors import HierarchyIntegrityFault, InvalidReassignment
from .store import HierarchyStore
from .traversal import walk_descendants, walk_managers

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365.25


@dataclass
class OrgChartNode:
    employee: Employee
    direct_report_count: int
    reports: List["OrgChartNode"] = field(default_factory=list)

    @property
    def id(self) -> int:
        return self.employee.id

    @property
    def full_name(self) -> str:
        return self.employee.full_name

    @property
    def title(self) -> str:
        return self.employee.title

    @property
    def status(self) -> EmployeeStatus:
        return self.employee.status

    @property
    def is_manager(self) -> bool:
        return self.direct_report_count > 0


@dataclass
class EmployeeHierarchySummary:
    id: int
    manager_id: Optional[int]
    is_top_level: bool
    is_manager: bool
    direct_report_count: int
    total_descendant_count: int


class HierarchyService:
    """
    Tree algorithms over the employee manager relation.

    Reads go through the store one lookup at a time; commands mutate the
    loaded records and commit once through store.save_changes().
    Lookups that miss return None or an empty list, commands that target a
    missing employee return False.
    """

    def __init__(self, store: HierarchyStore, *, max_depth: Optional[int] = None):
        self.store = store
        self.max_depth = settings.HIERARCHY_MAX_DEPTH if max_depth is None else max_depth

    def _budget(self) -> int:
        # a well-formed chain has fewer hops than there are employees
        return max(1, min(self.store.count(), self.max_depth))

    # ---------- lookups ----------

    def get_employee(self, employee_id: int) -> Optional[Employee]:
        return self.store.get_by_id(employee_id)

    def direct_reports(self, manager_id: int) -> List[Employee]:
        return self.store.get_children_of(manager_id)

    def all_descendants(self, manager_id: int) -> List[Employee]:
        try:
            return walk_descendants(manager_id, self.store.get_children_of, max_depth=self._budget())
        except HierarchyIntegrityFault as e:
            logger.error("descendant walk aborted: %s", e)
            raise

    def manager_chain(self, employee_id: int) -> List[Employee]:
        employee = self.store.get_by_id(employee_id)
        if employee is None:
            return []
        try:
            return walk_managers(employee, self.store.get_by_id, max_hops=self._budget())
        except HierarchyIntegrityFault as e:
            logger.error("manager chain walk aborted: %s", e)
            raise

    def direct_manager(self, employee_id: int) -> Optional[Employee]:
        employee = self.store.get_by_id(employee_id)
        if employee is None or employee.manager_id is None:
            return None
        return self.store.get_by_id(employee.manager_id)

    def top_level_employees(self) -> List[Employee]:
        return [e for e in self.store.get_all() if e.manager_id is None]

    def managers_only(self) -> List[Employee]:
        employees = self.store.get_all()
        manager_ids = {e.manager_id for e in employees if e.manager_id is not None}
        return [e for e in employees if e.id in manager_ids]

    def is_manager_of(self, candidate_manager_id: int, employee_id: int) -> bool:
        if candidate_manager_id == employee_id:
            return False
        return any(d.id == employee_id for d in self.all_descendants(candidate_manager_id))

    def has_direct_reports(self, employee_id: int) -> bool:
        return self.direct_report_count(employee_id) > 0

    def direct_report_count(self, manager_id: int) -> int:
        return len(self.store.get_children_of(manager_id))

    def total_descendant_count(self, manager_id: int) -> int:
        return len(self.all_descendants(manager_id))

    def summary(self, employee_id: int) -> Optional[EmployeeHierarchySummary]:
        employee = self.store.get_by_id(employee_id)
        if employee is None:
            return None
        direct = self.direct_report_count(employee_id)
        return EmployeeHierarchySummary(
            id=employee.id,
            manager_id=employee.manager_id,
            is_top_level=employee.manager_id is None,
            is_manager=direct > 0,
            direct_report_count=direct,
            total_descendant_count=self.total_descendant_count(employee_id),
        )

    def can_view_sensitive(self, viewer_id: int, employee_id: int) -> bool:
        """
        Salary and personal data are visible to the employee and to anyone
        above them in the chain.
        """
        if viewer_id == employee_id:
            return self.store.get_by_id(employee_id) is not None
        return any(m.id == viewer_id for m in self.manager_chain(employee_id))

    def org_chart(self) -> List[OrgChartNode]:
        """
        Nested chart of active employees.

        An active employee whose manager is inactive or missing is shown as a
        root so nobody drops off the chart.
        """
        employees = self.store.get_all()
        report_counts = Counter(e.manager_id for e in employees if e.manager_id is not None)
        active = [e for e in employees if e.status == EmployeeStatus.active]
        active_ids = {e.id for e in active}

        nodes = {e.id: OrgChartNode(employee=e, direct_report_count=report_counts[e.id]) for e in active}
        roots: List[OrgChartNode] = []
        for e in active:
            if e.manager_id is None or e.manager_id not in active_ids:
                roots.append(nodes[e.id])
            else:
                nodes[e.manager_id].reports.append(nodes[e.id])

        # every active employee must hang below some root
        placed = set()
        stack = list(roots)
        while stack:
            node = stack.pop()
            placed.add(node.id)
            stack.extend(node.reports)
        unplaced = sorted(active_ids - placed)
        if unplaced:
            logger.error("org chart: employees %s are caught in a manager cycle", unplaced)
            raise HierarchyIntegrityFault(unplaced[0], 0, "not reachable from a top-level employee")
        return roots

    # ---------- statistics ----------

    def _active(self) -> List[Employee]:
        return [e for e in self.store.get_all() if e.status == EmployeeStatus.active]

    def count_by_title(self) -> dict[str, int]:
        return dict(Counter(e.title for e in self._active()))

    def count_by_status(self) -> dict[str, int]:
        return dict(Counter(EmployeeStatus(e.status).value for e in self.store.get_all()))

    def count_active(self) -> int:
        return len(self._active())

    def average_tenure_years(self, today: Optional[date] = None) -> float:
        today = today or date.today()
        active = self._active()
        if not active:
            return 0.0
        return sum((today - e.hire_date).days / DAYS_PER_YEAR for e in active) / len(active)

    def longest_serving(self, limit: Optional[int] = None) -> List[Employee]:
        if limit is None:
            limit = settings.LONGEST_SERVING_LIMIT
        return sorted(self._active(), key=lambda e: (e.hire_date, e.id))[:limit]

    # ---------- commands ----------

    def can_assign_manager(self, candidate_manager_id: int, employee_id: int) -> bool:
        if candidate_manager_id == employee_id:
            return False
        # a subordinate above the employee would close a loop
        return all(d.id != candidate_manager_id for d in self.all_descendants(employee_id))

    def _check_assignment(self, employee_id: int, manager_id: int) -> None:
        reason = None
        if manager_id == employee_id:
            reason = "an employee cannot be their own manager"
        elif self.store.get_by_id(manager_id) is None:
            reason = "manager not found"
        elif not self.can_assign_manager(manager_id, employee_id):
            reason = "manager is a subordinate of the employee"
        if reason:
            logger.warning("rejected manager %s for employee %s: %s", manager_id, employee_id, reason)
            raise InvalidReassignment(employee_id, manager_id, reason)

    def reassign_manager(self, employee_id: int, new_manager_id: Optional[int]) -> bool:
        """
        Point employee_id at new_manager_id (None makes them top-level).

        The assignment guard runs first; a rejected pair raises
        InvalidReassignment and nothing is written. Returns whether a row
        changed, False for an unknown employee.
        """
        employee = self.store.get_by_id(employee_id)
        if employee is None:
            return False
        if new_manager_id is not None:
            self._check_assignment(employee_id, new_manager_id)

        previous = employee.manager_id
        employee.manager_id = new_manager_id
        changed = self.store.save_changes()
        logger.info("employee %s manager %s -> %s", employee_id, previous, new_manager_id)
        return changed

    def reassign_all_direct_reports(self, from_manager_id: int, to_manager_id: Optional[int]) -> bool:
        """
        Move every direct report of from_manager_id under to_manager_id in one
        commit. All moves are validated before any field is touched.
        """
        reports = self.store.get_children_of(from_manager_id)
        if not reports:
            return False
        if to_manager_id is not None:
            for report in reports:
                self._check_assignment(report.id, to_manager_id)

        for report in reports:
            report.manager_id = to_manager_id
        changed = self.store.save_changes()
        logger.info("moved %d reports from manager %s to %s", len(reports), from_manager_id, to_manager_id)
        return changed

    def change_status(self, employee_id: int, status: EmployeeStatus) -> bool:
        employee = self.store.get_by_id(employee_id)
        if employee is None:
            return False
        employee.status = status
        changed = self.store.save_changes()
        logger.info("employee %s status -> %s", employee_id, EmployeeStatus(status).value)
        return changed

    def update_salary(self, employee_id: int, new_salary: Decimal) -> bool:
        employee = self.store.get_by_id(employee_id)
        if employee is None:
            return False
        employee.salary = new_salary
        changed = self.store.save_changes()
        logger.info("employee %s salary updated", employee_id)
        return changed

    def promote(
        self,
        employee_id: int,
        new_title: str,
        new_manager_id: Optional[int] = None,
        new_salary: Optional[Decimal] = None,
        ) -> bool:
        """
        Change title and optionally salary and manager in a single commit.
        new_manager_id=None keeps the current manager.
        """
        employee = self.store.get_by_id(employee_id)
        if employee is None:
            return False
        if new_manager_id is not None:
            self._check_assignment(employee_id, new_manager_id)

        employee.title = new_title
        if new_salary is not None:
            employee.salary = new_salary
        if new_manager_id is not None:
            employee.manager_id = new_manager_id
        changed = self.store.save_changes()
        logger.info("promoted employee %s to %r", employee_id, new_title)
        return changed
