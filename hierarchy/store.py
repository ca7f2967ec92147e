from __future__ import annotations
from typing import Optional, List, Protocol

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from employee.models import Employee


class HierarchyStore(Protocol):
    def get_by_id(self, employee_id: int) -> Optional[Employee]: ...
    def get_children_of(self, manager_id: int) -> List[Employee]: ...
    def get_all(self) -> List[Employee]: ...
    def count(self) -> int: ...
    def save_changes(self) -> bool: ...


class SqlAlchemyHierarchyStore:
    """HierarchyStore over the employees table."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self.db.get(Employee, employee_id)

    def get_children_of(self, manager_id: int) -> List[Employee]:
        stmt = (
            select(Employee)
            .where(Employee.manager_id == manager_id)
            .order_by(Employee.last_name.asc(), Employee.first_name.asc(), Employee.id.asc())
        )
        return list(self.db.scalars(stmt))

    def get_all(self) -> List[Employee]:
        stmt = select(Employee).order_by(Employee.last_name.asc(), Employee.first_name.asc(), Employee.id.asc())
        return list(self.db.scalars(stmt))

    def count(self) -> int:
        return self.db.scalar(select(func.count(Employee.id))) or 0

    def save_changes(self) -> bool:
        # pending field writes only; callers must not query between mutating and saving
        changed = any(self.db.is_modified(obj) for obj in self.db.dirty)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return changed
