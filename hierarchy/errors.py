from __future__ import annotations
from typing import Optional


class HierarchyError(Exception):
    """Base class for errors raised by the hierarchy service."""


class HierarchyIntegrityFault(HierarchyError):
    """
    The stored manager links do not form a tree: a walk revisited an employee
    or ran past its hop budget. Never retried; the whole operation is aborted.
    """

    def __init__(self, employee_id: int, hops: int, reason: str):
        self.employee_id = employee_id
        self.hops = hops
        self.reason = reason
        super().__init__(f"hierarchy integrity fault at employee {employee_id} after {hops} hops: {reason}")


class InvalidReassignment(HierarchyError):
    """A manager assignment was rejected before anything was written."""

    def __init__(self, employee_id: int, manager_id: Optional[int], reason: str):
        self.employee_id = employee_id
        self.manager_id = manager_id
        self.reason = reason
        super().__init__(f"cannot assign manager {manager_id} to employee {employee_id}: {reason}")
