from .employee import Employee, EmployeeStatus

__all__ = ["Employee", "EmployeeStatus"]
