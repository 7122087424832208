# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import employee, action

# Explicit class exports for cleaner imports
from .employee import Employee, EmployeeStatus
from .action import EmployeeAction, CompensationAction

__all__ = [
    "Employee",
    "EmployeeStatus",
    "EmployeeAction",
    "CompensationAction",
]
