"""
Organisation structure data layer: departments and positions.

Usage:
    from app.services.org import create_department, create_position

    eng = create_department(db, {
        "department_code": "eng",
        "department_name": "Engineering",
        "effective_date": date(2024, 1, 1),
    }, actor_id=admin.id)
    # eng.department_code == "ENG"
"""

from .errors import (
    OrgDataError,
    MissingRequiredFieldError,
    DuplicateKeyError,
    InvalidReferenceError,
    TypeMismatchError,
    ReadOnlyFieldError,
    HierarchyCycleError,
    RecordNotFoundError,
)
from .departments import (
    create_department,
    update_department,
    retire_department,
    get_department,
    get_department_by_code,
    list_departments,
    list_child_departments,
    get_department_ancestors,
    find_department_cycle,
)
from .positions import (
    create_position,
    update_position,
    retire_position,
    get_position,
    get_position_by_code,
    list_positions,
    list_direct_reports,
    get_reporting_chain,
    find_reporting_cycle,
    is_over_allocated,
)

__all__ = [
    # Errors
    "OrgDataError",
    "MissingRequiredFieldError",
    "DuplicateKeyError",
    "InvalidReferenceError",
    "TypeMismatchError",
    "ReadOnlyFieldError",
    "HierarchyCycleError",
    "RecordNotFoundError",
    # Departments
    "create_department",
    "update_department",
    "retire_department",
    "get_department",
    "get_department_by_code",
    "list_departments",
    "list_child_departments",
    "get_department_ancestors",
    "find_department_cycle",
    # Positions
    "create_position",
    "update_position",
    "retire_position",
    "get_position",
    "get_position_by_code",
    "list_positions",
    "list_direct_reports",
    "get_reporting_chain",
    "find_reporting_cycle",
    "is_over_allocated",
]
