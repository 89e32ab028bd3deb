"""
Department persistence operations.
Write paths validate the payload, resolve every reference it names, stamp the
acting user and let the unique index on department_code arbitrate collisions.
Departments are retired, never deleted.
"""

import logging
from datetime import date
from typing import Any, List, Mapping, Optional, Union

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.db.models.departments import Departments
from app.db.models.employees import Employees
from app.db.models.users import Users
from app.db.normalization import normalize_code
from app.schemas.departments import DepartmentCreate, DepartmentUpdate
from app.services.org.errors import DuplicateKeyError, RecordNotFoundError
from app.services.org.hierarchy import find_cycle, walk_chain
from app.services.org.validation import commit_or_raise, parse_payload, resolve_reference


logger = logging.getLogger(__name__)


def _parent_of(department: Departments) -> Optional[Departments]:
    return department.parent


def _get_or_raise(db: Session, department_id: int) -> Departments:
    department = get_department(db, department_id)
    if department is None:
        raise RecordNotFoundError("Department", department_id)
    return department


def _check_code_available(db: Session, code: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(Departments.id).filter(Departments.department_code == code)
    if exclude_id is not None:
        query = query.filter(Departments.id != exclude_id)
    if query.first():
        logger.warning(f"Department code {code} already in use")
        raise DuplicateKeyError("department_code", code)


def create_department(
    db: Session,
    payload: Union[DepartmentCreate, Mapping[str, Any]],
    actor_id: int,
) -> Departments:
    data = parse_payload(DepartmentCreate, payload)

    actor = resolve_reference(db, Users, actor_id, "created_by")
    resolve_reference(db, Departments, data.parent_department_id, "parent_department_id")
    resolve_reference(db, Employees, data.department_head_id, "department_head_id")
    _check_code_available(db, data.department_code)

    department = Departments(**data.model_dump(), created_by=actor_id, updated_by=actor_id)
    db.add(department)
    commit_or_raise(db, department)

    logger.info(f"Created department {department.department_code} (id={department.id}) by {actor.display_name}")
    return department


def update_department(
    db: Session,
    department_id: int,
    payload: Union[DepartmentUpdate, Mapping[str, Any]],
    actor_id: int,
) -> Departments:
    data = parse_payload(DepartmentUpdate, payload)
    department = _get_or_raise(db, department_id)

    actor = resolve_reference(db, Users, actor_id, "updated_by")
    update_data = data.model_dump(exclude_unset=True)

    if update_data.get("parent_department_id") is not None:
        resolve_reference(db, Departments, update_data["parent_department_id"], "parent_department_id")
    if update_data.get("department_head_id") is not None:
        resolve_reference(db, Employees, update_data["department_head_id"], "department_head_id")
    if update_data.get("department_code") is not None:
        _check_code_available(db, update_data["department_code"], exclude_id=department.id)

    for field, value in update_data.items():
        setattr(department, field, value)
    department.updated_by = actor_id

    commit_or_raise(db, department)
    logger.info(f"Updated department {department.department_code} (id={department.id}) fields={sorted(update_data)} by {actor.display_name}")
    return department


def retire_department(
    db: Session,
    department_id: int,
    actor_id: int,
    end_date: Optional[date] = None,
) -> Departments:
    """Deactivate a department and close its validity window.
    An end_date already on the record is kept unless a new one is given.
    """
    department = _get_or_raise(db, department_id)
    actor = resolve_reference(db, Users, actor_id, "updated_by")

    department.is_active = False
    department.end_date = end_date or department.end_date or date.today()
    department.updated_by = actor_id

    commit_or_raise(db, department)
    logger.info(f"Retired department {department.department_code} (id={department.id}) as of {department.end_date} by {actor.display_name}")
    return department


def get_department(db: Session, department_id: int) -> Optional[Departments]:
    return db.query(Departments).filter(Departments.id == department_id).first()


def get_department_by_code(db: Session, code: str) -> Optional[Departments]:
    return db.query(Departments).filter(Departments.department_code == normalize_code(code)).first()


def list_departments(
    db: Session,
    parent_id: Optional[int] = None,
    head_id: Optional[int] = None,
    is_active: Optional[bool] = None,
    effective_on: Optional[date] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[Departments]:
    query = db.query(Departments)

    if parent_id is not None:
        query = query.filter(Departments.parent_department_id == parent_id)
    if head_id is not None:
        query = query.filter(Departments.department_head_id == head_id)
    if is_active is not None:
        query = query.filter(Departments.is_active == is_active)
    if effective_on is not None:
        query = query.filter(
            Departments.effective_date <= effective_on,
            or_(Departments.end_date.is_(None), Departments.end_date >= effective_on),
        )

    return query.order_by(Departments.department_code).offset(skip).limit(limit).all()


def list_child_departments(db: Session, department_id: int) -> List[Departments]:
    return (
        db.query(Departments)
        .filter(Departments.parent_department_id == department_id)
        .order_by(Departments.department_code)
        .all()
    )


def get_department_ancestors(db: Session, department_id: int) -> List[Departments]:
    """Parent chain from the immediate parent up to the root."""
    return walk_chain(_get_or_raise(db, department_id), _parent_of)


def find_department_cycle(db: Session, department_id: int) -> Optional[List[int]]:
    """Ids along the loop if the parent chain never reaches a root, else None."""
    return find_cycle(_get_or_raise(db, department_id), _parent_of)
