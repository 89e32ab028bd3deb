"""
Position persistence operations.
Same write contract as departments, plus the headcount checks: a position
filled past its budget is allowed but logged, since over-allocation is an
advisory state.
"""

import logging
from datetime import date
from typing import Any, List, Mapping, Optional, Union

from sqlalchemy.orm import Session

from app.db.models.departments import Departments
from app.db.models.pay_grades import PayGrades
from app.db.models.positions import Positions
from app.db.models.users import Users
from app.db.normalization import normalize_code
from app.schemas.positions import PositionCreate, PositionUpdate
from app.services.org.errors import DuplicateKeyError, RecordNotFoundError
from app.services.org.hierarchy import find_cycle, walk_chain
from app.services.org.validation import commit_or_raise, parse_payload, resolve_reference


logger = logging.getLogger(__name__)


def _manager_of(position: Positions) -> Optional[Positions]:
    return position.reports_to


def _get_or_raise(db: Session, position_id: int) -> Positions:
    position = get_position(db, position_id)
    if position is None:
        raise RecordNotFoundError("Position", position_id)
    return position


def _check_code_available(db: Session, code: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(Positions.id).filter(Positions.position_code == code)
    if exclude_id is not None:
        query = query.filter(Positions.id != exclude_id)
    if query.first():
        logger.warning(f"Position code {code} already in use")
        raise DuplicateKeyError("position_code", code)


def is_over_allocated(position: Positions) -> bool:
    return position.available_headcount < 0


def _warn_if_over_allocated(position: Positions) -> None:
    if is_over_allocated(position):
        logger.warning(
            f"Position {position.position_code} is over-allocated: "
            f"{position.current_headcount} filled against a budget of {position.headcount_budget}"
        )


def create_position(
    db: Session,
    payload: Union[PositionCreate, Mapping[str, Any]],
    actor_id: int,
) -> Positions:
    data = parse_payload(PositionCreate, payload)

    actor = resolve_reference(db, Users, actor_id, "created_by")
    resolve_reference(db, Departments, data.department_id, "department_id")
    resolve_reference(db, Positions, data.reports_to_position_id, "reports_to_position_id")
    resolve_reference(db, PayGrades, data.pay_grade_id, "pay_grade_id")
    _check_code_available(db, data.position_code)

    position = Positions(**data.model_dump(), created_by=actor_id, updated_by=actor_id)
    db.add(position)
    commit_or_raise(db, position)

    logger.info(f"Created position {position.position_code} (id={position.id}) in department {position.department_id} by {actor.display_name}")
    _warn_if_over_allocated(position)
    return position


def update_position(
    db: Session,
    position_id: int,
    payload: Union[PositionUpdate, Mapping[str, Any]],
    actor_id: int,
) -> Positions:
    data = parse_payload(PositionUpdate, payload)
    position = _get_or_raise(db, position_id)

    actor = resolve_reference(db, Users, actor_id, "updated_by")
    update_data = data.model_dump(exclude_unset=True)

    # a None here for a required reference is left for the NOT NULL constraint to reject
    references = {
        "department_id": Departments,
        "reports_to_position_id": Positions,
        "pay_grade_id": PayGrades,
    }
    for field, model in references.items():
        if update_data.get(field) is not None:
            resolve_reference(db, model, update_data[field], field)
    if update_data.get("position_code") is not None:
        _check_code_available(db, update_data["position_code"], exclude_id=position.id)

    for field, value in update_data.items():
        setattr(position, field, value)
    position.updated_by = actor_id

    commit_or_raise(db, position)
    logger.info(f"Updated position {position.position_code} (id={position.id}) fields={sorted(update_data)} by {actor.display_name}")
    _warn_if_over_allocated(position)
    return position


def retire_position(
    db: Session,
    position_id: int,
    actor_id: int,
    end_date: Optional[date] = None,
) -> Positions:
    """Deactivate a position and close its validity window.
    An end_date already on the record is kept unless a new one is given.
    """
    position = _get_or_raise(db, position_id)
    actor = resolve_reference(db, Users, actor_id, "updated_by")

    position.is_active = False
    position.end_date = end_date or position.end_date or date.today()
    position.updated_by = actor_id

    commit_or_raise(db, position)
    logger.info(f"Retired position {position.position_code} (id={position.id}) as of {position.end_date} by {actor.display_name}")
    return position


def get_position(db: Session, position_id: int) -> Optional[Positions]:
    return db.query(Positions).filter(Positions.id == position_id).first()


def get_position_by_code(db: Session, code: str) -> Optional[Positions]:
    return db.query(Positions).filter(Positions.position_code == normalize_code(code)).first()


def list_positions(
    db: Session,
    department_id: Optional[int] = None,
    reports_to_id: Optional[int] = None,
    is_active: Optional[bool] = None,
    level: Optional[str] = None,
    job_family: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[Positions]:
    query = db.query(Positions)

    if department_id is not None:
        query = query.filter(Positions.department_id == department_id)
    if reports_to_id is not None:
        query = query.filter(Positions.reports_to_position_id == reports_to_id)
    if is_active is not None:
        query = query.filter(Positions.is_active == is_active)
    if level is not None:
        query = query.filter(Positions.level == level.strip())
    if job_family is not None:
        query = query.filter(Positions.job_family == job_family)

    return query.order_by(Positions.position_code).offset(skip).limit(limit).all()


def list_direct_reports(db: Session, position_id: int) -> List[Positions]:
    return (
        db.query(Positions)
        .filter(Positions.reports_to_position_id == position_id)
        .order_by(Positions.position_code)
        .all()
    )


def get_reporting_chain(db: Session, position_id: int) -> List[Positions]:
    """Managers of a position, nearest first, up to the top of the chain."""
    return walk_chain(_get_or_raise(db, position_id), _manager_of)


def find_reporting_cycle(db: Session, position_id: int) -> Optional[List[int]]:
    return find_cycle(_get_or_raise(db, position_id), _manager_of)
