"""
Translation of pydantic and database failures into the org error taxonomy,
plus the shared reference lookup and commit helpers used by the services.
"""

import logging
import re
from typing import Any, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError
from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.db.database import Base
from app.services.org.errors import (
    OrgDataError,
    MissingRequiredFieldError,
    DuplicateKeyError,
    InvalidReferenceError,
    TypeMismatchError,
    ReadOnlyFieldError,
)


logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)
ModelT = TypeVar("ModelT", bound=Base)

# attributes owned by the data layer, never taken from a write payload
READ_ONLY_FIELDS = frozenset({
    "id",
    "available_headcount",
    "created_by",
    "updated_by",
    "created_at",
    "updated_at",
})

# sqlite and postgres wording respectively
_UNIQUE_PATTERNS = (
    re.compile(r"UNIQUE constraint failed: \w+\.(\w+)"),
    re.compile(r"Key \((\w+)\)=\((.*?)\) already exists"),
)
_NOT_NULL_PATTERNS = (
    re.compile(r"NOT NULL constraint failed: \w+\.(\w+)"),
    re.compile(r'null value in column "(\w+)"'),
)
_FOREIGN_KEY_PATTERNS = (
    re.compile(r"Key \((\w+)\)=\((.*?)\) is not present"),
    re.compile(r"FOREIGN KEY constraint failed"),
)


def parse_payload(schema_cls: Type[SchemaT], payload: Union[SchemaT, Mapping[str, Any]]) -> SchemaT:
    """Validate a write payload against its schema, raising OrgDataError on failure."""
    if isinstance(payload, schema_cls):
        return payload
    try:
        return schema_cls.model_validate(payload)
    except ValidationError as e:
        raise translate_validation_error(e) from e


def translate_validation_error(exc: ValidationError) -> OrgDataError:
    # first failure only, matching how the database reports a single violation
    error = exc.errors()[0]
    loc = error.get("loc") or ()
    field = str(loc[0]) if loc else None
    error_type = error.get("type")

    if error_type == "extra_forbidden":
        if field in READ_ONLY_FIELDS:
            return ReadOnlyFieldError(field)
        return TypeMismatchError(field, "unexpected field")
    if error_type in ("missing", "string_too_short"):
        return MissingRequiredFieldError(field)
    # an explicit null only fails validation on fields that do not accept None
    if "input" in error and error["input"] is None:
        return MissingRequiredFieldError(field)
    return TypeMismatchError(field, error.get("msg", ""))


def translate_integrity_error(exc: IntegrityError, instance: Optional[Base] = None) -> OrgDataError:
    message = str(exc.orig)

    for pattern in _UNIQUE_PATTERNS:
        match = pattern.search(message)
        if match:
            field = match.group(1)
            value = match.group(2) if match.lastindex and match.lastindex > 1 else _loaded_value(instance, field)
            return DuplicateKeyError(field, value)

    for pattern in _NOT_NULL_PATTERNS:
        match = pattern.search(message)
        if match:
            return MissingRequiredFieldError(match.group(1))

    for pattern in _FOREIGN_KEY_PATTERNS:
        match = pattern.search(message)
        if match:
            if match.groups():
                return InvalidReferenceError(match.group(1), match.group(2))
            return InvalidReferenceError("unknown")

    return OrgDataError(message)


def _loaded_value(instance: Optional[Base], field: str) -> Any:
    # read from the instance state so no SQL is emitted on a failed session
    if instance is None:
        return None
    return inspect(instance).dict.get(field)


def commit_or_raise(db: Session, instance: Base) -> None:
    """Commit and refresh instance, translating constraint violations."""
    try:
        db.commit()
    except IntegrityError as e:
        error = translate_integrity_error(e, instance)
        db.rollback()
        logger.warning(f"Write rejected for {type(instance).__name__}: {error}")
        raise error from e
    db.refresh(instance)


def resolve_reference(db: Session, model: Type[ModelT], record_id: Optional[int], field: str) -> Optional[ModelT]:
    """Load the record a reference field points to. None passes through."""
    if record_id is None:
        return None
    record = db.query(model).filter(model.id == record_id).first()
    if record is None:
        logger.warning(f"{field}={record_id} does not resolve to a {model.__tablename__} row")
        raise InvalidReferenceError(field, record_id)
    return record
