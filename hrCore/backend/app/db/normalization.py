"""
Field-level normalisation rules.
Each table maps a column name to the function applied whenever that attribute
is assigned, on the ORM models and on the pydantic write schemas alike.
"""

from typing import Any, Callable, Dict


def trim(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip()
    return value


def upper_trim(value: Any) -> Any:
    value = trim(value)
    if isinstance(value, str):
        return value.upper()
    return value


FieldRules = Dict[str, Callable[[Any], Any]]

DEPARTMENT_FIELD_RULES: FieldRules = {
    "department_code": upper_trim,
    "department_name": trim,
    "department_name_arabic": trim,
}

POSITION_FIELD_RULES: FieldRules = {
    "position_code": upper_trim,
    "position_title": trim,
    "position_title_arabic": trim,
    "level": trim,
}

PAY_GRADE_FIELD_RULES: FieldRules = {
    "code": upper_trim,
    "name": trim,
}


def normalize_code(code: str) -> str:
    """Normalise a code the way it is stored, for lookups."""
    return upper_trim(code)
