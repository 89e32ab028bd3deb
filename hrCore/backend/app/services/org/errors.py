"""
Errors raised by the organisation data layer.
Every failure on a write path is surfaced synchronously as one of these;
nothing is retried here.
"""

from typing import Any, List, Optional


class OrgDataError(Exception):
    pass


class MissingRequiredFieldError(OrgDataError):
    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Missing required field: {field}")


class DuplicateKeyError(OrgDataError):
    def __init__(self, field: str, value: Any = None):
        self.field = field
        self.value = value
        super().__init__(f"Duplicate value for {field}: {value!r}")


class InvalidReferenceError(OrgDataError):
    def __init__(self, field: str, value: Any = None):
        self.field = field
        self.value = value
        super().__init__(f"{field} references a record that does not exist: {value!r}")


class TypeMismatchError(OrgDataError):
    def __init__(self, field: Optional[str], detail: str = ""):
        self.field = field
        self.detail = detail
        super().__init__(f"Invalid value for {field}: {detail}" if detail else f"Invalid value for {field}")


class ReadOnlyFieldError(OrgDataError):
    def __init__(self, field: str):
        self.field = field
        super().__init__(f"{field} is derived and cannot be written")


class HierarchyCycleError(OrgDataError):
    def __init__(self, record_ids: List[int]):
        self.record_ids = record_ids
        chain = " -> ".join(str(i) for i in record_ids)
        super().__init__(f"Hierarchy loops back on itself: {chain}")


class RecordNotFoundError(OrgDataError):
    def __init__(self, entity: str, record_id: Any):
        self.entity = entity
        self.record_id = record_id
        super().__init__(f"{entity} not found: {record_id!r}")
