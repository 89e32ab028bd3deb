from pydantic import BaseModel, Field, field_validator
from datetime import date, datetime
from typing import Optional

from app.db.normalization import DEPARTMENT_FIELD_RULES


class DepartmentBase(BaseModel):
    department_code: str = Field(..., min_length=1, max_length=50)
    department_name: str = Field(..., min_length=1, max_length=255)
    department_name_arabic: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    parent_department_id: Optional[int] = None
    department_head_id: Optional[int] = None
    cost_center: Optional[str] = Field(None, max_length=50)
    is_active: bool = True
    effective_date: date
    end_date: Optional[date] = None

    @field_validator(*DEPARTMENT_FIELD_RULES, mode="before")
    @classmethod
    def normalize_text(cls, value, info):
        return DEPARTMENT_FIELD_RULES[info.field_name](value)


class DepartmentCreate(DepartmentBase):

    class Config:
        extra = "forbid"


class DepartmentUpdate(BaseModel):
    department_code: Optional[str] = Field(None, min_length=1, max_length=50)
    department_name: Optional[str] = Field(None, min_length=1, max_length=255)
    department_name_arabic: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    parent_department_id: Optional[int] = None
    department_head_id: Optional[int] = None
    cost_center: Optional[str] = Field(None, max_length=50)
    is_active: Optional[bool] = None
    effective_date: Optional[date] = None
    end_date: Optional[date] = None

    @field_validator(*DEPARTMENT_FIELD_RULES, mode="before")
    @classmethod
    def normalize_text(cls, value, info):
        return DEPARTMENT_FIELD_RULES[info.field_name](value)

    class Config:
        extra = "forbid"


class DepartmentResponse(DepartmentBase):
    id: int
    created_by: int
    updated_by: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
