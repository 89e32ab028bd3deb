from pydantic import BaseModel, Field, field_validator
from datetime import date, datetime
from typing import Optional

from app.db.normalization import POSITION_FIELD_RULES


class PositionBase(BaseModel):
    position_code: str = Field(..., min_length=1, max_length=50)
    position_title: str = Field(..., min_length=1, max_length=255)
    position_title_arabic: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    department_id: int
    reports_to_position_id: Optional[int] = None
    level: str = Field(..., min_length=1, max_length=50)
    job_family: Optional[str] = Field(None, max_length=100)
    pay_grade_id: int
    headcount_budget: int = 1
    current_headcount: int = 0
    is_active: bool = True
    effective_date: date
    end_date: Optional[date] = None

    @field_validator(*POSITION_FIELD_RULES, mode="before")
    @classmethod
    def normalize_text(cls, value, info):
        return POSITION_FIELD_RULES[info.field_name](value)


class PositionCreate(PositionBase):

    class Config:
        extra = "forbid"


class PositionUpdate(BaseModel):
    position_code: Optional[str] = Field(None, min_length=1, max_length=50)
    position_title: Optional[str] = Field(None, min_length=1, max_length=255)
    position_title_arabic: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    department_id: Optional[int] = None
    reports_to_position_id: Optional[int] = None
    level: Optional[str] = Field(None, min_length=1, max_length=50)
    job_family: Optional[str] = Field(None, max_length=100)
    pay_grade_id: Optional[int] = None
    headcount_budget: Optional[int] = None
    current_headcount: Optional[int] = None
    is_active: Optional[bool] = None
    effective_date: Optional[date] = None
    end_date: Optional[date] = None

    @field_validator(*POSITION_FIELD_RULES, mode="before")
    @classmethod
    def normalize_text(cls, value, info):
        return POSITION_FIELD_RULES[info.field_name](value)

    class Config:
        extra = "forbid"


class PositionResponse(PositionBase):
    id: int
    # derived from headcount_budget - current_headcount on every read
    available_headcount: int
    created_by: int
    updated_by: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
