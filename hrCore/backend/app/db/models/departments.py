from datetime import date, datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Integer, String, Text, Boolean, Date, DateTime, ForeignKey, Index, func
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from app.db.database import Base
from app.db.normalization import DEPARTMENT_FIELD_RULES

if TYPE_CHECKING:
    from app.db.models.employees import Employees
    from app.db.models.positions import Positions


class Departments(Base):
    __tablename__ = "departments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    department_code: Mapped[str] = mapped_column(String(50), nullable=False)
    department_name: Mapped[str] = mapped_column(String(255), nullable=False)
    department_name_arabic: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # hierarchy
    parent_department_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("departments.id"), nullable=True)
    department_head_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("employees.id"), nullable=True)

    # payroll linkage
    cost_center: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    effective_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    created_by: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    updated_by: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    parent: Mapped[Optional["Departments"]] = relationship(
        "Departments", remote_side="Departments.id", back_populates="children"
    )
    children: Mapped[List["Departments"]] = relationship("Departments", back_populates="parent")
    head: Mapped[Optional["Employees"]] = relationship("Employees")
    positions: Mapped[List["Positions"]] = relationship("Positions", back_populates="department")

    __table_args__ = (
        Index("ix_departments_department_code", "department_code", unique=True),
        Index("ix_departments_parent_department_id", "parent_department_id"),
        Index("ix_departments_department_head_id", "department_head_id"),
        Index("ix_departments_is_active", "is_active"),
        Index("ix_departments_effective_date", "effective_date"),
    )

    def __init__(self, **kwargs):
        kwargs.setdefault("is_active", True)
        super().__init__(**kwargs)

    @validates(*DEPARTMENT_FIELD_RULES)
    def _normalize(self, key, value):
        return DEPARTMENT_FIELD_RULES[key](value)

    def __repr__(self) -> str:
        return f"<Department {self.department_code}: {self.department_name}>"
