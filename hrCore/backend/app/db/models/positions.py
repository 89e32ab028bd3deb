from datetime import date, datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Integer, String, Text, Boolean, Date, DateTime, ForeignKey, Index, func
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from app.db.database import Base
from app.db.normalization import POSITION_FIELD_RULES

if TYPE_CHECKING:
    from app.db.models.departments import Departments
    from app.db.models.pay_grades import PayGrades


class Positions(Base):
    __tablename__ = "positions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    position_code: Mapped[str] = mapped_column(String(50), nullable=False)
    position_title: Mapped[str] = mapped_column(String(255), nullable=False)
    position_title_arabic: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # organisational placement
    department_id: Mapped[int] = mapped_column(Integer, ForeignKey("departments.id"), nullable=False)
    reports_to_position_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("positions.id"), nullable=True)

    level: Mapped[str] = mapped_column(String(50), nullable=False)  # Junior, Mid, Senior, Lead, Manager
    job_family: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)  # Engineering, Sales, HR

    pay_grade_id: Mapped[int] = mapped_column(Integer, ForeignKey("pay_grades.id"), nullable=False)

    headcount_budget: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    current_headcount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    effective_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    created_by: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    updated_by: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    department: Mapped["Departments"] = relationship("Departments", back_populates="positions")
    reports_to: Mapped[Optional["Positions"]] = relationship(
        "Positions", remote_side="Positions.id", back_populates="direct_reports"
    )
    direct_reports: Mapped[List["Positions"]] = relationship("Positions", back_populates="reports_to")
    pay_grade: Mapped["PayGrades"] = relationship("PayGrades")

    __table_args__ = (
        Index("ix_positions_position_code", "position_code", unique=True),
        Index("ix_positions_department_id", "department_id"),
        Index("ix_positions_reports_to_position_id", "reports_to_position_id"),
        Index("ix_positions_is_active", "is_active"),
        Index("ix_positions_level", "level"),
        Index("ix_positions_job_family", "job_family"),
    )

    def __init__(self, **kwargs):
        # column defaults only apply at INSERT; set them up front so reads before a flush agree
        kwargs.setdefault("headcount_budget", 1)
        kwargs.setdefault("current_headcount", 0)
        kwargs.setdefault("is_active", True)
        super().__init__(**kwargs)

    @validates(*POSITION_FIELD_RULES)
    def _normalize(self, key, value):
        return POSITION_FIELD_RULES[key](value)

    @property
    def available_headcount(self) -> int:
        """Budgeted slots not yet filled. Derived on every read, never stored."""
        return self.headcount_budget - self.current_headcount

    def __repr__(self) -> str:
        return f"<Position {self.position_code}: {self.position_title}>"
