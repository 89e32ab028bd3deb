from sqlalchemy import Integer, String, Boolean, Numeric, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column, validates
from datetime import datetime
from decimal import Decimal
from typing import Optional
from app.db.database import Base
from app.db.normalization import PAY_GRADE_FIELD_RULES

class PayGrades(Base):
    __tablename__ = "pay_grades"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    min_annual: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    max_annual: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    @validates(*PAY_GRADE_FIELD_RULES)
    def _normalize(self, key, value):
        return PAY_GRADE_FIELD_RULES[key](value)
