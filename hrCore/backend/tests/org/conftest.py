import os

# settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from datetime import date
from decimal import Decimal
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.models import Base, Users, Employees, PayGrades, Departments


EFFECTIVE_DATE = date(2024, 1, 1)


@pytest.fixture()
def db():
    """Fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def admin(db) -> Users:
    user = Users(email="admin@hrcore.local", firstname="Admin", surname="User")
    db.add(user)
    db.commit()
    return user


@pytest.fixture()
def head(db) -> Employees:
    employee = Employees(employee_number="E-0001", first_name="Layla", last_name="Haddad")
    db.add(employee)
    db.commit()
    return employee


@pytest.fixture()
def grade(db) -> PayGrades:
    pay_grade = PayGrades(code="g1", name="Grade 1", min_annual=Decimal("60000"), max_annual=Decimal("80000"))
    db.add(pay_grade)
    db.commit()
    return pay_grade


@pytest.fixture()
def engineering(db, admin) -> Departments:
    department = Departments(
        department_code="ENG",
        department_name="Engineering",
        effective_date=EFFECTIVE_DATE,
        created_by=admin.id,
        updated_by=admin.id,
    )
    db.add(department)
    db.commit()
    return department


def department_payload(**overrides) -> dict:
    payload = {
        "department_code": "eng",
        "department_name": "Engineering",
        "effective_date": EFFECTIVE_DATE,
    }
    payload.update(overrides)
    return payload


def position_payload(department_id: int, pay_grade_id: int, **overrides) -> dict:
    payload = {
        "position_code": "swe1",
        "position_title": "Software Engineer I",
        "department_id": department_id,
        "level": "Junior",
        "pay_grade_id": pay_grade_id,
        "headcount_budget": 5,
        "current_headcount": 2,
        "effective_date": EFFECTIVE_DATE,
    }
    payload.update(overrides)
    return payload
