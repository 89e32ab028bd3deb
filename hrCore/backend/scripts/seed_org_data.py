"""
Seed script for the HR organisation structure development database.

Creates one admin user, a handful of employees and pay grades, a small
department tree and the positions within it. Departments and positions go
through the org data layer so codes are normalised and references checked.

Run with: python -m scripts.seed_org_data
"""

from datetime import date
from decimal import Decimal

from app.core.logging import configure_logging
from app.db.database import SessionLocal, init_db
from app.db.models.users import Users
from app.db.models.employees import Employees
from app.db.models.pay_grades import PayGrades
from app.db.models.departments import Departments
from app.db.models.positions import Positions
from app.services.org import create_department, create_position, get_department_by_code, get_position_by_code


EFFECTIVE_DATE = date(2024, 1, 1)


def clear_tables(db):
    """Delete all rows, children before parents."""
    print("Clearing tables...")

    # self references first, so rows can be removed in any order
    db.query(Positions).update({Positions.reports_to_position_id: None})
    db.query(Departments).update({Departments.parent_department_id: None})

    for model in (Positions, Departments, PayGrades, Employees, Users):
        db.query(model).delete()

    db.commit()
    print("All tables cleared.")


def seed_users(db):
    print("Seeding users...")

    admin = Users(
        id=100001,
        email="admin@hrcore.local",
        firstname="Admin",
        surname="User",
        is_active=True,
    )
    db.add(admin)
    db.commit()
    return admin


def seed_employees(db):
    print("Seeding employees...")

    employees = [
        Employees(id=100001, employee_number="E-0001", first_name="Layla", last_name="Haddad"),
        Employees(id=100002, employee_number="E-0002", first_name="Omar", last_name="Farouk"),
        Employees(id=100003, employee_number="E-0003", first_name="Sara", last_name="Nasser"),
    ]
    db.add_all(employees)
    db.commit()
    return {e.employee_number: e for e in employees}


def seed_pay_grades(db):
    print("Seeding pay grades...")

    grades = [
        PayGrades(id=100001, code="g1", name="Grade 1", min_annual=Decimal("60000"), max_annual=Decimal("80000")),
        PayGrades(id=100002, code="g2", name="Grade 2", min_annual=Decimal("80000"), max_annual=Decimal("110000")),
        PayGrades(id=100003, code="g3", name="Grade 3", min_annual=Decimal("110000"), max_annual=Decimal("150000")),
    ]
    db.add_all(grades)
    db.commit()
    return {g.code: g for g in grades}


def seed_departments(db, admin, employees):
    print("Seeding departments...")

    departments = [
        # (payload, parent code)
        ({"department_code": "exec", "department_name": "Executive Office",
          "department_name_arabic": "المكتب التنفيذي",
          "department_head_id": employees["E-0001"].id, "cost_center": "CC-100"}, None),
        ({"department_code": "eng", "department_name": "Engineering",
          "department_name_arabic": "الهندسة",
          "department_head_id": employees["E-0002"].id, "cost_center": "CC-200"}, "EXEC"),
        ({"department_code": "eng-plat", "department_name": "Platform Engineering",
          "cost_center": "CC-210"}, "ENG"),
        ({"department_code": "hr", "department_name": "Human Resources",
          "department_name_arabic": "الموارد البشرية",
          "department_head_id": employees["E-0003"].id, "cost_center": "CC-300"}, "EXEC"),
    ]

    for payload, parent_code in departments:
        if parent_code:
            payload["parent_department_id"] = get_department_by_code(db, parent_code).id
        payload["effective_date"] = EFFECTIVE_DATE
        create_department(db, payload, actor_id=admin.id)


def seed_positions(db, admin, grades):
    print("Seeding positions...")

    positions = [
        # (payload, department code, reports-to code)
        ({"position_code": "eng-mgr", "position_title": "Engineering Manager", "level": "Manager",
          "job_family": "Engineering", "pay_grade_id": grades["G3"].id,
          "headcount_budget": 1, "current_headcount": 1}, "ENG", None),
        ({"position_code": "swe2", "position_title": "Software Engineer II", "level": "Mid",
          "job_family": "Engineering", "pay_grade_id": grades["G2"].id,
          "headcount_budget": 4, "current_headcount": 3}, "ENG-PLAT", "ENG-MGR"),
        ({"position_code": "swe1", "position_title": "Software Engineer I", "level": "Junior",
          "job_family": "Engineering", "pay_grade_id": grades["G1"].id,
          "headcount_budget": 5, "current_headcount": 2}, "ENG-PLAT", "SWE2"),
        ({"position_code": "hrbp", "position_title": "HR Business Partner", "level": "Senior",
          "job_family": "HR", "pay_grade_id": grades["G2"].id,
          "headcount_budget": 2, "current_headcount": 0}, "HR", None),
    ]

    for payload, department_code, reports_to_code in positions:
        payload["department_id"] = get_department_by_code(db, department_code).id
        if reports_to_code:
            payload["reports_to_position_id"] = get_position_by_code(db, reports_to_code).id
        payload["effective_date"] = EFFECTIVE_DATE
        create_position(db, payload, actor_id=admin.id)


def main():
    configure_logging()
    init_db()

    db = SessionLocal()
    try:
        clear_tables(db)

        admin = seed_users(db)
        employees = seed_employees(db)
        grades = seed_pay_grades(db)
        seed_departments(db, admin, employees)
        seed_positions(db, admin, grades)

        print("\n" + "="*50)
        print("Seeding complete!")
        print("="*50)
        print("\nDepartments:")
        for department in db.query(Departments).order_by(Departments.department_code):
            parent = department.parent.department_code if department.parent else "-"
            print(f"  {department.department_code:<10} {department.department_name:<24} parent={parent}")
        print("\nPositions:")
        for position in db.query(Positions).order_by(Positions.position_code):
            print(f"  {position.position_code:<10} {position.position_title:<24} "
                  f"available={position.available_headcount}/{position.headcount_budget}")
        print("="*50 + "\n")

    except Exception as e:
        db.rollback()
        print(f"\nError during seeding: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
