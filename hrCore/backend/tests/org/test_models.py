import pytest
from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError

from app.db.models import Departments, Positions, PayGrades

from conftest import EFFECTIVE_DATE


def make_department(admin, code="ENG", **overrides) -> Departments:
    fields = dict(
        department_code=code,
        department_name="Engineering",
        effective_date=EFFECTIVE_DATE,
        created_by=admin.id,
        updated_by=admin.id,
    )
    fields.update(overrides)
    return Departments(**fields)


def make_position(admin, department, grade, code="SWE1", **overrides) -> Positions:
    fields = dict(
        position_code=code,
        position_title="Software Engineer I",
        department_id=department.id,
        level="Junior",
        pay_grade_id=grade.id,
        headcount_budget=5,
        current_headcount=2,
        effective_date=EFFECTIVE_DATE,
        created_by=admin.id,
        updated_by=admin.id,
    )
    fields.update(overrides)
    return Positions(**fields)


class TestDepartmentModel:

    def test_code_is_trimmed_and_uppercased(self, db, admin):
        department = make_department(admin, code="  eng ")
        assert department.department_code == "ENG"

    def test_text_fields_are_trimmed(self, db, admin):
        department = make_department(
            admin,
            department_name="  Engineering  ",
            department_name_arabic=" الهندسة ",
            description="  kept as given  ",
        )
        assert department.department_name == "Engineering"
        assert department.department_name_arabic == "الهندسة"
        assert department.description == "  kept as given  "

    def test_reassigning_code_normalises(self, db, admin):
        department = make_department(admin)
        department.department_code = "ops "
        assert department.department_code == "OPS"

    def test_active_before_insert(self, admin):
        assert make_department(admin).is_active is True

    def test_defaults_and_timestamps_after_insert(self, db, admin):
        department = make_department(admin, code="eng")
        db.add(department)
        db.commit()
        db.refresh(department)

        assert department.department_code == "ENG"
        assert department.is_active is True
        assert department.end_date is None
        assert department.created_at is not None
        assert department.updated_at is not None

    def test_codes_differing_by_case_collide(self, db, admin):
        db.add(make_department(admin, code="eng"))
        db.commit()

        db.add(make_department(admin, code="ENG", department_name="Engineering 2"))
        with pytest.raises(IntegrityError):
            db.commit()
        db.rollback()

    def test_missing_effective_date_rejected(self, db, admin):
        db.add(make_department(admin, effective_date=None))
        with pytest.raises(IntegrityError):
            db.commit()
        db.rollback()

    def test_self_parent_is_storable(self, db, admin):
        department = make_department(admin)
        db.add(department)
        db.commit()

        department.parent_department_id = department.id
        db.commit()
        db.refresh(department)

        assert department.parent_department_id == department.id
        assert department.parent is department

    def test_parent_child_relationship(self, db, admin):
        parent = make_department(admin, code="EXEC", department_name="Executive")
        db.add(parent)
        db.commit()

        child = make_department(admin, parent_department_id=parent.id)
        db.add(child)
        db.commit()
        db.refresh(parent)

        assert child.parent is parent
        assert parent.children == [child]

    def test_indexes(self):
        indexes = {ix.name: ix for ix in Departments.__table__.indexes}
        assert indexes["ix_departments_department_code"].unique
        indexed_columns = {tuple(c.name for c in ix.columns) for ix in indexes.values()}
        assert indexed_columns == {
            ("department_code",),
            ("parent_department_id",),
            ("department_head_id",),
            ("is_active",),
            ("effective_date",),
        }


class TestPositionModel:

    def test_code_title_and_level_normalised(self, db, admin, engineering, grade):
        position = make_position(
            admin, engineering, grade,
            code=" swe1 ", position_title=" Software Engineer I ", level=" Junior ",
            job_family=" Engineering ",
        )
        assert position.position_code == "SWE1"
        assert position.position_title == "Software Engineer I"
        assert position.level == "Junior"
        # job family is stored as given
        assert position.job_family == " Engineering "

    def test_headcount_defaults(self, db, admin, engineering, grade):
        position = Positions(
            position_code="SWE1",
            position_title="Software Engineer I",
            department_id=engineering.id,
            level="Junior",
            pay_grade_id=grade.id,
            effective_date=EFFECTIVE_DATE,
            created_by=admin.id,
            updated_by=admin.id,
        )
        db.add(position)
        db.commit()
        db.refresh(position)

        assert position.headcount_budget == 1
        assert position.current_headcount == 0
        assert position.available_headcount == 1
        assert position.is_active is True

    def test_defaults_visible_before_insert(self, admin, engineering, grade):
        position = Positions(
            position_code="SWE1",
            position_title="Software Engineer I",
            department_id=engineering.id,
            level="Junior",
            pay_grade_id=grade.id,
            effective_date=EFFECTIVE_DATE,
            created_by=admin.id,
            updated_by=admin.id,
        )
        assert position.headcount_budget == 1
        assert position.current_headcount == 0
        assert position.is_active is True
        assert position.available_headcount == 1

    def test_explicit_headcount_not_overridden_by_defaults(self, admin, engineering, grade):
        position = make_position(admin, engineering, grade, headcount_budget=4, current_headcount=4)
        assert position.available_headcount == 0

    def test_available_headcount_tracks_fields(self, db, admin, engineering, grade):
        position = make_position(admin, engineering, grade)
        db.add(position)
        db.commit()
        assert position.available_headcount == 3

        position.current_headcount = 4
        assert position.available_headcount == 1

        position.headcount_budget = 2
        assert position.available_headcount == -2

    def test_available_headcount_is_read_only(self, db, admin, engineering, grade):
        position = make_position(admin, engineering, grade)
        with pytest.raises(AttributeError):
            position.available_headcount = 10

    def test_available_headcount_not_a_column(self):
        assert "available_headcount" not in Positions.__table__.columns
        assert "available_headcount" not in inspect(Positions).attrs

    def test_missing_department_rejected(self, db, admin, engineering, grade):
        db.add(make_position(admin, engineering, grade, department_id=None))
        with pytest.raises(IntegrityError):
            db.commit()
        db.rollback()

    def test_reporting_relationship(self, db, admin, engineering, grade):
        manager = make_position(admin, engineering, grade, code="ENG-MGR", level="Manager")
        db.add(manager)
        db.commit()

        report = make_position(admin, engineering, grade, reports_to_position_id=manager.id)
        db.add(report)
        db.commit()
        db.refresh(manager)

        assert report.reports_to is manager
        assert manager.direct_reports == [report]
        assert report.department is engineering
        assert report.pay_grade is grade
        assert {p.id for p in engineering.positions} == {manager.id, report.id}

    def test_indexes(self):
        indexes = {ix.name: ix for ix in Positions.__table__.indexes}
        assert indexes["ix_positions_position_code"].unique
        indexed_columns = {tuple(c.name for c in ix.columns) for ix in indexes.values()}
        assert indexed_columns == {
            ("position_code",),
            ("department_id",),
            ("reports_to_position_id",),
            ("is_active",),
            ("level",),
            ("job_family",),
        }


class TestPayGradeModel:

    def test_code_normalised(self):
        assert PayGrades(code=" g1 ").code == "G1"
