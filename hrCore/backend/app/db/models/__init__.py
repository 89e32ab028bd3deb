from app.db.database import Base

# Import models
from app.db.models.users import Users
from app.db.models.employees import Employees
from app.db.models.pay_grades import PayGrades
from app.db.models.departments import Departments
from app.db.models.positions import Positions

__all__ = [
    "Base",
    # Models
    "Users",
    "Employees",
    "PayGrades",
    "Departments",
    "Positions",
]
