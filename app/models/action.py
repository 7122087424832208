from sqlalchemy import Column, Integer, String, DateTime, JSON
from app.database import Base
import enum

class CompensationAction(str, enum.Enum):
    FIRE = "FIRE"
    PROMOTE = "PROMOTE"
    DECREASE_SALARY = "DECREASE_SALARY"
    NO_CHANGE = "NO_CHANGE"

class EmployeeAction(Base):
    """
    Audit trail entry for one applied compensation action.
    Strictly append-only: rows are inserted and never updated or deleted.
    """
    __tablename__ = "employee_actions"

    id = Column(Integer, primary_key=True, index=True)
    ssid = Column(String, index=True, nullable=False)
    action = Column(String, nullable=False)
    note = Column(String, nullable=True)
    details = Column(JSON, nullable=False)
    applied_at = Column(DateTime(timezone=True), nullable=False, index=True)
