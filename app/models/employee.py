from sqlalchemy import Column, Integer, String, Float, DateTime, JSON
from sqlalchemy.sql import func
from app.database import Base
import enum

class EmployeeStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    FIRED = "FIRED"

class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    ssid = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=True)
    role = Column(String, nullable=True)
    performance = Column(JSON(none_as_null=True), nullable=True)  # number (0-10) or qualitative label
    experience = Column(Float, nullable=True)
    salary = Column(Float, nullable=True)
    revenue = Column(Float, nullable=True)
    status = Column(String, default=EmployeeStatus.ACTIVE.value, nullable=False, index=True)

    # Latest Suggestion snapshot, replaced wholesale on every analysis
    suggestion = Column(JSON(none_as_null=True), nullable=True)

    last_analyzed = Column(DateTime(timezone=True), nullable=True)
    last_promoted_at = Column(DateTime(timezone=True), nullable=True)
    terminated_at = Column(DateTime(timezone=True), nullable=True)

    # Optimistic lock: concurrent action applications on one ssid cannot both commit
    version_id = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __mapper_args__ = {"version_id_col": version_id}

    @property
    def is_fired(self) -> bool:
        return self.status == EmployeeStatus.FIRED.value
