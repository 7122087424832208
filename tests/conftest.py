import pytest
import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["OPENAI_API_KEY"] = ""

from app.database import Base, get_db
from app.dependencies import get_orchestrator
from app.main import app
from app.models.employee import Employee, EmployeeStatus
from app.services.decision_engine import DecisionOrchestrator
from fastapi.testclient import TestClient

# SQLite in-memory database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeChatClient:
    """Stands in for AIClient: replays canned replies and records prompts."""

    def __init__(self, *replies, provider="openai"):
        self.replies = list(replies)
        self.provider = provider
        self.calls = []

    def call_model(self, messages):
        self.calls.append(messages)
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def fake_chat_client():
    return FakeChatClient


@pytest.fixture(scope="function")
def db_session():
    """Fresh schema and session for each test function."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def make_employee(db_session):
    """Persist an employee with sensible defaults."""
    def _make_employee(ssid="E1", **fields):
        values = {
            "name": f"Employee {ssid}",
            "role": "engineer",
            "performance": 6,
            "experience": 3,
            "salary": 1000000,
            "revenue": 1500000,
            "status": EmployeeStatus.ACTIVE.value,
        }
        values.update(fields)
        employee = Employee(ssid=ssid, **values)
        db_session.add(employee)
        db_session.commit()
        db_session.refresh(employee)
        return employee
    return _make_employee


@pytest.fixture(scope="function")
def client(db_session):
    """TestClient wired to the test session and a heuristic-only orchestrator."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_orchestrator] = lambda: DecisionOrchestrator()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
