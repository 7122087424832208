"""
Compensation Service Layer

Business logic between the routers and the models: employee upserts,
batch analysis with suggestion persistence, and atomic action application.

Architecture:
- Router -> Service (this module) -> Decision engine / State machine / Models
- Commits and rollbacks happen here, nowhere else
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
import logging

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.action import EmployeeAction
from app.models.employee import Employee, EmployeeStatus
from app.schemas.compensation import BatchAnalysis, EmployeeProfile, EmployeeUpsert
from app.services.action_history import ActionHistoryService
from app.services.action_state_machine import apply_transition, parse_action
from app.services.decision_engine import DecisionOrchestrator, analyze_batch

logger = logging.getLogger(__name__)

UPSERT_FIELDS = ("name", "role", "performance", "experience", "salary", "revenue")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def get_employee(db: Session, ssid: str) -> Employee:
    employee = db.query(Employee).filter(Employee.ssid == ssid).first()
    if not employee:
        raise NotFoundError("Employee not found", details={"ssid": ssid})
    return employee


def list_employees(db: Session) -> List[Employee]:
    return db.query(Employee).order_by(Employee.id).all()


def list_pending(db: Session) -> List[Employee]:
    """Non-fired employees carrying a suggestion that may still be acted on."""
    return (
        db.query(Employee)
        .filter(Employee.suggestion.isnot(None), Employee.status != EmployeeStatus.FIRED.value)
        .order_by(Employee.id)
        .all()
    )


def _upsert(db: Session, data: EmployeeUpsert) -> Employee:
    if not data.ssid or not data.ssid.strip():
        raise ValidationError("ssid is required")
    ssid = data.ssid.strip()
    values = data.model_dump(include=set(UPSERT_FIELDS), exclude_unset=True)

    employee = db.query(Employee).filter(Employee.ssid == ssid).first()
    if employee is None:
        status = (data.status or EmployeeStatus.ACTIVE.value).upper()
        if status not in (EmployeeStatus.ACTIVE.value, EmployeeStatus.FIRED.value):
            raise ValidationError(f"status must be ACTIVE or FIRED, got {data.status}")
        employee = Employee(ssid=ssid, status=status, **values)
        db.add(employee)
    else:
        # Status is owned by the action state machine; FIRED is never reversed here
        for field, value in values.items():
            setattr(employee, field, value)
    return employee


def upsert_employee(db: Session, data: EmployeeUpsert) -> Employee:
    """Create or update core fields; fields not sent keep their stored values."""
    try:
        employee = _upsert(db, data)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(employee)
    return employee


def bulk_upsert_employees(db: Session, items: Any) -> List[Dict[str, Any]]:
    if not isinstance(items, list):
        raise ValidationError("Expected array of employees")

    results = []
    try:
        for raw in items:
            try:
                data = raw if isinstance(raw, EmployeeUpsert) else EmployeeUpsert.model_validate(raw)
            except PydanticValidationError as e:
                results.append({"ssid": raw.get("ssid") if isinstance(raw, dict) else None,
                                "error": f"Invalid employee record: {e.error_count()} field error(s)"})
                continue
            if not data.ssid:
                results.append({"ssid": None, "error": "Missing ssid"})
                continue
            try:
                _upsert(db, data)
            except ValidationError as e:
                results.append({"ssid": data.ssid, "error": e.message})
                continue
            db.flush()
            results.append({"ssid": data.ssid, "ok": True})
        db.commit()
    except Exception:
        db.rollback()
        raise
    return results


def analyze_employees(
    db: Session,
    budget: Optional[float],
    orchestrator: DecisionOrchestrator,
    ssids: Optional[List[str]] = None,
) -> BatchAnalysis:
    """
    Analyze non-fired employees (optionally a subset) and persist each new
    Suggestion snapshot with its analysis timestamp.
    """
    query = db.query(Employee).filter(Employee.status != EmployeeStatus.FIRED.value)
    if ssids:
        query = query.filter(Employee.ssid.in_(ssids))
    employees = query.order_by(Employee.id).all()
    if not employees:
        raise NotFoundError("No employees found to analyze")

    profiles = [EmployeeProfile.model_validate(e) for e in employees]
    analysis = analyze_batch(profiles, budget, orchestrator)

    by_ssid = {e.ssid: e for e in employees}
    analyzed_at = _utcnow()
    try:
        for result in analysis.results:
            employee = by_ssid[result.ssid]
            employee.suggestion = result.suggestion.model_dump(mode="json")
            employee.last_analyzed = analyzed_at
        db.commit()
    except StaleDataError:
        db.rollback()
        raise ConflictError("Employees changed while the analysis was running, retry the analysis")
    except Exception:
        db.rollback()
        raise
    return analysis


def apply_action(
    db: Session,
    ssid: Optional[str],
    action: Optional[str],
    note: Optional[str] = None,
    change_percent: Optional[float] = None,
) -> Tuple[Employee, EmployeeAction]:
    """
    Apply a human-approved action and append its history record.
    The employee update and the record commit as one transaction.
    """
    if not ssid:
        raise ValidationError("ssid and action are required")
    parsed_action = parse_action(action)

    history = ActionHistoryService(db)
    try:
        employee = (
            db.query(Employee)
            .filter(Employee.ssid == ssid)
            .with_for_update()
            .first()
        )
        if not employee:
            raise NotFoundError("Employee not found", details={"ssid": ssid})

        now = _utcnow()
        details = apply_transition(employee, parsed_action, change_percent, now)
        record = history.record(ssid, parsed_action, details, applied_at=now, note=note)
        db.commit()
    except StaleDataError:
        db.rollback()
        logger.warning(f"Concurrent modification while applying {parsed_action.value} to {ssid}")
        raise ConflictError()
    except Exception:
        db.rollback()
        raise

    db.refresh(employee)
    db.refresh(record)
    logger.info(
        f"Action {parsed_action.value} applied to {ssid}",
        extra={"ssid": ssid, "action": parsed_action.value, "details": details},
    )
    return employee, record


def list_actions(db: Session, ssid: Optional[str] = None) -> List[EmployeeAction]:
    history = ActionHistoryService(db)
    if ssid:
        return history.list_for_employee(ssid)
    return history.list_all()
