"""
Employee Router

Employee records and their action history. Upserts never touch the
status or the suggestion snapshot of an existing employee.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.compensation import ActionRecordResponse, EmployeeResponse, EmployeeUpsert
from app.services import compensation_service
from app.services.formatting import action_view, employee_view

router = APIRouter(
    prefix="/employees",
    tags=["employees"],
)


def _employee_out(employee) -> dict:
    return employee_view(EmployeeResponse.model_validate(employee))


def _actions_out(actions) -> list:
    return [action_view(ActionRecordResponse.model_validate(a)) for a in actions]


@router.get("")
def list_employees(db: Session = Depends(get_db)):
    """All employees plus the global action history, newest first."""
    employees = compensation_service.list_employees(db)
    actions = compensation_service.list_actions(db)
    return {
        "employees": [_employee_out(e) for e in employees],
        "actions": _actions_out(actions),
    }


@router.get("/{ssid}")
def get_employee(ssid: str, db: Session = Depends(get_db)):
    employee = compensation_service.get_employee(db, ssid)
    actions = compensation_service.list_actions(db, ssid)
    return {
        "employee": _employee_out(employee),
        "actions": _actions_out(actions),
    }


@router.post("")
def upsert_employee(payload: EmployeeUpsert, db: Session = Depends(get_db)):
    employee = compensation_service.upsert_employee(db, payload)
    return {"ok": True, "employee": _employee_out(employee)}


@router.post("/bulk")
def bulk_upsert_employees(payload: Any = Body(...), db: Session = Depends(get_db)):
    results = compensation_service.bulk_upsert_employees(db, payload)
    return {"ok": True, "results": results}
