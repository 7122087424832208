"""
Action Router

A human confirms (or overrides) a suggestion; the service applies it and
appends the matching history record in the same transaction.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.compensation import ActionRecordResponse, ApplyActionRequest, EmployeeResponse
from app.services import compensation_service
from app.services.formatting import action_view, employee_view

router = APIRouter(tags=["actions"])


@router.post("/action")
def apply_action(payload: ApplyActionRequest, db: Session = Depends(get_db)):
    employee, record = compensation_service.apply_action(
        db,
        payload.ssid,
        payload.action,
        note=payload.note,
        change_percent=payload.change_percent,
    )
    applied = action_view(ActionRecordResponse.model_validate(record))
    return {
        "ok": True,
        "message": f"Action {record.action} applied successfully",
        "applied": applied,
        "employee": employee_view(EmployeeResponse.model_validate(employee)),
        "action_details": record.details,
        "action_details_formatted": applied["details_formatted"],
    }


@router.get("/actions")
def list_actions(db: Session = Depends(get_db)):
    actions = compensation_service.list_actions(db)
    return {"actions": [action_view(ActionRecordResponse.model_validate(a)) for a in actions]}


@router.get("/actions/{ssid}")
def list_employee_actions(ssid: str, db: Session = Depends(get_db)):
    actions = compensation_service.list_actions(db, ssid)
    return {
        "ssid": ssid,
        "actions": [action_view(ActionRecordResponse.model_validate(a)) for a in actions],
    }
