from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.models.action import CompensationAction, EmployeeAction


class ActionHistoryService:
    """
    Append-only history of applied compensation actions.
    Records are inserted and never updated or deleted.
    """

    def __init__(self, db: Session):
        self.db = db

    def record(
        self,
        ssid: str,
        action: CompensationAction,
        details: Dict[str, Any],
        applied_at: datetime,
        note: Optional[str] = None,
    ) -> EmployeeAction:
        """
        Stage a history entry in the caller's transaction.
        We do NOT commit here: the entry must land together with the employee
        update it describes, or not at all. Flushing assigns the id.
        """
        entry = EmployeeAction(
            ssid=ssid,
            action=action.value,
            note=note or None,
            details=details,
            applied_at=applied_at,
        )
        self.db.add(entry)
        self.db.flush()
        return entry

    def list_for_employee(self, ssid: str) -> List[EmployeeAction]:
        return (
            self.db.query(EmployeeAction)
            .filter(EmployeeAction.ssid == ssid)
            .order_by(EmployeeAction.applied_at.desc(), EmployeeAction.id.desc())
            .all()
        )

    def list_all(self) -> List[EmployeeAction]:
        return (
            self.db.query(EmployeeAction)
            .order_by(EmployeeAction.applied_at.desc(), EmployeeAction.id.desc())
            .all()
        )
