"""
Action application state machine.

Employee states: ACTIVE -> FIRED (terminal, no reactivation).
Each transition mutates the employee in place and returns the effect
details that go into the action history record.
"""
import math
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from app.core.exceptions import ValidationError
from app.models.action import CompensationAction
from app.models.employee import Employee, EmployeeStatus
from app.services.compensation_heuristic import POLICY_CHANGE_PERCENT, round_half_up

VALID_ACTIONS = [a.value for a in CompensationAction]


def parse_action(action: Optional[str]) -> CompensationAction:
    if not action:
        raise ValidationError("ssid and action are required")
    try:
        return CompensationAction(str(action).strip().upper())
    except ValueError:
        raise ValidationError(
            f"action must be one of: {', '.join(VALID_ACTIONS)}",
            details={"action": action},
        )


def _percent_matches_action(action: CompensationAction, percent: float) -> bool:
    if not math.isfinite(percent) or percent <= -100:
        return False
    if action == CompensationAction.PROMOTE:
        return percent >= 0
    if action == CompensationAction.DECREASE_SALARY:
        return percent <= 0
    return True


def resolve_change_percent(
    action: CompensationAction,
    override: Optional[float],
    suggestion: Optional[Mapping[str, Any]],
) -> float:
    """
    Explicit override first; then the stored suggestion's percent when it
    recommended this same action; then the fixed policy step.
    """
    if override is not None:
        if not _percent_matches_action(action, override):
            raise ValidationError(
                f"change_percent {override} is not valid for {action.value}",
                details={"action": action.value, "change_percent": override},
            )
        return override

    if suggestion and suggestion.get("action") == action.value:
        stored = suggestion.get("recommended_change_percent")
        if isinstance(stored, (int, float)) and stored and _percent_matches_action(action, stored):
            return stored

    return POLICY_CHANGE_PERCENT.get(action, 0)


def resolve_previous_salary(employee: Employee) -> float:
    """Stored salary, else the last suggestion's salary estimate, else 0."""
    if employee.salary:
        return employee.salary
    if employee.suggestion:
        estimate = employee.suggestion.get("current_salary")
        if isinstance(estimate, (int, float)) and estimate > 0:
            return estimate
    return 0


def apply_transition(
    employee: Employee,
    action: CompensationAction,
    change_percent: Optional[float],
    now: datetime,
) -> Dict[str, Any]:
    if employee.is_fired:
        raise ValidationError(
            f"Employee {employee.ssid} is already FIRED; no further actions can be applied",
            details={"ssid": employee.ssid, "status": employee.status},
        )

    previous_status = employee.status
    percent = resolve_change_percent(action, change_percent, employee.suggestion)
    previous_salary = resolve_previous_salary(employee)

    if action == CompensationAction.FIRE:
        employee.status = EmployeeStatus.FIRED.value
        employee.terminated_at = now
        return {
            "effect": "Employee terminated",
            "previous_status": previous_status,
            "new_status": EmployeeStatus.FIRED.value,
        }

    employee.status = EmployeeStatus.ACTIVE.value

    if action in (CompensationAction.PROMOTE, CompensationAction.DECREASE_SALARY):
        new_salary = round_half_up(previous_salary * (1 + percent / 100))
        employee.salary = new_salary
        if action == CompensationAction.PROMOTE:
            employee.last_promoted_at = now
            effect = "Salary increased"
        else:
            effect = "Salary decreased"
        return {
            "effect": effect,
            "previous_salary": previous_salary,
            "new_salary": new_salary,
            "change_percent": percent,
        }

    return {
        "effect": "No changes made",
        "salary": previous_salary,
    }
