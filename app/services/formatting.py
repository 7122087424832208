"""
Presentation helpers for currency amounts (Indian digit grouping).
Display only; nothing in the decision logic depends on these strings.
"""
from typing import Any, Dict, Iterable, Optional, Union

from pydantic import BaseModel

from app.core.config import settings

Number = Union[int, float]


def format_inr(amount: Number) -> str:
    """
    Format an amount with Indian grouping: last three digits, then pairs.
    1234567 -> "12,34,567"; fractional parts keep up to two decimals.
    """
    negative = amount < 0
    value = abs(amount)
    whole = int(value)
    fraction = round(value - whole, 2)
    if fraction >= 1:
        whole += 1
        fraction = 0.0

    digits = str(whole)
    if len(digits) > 3:
        head, tail = digits[:-3], digits[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        digits = ",".join(groups + [tail])

    if fraction:
        digits += f"{fraction:.2f}"[1:].rstrip("0")
    return f"-{digits}" if negative else digits


def format_rs(amount: Optional[Number]) -> Optional[str]:
    if amount is None:
        return None
    return f"{settings.currency_label} {format_inr(amount)}"


def _with_formatted(values: Dict[str, Any], fields: Iterable[str]) -> Dict[str, Any]:
    for field in fields:
        amount = values.get(field)
        values[f"{field}_formatted"] = format_rs(amount) if amount else None
    return values


def suggestion_view(suggestion: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not suggestion:
        return suggestion
    view = _with_formatted(dict(suggestion), ("suggested_salary", "current_salary"))
    difference = suggestion.get("salary_difference")
    view["salary_difference_formatted"] = format_rs(abs(difference)) if difference else None
    view["salary_change_type"] = "increase" if (difference or 0) >= 0 else "decrease"
    band = suggestion.get("market_salary_range")
    if band:
        view["market_salary_range_formatted"] = {key: format_rs(band[key]) for key in ("min", "mid", "max")}
    return view


def employee_view(employee: BaseModel) -> Dict[str, Any]:
    view = _with_formatted(employee.model_dump(mode="json"), ("salary", "revenue"))
    if employee.salary and employee.revenue:
        view["profit_formatted"] = format_rs(employee.revenue - employee.salary)
    view["suggestion"] = suggestion_view(view.get("suggestion"))
    return view


def action_view(record: BaseModel) -> Dict[str, Any]:
    view = record.model_dump(mode="json")
    view["details_formatted"] = {
        "effect": record.details.get("effect"),
        **_with_formatted(
            {key: record.details.get(key) for key in ("previous_salary", "new_salary", "salary")},
            ("previous_salary", "new_salary", "salary"),
        ),
        "change_percent": record.details.get("change_percent"),
    }
    return view
