"""
Analysis Router

Runs the decision engine over the workforce and exposes the pending
suggestions awaiting a human decision.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.limiter import limiter
from app.database import get_db
from app.dependencies import get_orchestrator
from app.schemas.compensation import AnalyzeRequest, EmployeeResponse
from app.services import compensation_service
from app.services.decision_engine import DecisionOrchestrator
from app.services.formatting import employee_view, format_rs, suggestion_view

router = APIRouter(tags=["analysis"])


@router.post("/analyze")
@limiter.limit(settings.analyze_rate_limit)
def analyze(
    request: Request,
    payload: AnalyzeRequest,
    db: Session = Depends(get_db),
    orchestrator: DecisionOrchestrator = Depends(get_orchestrator),
):
    """
    Analyze every non-fired employee (or the given ssids) against the budget
    and store the resulting suggestions. Per-employee AI failures never fail
    the request; those employees get the heuristic suggestion.
    """
    analysis = compensation_service.analyze_employees(
        db, payload.budget, orchestrator, ssids=payload.ssids
    )
    summary = analysis.summary.model_dump(mode="json")
    summary.update({
        "company_budget_formatted": format_rs(summary["company_budget"]),
        "total_current_salaries_formatted": format_rs(summary["total_current_salaries"]),
        "total_suggested_salaries_formatted": format_rs(summary["total_suggested_salaries"]),
        "total_revenue_formatted": format_rs(summary["total_revenue"]),
        "projected_savings_formatted": format_rs(abs(summary["projected_savings"])),
        "projected_savings_type": "savings" if summary["projected_savings"] >= 0 else "increase",
    })

    results = []
    for result in analysis.results:
        view = result.model_dump(mode="json")
        view["current_salary_formatted"] = format_rs(result.current_salary)
        view["suggestion"] = suggestion_view(view["suggestion"])
        results.append(view)

    return {
        "budget": payload.budget,
        "budget_formatted": format_rs(payload.budget),
        "employees_analyzed": summary["total_employees"],
        "summary": summary,
        "results": results,
    }


@router.get("/pending")
def pending_suggestions(db: Session = Depends(get_db)):
    employees = compensation_service.list_pending(db)
    return {
        "count": len(employees),
        "employees": [employee_view(EmployeeResponse.model_validate(e)) for e in employees],
    }
