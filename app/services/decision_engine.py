"""
Decision orchestration and batch analysis.

The orchestrator always computes the heuristic suggestion and, when an
advisor is configured, prefers the external service's answer. External
failures are logged and absorbed: a Suggestion is always produced.
"""
import logging
from collections import Counter
from typing import Iterable, List, Optional

from app.core.config import AISettings
from app.core.exceptions import ExternalServiceError, ValidationError
from app.models.action import CompensationAction
from app.models.employee import EmployeeStatus
from app.schemas.compensation import (
    ActionBreakdown,
    BatchAnalysis,
    BatchSummary,
    EmployeeAnalysis,
    EmployeeProfile,
    Suggestion,
)
from app.services.ai_client import AIClient
from app.services.compensation_ai import CompensationAdvisor
from app.services.compensation_heuristic import heuristic_analysis, round_half_up

logger = logging.getLogger(__name__)


class DecisionOrchestrator:
    def __init__(self, advisor: Optional[CompensationAdvisor] = None):
        self.advisor = advisor

    @property
    def ai_enabled(self) -> bool:
        return self.advisor is not None

    def analyze_employee(
        self,
        profile: EmployeeProfile,
        budget: Optional[float],
        total_employees: int = 1,
    ) -> Suggestion:
        heuristic = heuristic_analysis(profile, budget, total_employees)
        if self.advisor is None:
            return heuristic

        try:
            return self.advisor.advise(profile, budget, total_employees)
        except ExternalServiceError as e:
            logger.warning(
                f"AI analysis failed for {profile.ssid}, using heuristic: {e.message}",
                extra={"ssid": profile.ssid, "provider": self.advisor.provider},
            )
        except Exception:
            logger.exception(f"Unexpected error from AI advisor for {profile.ssid}, using heuristic")
        return heuristic


def build_orchestrator(ai_settings: AISettings) -> DecisionOrchestrator:
    """Wire the AI path only when a credential is present and not kill-switched."""
    if not ai_settings.enabled:
        return DecisionOrchestrator()
    client = AIClient(ai_settings)
    return DecisionOrchestrator(CompensationAdvisor(client, max_response_chars=ai_settings.max_response_chars))


def _profit_margin(total_salaries: float, total_revenue: float) -> int:
    if total_revenue <= 0:
        return 0
    return round_half_up((1 - total_salaries / total_revenue) * 100)


def summarize(
    employees: List[EmployeeProfile],
    results: List[EmployeeAnalysis],
    budget: Optional[float],
) -> BatchSummary:
    total_current = sum(e.salary or 0 for e in employees)
    total_suggested = sum(r.suggestion.suggested_salary or 0 for r in results)
    total_revenue = sum(e.revenue or 0 for e in employees)
    counts = Counter(CompensationAction(r.suggestion.action).value for r in results)

    return BatchSummary(
        total_employees=len(employees),
        company_budget=budget,
        total_current_salaries=total_current,
        total_suggested_salaries=total_suggested,
        total_revenue=total_revenue,
        action_breakdown=ActionBreakdown(**{action.value: counts.get(action.value, 0) for action in CompensationAction}),
        projected_savings=total_current - total_suggested,
        current_profit_margin=_profit_margin(total_current, total_revenue),
        projected_profit_margin=_profit_margin(total_suggested, total_revenue),
    )


def analyze_batch(
    employees: Iterable[EmployeeProfile],
    budget: Optional[float],
    orchestrator: DecisionOrchestrator,
) -> BatchAnalysis:
    """
    Run the orchestrator over every non-fired employee, one at a time.

    Sequential on purpose: external calls are not burst at the provider and
    each employee sees the same per-employee budget denominator.
    """
    if employees is None or isinstance(employees, (str, bytes, dict)):
        raise ValidationError("Expected a collection of employees")
    active = [e for e in employees if e.status != EmployeeStatus.FIRED.value]
    if not active:
        raise ValidationError("No employees to analyze")

    total_employees = len(active)
    results = []
    for profile in active:
        suggestion = orchestrator.analyze_employee(profile, budget, total_employees)
        results.append(EmployeeAnalysis(
            ssid=profile.ssid,
            name=profile.name,
            role=profile.role,
            current_salary=profile.salary,
            suggestion=suggestion,
        ))

    summary = summarize(active, results, budget)
    logger.info(
        f"Analyzed {total_employees} employees",
        extra={"action_breakdown": summary.action_breakdown.model_dump(), "ai_enabled": orchestrator.ai_enabled},
    )
    return BatchAnalysis(results=results, summary=summary)
