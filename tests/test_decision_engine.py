import json

import pytest

from app.core.config import AISettings
from app.core.exceptions import ExternalServiceError, ValidationError
from app.models.action import CompensationAction
from app.schemas.compensation import EmployeeProfile
from app.services.compensation_ai import CompensationAdvisor
from app.services.compensation_heuristic import heuristic_analysis
from app.services.decision_engine import DecisionOrchestrator, analyze_batch, build_orchestrator

STAR = EmployeeProfile(ssid="E1", name="Asha", role="engineer", performance=9,
                       experience=6, salary=1000000, revenue=3000000)
STEADY = EmployeeProfile(ssid="E2", name="Ravi", role="developer", performance=6,
                         experience=3, salary=900000, revenue=1500000)
WEAK = EmployeeProfile(ssid="E3", name="Kiran", role="sales", performance="poor",
                       experience=1, salary=600000, revenue=400000)


def _advisor(fake_chat_client, *replies):
    return CompensationAdvisor(fake_chat_client(*replies))


def test_without_advisor_returns_heuristic():
    orchestrator = DecisionOrchestrator()
    assert not orchestrator.ai_enabled
    assert orchestrator.analyze_employee(STAR, 5000000, 3) == heuristic_analysis(STAR, 5000000, 3)


@pytest.mark.parametrize("reply", [
    ExternalServiceError("AI service reached timeout limit."),
    ExternalServiceError("AI service returned error: 500"),
    "no structured answer here",
    '{"confidence": 0.8}',
    RuntimeError("unexpected client bug"),
])
def test_advisor_failure_falls_back_to_identical_heuristic(fake_chat_client, reply):
    orchestrator = DecisionOrchestrator(_advisor(fake_chat_client, reply))
    suggestion = orchestrator.analyze_employee(STAR, 5000000, 3)

    assert suggestion == heuristic_analysis(STAR, 5000000, 3)
    assert suggestion.using == "heuristic"


def test_advisor_answer_is_preferred(fake_chat_client):
    reply = json.dumps({"action": "NO_CHANGE", "confidence": 0.7, "reason": "Hold",
                        "recommended_change_percent": 0, "suggestedSalary": 1100000})
    suggestion = DecisionOrchestrator(_advisor(fake_chat_client, reply)).analyze_employee(STAR, None)

    assert suggestion.action == CompensationAction.NO_CHANGE
    assert suggestion.using == "openai"
    assert suggestion.suggested_salary == 1100000


def test_lakhs_answer_is_corrected_but_keeps_ai_path(fake_chat_client):
    reply = json.dumps({"action": "PROMOTE", "confidence": 0.9, "reason": "Top",
                        "recommended_change_percent": 15, "suggestedSalary": 18})
    suggestion = DecisionOrchestrator(_advisor(fake_chat_client, reply)).analyze_employee(STAR, None)

    assert suggestion.using == "openai"
    assert suggestion.suggested_salary == heuristic_analysis(STAR, None).suggested_salary


def test_build_orchestrator_without_key_is_heuristic_only():
    assert not build_orchestrator(AISettings(api_key=None)).ai_enabled


def test_build_orchestrator_respects_kill_switch():
    assert not build_orchestrator(AISettings(api_key="sk-test", kill_switch=True)).ai_enabled


def test_build_orchestrator_with_key_enables_advisor():
    orchestrator = build_orchestrator(AISettings(api_key="sk-test", kill_switch=False, max_response_chars=500))
    assert orchestrator.ai_enabled
    assert orchestrator.advisor.max_response_chars == 500


@pytest.mark.parametrize("employees", [None, "E1", {"ssid": "E1"}])
def test_batch_rejects_non_collections(employees):
    with pytest.raises(ValidationError):
        analyze_batch(employees, None, DecisionOrchestrator())


def test_batch_rejects_empty_collection():
    with pytest.raises(ValidationError, match="No employees to analyze"):
        analyze_batch([], None, DecisionOrchestrator())


def test_batch_summary_is_consistent():
    employees = [STAR, STEADY, WEAK]
    analysis = analyze_batch(employees, 3000000, DecisionOrchestrator())
    summary = analysis.summary

    assert [r.ssid for r in analysis.results] == ["E1", "E2", "E3"]
    assert summary.total_employees == 3
    assert summary.company_budget == 3000000
    assert sum(summary.action_breakdown.model_dump().values()) == 3
    assert summary.total_current_salaries == 2500000
    assert summary.total_revenue == 4900000
    assert summary.total_suggested_salaries == sum(r.suggestion.suggested_salary for r in analysis.results)
    assert summary.projected_savings == summary.total_current_salaries - summary.total_suggested_salaries
    # (1 - 2.5M / 4.9M) * 100 = 48.98
    assert summary.current_profit_margin == 49
    assert summary.action_breakdown.FIRE == 1
    assert summary.action_breakdown.PROMOTE == 1


def test_batch_skips_fired_employees_and_uses_active_denominator():
    fired = EmployeeProfile(ssid="E9", role="engineer", performance=9, salary=1000000,
                            revenue=5000000, status="FIRED")
    analysis = analyze_batch([STAR, fired, STEADY], 2000000, DecisionOrchestrator())

    assert [r.ssid for r in analysis.results] == ["E1", "E2"]
    assert analysis.summary.total_employees == 2
    assert analysis.results[0].suggestion == heuristic_analysis(STAR, 2000000, 2)


def test_batch_with_only_fired_employees_is_rejected():
    fired = EmployeeProfile(ssid="E9", status="FIRED")
    with pytest.raises(ValidationError):
        analyze_batch([fired], None, DecisionOrchestrator())


def test_zero_revenue_gives_zero_margins():
    idle = EmployeeProfile(ssid="E4", role="intern", performance=5, salary=300000, revenue=0)
    summary = analyze_batch([idle], None, DecisionOrchestrator()).summary
    assert summary.current_profit_margin == 0
    assert summary.projected_profit_margin == 0


def test_batch_falls_back_per_employee(fake_chat_client):
    good = json.dumps({"action": "NO_CHANGE", "confidence": 0.6, "reason": "ok", "suggestedSalary": 950000})
    client = fake_chat_client(good, ExternalServiceError("AI service returned error: 502"), good)
    analysis = analyze_batch([STAR, STEADY, WEAK], None, DecisionOrchestrator(CompensationAdvisor(client)))

    assert [r.suggestion.using for r in analysis.results] == ["openai", "heuristic", "openai"]
    assert len(client.calls) == 3
