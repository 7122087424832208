import json

import pytest

from app.core.exceptions import ExternalServiceError
from app.models.action import CompensationAction
from app.schemas.compensation import EmployeeProfile
from app.services.compensation_ai import (
    MARKET_FALLBACK_NOTE,
    CompensationAdvisor,
    extract_json_object,
    parse_advisor_response,
)
from app.services.compensation_heuristic import heuristic_analysis
from app.services.formatting import format_rs
from app.services.market_bands import MARKET_SALARY_RANGES

ENGINEER = EmployeeProfile(
    ssid="E1", name="Asha", role="engineer", performance=9,
    experience=6, salary=1000000, revenue=3000000,
)


def _reply(**overrides):
    payload = {
        "action": "PROMOTE",
        "confidence": 0.82,
        "reason": "Consistently exceeds targets",
        "recommended_change_percent": 12,
        "suggestedSalary": 1500000,
        "salaryReason": "Top of band for impact",
    }
    payload.update(overrides)
    return "Here is my analysis:\n" + json.dumps(payload) + "\nLet me know if you need more."


def test_advise_returns_normalized_suggestion(fake_chat_client):
    advisor = CompensationAdvisor(fake_chat_client(_reply()))
    suggestion = advisor.advise(ENGINEER, None)

    assert suggestion.action == CompensationAction.PROMOTE
    assert suggestion.using == "openai"
    assert suggestion.confidence == 0.82
    assert suggestion.recommended_change_percent == 12
    assert suggestion.suggested_salary == 1500000
    assert suggestion.current_salary == 1000000
    assert suggestion.salary_difference == 500000
    assert suggestion.salary_difference_percent == 50
    assert suggestion.salary_reason == "Top of band for impact"
    assert suggestion.market_salary_range == MARKET_SALARY_RANGES["engineer"]


def test_prompt_carries_employee_and_reference_numbers(fake_chat_client):
    client = fake_chat_client(_reply())
    CompensationAdvisor(client).advise(ENGINEER, 4000000, 4)

    system, user = client.calls[0]
    assert system["role"] == "system"
    assert "suggestedSalary" in system["content"]
    assert "SSID: E1" in user["content"]
    assert "Average Budget Per Employee: Rs 10,00,000" in user["content"]
    assert "Maximum: Rs 18,00,000" in user["content"]
    assert "Profit Contribution: Rs 20,00,000" in user["content"]
    reference = heuristic_analysis(ENGINEER, 4000000, 4).suggested_salary
    assert f"Calculated suggested salary: {format_rs(reference)}" in user["content"]


@pytest.mark.parametrize("abbreviated", [12, 9999, 0])
def test_abbreviated_salary_is_replaced_by_market_analysis(fake_chat_client, abbreviated):
    advisor = CompensationAdvisor(fake_chat_client(_reply(suggestedSalary=abbreviated)))
    suggestion = advisor.advise(ENGINEER, None)

    expected = heuristic_analysis(ENGINEER, None).suggested_salary
    assert suggestion.suggested_salary == expected
    assert suggestion.salary_difference == expected - 1000000
    assert suggestion.salary_reason.endswith(MARKET_FALLBACK_NOTE)
    assert suggestion.using == "openai"


def test_missing_salary_is_replaced_by_market_analysis(fake_chat_client):
    reply = json.dumps({"action": "NO_CHANGE", "confidence": 0.6, "reason": "Steady"})
    suggestion = CompensationAdvisor(fake_chat_client(reply)).advise(ENGINEER, None)
    assert suggestion.suggested_salary == heuristic_analysis(ENGINEER, None).suggested_salary
    assert suggestion.salary_reason == MARKET_FALLBACK_NOTE


def test_lowercase_action_is_normalized(fake_chat_client):
    suggestion = CompensationAdvisor(fake_chat_client(_reply(action="decrease salary"))).advise(ENGINEER, None)
    assert suggestion.action == CompensationAction.DECREASE_SALARY


def test_confidence_is_clamped(fake_chat_client):
    suggestion = CompensationAdvisor(fake_chat_client(_reply(confidence=3))).advise(ENGINEER, None)
    assert suggestion.confidence == 1.0


def test_free_text_is_sanitized(fake_chat_client):
    reply = _reply(reason="<script>alert(1)</script>Great   work <b>here</b>")
    suggestion = CompensationAdvisor(fake_chat_client(reply)).advise(ENGINEER, None)
    assert suggestion.reason == "Great work &lt;b&gt;here&lt;/b&gt;"


@pytest.mark.parametrize("reply", [
    "I recommend a promotion.",
    '{"action": PROMOTE}',
    '{"confidence": 0.9, "reason": "no action given"}',
    '{"action": "RETIRE", "confidence": 0.9}',
    '{"action": "PROMOTE", "confidence": "very"}',
    '["PROMOTE"]',
    '{"action": "PROMOTE", "reason": "unterminated',
    "",
])
def test_malformed_replies_raise(fake_chat_client, reply):
    advisor = CompensationAdvisor(fake_chat_client(reply))
    with pytest.raises(ExternalServiceError):
        advisor.advise(ENGINEER, None)


def test_service_failure_propagates(fake_chat_client):
    advisor = CompensationAdvisor(fake_chat_client(ExternalServiceError("AI service reached timeout limit.")))
    with pytest.raises(ExternalServiceError):
        advisor.advise(ENGINEER, None)


def test_extract_json_object_ignores_braces_in_strings():
    text = 'Result: {"action": "NO_CHANGE", "reason": "keep {as is}"} and {"other": 1}'
    assert json.loads(extract_json_object(text, 1000)) == {"action": "NO_CHANGE", "reason": "keep {as is}"}


def test_extract_json_object_is_bounded():
    text = "x" * 500 + '{"action": "FIRE"}'
    with pytest.raises(ExternalServiceError):
        extract_json_object(text, 100)
    assert extract_json_object(text, 1000) == '{"action": "FIRE"}'


def test_parse_advisor_response_accepts_snake_case_keys():
    payload = parse_advisor_response(
        '{"action": "PROMOTE", "suggested_salary": 1200000, "salary_reason": "ok", "recommended_change_percent": "7.6%"}',
        1000,
    )
    assert payload.suggested_salary == 1200000
    assert payload.salary_reason == "ok"
    assert payload.recommended_change_percent == 8
