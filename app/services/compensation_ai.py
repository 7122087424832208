"""
AI advisor bridge.

Asks the external reasoning service for a compensation decision, using the
heuristic's numbers as grounding context, then validates, sanitizes and
normalizes the answer into a Suggestion. Anything short of a well-formed
answer raises ExternalServiceError; choosing the fallback is the caller's job.
"""
import json
import math
import logging
from typing import Dict, List, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError, field_validator

from app.core.exceptions import ExternalServiceError
from app.core.prompts import COMPENSATION_ADVISOR_SYSTEM, COMPENSATION_ADVISOR_USER_TEMPLATE, get_prompt
from app.core.security import sanitize_input
from app.models.action import CompensationAction
from app.schemas.compensation import EmployeeProfile, Suggestion
from app.services.compensation_heuristic import SalaryAnalysis, calculate_suggested_salary, round_half_up, salary_difference
from app.services.formatting import format_rs
from app.services.market_bands import get_market_band

logger = logging.getLogger(__name__)

# Anything below this was almost certainly answered in lakhs, not rupees
MIN_PLAUSIBLE_SALARY = 10000
MARKET_FALLBACK_NOTE = "(Salary calculated using market analysis)"


class ChatClient(Protocol):
    provider: str

    def call_model(self, messages: List[Dict[str, str]]) -> str:
        ...


class AdvisorPayload(BaseModel):
    """Structured object the reasoning service must embed in its reply."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    action: CompensationAction
    confidence: float = 0.5
    reason: str = ""
    recommended_change_percent: int = 0
    suggested_salary: Optional[float] = Field(default=None, alias="suggestedSalary")
    salary_reason: Optional[str] = Field(default=None, alias="salaryReason")

    @field_validator("action", mode="before")
    @classmethod
    def normalize_action(cls, value):
        if isinstance(value, str):
            return value.strip().upper().replace(" ", "_")
        return value

    @field_validator("confidence", mode="after")
    @classmethod
    def clamp_confidence(cls, value: float) -> float:
        return round(min(1.0, max(0.0, value)), 2)

    @field_validator("recommended_change_percent", mode="before")
    @classmethod
    def round_percent(cls, value):
        if isinstance(value, float):
            return round_half_up(value)
        if isinstance(value, str):
            return round_half_up(float(value.strip().rstrip("%")))
        return value


def extract_json_object(text: str, max_chars: int) -> str:
    """
    Return the first balanced {...} region of a free-text reply, scanning at
    most ``max_chars`` characters. Braces inside JSON strings are ignored.
    """
    window = text[:max_chars]
    start = window.find("{")
    if start < 0:
        raise ExternalServiceError("AI response contained no JSON object.")

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(window)):
        char = window[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return window[start:index + 1]
    raise ExternalServiceError("AI response JSON object was not terminated.")


def parse_advisor_response(text: str, max_chars: int) -> AdvisorPayload:
    raw = extract_json_object(text, max_chars)
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ExternalServiceError(f"Failed to parse AI response: {e.msg}")
    if not isinstance(parsed, dict):
        raise ExternalServiceError("AI response payload is not an object.")
    if not parsed.get("action"):
        raise ExternalServiceError("AI response is missing an action.")
    try:
        return AdvisorPayload.model_validate(parsed)
    except (PydanticValidationError, ValueError) as e:
        raise ExternalServiceError(f"AI response failed validation: {e}")


class CompensationAdvisor:
    def __init__(self, client: ChatClient, max_response_chars: int = 20000):
        self.client = client
        self.max_response_chars = max_response_chars

    @property
    def provider(self) -> str:
        return self.client.provider

    def build_messages(
        self,
        profile: EmployeeProfile,
        budget: Optional[float],
        total_employees: int,
        reference: SalaryAnalysis,
    ) -> List[Dict[str, str]]:
        band = reference.market_band
        per_employee = round_half_up(budget / total_employees) if budget and total_employees > 0 else None
        profit = (
            format_rs(profile.revenue - profile.salary)
            if profile.revenue and profile.salary else "N/A"
        )
        user_prompt = get_prompt(
            COMPENSATION_ADVISOR_USER_TEMPLATE,
            budget=format_rs(budget) if budget else "Not specified",
            total_employees=total_employees,
            avg_budget=format_rs(per_employee) if per_employee is not None else "N/A",
            role_label=profile.role or "this role",
            band_min=format_rs(band.min),
            band_mid=format_rs(band.mid),
            band_max=format_rs(band.max),
            ssid=profile.ssid,
            name=profile.name or "N/A",
            role=profile.role or "N/A",
            performance=profile.performance if profile.performance not in (None, "") else "N/A",
            experience=profile.experience if profile.experience is not None else "N/A",
            salary=format_rs(profile.salary) if profile.salary else "Not specified",
            revenue=format_rs(profile.revenue) if profile.revenue else "Not specified",
            profit=profit,
            status=profile.status or "ACTIVE",
            reference_salary=format_rs(reference.suggested_salary),
        )
        return [
            {"role": "system", "content": COMPENSATION_ADVISOR_SYSTEM},
            {"role": "user", "content": user_prompt},
        ]

    def advise(
        self,
        profile: EmployeeProfile,
        budget: Optional[float],
        total_employees: int = 1,
    ) -> Suggestion:
        """Ask the reasoning service; raises ExternalServiceError on any defect."""
        reference = calculate_suggested_salary(profile, budget, total_employees)
        text = self.client.call_model(self.build_messages(profile, budget, total_employees, reference))
        if not text:
            raise ExternalServiceError("Empty response from AI service.")
        payload = parse_advisor_response(text, self.max_response_chars)

        salary_reason = sanitize_input(payload.salary_reason)
        suggested = payload.suggested_salary
        if suggested is None or not math.isfinite(suggested) or suggested < MIN_PLAUSIBLE_SALARY:
            logger.info(
                f"Discarding implausible AI salary {suggested!r} for {profile.ssid}; using market analysis"
            )
            suggested = reference.suggested_salary
            salary_reason = f"{salary_reason} {MARKET_FALLBACK_NOTE}".strip()

        suggested_salary = round_half_up(suggested)
        current_salary = profile.salary or 0
        difference, difference_percent = salary_difference(suggested_salary, current_salary)

        return Suggestion(
            action=payload.action,
            confidence=payload.confidence,
            reason=sanitize_input(payload.reason),
            recommended_change_percent=payload.recommended_change_percent,
            current_salary=current_salary,
            suggested_salary=suggested_salary,
            salary_difference=difference,
            salary_difference_percent=difference_percent,
            salary_reason=salary_reason,
            market_salary_range=get_market_band(profile.role),
            using=self.provider,
        )
